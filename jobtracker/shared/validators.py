"""Shared validation utilities"""

import re
from datetime import datetime, timezone
from typing import Optional


def validate_required_text(value: Optional[str], field_name: str = "Value") -> str:
    """
    Validate a required free-text field.

    Args:
        value: Raw string from the request
        field_name: Human readable name used in the error message

    Returns:
        The stripped string

    Raises:
        ValueError: If the value is missing or blank
    """
    if value is None or not str(value).strip():
        raise ValueError(f"{field_name} is required")
    return str(value).strip()


def validate_optional_text(value: Optional[str]) -> Optional[str]:
    """Strip optional text; blank strings become None"""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return None

    email = email.strip().lower()

    # Basic email validation pattern
    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def to_naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values are assumed to be UTC already"""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def utcnow() -> datetime:
    """Current time as naive UTC, matching how timestamps are stored"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def format_time(value: datetime) -> str:
    """Short human format used in conflict messages, e.g. 'Mar 5, 10:00 AM'"""
    hour = value.hour % 12 or 12
    return f"{value:%b} {value.day}, {hour}:{value:%M} {value:%p}"
