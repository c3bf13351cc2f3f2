"""Fixed-point money helpers. Every monetary value is a Decimal with 2 places."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    """
    Convert a number to Decimal without picking up binary float noise.

    Floats go through ``str`` so 2.5 becomes Decimal("2.5"), not
    Decimal("2.5000000000000000001...").
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("Booleans are not monetary values")
    if isinstance(value, float):
        value = str(value)
    try:
        return Decimal(value)
    except (InvalidOperation, TypeError) as e:
        raise ValueError(f"Not a numeric value: {value!r}") from e


def round2(value: Number) -> Decimal:
    """Round half-up to 2 decimal places"""
    value = to_decimal(value)
    try:
        return value.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        # Infinity, or too many digits for the context precision
        raise ValueError(f"Cannot round {value} to cents") from e


def format_money(value: Number) -> str:
    return f"{round2(value):.2f}"
