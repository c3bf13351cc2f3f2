"""
Technician double-booking detection.

Appointments are half-open intervals [start, end). Two intervals for the same
technician conflict iff new_start < existing_end and new_end > existing_start,
which means back-to-back bookings (one ends exactly when the next starts) are
allowed. Appointments belonging to different technicians never conflict.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Appointment
from ...shared.errors import ValidationError
from .repository import SchedulingRepository


def intervals_overlap(
    new_start: datetime, new_end: datetime, existing_start: datetime, existing_end: datetime
) -> bool:
    return new_start < existing_end and new_end > existing_start


def validate_interval(start: datetime, end: datetime) -> None:
    if start >= end:
        raise ValidationError(
            "start_time must be before end_time",
            {"start_time": start.isoformat(), "end_time": end.isoformat()},
        )


class ConflictChecker:
    """Pure predicate over the appointments persisted at call time"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = SchedulingRepository()

    def find_conflict(
        self, technician_id: int, start: datetime, end: datetime
    ) -> Optional[Appointment]:
        """Earliest stored appointment for the technician that overlaps the window"""
        validate_interval(start, end)
        overlapping = self.repo.find_overlapping(self.db, technician_id, start, end)
        return overlapping[0] if overlapping else None

    def has_conflict(self, technician_id: int, start: datetime, end: datetime) -> bool:
        return self.find_conflict(technician_id, start, end) is not None
