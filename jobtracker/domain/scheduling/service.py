"""Scheduling service - Books technicians onto jobs"""

import logging
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...database import transaction
from ...models import Appointment, JobStatus
from ...shared.errors import ConflictError, JobTrackerError, NotFoundError
from ...shared.validators import format_time
from ..jobs import state_machine
from ..jobs.repository import JobRepository
from .conflicts import ConflictChecker, validate_interval
from .repository import SchedulingRepository

logger = logging.getLogger(__name__)


class SchedulingService:
    """Service layer for appointment scheduling"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = SchedulingRepository()
        self.job_repo = JobRepository()
        self.checker = ConflictChecker(db)

    def schedule_job(
        self, job_id: int, technician_id: int, start_time: datetime, end_time: datetime
    ) -> Appointment:
        """
        Book a technician for a job and move the job to Scheduled.

        The overlap check, the appointment insert and the status change run
        in one transaction with the job and technician rows locked, so two
        concurrent bookings for the same technician cannot both pass the check.
        The unique job_id constraint backs up the one-appointment-per-job rule.
        """
        validate_interval(start_time, end_time)

        try:
            with transaction(self.db):
                job = self.job_repo.get_job_by_id(self.db, job_id, for_update=True)
                if not job:
                    raise NotFoundError("Job not found", {"job_id": job_id})

                technician = self.repo.lock_technician(self.db, technician_id)
                if not technician:
                    raise NotFoundError("Technician not found", {"technician_id": technician_id})

                if self.repo.get_appointment_by_job_id(self.db, job.id):
                    raise ConflictError("This job already has an appointment", {"job_id": job.id})

                conflict = self.checker.find_conflict(technician.id, start_time, end_time)
                if conflict:
                    raise ConflictError(
                        f"Schedule conflict: {technician.name} is already booked for "
                        f'"{conflict.job.title}" from {format_time(conflict.start_time)} '
                        f"to {format_time(conflict.end_time)}",
                        {
                            "technician_id": technician.id,
                            "technician_name": technician.name,
                            "conflicting_appointment_id": conflict.id,
                            "conflicting_job_id": conflict.job_id,
                            "conflicting_start_time": conflict.start_time.isoformat(),
                            "conflicting_end_time": conflict.end_time.isoformat(),
                        },
                    )

                appointment = self.repo.create_appointment(
                    self.db, job.id, technician.id, start_time, end_time
                )
                state_machine.transition(job, JobStatus.SCHEDULED, appointment=appointment)
        except IntegrityError as e:
            logger.warning(f"⚠️ Appointment insert for job {job_id} hit a constraint: {e.orig}")
            raise ConflictError("This job already has an appointment", {"job_id": job_id}) from e
        except JobTrackerError as e:
            logger.warning(f"⚠️ Scheduling job {job_id} rejected: {e.message}")
            raise

        self.db.refresh(appointment)
        logger.info(
            f"📅 Job {job_id} scheduled with technician {technician_id} "
            f"({start_time.isoformat()} - {end_time.isoformat()})"
        )
        return appointment
