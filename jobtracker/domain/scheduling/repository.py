"""Scheduling repository - Database operations for appointments"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Appointment, Job, Technician


class SchedulingRepository:
    """Repository for appointment database operations"""

    @staticmethod
    def get_appointment_by_job_id(db: Session, job_id: int) -> Optional[Appointment]:
        return db.query(Appointment).filter(Appointment.job_id == job_id).first()

    @staticmethod
    def find_overlapping(
        db: Session,
        technician_id: int,
        start_time: datetime,
        end_time: datetime,
    ) -> list[Appointment]:
        """
        Appointments for a technician that overlap [start_time, end_time).

        Half-open test: given_start < end_time AND given_end > start_time,
        so back-to-back windows are not returned.
        """
        query = (
            db.query(Appointment)
            .options(joinedload(Appointment.technician), joinedload(Appointment.job))
            .filter(
                Appointment.technician_id == technician_id,
                Appointment.end_time > start_time,
                Appointment.start_time < end_time,
            )
        )

        return query.order_by(Appointment.start_time, Appointment.id).all()

    @staticmethod
    def get_appointments_for_technician(db: Session, technician_id: int) -> list[Appointment]:
        """All appointments for a technician, newest first, with job and customer loaded"""
        return (
            db.query(Appointment)
            .options(joinedload(Appointment.job).joinedload(Job.customer))
            .filter(Appointment.technician_id == technician_id)
            .order_by(Appointment.start_time.desc(), Appointment.id.desc())
            .all()
        )

    @staticmethod
    def lock_technician(db: Session, technician_id: int) -> Optional[Technician]:
        """
        Load a technician with a row lock.

        Held until the surrounding transaction ends, so two bookings for the
        same technician cannot both pass the overlap check.
        """
        return (
            db.query(Technician)
            .filter(Technician.id == technician_id)
            .with_for_update()
            .first()
        )

    @staticmethod
    def create_appointment(
        db: Session, job_id: int, technician_id: int, start_time: datetime, end_time: datetime
    ) -> Appointment:
        """Insert an appointment; the caller owns the commit"""
        appointment = Appointment(
            job_id=job_id,
            technician_id=technician_id,
            start_time=start_time,
            end_time=end_time,
        )
        db.add(appointment)
        db.flush()
        return appointment
