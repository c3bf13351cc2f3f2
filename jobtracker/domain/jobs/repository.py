"""Job repository - Database operations for jobs"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Appointment, Invoice, Job


class JobRepository:
    """Repository for job database operations"""

    @staticmethod
    def get_jobs(db: Session, status: Optional[str] = None) -> list[Job]:
        """Get jobs newest first, with customer and invoice loaded for the board view"""
        query = db.query(Job).options(joinedload(Job.customer), joinedload(Job.invoice))

        if status:
            query = query.filter(Job.status == status)

        return query.order_by(Job.created_at.desc(), Job.id.desc()).all()

    @staticmethod
    def get_job_by_id(db: Session, job_id: int, for_update: bool = False) -> Optional[Job]:
        """
        Get a job by ID.

        With ``for_update`` the row stays locked until the surrounding
        transaction ends, so concurrent transitions on the same job queue up.
        """
        query = db.query(Job).filter(Job.id == job_id)
        if for_update:
            query = query.with_for_update()
        return query.first()

    @staticmethod
    def get_job_detail(db: Session, job_id: int) -> Optional[Job]:
        """Job with customer, appointment (+technician) and invoice (+payments)"""
        return (
            db.query(Job)
            .options(
                joinedload(Job.customer),
                joinedload(Job.appointment).joinedload(Appointment.technician),
                joinedload(Job.invoice).selectinload(Invoice.payments),
            )
            .filter(Job.id == job_id)
            .first()
        )

    @staticmethod
    def create_job(db: Session, **job_data) -> Job:
        """Insert a job; the caller owns the commit"""
        job = Job(**job_data)
        db.add(job)
        db.flush()
        return job
