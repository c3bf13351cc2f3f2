"""Job service - Coordinates job creation, lookups and explicit status changes"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...database import transaction
from ...models import Job, JobStatus
from ...shared.errors import JobTrackerError, NotFoundError
from ..billing.repository import BillingRepository
from ..customers.repository import CustomerRepository
from ..scheduling.repository import SchedulingRepository
from . import state_machine
from .repository import JobRepository
from .schemas import JobCreate

logger = logging.getLogger(__name__)


class JobService:
    """Service layer for job operations"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = JobRepository()
        self.customer_repo = CustomerRepository()
        self.scheduling_repo = SchedulingRepository()
        self.billing_repo = BillingRepository()

    def get_jobs(self, status: Optional[str] = None) -> list[Job]:
        """Get jobs, optionally filtered to one status"""
        if status:
            status = state_machine.parse_status(status).value
        return self.repo.get_jobs(self.db, status)

    def get_job(self, job_id: int) -> Job:
        """Get a job with its customer, appointment and invoice"""
        job = self.repo.get_job_detail(self.db, job_id)
        if not job:
            raise NotFoundError("Job not found", {"job_id": job_id})
        return job

    def create_job(self, data: JobCreate) -> Job:
        with transaction(self.db):
            customer = self.customer_repo.get_customer_by_id(self.db, data.customer_id)
            if not customer:
                raise NotFoundError("Customer not found", {"customer_id": data.customer_id})

            job = self.repo.create_job(
                self.db,
                customer_id=customer.id,
                title=data.title,
                description=data.description,
                status=JobStatus.NEW.value,
            )

        self.db.refresh(job)
        logger.info(f"✅ Created job {job.id} '{job.title}' for customer {job.customer_id}")
        return job

    def update_status(self, job_id: int, status: str) -> Job:
        """
        Explicitly move a job one step forward.

        Used for the Done transition and any move not driven by creating an
        appointment, invoice or payment. Reading the job, checking the
        preconditions and writing the new status happen under one row lock.
        """
        target = state_machine.parse_status(status)

        try:
            with transaction(self.db):
                job = self.repo.get_job_by_id(self.db, job_id, for_update=True)
                if not job:
                    raise NotFoundError("Job not found", {"job_id": job_id})

                state_machine.transition(
                    job,
                    target,
                    appointment=self.scheduling_repo.get_appointment_by_job_id(self.db, job.id),
                    invoice=self.billing_repo.get_invoice_by_job_id(self.db, job.id),
                )
        except JobTrackerError as e:
            logger.warning(f"⚠️ Status update for job {job_id} to {target.value} rejected: {e.message}")
            raise

        self.db.refresh(job)
        return job
