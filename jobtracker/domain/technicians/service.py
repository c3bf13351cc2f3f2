"""Technician service - Business logic for technician operations"""

import logging

from sqlalchemy.orm import Session

from ...database import transaction
from ...models import Technician
from ...shared.errors import NotFoundError
from ..scheduling.repository import SchedulingRepository
from .repository import TechnicianRepository
from .schemas import TechnicianAppointment, TechnicianCreate, TechnicianDetailResponse

logger = logging.getLogger(__name__)


class TechnicianService:
    """Service layer for technician operations"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = TechnicianRepository()
        self.scheduling_repo = SchedulingRepository()

    def get_technicians(self) -> list[Technician]:
        return self.repo.get_technicians(self.db)

    def get_technician(self, technician_id: int) -> Technician:
        technician = self.repo.get_technician_by_id(self.db, technician_id)
        if not technician:
            raise NotFoundError("Technician not found", {"technician_id": technician_id})
        return technician

    def get_technician_detail(self, technician_id: int) -> TechnicianDetailResponse:
        """Technician with their appointments (newest first) and the job/customer they serve"""
        technician = self.get_technician(technician_id)
        appointments = self.scheduling_repo.get_appointments_for_technician(self.db, technician.id)

        return TechnicianDetailResponse(
            id=technician.id,
            name=technician.name,
            phone=technician.phone,
            email=technician.email,
            created_at=technician.created_at,
            appointments=[
                TechnicianAppointment(
                    id=a.id,
                    job_id=a.job_id,
                    technician_id=a.technician_id,
                    start_time=a.start_time,
                    end_time=a.end_time,
                    created_at=a.created_at,
                    job_title=a.job.title if a.job else None,
                    job_status=a.job.status if a.job else None,
                    customer_name=a.job.customer.name if a.job and a.job.customer else None,
                )
                for a in appointments
            ],
        )

    def create_technician(self, data: TechnicianCreate) -> Technician:
        with transaction(self.db):
            technician = self.repo.create_technician(
                self.db, name=data.name, phone=data.phone, email=data.email
            )

        self.db.refresh(technician)
        logger.info(f"✅ Created technician {technician.id} ({technician.name})")
        return technician
