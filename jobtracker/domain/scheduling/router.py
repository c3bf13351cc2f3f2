"""Scheduling router - FastAPI endpoints for appointments"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...database import get_db
from .schemas import AppointmentCreate, AppointmentResponse
from .service import SchedulingService

router = APIRouter(prefix="/jobs", tags=["Scheduling"])


def get_scheduling_service(db: Session = Depends(get_db)) -> SchedulingService:
    """Dependency injection for SchedulingService"""
    return SchedulingService(db)


@router.post(
    "/{job_id}/appointments",
    response_model=AppointmentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_appointment(
    job_id: int,
    data: AppointmentCreate,
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Book a technician for a job; rejects overlapping bookings and moves the job to Scheduled"""
    return service.schedule_job(job_id, data.technician_id, data.start_time, data.end_time)
