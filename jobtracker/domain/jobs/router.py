"""Job router - FastAPI endpoints for jobs and their lifecycle"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ...database import get_db
from .schemas import (
    JobCreate,
    JobDetailResponse,
    JobListItem,
    JobResponse,
    JobStatusResponse,
    JobStatusUpdate,
)
from .service import JobService

router = APIRouter(prefix="/jobs", tags=["Jobs"])


def get_job_service(db: Session = Depends(get_db)) -> JobService:
    """Dependency injection for JobService"""
    return JobService(db)


@router.post("", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
async def create_job(
    data: JobCreate,
    service: JobService = Depends(get_job_service),
):
    """Create a job for a customer (status New)"""
    return service.create_job(data)


@router.get("", response_model=list[JobListItem])
async def get_jobs(
    status: Optional[str] = Query(None, description="Filter by job status"),
    service: JobService = Depends(get_job_service),
):
    """Get all jobs, newest first"""
    return service.get_jobs(status)


@router.get("/{job_id}", response_model=JobDetailResponse)
async def get_job(
    job_id: int,
    service: JobService = Depends(get_job_service),
):
    """Get a job with its customer, appointment and invoice"""
    return service.get_job(job_id)


@router.patch("/{job_id}/status", response_model=JobStatusResponse)
async def update_job_status(
    job_id: int,
    data: JobStatusUpdate,
    service: JobService = Depends(get_job_service),
):
    """Move a job one step forward in its lifecycle"""
    return service.update_status(job_id, data.status)
