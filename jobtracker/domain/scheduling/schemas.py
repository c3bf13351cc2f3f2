"""Scheduling domain schemas - Pydantic models for appointments"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import to_naive_utc
from ..technicians.schemas import TechnicianResponse


class AppointmentCreate(BaseModel):
    """Schema for booking a technician onto a job"""

    technician_id: int
    start_time: datetime
    end_time: datetime

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_to_utc(cls, v):
        return to_naive_utc(v)


class AppointmentResponse(BaseModel):
    id: int
    job_id: int
    technician_id: int
    start_time: datetime
    end_time: datetime
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AppointmentDetailResponse(AppointmentResponse):
    technician: TechnicianResponse
