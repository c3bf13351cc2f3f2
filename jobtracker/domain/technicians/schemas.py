"""Technician domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_email, validate_optional_text, validate_required_text


class TechnicianCreate(BaseModel):
    """Schema for creating a new technician"""

    name: str
    phone: Optional[str] = None
    email: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return validate_required_text(v, "Name")

    @field_validator("phone")
    @classmethod
    def strip_phone(cls, v):
        return validate_optional_text(v)

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v):
        return validate_email(v)


class TechnicianResponse(BaseModel):
    id: int
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TechnicianAppointment(BaseModel):
    """Appointment row as shown on a technician's schedule"""

    id: int
    job_id: int
    technician_id: int
    start_time: datetime
    end_time: datetime
    created_at: Optional[datetime] = None
    job_title: Optional[str] = None
    job_status: Optional[str] = None
    customer_name: Optional[str] = None


class TechnicianDetailResponse(TechnicianResponse):
    appointments: list[TechnicianAppointment] = []
