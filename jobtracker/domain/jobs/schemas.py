"""Job domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, computed_field, field_validator

from ...shared.validators import validate_optional_text, validate_required_text
from ..billing.schemas import InvoiceDetailResponse
from ..customers.schemas import CustomerResponse
from ..scheduling.schemas import AppointmentDetailResponse
from . import state_machine


class JobCreate(BaseModel):
    """Schema for creating a new job; status always starts at New"""

    customer_id: int
    title: str
    description: Optional[str] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return validate_required_text(v, "Title")

    @field_validator("description")
    @classmethod
    def strip_description(cls, v):
        return validate_optional_text(v)


class JobStatusUpdate(BaseModel):
    # Checked against the lifecycle by the service so unknown values get a descriptive 400
    status: str


class JobResponse(BaseModel):
    id: int
    customer_id: int
    title: str
    description: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class JobInvoiceSummary(BaseModel):
    balance: float

    class Config:
        from_attributes = True


class JobListItem(JobResponse):
    """Row on the job board"""

    customer: CustomerResponse
    invoice: Optional[JobInvoiceSummary] = None


class JobDetailResponse(JobResponse):
    customer: CustomerResponse
    appointment: Optional[AppointmentDetailResponse] = None
    invoice: Optional[InvoiceDetailResponse] = None

    @computed_field
    @property
    def next_status(self) -> Optional[str]:
        """The status this job can move to next, or None once Paid"""
        following = state_machine.next_status(self.status)
        return following.value if following else None


class JobStatusResponse(BaseModel):
    id: int
    status: str
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
