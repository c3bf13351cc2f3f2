"""Billing domain schemas - Pydantic models for invoices and payments"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class LineItemCreate(BaseModel):
    """
    Line item as submitted by the client. The amount is always computed
    server-side; presence and sign of each field are checked by the ledger.
    """

    description: Optional[str] = None
    quantity: Optional[Decimal] = None
    rate: Optional[Decimal] = None


class InvoiceCreate(BaseModel):
    line_items: list[LineItemCreate] = []


class PaymentCreate(BaseModel):
    amount: Optional[Decimal] = None


class LineItemResponse(BaseModel):
    description: str
    quantity: float
    rate: float
    amount: float


class PaymentResponse(BaseModel):
    id: int
    invoice_id: int
    amount: float
    payment_date: datetime
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class InvoiceResponse(BaseModel):
    id: int
    job_id: int
    line_items: list[LineItemResponse]
    subtotal: float
    tax: float
    total: float
    balance: float
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class InvoiceDetailResponse(InvoiceResponse):
    """Invoice with its payments in the order they were received"""

    payments: list[PaymentResponse] = []


class PaymentRecordedResponse(BaseModel):
    id: int
    invoice_id: int
    amount: float
    payment_date: datetime
    remaining_balance: float
    job_status: str
