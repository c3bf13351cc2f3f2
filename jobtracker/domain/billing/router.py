"""Billing router - FastAPI endpoints for invoices and payments"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...database import get_db
from .schemas import (
    InvoiceCreate,
    InvoiceDetailResponse,
    InvoiceResponse,
    PaymentCreate,
    PaymentRecordedResponse,
    PaymentResponse,
)
from .service import BillingService

router = APIRouter(tags=["Billing"])


def get_billing_service(db: Session = Depends(get_db)) -> BillingService:
    """Dependency injection for BillingService"""
    return BillingService(db)


@router.post(
    "/jobs/{job_id}/invoice",
    response_model=InvoiceResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_invoice(
    job_id: int,
    data: InvoiceCreate,
    service: BillingService = Depends(get_billing_service),
):
    """Invoice a job that is Done; amounts are computed server-side"""
    return service.create_invoice(job_id, data.line_items)


@router.get("/invoices/{invoice_id}", response_model=InvoiceDetailResponse)
async def get_invoice(
    invoice_id: int,
    service: BillingService = Depends(get_billing_service),
):
    """Get an invoice with its payments"""
    return service.get_invoice(invoice_id)


@router.get("/invoices/{invoice_id}/payments", response_model=list[PaymentResponse])
async def get_payments(
    invoice_id: int,
    service: BillingService = Depends(get_billing_service),
):
    """Get payments recorded against an invoice"""
    return service.get_payments(invoice_id)


@router.post(
    "/invoices/{invoice_id}/payments",
    response_model=PaymentRecordedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def record_payment(
    invoice_id: int,
    data: PaymentCreate,
    service: BillingService = Depends(get_billing_service),
):
    """Record a payment; the job moves to Paid when the balance reaches zero"""
    result = service.record_payment(invoice_id, data.amount)
    return PaymentRecordedResponse(
        id=result.payment.id,
        invoice_id=result.payment.invoice_id,
        amount=float(result.payment.amount),
        payment_date=result.payment.payment_date,
        remaining_balance=float(result.new_balance),
        job_status=result.job_status,
    )
