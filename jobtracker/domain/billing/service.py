"""Billing service - Invoices finished jobs and records payments against them"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...database import transaction
from ...models import Invoice, JobStatus, Payment
from ...shared.errors import ConflictError, JobTrackerError, NotFoundError, PreconditionError
from ...shared.money import ZERO, Number
from ...shared.validators import utcnow
from ..jobs import state_machine
from ..jobs.repository import JobRepository
from . import ledger
from .repository import BillingRepository

logger = logging.getLogger(__name__)


@dataclass
class PaymentResult:
    payment: Payment
    new_balance: Decimal
    job_status: str


class BillingService:
    """Service layer for invoices and payments"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = BillingRepository()
        self.job_repo = JobRepository()

    def get_invoice(self, invoice_id: int) -> Invoice:
        """Get an invoice with its payments"""
        invoice = self.repo.get_invoice_with_payments(self.db, invoice_id)
        if not invoice:
            raise NotFoundError("Invoice not found", {"invoice_id": invoice_id})
        return invoice

    def get_payments(self, invoice_id: int) -> list[Payment]:
        invoice = self.repo.get_invoice_by_id(self.db, invoice_id)
        if not invoice:
            raise NotFoundError("Invoice not found", {"invoice_id": invoice_id})
        return self.repo.get_payments(self.db, invoice.id)

    def create_invoice(self, job_id: int, line_items: Iterable[Any]) -> Invoice:
        """
        Invoice a finished job and move it to Invoiced.

        Amounts are computed here from quantity and rate; the invoice insert
        and the status change commit together or not at all.
        """
        priced = ledger.price_line_items(line_items)
        totals = ledger.compute_totals(priced)

        try:
            with transaction(self.db):
                job = self.job_repo.get_job_by_id(self.db, job_id, for_update=True)
                if not job:
                    raise NotFoundError("Job not found", {"job_id": job_id})

                if self.repo.get_invoice_by_job_id(self.db, job.id):
                    raise ConflictError("This job already has an invoice", {"job_id": job.id})

                if job.status != JobStatus.DONE.value:
                    raise PreconditionError(
                        "Job must be marked as Done before creating an invoice",
                        {"job_id": job.id, "current_status": job.status},
                    )

                invoice = self.repo.create_invoice(
                    self.db,
                    job_id=job.id,
                    line_items=[item.to_json() for item in priced],
                    subtotal=totals.subtotal,
                    tax=totals.tax,
                    total=totals.total,
                    balance=totals.balance,
                )
                state_machine.transition(job, JobStatus.INVOICED, invoice=invoice)
        except IntegrityError as e:
            logger.warning(f"⚠️ Invoice insert for job {job_id} hit a constraint: {e.orig}")
            raise ConflictError("This job already has an invoice", {"job_id": job_id}) from e
        except JobTrackerError as e:
            logger.warning(f"⚠️ Invoice for job {job_id} rejected: {e.message}")
            raise

        self.db.refresh(invoice)
        logger.info(f"🧾 Invoice {invoice.id} created for job {job_id}: total={totals.total}")
        return invoice

    def record_payment(self, invoice_id: int, amount: Number) -> PaymentResult:
        """
        Apply a payment to an invoice.

        Reading the balance, validating the amount, appending the payment,
        writing the new balance and (at zero) moving the job to Paid happen
        under one row lock on the invoice, so concurrent payments serialize
        and the second one sees the first one's balance.
        """
        amount = ledger.payment_amount(amount)

        try:
            with transaction(self.db):
                invoice = self.repo.get_invoice_by_id(self.db, invoice_id, for_update=True)
                if not invoice:
                    raise NotFoundError("Invoice not found", {"invoice_id": invoice_id})

                new_balance = ledger.apply_payment(invoice.balance, amount)

                payment = self.repo.create_payment(self.db, invoice.id, amount, utcnow())
                self.repo.update_balance(self.db, invoice, new_balance)

                job = self.job_repo.get_job_by_id(self.db, invoice.job_id, for_update=True)
                if new_balance == ZERO:
                    state_machine.transition(job, JobStatus.PAID, invoice=invoice)
                job_status = job.status
        except JobTrackerError as e:
            logger.warning(f"⚠️ Payment on invoice {invoice_id} rejected: {e.message}")
            raise

        self.db.refresh(payment)
        logger.info(
            f"💰 Payment {payment.id} of {amount} on invoice {invoice_id}; "
            f"remaining balance {new_balance}"
        )
        return PaymentResult(payment=payment, new_balance=new_balance, job_status=job_status)
