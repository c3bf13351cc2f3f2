"""Billing repository - Database operations for invoices and payments"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session, selectinload

from ...models import Invoice, Payment


class BillingRepository:
    """Repository for invoice and payment database operations"""

    @staticmethod
    def get_invoice_by_id(db: Session, invoice_id: int, for_update: bool = False) -> Optional[Invoice]:
        """Get an invoice; ``for_update`` holds a row lock until the transaction ends"""
        query = db.query(Invoice).filter(Invoice.id == invoice_id)
        if for_update:
            query = query.with_for_update()
        return query.first()

    @staticmethod
    def get_invoice_with_payments(db: Session, invoice_id: int) -> Optional[Invoice]:
        return (
            db.query(Invoice)
            .options(selectinload(Invoice.payments))
            .filter(Invoice.id == invoice_id)
            .first()
        )

    @staticmethod
    def get_invoice_by_job_id(db: Session, job_id: int) -> Optional[Invoice]:
        return db.query(Invoice).filter(Invoice.job_id == job_id).first()

    @staticmethod
    def get_payments(db: Session, invoice_id: int) -> list[Payment]:
        """Payments for an invoice in the order they were received"""
        return (
            db.query(Payment)
            .filter(Payment.invoice_id == invoice_id)
            .order_by(Payment.payment_date.asc(), Payment.id.asc())
            .all()
        )

    @staticmethod
    def create_invoice(
        db: Session,
        job_id: int,
        line_items: list[dict],
        subtotal: Decimal,
        tax: Decimal,
        total: Decimal,
        balance: Decimal,
    ) -> Invoice:
        """Insert an invoice; the caller owns the commit"""
        invoice = Invoice(
            job_id=job_id,
            line_items=line_items,
            subtotal=subtotal,
            tax=tax,
            total=total,
            balance=balance,
        )
        db.add(invoice)
        db.flush()
        return invoice

    @staticmethod
    def create_payment(db: Session, invoice_id: int, amount: Decimal, payment_date: datetime) -> Payment:
        """Append a payment row; the caller owns the commit"""
        payment = Payment(invoice_id=invoice_id, amount=amount, payment_date=payment_date)
        db.add(payment)
        db.flush()
        return payment

    @staticmethod
    def update_balance(db: Session, invoice: Invoice, balance: Decimal) -> Invoice:
        invoice.balance = balance
        db.flush()
        return invoice
