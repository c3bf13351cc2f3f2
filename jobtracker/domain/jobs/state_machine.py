"""
Job status state machine

Statuses form a strict total order: New < Scheduled < Done < Invoiced < Paid.
A job moves forward exactly one step at a time, never backwards, and each
target status has a precondition:

    Scheduled  - the job has an appointment
    Done       - the job has an appointment
    Invoiced   - current status is Done and the job has an invoice
    Paid       - the job has an invoice whose balance is <= 0

Moving to the current status is a no-op. This module only validates and
applies the status change; creating the appointment or invoice that satisfies
a precondition is done by the calling service in the same transaction.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional, Union

from ...models import JOB_STATUS_VALUES, Appointment, Invoice, Job, JobStatus
from ...shared.errors import PreconditionError, ValidationError
from ...shared.money import ZERO, format_money
from ...shared.validators import utcnow

logger = logging.getLogger(__name__)

STATUS_ORDER = list(JobStatus)


def parse_status(value: Union[str, JobStatus]) -> JobStatus:
    """Map a raw status string onto JobStatus"""
    if isinstance(value, JobStatus):
        return value
    try:
        return JobStatus(value)
    except ValueError:
        raise ValidationError(
            f"Invalid status. Must be one of: {', '.join(JOB_STATUS_VALUES)}",
            {"status": value},
        ) from None


def status_index(status: Union[str, JobStatus]) -> int:
    return STATUS_ORDER.index(parse_status(status))


def next_status(status: Union[str, JobStatus]) -> Optional[JobStatus]:
    """The status one step after ``status``, or None for Paid"""
    index = status_index(status)
    if index + 1 < len(STATUS_ORDER):
        return STATUS_ORDER[index + 1]
    return None


def validate_transition(
    current: Union[str, JobStatus],
    target: Union[str, JobStatus],
    *,
    has_appointment: bool,
    has_invoice: bool,
    invoice_balance: Optional[Decimal] = None,
) -> bool:
    """
    Check a status change against the lifecycle rules.

    Returns False when target equals current (nothing to do), True for a
    legal one-step move. Raises PreconditionError otherwise.
    """
    current = parse_status(current)
    target = parse_status(target)

    current_index = STATUS_ORDER.index(current)
    target_index = STATUS_ORDER.index(target)
    context = {"current_status": current.value, "target_status": target.value}

    if target_index == current_index:
        return False

    if target_index < current_index:
        raise PreconditionError("Cannot move job backwards in status", context)

    if target_index > current_index + 1:
        raise PreconditionError(
            "Cannot skip status steps. Jobs must progress linearly.", context
        )

    if target == JobStatus.SCHEDULED and not has_appointment:
        raise PreconditionError(
            "Job cannot be moved to Scheduled without an appointment", context
        )

    if target == JobStatus.DONE and not has_appointment:
        raise PreconditionError("Job cannot be marked as Done without an appointment", context)

    if target == JobStatus.INVOICED:
        if current != JobStatus.DONE:
            raise PreconditionError(
                "Job must be marked as Done before creating an invoice", context
            )
        if not has_invoice:
            raise PreconditionError(
                "Job cannot be moved to Invoiced without an invoice", context
            )

    if target == JobStatus.PAID:
        if not has_invoice:
            raise PreconditionError("Job cannot be moved to Paid without an invoice", context)
        balance = invoice_balance if invoice_balance is not None else ZERO
        if balance > ZERO:
            raise PreconditionError(
                f"Job cannot be moved to Paid with outstanding balance of {format_money(balance)}",
                {**context, "balance": float(balance)},
            )

    return True


def transition(
    job: Job,
    target: Union[str, JobStatus],
    *,
    appointment: Optional[Appointment] = None,
    invoice: Optional[Invoice] = None,
    now: Optional[datetime] = None,
) -> Job:
    """
    Validate and apply a status change on ``job`` in place.

    ``appointment`` and ``invoice`` are the job's related rows as currently
    stored (None when absent). A no-op leaves the job untouched, including
    its updated_at timestamp.
    """
    target = parse_status(target)
    changed = validate_transition(
        job.status,
        target,
        has_appointment=appointment is not None,
        has_invoice=invoice is not None,
        invoice_balance=invoice.balance if invoice is not None else None,
    )

    if not changed:
        return job

    previous = job.status
    job.status = target.value
    job.updated_at = now or utcnow()
    logger.info(f"✅ Job {job.id} transitioned: {previous} → {target.value}")
    return job
