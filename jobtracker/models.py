import enum

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

# Money columns: fixed point, 2 decimal places
Money = Numeric(12, 2, asdecimal=True)


class JobStatus(str, enum.Enum):
    """Job lifecycle, declared in its strict order"""

    NEW = "New"
    SCHEDULED = "Scheduled"
    DONE = "Done"
    INVOICED = "Invoiced"
    PAID = "Paid"


JOB_STATUS_VALUES = [status.value for status in JobStatus]


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True)
    address = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    jobs = relationship(
        "Job",
        back_populates="customer",
        order_by="[desc(Job.created_at), desc(Job.id)]",
    )


class Technician(Base):
    __tablename__ = "technicians"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    appointments = relationship(
        "Appointment",
        back_populates="technician",
        order_by="[desc(Appointment.start_time), desc(Appointment.id)]",
    )


class Job(Base):
    __tablename__ = "jobs"
    __table_args__ = (
        CheckConstraint(
            "status IN ({})".format(", ".join(f"'{value}'" for value in JOB_STATUS_VALUES)),
            name="ck_jobs_status",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)

    # New → Scheduled → Done → Invoiced → Paid, never backwards
    status = Column(String(20), nullable=False, default=JobStatus.NEW.value, index=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    customer = relationship("Customer", back_populates="jobs")
    appointment = relationship("Appointment", back_populates="job", uselist=False)
    invoice = relationship("Invoice", back_populates="job", uselist=False)


class Appointment(Base):
    """Technician time window for a job. One per job, never rescheduled."""

    __tablename__ = "appointments"
    __table_args__ = (
        CheckConstraint("start_time < end_time", name="ck_appointments_window"),
    )

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id"), unique=True, nullable=False)
    technician_id = Column(Integer, ForeignKey("technicians.id"), nullable=False, index=True)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    job = relationship("Job", back_populates="appointment")
    technician = relationship("Technician", back_populates="appointments")


class Invoice(Base):
    """Invoice for a finished job. Line items are frozen; only balance moves."""

    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id"), unique=True, nullable=False)

    # Ordered list of {description, quantity, rate, amount}
    line_items = Column(JSON, nullable=False, default=list)

    subtotal = Column(Money, nullable=False)
    tax = Column(Money, nullable=False, default=0)
    total = Column(Money, nullable=False)
    balance = Column(Money, nullable=False)

    created_at = Column(DateTime, server_default=func.now())

    job = relationship("Job", back_populates="invoice")
    payments = relationship(
        "Payment",
        back_populates="invoice",
        order_by="[Payment.payment_date, Payment.id]",
    )


class Payment(Base):
    """Append-only payment against an invoice"""

    __tablename__ = "payments"
    __table_args__ = (CheckConstraint("amount > 0", name="ck_payments_amount_positive"),)

    id = Column(Integer, primary_key=True, index=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id"), nullable=False, index=True)
    amount = Column(Money, nullable=False)
    payment_date = Column(DateTime, server_default=func.now(), nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    invoice = relationship("Invoice", back_populates="payments")
