import os

# Keep the module-level engine off disk; tests use their own in-memory engine
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DB_LOG_SLOW_QUERIES", "false")

from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from jobtracker.database import Base, build_engine, configure_sqlite, get_db
from jobtracker.domain.billing.service import BillingService
from jobtracker.domain.customers.schemas import CustomerCreate
from jobtracker.domain.customers.service import CustomerService
from jobtracker.domain.jobs.schemas import JobCreate
from jobtracker.domain.jobs.service import JobService
from jobtracker.domain.scheduling.service import SchedulingService
from jobtracker.domain.technicians.schemas import TechnicianCreate
from jobtracker.domain.technicians.service import TechnicianService
from jobtracker.main import app


def at(hour: int, minute: int = 0, day: int = 1) -> datetime:
    """Naive UTC timestamp on a fixed test date"""
    return datetime(2025, 3, day, hour, minute)


@pytest.fixture
def engine():
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    configure_sqlite(test_engine)
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def file_session_factory(tmp_path):
    """Sessions on a file-backed SQLite database, safe to use one per thread"""
    file_engine = build_engine(f"sqlite:///{tmp_path / 'jobtracker.db'}")
    Base.metadata.create_all(bind=file_engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=file_engine)
    file_engine.dispose()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


class Workshop:
    """Builds customers, technicians and jobs through the real services"""

    def __init__(self, db):
        self.db = db
        self.customers = CustomerService(db)
        self.technicians = TechnicianService(db)
        self.jobs = JobService(db)
        self.scheduling = SchedulingService(db)
        self.billing = BillingService(db)

    def customer(self, name="Ann", **kwargs):
        return self.customers.create_customer(CustomerCreate(name=name, **kwargs))

    def technician(self, name="Taylor", **kwargs):
        return self.technicians.create_technician(TechnicianCreate(name=name, **kwargs))

    def job(self, customer=None, title="Leak Fix", **kwargs):
        customer = customer or self.customer()
        return self.jobs.create_job(JobCreate(customer_id=customer.id, title=title, **kwargs))

    def scheduled_job(self, technician=None, start=None, end=None, title="Leak Fix"):
        job = self.job(title=title)
        technician = technician or self.technician()
        self.scheduling.schedule_job(job.id, technician.id, start or at(10), end or at(11))
        return job

    def done_job(self, **kwargs):
        job = self.scheduled_job(**kwargs)
        return self.jobs.update_status(job.id, "Done")

    def invoiced_job(self, line_items=None, **kwargs):
        job = self.done_job(**kwargs)
        invoice = self.billing.create_invoice(
            job.id, line_items or [{"description": "Labor", "quantity": 2, "rate": 50}]
        )
        return job, invoice


@pytest.fixture
def workshop(db):
    return Workshop(db)
