import threading
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import pytest
from conftest import Workshop, at

from jobtracker.domain.billing.service import BillingService
from jobtracker.domain.customers.schemas import CustomerCreate
from jobtracker.domain.customers.service import CustomerService
from jobtracker.domain.jobs.service import JobService
from jobtracker.domain.scheduling.service import SchedulingService
from jobtracker.models import Appointment, Customer, Invoice, Job, Payment
from jobtracker.shared.errors import ConflictError

WORKERS = 8


def run_concurrently(session_factory, action, count=WORKERS):
    """
    Call ``action(session, n)`` from ``count`` threads at once, each with its
    own session. Returns what each call returned, or the ConflictError it raised.
    """
    barrier = threading.Barrier(count)

    def attempt(n):
        session = session_factory()
        try:
            barrier.wait()
            return action(session, n)
        except ConflictError as e:
            return e
        finally:
            session.close()

    with ThreadPoolExecutor(max_workers=count) as pool:
        return list(pool.map(attempt, range(count)))


def conflicts(results):
    return [r for r in results if isinstance(r, ConflictError)]


class TestConcurrentWrites:
    """Read-validate-write units stay serialized across sessions"""

    @pytest.fixture
    def setup(self, file_session_factory):
        session = file_session_factory()
        yield Workshop(session)
        session.close()

    def test_only_one_overlapping_booking_persists(self, file_session_factory, setup):
        technician_id = setup.technician("Taylor").id
        job_ids = [setup.job(title=f"Visit {n}").id for n in range(WORKERS)]
        setup.db.close()

        results = run_concurrently(
            file_session_factory,
            lambda session, n: SchedulingService(session).schedule_job(
                job_ids[n], technician_id, at(10), at(11)
            ),
        )

        assert len(conflicts(results)) == WORKERS - 1
        check = file_session_factory()
        try:
            assert check.query(Appointment).count() == 1
            assert check.query(Job).filter(Job.status == "Scheduled").count() == 1
            assert check.query(Job).filter(Job.status == "New").count() == WORKERS - 1
        finally:
            check.close()

    def test_payments_never_lose_an_update(self, file_session_factory, setup):
        _, invoice = setup.invoiced_job(
            line_items=[{"description": "Labor", "quantity": 1, "rate": 100}]
        )
        invoice_id = invoice.id
        setup.db.close()

        results = run_concurrently(
            file_session_factory,
            lambda session, n: BillingService(session).record_payment(invoice_id, 30),
            count=6,
        )

        assert len(conflicts(results)) == 3
        check = file_session_factory()
        try:
            invoice = check.get(Invoice, invoice_id)
            assert invoice.balance == Decimal("10.00")
            assert [p.amount for p in check.query(Payment).all()] == [Decimal("30.00")] * 3
            assert check.get(Job, invoice.job_id).status == "Invoiced"
        finally:
            check.close()

    def test_only_one_invoice_per_job(self, file_session_factory, setup):
        job_id = setup.done_job().id
        setup.db.close()

        results = run_concurrently(
            file_session_factory,
            lambda session, n: BillingService(session).create_invoice(
                job_id, [{"description": f"Labor {n}", "quantity": 1, "rate": 50}]
            ),
        )

        assert len(conflicts(results)) == WORKERS - 1
        check = file_session_factory()
        try:
            assert check.query(Invoice).count() == 1
            assert check.get(Job, job_id).status == "Invoiced"
        finally:
            check.close()

    def test_repeated_transition_applies_once(self, file_session_factory, setup):
        job_id = setup.scheduled_job().id
        setup.db.close()

        results = run_concurrently(
            file_session_factory,
            lambda session, n: JobService(session).update_status(job_id, "Done").status,
        )

        assert results == ["Done"] * WORKERS
        check = file_session_factory()
        try:
            assert check.get(Job, job_id).status == "Done"
        finally:
            check.close()

    def test_open_read_session_does_not_block_writers(self, file_session_factory, setup):
        setup.customer("Ann")
        assert len(setup.customers.get_customers()) == 1

        other = file_session_factory()
        try:
            bob = CustomerService(other).create_customer(CustomerCreate(name="Bob"))
            assert bob.id is not None
        finally:
            other.close()

        setup.technician("Taylor")
        assert setup.db.query(Customer).count() == 2
