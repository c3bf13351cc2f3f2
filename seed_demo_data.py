"""
Seed the database with demo customers, a technician and jobs in every status
Usage: python seed_demo_data.py
"""
import logging
import sys
from datetime import timedelta
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from jobtracker import models
from jobtracker.database import Base, SessionLocal, engine
from jobtracker.domain.billing.service import BillingService
from jobtracker.domain.customers.schemas import CustomerCreate
from jobtracker.domain.customers.service import CustomerService
from jobtracker.domain.jobs.schemas import JobCreate
from jobtracker.domain.jobs.service import JobService
from jobtracker.domain.scheduling.service import SchedulingService
from jobtracker.domain.technicians.schemas import TechnicianCreate
from jobtracker.domain.technicians.service import TechnicianService
from jobtracker.shared.validators import utcnow

logging.basicConfig(level=logging.INFO, format='%(message)s')
logger = logging.getLogger(__name__)

CUSTOMERS = [
    ("John Smith", "555-123-4567", "john.smith@email.com", "123 Main St, Springfield, IL"),
    ("Jane Doe", "555-234-5678", "jane.doe@email.com", "456 Oak Ave, Riverside, CA"),
    ("Bob Wilson", "555-345-6789", "bob.wilson@email.com", "789 Pine Rd, Denver, CO"),
]


def reset_tables():
    logger.info("Clearing existing data...")
    Base.metadata.drop_all(bind=engine, tables=[
        models.Payment.__table__,
        models.Invoice.__table__,
        models.Appointment.__table__,
        models.Job.__table__,
        models.Customer.__table__,
        models.Technician.__table__,
    ])
    Base.metadata.create_all(bind=engine)


def seed():
    reset_tables()
    db = SessionLocal()
    try:
        logger.info("Creating customers...")
        customers = [
            CustomerService(db).create_customer(
                CustomerCreate(name=name, phone=phone, email=email, address=address)
            )
            for name, phone, email, address in CUSTOMERS
        ]

        logger.info("Creating technician...")
        taylor = TechnicianService(db).create_technician(
            TechnicianCreate(name="Taylor", phone="555-111-2222", email="taylor@company.com")
        )

        logger.info("Creating jobs...")
        jobs = JobService(db)
        ac_job = jobs.create_job(JobCreate(
            customer_id=customers[0].id,
            title="Fix AC Unit",
            description="AC not cooling properly, needs inspection and repair",
        ))
        jobs.create_job(JobCreate(
            customer_id=customers[1].id,
            title="Install Thermostat",
            description="Install new smart thermostat in living room",
        ))
        heater_job = jobs.create_job(JobCreate(
            customer_id=customers[2].id,
            title="Repair Heater",
            description="Heater making strange noises, urgent repair needed",
        ))

        logger.info("Scheduling appointments...")
        tomorrow = (utcnow() + timedelta(days=1)).replace(hour=9, minute=0, second=0, microsecond=0)
        scheduling = SchedulingService(db)
        scheduling.schedule_job(heater_job.id, taylor.id, tomorrow, tomorrow + timedelta(hours=2))
        yesterday = tomorrow - timedelta(days=2)
        scheduling.schedule_job(ac_job.id, taylor.id, yesterday, yesterday + timedelta(hours=3))

        logger.info("Completing and invoicing the AC job...")
        jobs.update_status(ac_job.id, models.JobStatus.DONE.value)
        billing = BillingService(db)
        invoice = billing.create_invoice(ac_job.id, [
            {"description": "AC Repair", "quantity": 1, "rate": "150.00"},
            {"description": "Parts", "quantity": 3, "rate": "25.50"},
            {"description": "Labor (hours)", "quantity": "2.5", "rate": "85.00"},
        ])
        billing.record_payment(invoice.id, "200.00")

        logger.info("✅ Seed completed successfully!")
    finally:
        db.close()


if __name__ == "__main__":
    try:
        seed()
    except Exception as e:
        logger.error(f"❌ Seed failed: {e}")
        sys.exit(1)
