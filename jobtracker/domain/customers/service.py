"""Customer service - Business logic for customer operations"""

import logging

from sqlalchemy.orm import Session

from ...database import transaction
from ...models import Customer
from ...shared.errors import NotFoundError
from .repository import CustomerRepository
from .schemas import CustomerCreate

logger = logging.getLogger(__name__)


class CustomerService:
    """Service layer for customer operations"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = CustomerRepository()

    def get_customers(self) -> list[Customer]:
        return self.repo.get_customers(self.db)

    def get_customer(self, customer_id: int, with_jobs: bool = False) -> Customer:
        """Get a specific customer"""
        customer = self.repo.get_customer_by_id(self.db, customer_id, with_jobs=with_jobs)
        if not customer:
            raise NotFoundError("Customer not found", {"customer_id": customer_id})
        return customer

    def create_customer(self, data: CustomerCreate) -> Customer:
        """Create a new customer; optional contact fields default to absent"""
        with transaction(self.db):
            customer = self.repo.create_customer(
                self.db,
                name=data.name,
                phone=data.phone,
                email=data.email,
                address=data.address,
            )

        self.db.refresh(customer)
        logger.info(f"✅ Created customer {customer.id} ({customer.name})")
        return customer
