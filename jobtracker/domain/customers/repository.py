"""Customer repository - Database operations for customers"""

from typing import Optional

from sqlalchemy.orm import Session, selectinload

from ...models import Customer


class CustomerRepository:
    """Repository for customer database operations"""

    @staticmethod
    def get_customers(db: Session) -> list[Customer]:
        """Get all customers, newest first"""
        return db.query(Customer).order_by(Customer.created_at.desc(), Customer.id.desc()).all()

    @staticmethod
    def get_customer_by_id(db: Session, customer_id: int, with_jobs: bool = False) -> Optional[Customer]:
        """Get a specific customer by ID"""
        query = db.query(Customer)
        if with_jobs:
            query = query.options(selectinload(Customer.jobs))
        return query.filter(Customer.id == customer_id).first()

    @staticmethod
    def create_customer(db: Session, **customer_data) -> Customer:
        """Insert a customer; the caller owns the commit"""
        customer = Customer(**customer_data)
        db.add(customer)
        db.flush()
        return customer
