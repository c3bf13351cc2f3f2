"""Technician repository - Database operations for technicians"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Technician


class TechnicianRepository:
    """Repository for technician database operations"""

    @staticmethod
    def get_technicians(db: Session) -> list[Technician]:
        """Get all technicians ordered by name"""
        return db.query(Technician).order_by(Technician.name.asc(), Technician.id.asc()).all()

    @staticmethod
    def get_technician_by_id(db: Session, technician_id: int) -> Optional[Technician]:
        return db.query(Technician).filter(Technician.id == technician_id).first()

    @staticmethod
    def create_technician(db: Session, **technician_data) -> Technician:
        """Insert a technician; the caller owns the commit"""
        technician = Technician(**technician_data)
        db.add(technician)
        db.flush()
        return technician
