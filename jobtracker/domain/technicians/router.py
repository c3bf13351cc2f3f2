"""Technician router - FastAPI endpoints for technician operations"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...database import get_db
from .schemas import TechnicianCreate, TechnicianDetailResponse, TechnicianResponse
from .service import TechnicianService

router = APIRouter(prefix="/technicians", tags=["Technicians"])


def get_technician_service(db: Session = Depends(get_db)) -> TechnicianService:
    """Dependency injection for TechnicianService"""
    return TechnicianService(db)


@router.post("", response_model=TechnicianResponse, status_code=status.HTTP_201_CREATED)
async def create_technician(
    data: TechnicianCreate,
    service: TechnicianService = Depends(get_technician_service),
):
    """Create a new technician"""
    return service.create_technician(data)


@router.get("", response_model=list[TechnicianResponse])
async def get_technicians(service: TechnicianService = Depends(get_technician_service)):
    """Get all technicians ordered by name"""
    return service.get_technicians()


@router.get("/{technician_id}", response_model=TechnicianDetailResponse)
async def get_technician(
    technician_id: int,
    service: TechnicianService = Depends(get_technician_service),
):
    """Get a technician and their booked appointments"""
    return service.get_technician_detail(technician_id)
