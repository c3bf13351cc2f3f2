"""Customer router - FastAPI endpoints for customer operations"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...database import get_db
from .schemas import CustomerCreate, CustomerDetailResponse, CustomerResponse
from .service import CustomerService

router = APIRouter(prefix="/customers", tags=["Customers"])


def get_customer_service(db: Session = Depends(get_db)) -> CustomerService:
    """Dependency injection for CustomerService"""
    return CustomerService(db)


@router.post("", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
async def create_customer(
    data: CustomerCreate,
    service: CustomerService = Depends(get_customer_service),
):
    """Create a new customer"""
    return service.create_customer(data)


@router.get("", response_model=list[CustomerResponse])
async def get_customers(service: CustomerService = Depends(get_customer_service)):
    """Get all customers, newest first"""
    return service.get_customers()


@router.get("/{customer_id}", response_model=CustomerDetailResponse)
async def get_customer(
    customer_id: int,
    service: CustomerService = Depends(get_customer_service),
):
    """Get a customer together with their jobs"""
    return service.get_customer(customer_id, with_jobs=True)
