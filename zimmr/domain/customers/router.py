"""Customer router - FastAPI endpoints for customer operations"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_craftsman_id
from ...database import get_db
from ...shared.schemas import MessageResponse
from .schemas import CustomerCreate, CustomerResponse, CustomerUpdate
from .service import CustomerService

router = APIRouter(prefix="/customers", tags=["Customers"])


def get_customer_service(db: Session = Depends(get_db)) -> CustomerService:
    """Dependency injection for CustomerService"""
    return CustomerService(db)


@router.get("", response_model=list[CustomerResponse])
async def get_customers(
    craftsman_id: int = Depends(get_current_craftsman_id),
    service: CustomerService = Depends(get_customer_service),
):
    """All customers of the logged-in craftsman, by name"""
    return service.get_customers(craftsman_id)


@router.get("/{customer_id}", response_model=CustomerResponse)
async def get_customer(
    customer_id: int,
    craftsman_id: int = Depends(get_current_craftsman_id),
    service: CustomerService = Depends(get_customer_service),
):
    return service.get_customer(customer_id, craftsman_id)


@router.post("", response_model=CustomerResponse, status_code=201)
async def create_customer(
    data: CustomerCreate,
    craftsman_id: int = Depends(get_current_craftsman_id),
    service: CustomerService = Depends(get_customer_service),
):
    return service.create_customer(data, craftsman_id)


@router.put("/{customer_id}", response_model=CustomerResponse)
async def update_customer(
    customer_id: int,
    data: CustomerUpdate,
    craftsman_id: int = Depends(get_current_craftsman_id),
    service: CustomerService = Depends(get_customer_service),
):
    return service.update_customer(customer_id, data, craftsman_id)


@router.delete("/{customer_id}", response_model=MessageResponse)
async def delete_customer(
    customer_id: int,
    craftsman_id: int = Depends(get_current_craftsman_id),
    service: CustomerService = Depends(get_customer_service),
):
    return service.delete_customer(customer_id, craftsman_id)
