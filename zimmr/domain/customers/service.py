"""Customer service - Business logic for customer operations"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...errors import NotFoundError, UpstreamError
from ...models import Customer
from .repository import CustomerRepository
from .schemas import CustomerCreate, CustomerUpdate

logger = logging.getLogger(__name__)

PHONE_CUSTOMER_NAME = "Phone Customer"


class CustomerService:
    """Service layer for customer business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = CustomerRepository(db)

    def get_customers(self, craftsman_id: int) -> list[Customer]:
        return self.repo.list_for_craftsman(craftsman_id)

    def get_customer(self, customer_id: int, craftsman_id: int) -> Customer:
        customer = self.repo.get(customer_id, craftsman_id)
        if not customer:
            raise NotFoundError("Customer not found")
        return customer

    def create_customer(self, data: CustomerCreate, craftsman_id: int) -> Customer:
        logger.info(f"Creating customer for craftsman {craftsman_id}")
        return self.repo.create(craftsman_id, source="manual", **data.model_dump())

    def update_customer(self, customer_id: int, data: CustomerUpdate, craftsman_id: int) -> Customer:
        customer = self.get_customer(customer_id, craftsman_id)
        updates = data.model_dump(exclude_unset=True)
        if updates.get("name") is None:
            updates.pop("name", None)
        return self.repo.update(customer, **updates)

    def delete_customer(self, customer_id: int, craftsman_id: int) -> dict:
        customer = self.get_customer(customer_id, craftsman_id)
        try:
            self.repo.delete(customer)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise UpstreamError("Failed to delete customer", cause=e) from e
        logger.info(f"Deleted customer {customer_id} for craftsman {craftsman_id}")
        return {"message": "Customer deleted successfully"}

    def find_or_create_by_phone(
        self, phone: str, name: Optional[str], craftsman_id: int, source: str = "phone_ai_assistant"
    ) -> Customer:
        """Phone-assistant callers are matched by number within the craftsman's customers"""
        existing = self.repo.get_by_phone(phone, craftsman_id)
        if existing:
            logger.info(f"Found existing customer {existing.id} for craftsman {craftsman_id}")
            return existing

        customer = self.repo.create(
            craftsman_id, name=name or PHONE_CUSTOMER_NAME, phone=phone, source=source
        )
        logger.info(f"Created customer {customer.id} for craftsman {craftsman_id}")
        return customer
