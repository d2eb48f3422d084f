"""Customer repository - Database operations for customers"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Customer


class CustomerRepository:
    """Repository for customer database operations"""

    def __init__(self, db: Session):
        self.db = db

    def list_for_craftsman(self, craftsman_id: int) -> list[Customer]:
        return (
            self.db.query(Customer)
            .filter(Customer.craftsman_id == craftsman_id)
            .order_by(Customer.name.asc())
            .all()
        )

    def get(self, customer_id: int, craftsman_id: int) -> Optional[Customer]:
        return (
            self.db.query(Customer)
            .filter(Customer.id == customer_id, Customer.craftsman_id == craftsman_id)
            .first()
        )

    def get_by_phone(self, phone: str, craftsman_id: int) -> Optional[Customer]:
        return (
            self.db.query(Customer)
            .filter(Customer.phone == phone, Customer.craftsman_id == craftsman_id)
            .order_by(Customer.id)
            .first()
        )

    def create(self, craftsman_id: int, **customer_data) -> Customer:
        customer = Customer(craftsman_id=craftsman_id, **customer_data)
        self.db.add(customer)
        self.db.commit()
        self.db.refresh(customer)
        return customer

    def update(self, customer: Customer, **updates) -> Customer:
        for key, value in updates.items():
            if key in ("id", "craftsman_id"):
                continue
            if hasattr(customer, key):
                setattr(customer, key, value)
        self.db.commit()
        self.db.refresh(customer)
        return customer

    def delete(self, customer: Customer) -> None:
        self.db.delete(customer)
        self.db.commit()
