"""Craftsman repository - Database operations for tenant rows"""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ...models import Craftsman


class CraftsmanRepository:
    """Repository for craftsman database operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_user_id(self, user_id: str) -> Optional[Craftsman]:
        """Get the craftsman bound to an identity-provider user id"""
        return (
            self.db.query(Craftsman)
            .filter(Craftsman.user_id == user_id)
            .order_by(Craftsman.id)
            .first()
        )

    def get_by_id(self, craftsman_id: int) -> Optional[Craftsman]:
        return self.db.query(Craftsman).filter(Craftsman.id == craftsman_id).first()

    def get_by_phone(self, phone: str) -> Optional[Craftsman]:
        """Match a forwarded or calling number against the assistant number or the contact phone"""
        return (
            self.db.query(Craftsman)
            .filter(or_(Craftsman.twilio_phone_number == phone, Craftsman.phone == phone))
            .order_by(Craftsman.id)
            .first()
        )

    def create(self, **craftsman_data) -> Craftsman:
        """Insert a craftsman row; the caller handles IntegrityError on user_id"""
        craftsman = Craftsman(**craftsman_data)
        self.db.add(craftsman)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(craftsman)
        return craftsman

    def update(self, craftsman: Craftsman, **updates) -> Craftsman:
        for key, value in updates.items():
            if hasattr(craftsman, key):
                setattr(craftsman, key, value)
        self.db.commit()
        self.db.refresh(craftsman)
        return craftsman
