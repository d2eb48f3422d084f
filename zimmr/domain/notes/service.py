"""Note service - Business logic for customer notes"""

import logging
import math
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...errors import NotFoundError, UpstreamError
from ...models import Note
from ..appointments.repository import AppointmentRepository
from ..customers.repository import CustomerRepository
from .repository import NoteFilter, NoteRepository
from .schemas import NoteCreate, NoteUpdate

logger = logging.getLogger(__name__)

# Columns that keep their value when an update sends null
REQUIRED_FIELDS = ("customer_id", "title", "content", "is_private")


class NoteService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = NoteRepository(db)
        self.customers = CustomerRepository(db)
        self.appointments = AppointmentRepository(db)

    def list_notes(self, craftsman_id: int, filters: NoteFilter, page: int, limit: int) -> dict:
        total = self.repo.count(craftsman_id, filters)
        notes = self.repo.list_page(craftsman_id, filters, offset=(page - 1) * limit, limit=limit)
        total_pages = math.ceil(total / limit)
        return {
            "notes": notes,
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "total_pages": total_pages,
                "has_next": page < total_pages,
                "has_prev": page > 1,
            },
        }

    def get_note(self, note_id: int, craftsman_id: int) -> Note:
        note = self.repo.get(note_id, craftsman_id)
        if not note:
            raise NotFoundError("Note not found")
        return note

    def _check_references(
        self, customer_id: int, appointment_id: Optional[int], craftsman_id: int
    ) -> None:
        """The customer must be the craftsman's; a linked appointment must be that customer's"""
        if not self.customers.get(customer_id, craftsman_id):
            raise NotFoundError("Customer not found")
        if appointment_id is not None:
            appointment = self.appointments.get(appointment_id, craftsman_id)
            if not appointment or appointment.customer_id != customer_id:
                raise NotFoundError("Appointment not found")

    def create_note(self, data: NoteCreate, craftsman_id: int) -> Note:
        self._check_references(data.customer_id, data.appointment_id, craftsman_id)
        try:
            note = self.repo.create(craftsman_id, **data.model_dump())
        except SQLAlchemyError as e:
            self.db.rollback()
            raise UpstreamError("Failed to create note", cause=e) from e
        logger.info(f"Created note {note.id} for craftsman {craftsman_id}")
        return note

    def update_note(self, note_id: int, data: NoteUpdate, craftsman_id: int) -> Note:
        note = self.get_note(note_id, craftsman_id)
        updates = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None or key not in REQUIRED_FIELDS
        }
        if "customer_id" in updates or updates.get("appointment_id") is not None:
            self._check_references(
                updates.get("customer_id", note.customer_id),
                updates.get("appointment_id"),
                craftsman_id,
            )
        try:
            return self.repo.update(note, **updates)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise UpstreamError("Failed to update note", cause=e) from e

    def delete_note(self, note_id: int, craftsman_id: int) -> dict:
        note = self.get_note(note_id, craftsman_id)
        try:
            self.repo.delete(note)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise UpstreamError("Failed to delete note", cause=e) from e
        return {"message": "Note deleted successfully"}
