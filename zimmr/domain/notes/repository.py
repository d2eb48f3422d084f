"""Note repository - every query is filtered by craftsman_id"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from ...models import Note


@dataclass
class NoteFilter:
    search: Optional[str] = None
    customer_id: Optional[int] = None
    appointment_id: Optional[int] = None
    no_appointment: bool = False


class NoteRepository:
    def __init__(self, db: Session):
        self.db = db

    def _filtered(self, craftsman_id: int, filters: NoteFilter):
        query = self.db.query(Note).filter(Note.craftsman_id == craftsman_id)
        if filters.search:
            pattern = f"%{filters.search}%"
            query = query.filter(or_(Note.title.ilike(pattern), Note.content.ilike(pattern)))
        if filters.customer_id is not None:
            query = query.filter(Note.customer_id == filters.customer_id)
        if filters.appointment_id is not None:
            query = query.filter(Note.appointment_id == filters.appointment_id)
        if filters.no_appointment:
            query = query.filter(Note.appointment_id.is_(None))
        return query

    def count(self, craftsman_id: int, filters: NoteFilter) -> int:
        return self._filtered(craftsman_id, filters).count()

    def list_page(self, craftsman_id: int, filters: NoteFilter, offset: int, limit: int) -> list[Note]:
        return (
            self._filtered(craftsman_id, filters)
            .options(joinedload(Note.customer))
            .order_by(Note.created_at.desc(), Note.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )

    def get(self, note_id: int, craftsman_id: int) -> Optional[Note]:
        return (
            self.db.query(Note)
            .options(joinedload(Note.customer))
            .filter(Note.id == note_id, Note.craftsman_id == craftsman_id)
            .first()
        )

    def create(self, craftsman_id: int, **note_data) -> Note:
        note = Note(craftsman_id=craftsman_id, **note_data)
        self.db.add(note)
        self.db.commit()
        self.db.refresh(note)
        return note

    def update(self, note: Note, **updates) -> Note:
        for key, value in updates.items():
            if key in ("id", "craftsman_id"):
                continue
            if hasattr(note, key):
                setattr(note, key, value)
        self.db.commit()
        self.db.refresh(note)
        return note

    def delete(self, note: Note) -> None:
        self.db.delete(note)
        self.db.commit()
