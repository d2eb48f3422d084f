"""Note domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from ...shared.schemas import ApiModel
from ...utils.timeutils import stored_utc


class NoteCreate(ApiModel):
    customer_id: int
    title: str
    content: str
    appointment_id: Optional[int] = None
    tags: list[str] = Field(default_factory=list)
    is_private: bool = False

    @field_validator("title", "content")
    @classmethod
    def validate_required_text(cls, v):
        if not v or not v.strip():
            raise ValueError("Title and content are required")
        return v


class NoteUpdate(ApiModel):
    customer_id: Optional[int] = None
    appointment_id: Optional[int] = None
    title: Optional[str] = None
    content: Optional[str] = None
    tags: Optional[list[str]] = None
    is_private: Optional[bool] = None

    @field_validator("title", "content")
    @classmethod
    def validate_text(cls, v):
        if v is not None and not v.strip():
            raise ValueError("must not be empty")
        return v


class NoteResponse(ApiModel):
    id: int
    craftsman_id: int
    customer_id: int
    customer_name: Optional[str] = None
    appointment_id: Optional[int] = None
    title: str
    content: str
    tags: list[str] = Field(default_factory=list)
    is_private: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_note(cls, note) -> "NoteResponse":
        return cls(
            id=note.id,
            craftsman_id=note.craftsman_id,
            customer_id=note.customer_id,
            customer_name=note.customer.name if note.customer else None,
            appointment_id=note.appointment_id,
            title=note.title,
            content=note.content,
            tags=note.tags or [],
            is_private=bool(note.is_private),
            created_at=stored_utc(note.created_at),
            updated_at=stored_utc(note.updated_at),
        )


class Pagination(ApiModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


class NoteListResponse(ApiModel):
    notes: list[NoteResponse]
    pagination: Pagination
