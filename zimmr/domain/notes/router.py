"""Note router - FastAPI endpoints for customer notes"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_craftsman_id
from ...database import get_db
from ...shared.schemas import MessageResponse
from .repository import NoteFilter
from .schemas import NoteCreate, NoteListResponse, NoteResponse, NoteUpdate
from .service import NoteService

router = APIRouter(prefix="/notes", tags=["Notes"])


def get_note_service(db: Session = Depends(get_db)) -> NoteService:
    return NoteService(db)


@router.get("", response_model=NoteListResponse)
async def get_notes(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    search: Optional[str] = Query(None),
    customer_id: Optional[int] = Query(None, alias="customerId"),
    appointment_id: Optional[int] = Query(None, alias="appointmentId"),
    no_appointment: bool = Query(False, alias="noAppointment"),
    craftsman_id: int = Depends(get_current_craftsman_id),
    service: NoteService = Depends(get_note_service),
):
    """Notes of the logged-in craftsman, newest first, one page at a time"""
    filters = NoteFilter(
        search=search.strip() if search else None,
        customer_id=customer_id,
        appointment_id=appointment_id,
        no_appointment=no_appointment,
    )
    result = service.list_notes(craftsman_id, filters, page, limit)
    return NoteListResponse(
        notes=[NoteResponse.from_note(note) for note in result["notes"]],
        pagination=result["pagination"],
    )


@router.get("/{note_id}", response_model=NoteResponse)
async def get_note(
    note_id: int,
    craftsman_id: int = Depends(get_current_craftsman_id),
    service: NoteService = Depends(get_note_service),
):
    return NoteResponse.from_note(service.get_note(note_id, craftsman_id))


@router.post("", response_model=NoteResponse, status_code=201)
async def create_note(
    data: NoteCreate,
    craftsman_id: int = Depends(get_current_craftsman_id),
    service: NoteService = Depends(get_note_service),
):
    return NoteResponse.from_note(service.create_note(data, craftsman_id))


@router.put("/{note_id}", response_model=NoteResponse)
async def update_note(
    note_id: int,
    data: NoteUpdate,
    craftsman_id: int = Depends(get_current_craftsman_id),
    service: NoteService = Depends(get_note_service),
):
    return NoteResponse.from_note(service.update_note(note_id, data, craftsman_id))


@router.delete("/{note_id}", response_model=MessageResponse)
async def delete_note(
    note_id: int,
    craftsman_id: int = Depends(get_current_craftsman_id),
    service: NoteService = Depends(get_note_service),
):
    return service.delete_note(note_id, craftsman_id)
