"""Time entry router"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_craftsman_id
from ...database import get_db
from .schemas import TimeEntryCreate, TimeEntryResponse
from .service import TimeEntryService

router = APIRouter(prefix="/time-entries", tags=["Time Entries"])


def get_time_entry_service(db: Session = Depends(get_db)) -> TimeEntryService:
    return TimeEntryService(db)


@router.get("", response_model=list[TimeEntryResponse])
async def get_time_entries(
    craftsman_id: int = Depends(get_current_craftsman_id),
    service: TimeEntryService = Depends(get_time_entry_service),
):
    """Time entries of the logged-in craftsman, latest start first"""
    return service.list_entries(craftsman_id)


@router.post("", response_model=TimeEntryResponse, status_code=201)
async def create_time_entry(
    data: TimeEntryCreate,
    craftsman_id: int = Depends(get_current_craftsman_id),
    service: TimeEntryService = Depends(get_time_entry_service),
):
    return service.create_entry(data, craftsman_id)
