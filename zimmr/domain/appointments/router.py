"""Appointment router - FastAPI endpoints for appointments and availability"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_craftsman_id
from ...database import get_db
from ...errors import ValidationFailure
from ...shared.schemas import MessageResponse
from ...utils.timeutils import parse_day
from ..scheduling.availability import SlotAvailabilityEngine
from ..scheduling.schemas import AvailabilityResponse
from .schemas import AppointmentCreate, AppointmentResponse, AppointmentUpdate, ApprovalRequest
from .service import AppointmentService

router = APIRouter(prefix="/appointments", tags=["Appointments"])


def get_appointment_service(db: Session = Depends(get_db)) -> AppointmentService:
    """Dependency injection for AppointmentService"""
    return AppointmentService(db)


@router.get("", response_model=list[AppointmentResponse])
async def get_appointments(
    craftsman_id: int = Depends(get_current_craftsman_id),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Appointments of the logged-in craftsman, newest first"""
    return [
        AppointmentResponse.from_appointment(apt)
        for apt in service.list_appointments(craftsman_id)
    ]


@router.get("/availability", response_model=AvailabilityResponse)
async def get_availability(
    date: str = Query(..., description="Calendar day, YYYY-MM-DD"),
    craftsman_id: int = Depends(get_current_craftsman_id),
    db: Session = Depends(get_db),
):
    """Free one-hour slots between 08:00 and 17:00 on the given day"""
    try:
        day = parse_day(date)
    except ValueError:
        raise ValidationFailure("Invalid date, expected YYYY-MM-DD")
    availability = SlotAvailabilityEngine(db).available_slots(craftsman_id, day)
    return AvailabilityResponse.from_availability(availability)


@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: int,
    craftsman_id: int = Depends(get_current_craftsman_id),
    service: AppointmentService = Depends(get_appointment_service),
):
    return AppointmentResponse.from_appointment(
        service.get_appointment(appointment_id, craftsman_id)
    )


@router.post("", response_model=AppointmentResponse, status_code=201)
async def create_appointment(
    data: AppointmentCreate,
    craftsman_id: int = Depends(get_current_craftsman_id),
    service: AppointmentService = Depends(get_appointment_service),
):
    return AppointmentResponse.from_appointment(service.create_appointment(data, craftsman_id))


@router.put("/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment(
    appointment_id: int,
    data: AppointmentUpdate,
    craftsman_id: int = Depends(get_current_craftsman_id),
    service: AppointmentService = Depends(get_appointment_service),
):
    return AppointmentResponse.from_appointment(
        service.update_appointment(appointment_id, data, craftsman_id)
    )


@router.delete("/{appointment_id}", response_model=MessageResponse)
async def delete_appointment(
    appointment_id: int,
    craftsman_id: int = Depends(get_current_craftsman_id),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.delete_appointment(appointment_id, craftsman_id)


@router.post("/{appointment_id}/approve", response_model=AppointmentResponse)
async def approve_appointment(
    appointment_id: int,
    data: ApprovalRequest,
    craftsman_id: int = Depends(get_current_craftsman_id),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Approve or reject an appointment booked by the phone assistant"""
    appointment = await service.approve_appointment(appointment_id, craftsman_id, data)
    return AppointmentResponse.from_appointment(appointment)
