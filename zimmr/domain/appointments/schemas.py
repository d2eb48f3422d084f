"""Appointment domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import Field, field_validator

from ...shared.schemas import ApiModel
from ...utils.timeutils import as_utc, stored_utc

AppointmentStatus = Literal["pending", "scheduled", "confirmed", "cancelled", "completed"]


class AppointmentCreate(ApiModel):
    """Schema for creating an appointment; craftsman_id is never accepted"""

    scheduled_at: datetime
    duration: int = Field(default=60, gt=0, le=24 * 60)
    customer_id: Optional[int] = None
    title: Optional[str] = None
    location: Optional[str] = None
    status: AppointmentStatus = "scheduled"
    notes: Optional[str] = None
    is_private: bool = False

    @field_validator("scheduled_at")
    @classmethod
    def normalize_scheduled_at(cls, v):
        return as_utc(v)


class AppointmentUpdate(ApiModel):
    scheduled_at: Optional[datetime] = None
    duration: Optional[int] = Field(default=None, gt=0, le=24 * 60)
    customer_id: Optional[int] = None
    title: Optional[str] = None
    location: Optional[str] = None
    status: Optional[AppointmentStatus] = None
    notes: Optional[str] = None
    is_private: Optional[bool] = None

    @field_validator("scheduled_at")
    @classmethod
    def normalize_scheduled_at(cls, v):
        if v is not None:
            return as_utc(v)
        return v


class ApprovalRequest(ApiModel):
    approved: bool
    scheduled_at: Optional[datetime] = None
    notes: Optional[str] = None

    @field_validator("scheduled_at")
    @classmethod
    def normalize_scheduled_at(cls, v):
        if v is not None:
            return as_utc(v)
        return v


class AppointmentResponse(ApiModel):
    id: int
    craftsman_id: int
    customer_id: Optional[int] = None
    customer_name: Optional[str] = None
    call_id: Optional[int] = None
    title: Optional[str] = None
    scheduled_at: datetime
    duration: int
    location: Optional[str] = None
    status: str
    approval_status: Optional[str] = None
    notes: Optional[str] = None
    craftsman_notes: Optional[str] = None
    is_private: bool = False
    approved_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_appointment(cls, appointment) -> "AppointmentResponse":
        return cls(
            id=appointment.id,
            craftsman_id=appointment.craftsman_id,
            customer_id=appointment.customer_id,
            customer_name=appointment.customer.name if appointment.customer else None,
            call_id=appointment.call_id,
            title=appointment.title,
            scheduled_at=stored_utc(appointment.scheduled_at),
            duration=appointment.duration,
            location=appointment.location,
            status=appointment.status,
            approval_status=appointment.approval_status,
            notes=appointment.notes,
            craftsman_notes=appointment.craftsman_notes,
            is_private=bool(appointment.is_private),
            approved_at=stored_utc(appointment.approved_at),
            cancelled_at=stored_utc(appointment.cancelled_at),
            created_at=stored_utc(appointment.created_at),
        )
