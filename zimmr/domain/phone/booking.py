"""Booking of appointments requested through the phone assistant"""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...errors import NotFoundError, UpstreamError, ValidationFailure
from ...models import Appointment, Craftsman, Customer
from ...services import twilio_service
from ...shared.validators import validate_phone
from ...utils.sanitization import sanitize_text
from ...utils.timeutils import parse_datetime
from ..appointments.repository import AppointmentRepository
from ..customers.service import CustomerService
from ..tenants.repository import CraftsmanRepository

logger = logging.getLogger(__name__)

PHONE_BOOKING_DURATION = 60
DEFAULT_BOOKING_NOTE = "Created from phone assistant"


@dataclass
class BookingResult:
    appointment: Appointment
    customer: Customer


class BookingService:
    """Creates pending appointments for a craftsman identified by id, not by session"""

    def __init__(self, db: Session):
        self.db = db
        self.craftsmen = CraftsmanRepository(db)
        self.appointments = AppointmentRepository(db)
        self.customers = CustomerService(db)

    def get_craftsman(self, craftsman_id: Optional[int]) -> Craftsman:
        craftsman = self.craftsmen.get_by_id(craftsman_id) if craftsman_id is not None else None
        if not craftsman:
            raise NotFoundError("Craftsman not found")
        return craftsman

    async def book(
        self,
        craftsman_id: Optional[int],
        customer_phone: Optional[str],
        customer_name: Optional[str],
        preferred_date: Optional[str],
        call_id: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> BookingResult:
        """
        Book a 60-minute appointment awaiting the craftsman's approval.

        Raises:
            ValidationFailure: Missing or malformed phone number or date
            NotFoundError: Unknown craftsman
            UpstreamError: Database failure
        """
        if craftsman_id is None or not customer_phone or not preferred_date:
            raise ValidationFailure("craftsmanId, customerPhone, and preferredDate are required")
        try:
            phone = validate_phone(customer_phone)
        except ValueError:
            raise ValidationFailure("Invalid customerPhone")
        try:
            scheduled_at = parse_datetime(str(preferred_date))
        except ValueError:
            raise ValidationFailure("Invalid preferredDate, expected ISO-8601")

        craftsman = self.get_craftsman(craftsman_id)

        try:
            customer = self.customers.find_or_create_by_phone(
                phone, sanitize_text(customer_name, max_length=255), craftsman.id
            )
            appointment = self.appointments.create(
                craftsman.id,
                customer_id=customer.id,
                call_id=call_id,
                scheduled_at=scheduled_at,
                duration=PHONE_BOOKING_DURATION,
                status="scheduled",
                approval_status="pending",
                notes=sanitize_text(notes) or DEFAULT_BOOKING_NOTE,
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            raise UpstreamError("Failed to create appointment", cause=e) from e

        logger.info(
            f"Phone booking: appointment {appointment.id} for craftsman {craftsman.id}, "
            f"customer {customer.id}, pending approval"
        )

        sent, error = await twilio_service.send_new_booking_notification(
            craftsman.phone, customer.name, appointment.scheduled_at
        )
        if not sent:
            logger.warning(f"Craftsman notification for appointment {appointment.id} not sent: {error}")

        return BookingResult(appointment=appointment, customer=customer)
