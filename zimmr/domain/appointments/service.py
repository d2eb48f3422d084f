"""Appointment service - Business logic for appointment operations"""

import logging
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...errors import NotFoundError, UpstreamError
from ...models import Appointment
from ...services import twilio_service
from ..customers.repository import CustomerRepository
from .repository import AppointmentRepository
from .schemas import AppointmentCreate, AppointmentUpdate, ApprovalRequest

logger = logging.getLogger(__name__)

# Non-nullable columns; an explicit null in an update leaves them unchanged
REQUIRED_FIELDS = ("scheduled_at", "duration", "status", "is_private")


class AppointmentService:
    """Service layer for appointment business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AppointmentRepository(db)
        self.customers = CustomerRepository(db)

    def list_appointments(self, craftsman_id: int) -> list[Appointment]:
        return self.repo.list_for_craftsman(craftsman_id)

    def get_appointment(self, appointment_id: int, craftsman_id: int) -> Appointment:
        appointment = self.repo.get(appointment_id, craftsman_id)
        if not appointment:
            raise NotFoundError("Appointment not found")
        return appointment

    def _check_customer(self, customer_id, craftsman_id: int) -> None:
        if customer_id is not None and not self.customers.get(customer_id, craftsman_id):
            raise NotFoundError("Customer not found")

    def create_appointment(self, data: AppointmentCreate, craftsman_id: int) -> Appointment:
        self._check_customer(data.customer_id, craftsman_id)
        try:
            appointment = self.repo.create(craftsman_id, **data.model_dump())
        except SQLAlchemyError as e:
            self.db.rollback()
            raise UpstreamError("Failed to create appointment", cause=e) from e
        logger.info(f"Created appointment {appointment.id} for craftsman {craftsman_id}")
        return appointment

    def update_appointment(
        self, appointment_id: int, data: AppointmentUpdate, craftsman_id: int
    ) -> Appointment:
        appointment = self.get_appointment(appointment_id, craftsman_id)
        updates = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None or key not in REQUIRED_FIELDS
        }
        self._check_customer(updates.get("customer_id"), craftsman_id)
        try:
            return self.repo.update(appointment, **updates)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise UpstreamError("Failed to update appointment", cause=e) from e

    def delete_appointment(self, appointment_id: int, craftsman_id: int) -> dict:
        appointment = self.get_appointment(appointment_id, craftsman_id)
        try:
            self.repo.delete(appointment)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise UpstreamError("Failed to delete appointment", cause=e) from e
        logger.info(f"Deleted appointment {appointment_id} for craftsman {craftsman_id}")
        return {"message": "Appointment deleted successfully"}

    async def approve_appointment(
        self, appointment_id: int, craftsman_id: int, data: ApprovalRequest
    ) -> Appointment:
        """
        Approve or reject a pending appointment and tell the customer by SMS.

        The SMS is best effort; its failure is logged and the decision stands.
        """
        appointment = self.get_appointment(appointment_id, craftsman_id)
        now = datetime.now(timezone.utc)

        updates = {"craftsman_notes": data.notes}
        if data.scheduled_at is not None:
            updates["scheduled_at"] = data.scheduled_at
        if data.approved:
            updates.update(status="confirmed", approval_status="approved", approved_at=now)
            action = "approved"
        else:
            updates.update(status="cancelled", approval_status="rejected", cancelled_at=now)
            action = "rejected"

        try:
            appointment = self.repo.update(appointment, **updates)
            self.repo.add_approval_log(appointment.id, craftsman_id, action, data.notes)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise UpstreamError("Failed to update appointment", cause=e) from e

        logger.info(f"Appointment {appointment.id} {action} by craftsman {craftsman_id}")

        customer_phone = appointment.customer.phone if appointment.customer else None
        if data.approved:
            sent, error = await twilio_service.send_appointment_confirmation(
                customer_phone, appointment.scheduled_at, appointment.location, data.notes
            )
        else:
            sent, error = await twilio_service.send_appointment_rejection(
                customer_phone, appointment.scheduled_at, data.notes
            )
        if not sent:
            logger.warning(f"Customer SMS for appointment {appointment.id} not sent: {error}")

        return appointment
