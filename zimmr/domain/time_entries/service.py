"""Time entry service - Business logic for work time tracking"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...errors import NotFoundError, UpstreamError
from ...models import TimeEntry
from ..appointments.repository import AppointmentRepository
from ..customers.repository import CustomerRepository
from .repository import TimeEntryRepository
from .schemas import TimeEntryCreate

logger = logging.getLogger(__name__)


class TimeEntryService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = TimeEntryRepository(db)
        self.customers = CustomerRepository(db)
        self.appointments = AppointmentRepository(db)

    def list_entries(self, craftsman_id: int) -> list[TimeEntry]:
        return self.repo.list_for_craftsman(craftsman_id)

    def create_entry(self, data: TimeEntryCreate, craftsman_id: int) -> TimeEntry:
        """
        Record worked time. Entries for a customer are always billable, and the
        duration is derived from start and end when not given.
        """
        if data.customer_id is not None and not self.customers.get(data.customer_id, craftsman_id):
            raise NotFoundError("Customer not found")
        if data.appointment_id is not None and not self.appointments.get(
            data.appointment_id, craftsman_id
        ):
            raise NotFoundError("Appointment not found")

        payload = data.model_dump()
        if data.customer_id is not None or data.is_billable is None:
            payload["is_billable"] = True
        if data.duration_minutes is None and data.end_time is not None:
            payload["duration_minutes"] = round((data.end_time - data.start_time).total_seconds() / 60)

        try:
            entry = self.repo.create(craftsman_id, **payload)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise UpstreamError("Error creating time entry", cause=e) from e
        logger.info(f"Created time entry {entry.id} for craftsman {craftsman_id}")
        return entry
