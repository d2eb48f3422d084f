"""Appointment repository - every query is filtered by craftsman_id"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Appointment, AppointmentApprovalLog


class AppointmentRepository:
    """Repository for appointment database operations"""

    def __init__(self, db: Session):
        self.db = db

    def list_for_craftsman(self, craftsman_id: int) -> list[Appointment]:
        return (
            self.db.query(Appointment)
            .options(joinedload(Appointment.customer))
            .filter(Appointment.craftsman_id == craftsman_id)
            .order_by(Appointment.scheduled_at.desc())
            .all()
        )

    def get(self, appointment_id: int, craftsman_id: int) -> Optional[Appointment]:
        """None both for missing rows and rows of another craftsman"""
        return (
            self.db.query(Appointment)
            .options(joinedload(Appointment.customer))
            .filter(Appointment.id == appointment_id, Appointment.craftsman_id == craftsman_id)
            .first()
        )

    def list_starting_between(
        self, craftsman_id: int, start: datetime, end: datetime, include_cancelled: bool = False
    ) -> list[Appointment]:
        """
        Appointments with start >= start and start < end, chronological.
        Cancelled appointments are left out unless include_cancelled is set.
        """
        query = self.db.query(Appointment).filter(
            Appointment.craftsman_id == craftsman_id,
            Appointment.scheduled_at >= start,
            Appointment.scheduled_at < end,
        )
        if not include_cancelled:
            query = query.filter(Appointment.status != "cancelled")
        return query.order_by(Appointment.scheduled_at.asc()).all()

    def create(self, craftsman_id: int, **appointment_data) -> Appointment:
        appointment = Appointment(craftsman_id=craftsman_id, **appointment_data)
        self.db.add(appointment)
        self.db.commit()
        self.db.refresh(appointment)
        return appointment

    def update(self, appointment: Appointment, **updates) -> Appointment:
        for key, value in updates.items():
            if key in ("id", "craftsman_id"):
                continue
            if hasattr(appointment, key):
                setattr(appointment, key, value)
        self.db.commit()
        self.db.refresh(appointment)
        return appointment

    def delete(self, appointment: Appointment) -> None:
        self.db.delete(appointment)
        self.db.commit()

    def add_approval_log(
        self, appointment_id: int, craftsman_id: int, action: str, notes: Optional[str]
    ) -> AppointmentApprovalLog:
        log = AppointmentApprovalLog(
            appointment_id=appointment_id, craftsman_id=craftsman_id, action=action, notes=notes
        )
        self.db.add(log)
        self.db.commit()
        return log
