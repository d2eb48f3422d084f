"""
Slot availability for a craftsman's calendar day.

The day is a fixed grid of one-hour slots between 08:00 and 17:00 local
business time. A slot is free unless an appointment of that day overlaps it;
an appointment that only touches a slot boundary does not block it.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...errors import UpstreamError
from ...utils.timeutils import local_day_bounds, local_tz, stored_utc
from ..appointments.repository import AppointmentRepository

logger = logging.getLogger(__name__)

BUSINESS_START_HOUR = 8
BUSINESS_END_HOUR = 17
SLOT_MINUTES = 60


@dataclass(frozen=True)
class Slot:
    start: datetime
    end: datetime
    display_time: str


@dataclass
class Availability:
    date: date
    available_slots: list[Slot] = field(default_factory=list)
    booked_count: int = 0
    total_slots: int = 0


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """Strict interval overlap of [a_start, a_end) and [b_start, b_end)"""
    return a_start < b_end and a_end > b_start


def candidate_slots(day: date, tz_name: Optional[str] = None) -> list[Slot]:
    """The fixed daily grid, chronological"""
    tz = local_tz(tz_name)
    slots = []
    for hour in range(BUSINESS_START_HOUR, BUSINESS_END_HOUR):
        start = datetime(day.year, day.month, day.day, hour, 0, tzinfo=tz)
        slots.append(
            Slot(
                start=start,
                end=start + timedelta(minutes=SLOT_MINUTES),
                display_time=start.strftime("%H:%M"),
            )
        )
    return slots


def free_slots(candidates: list[Slot], busy: list[tuple[datetime, datetime]]) -> list[Slot]:
    return [
        slot
        for slot in candidates
        if not any(overlaps(slot.start, slot.end, b_start, b_end) for b_start, b_end in busy)
    ]


class SlotAvailabilityEngine:
    """Recomputed on every call; nothing is kept between queries"""

    def __init__(self, db: Session, tz_name: Optional[str] = None):
        self.repo = AppointmentRepository(db)
        self.tz_name = tz_name

    def available_slots(self, craftsman_id: int, day: date) -> Availability:
        day_start, day_end = local_day_bounds(day, self.tz_name)
        try:
            appointments = self.repo.list_starting_between(craftsman_id, day_start, day_end)
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch appointments for craftsman {craftsman_id} on {day}: {e}")
            raise UpstreamError("Failed to fetch appointments", cause=e) from e

        busy = []
        for apt in appointments:
            apt_start = stored_utc(apt.scheduled_at)
            busy.append((apt_start, apt_start + timedelta(minutes=apt.duration or 0)))

        candidates = candidate_slots(day, self.tz_name)
        available = free_slots(candidates, busy)
        logger.debug(
            f"Craftsman {craftsman_id} on {day}: {len(available)}/{len(candidates)} slots free, "
            f"{len(appointments)} booked"
        )
        return Availability(
            date=day,
            available_slots=available,
            booked_count=len(appointments),
            total_slots=len(candidates),
        )
