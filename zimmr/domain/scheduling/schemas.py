from datetime import date, datetime

from ...shared.schemas import ApiModel
from .availability import Availability


class SlotResponse(ApiModel):
    start: datetime
    end: datetime
    display_time: str


class AvailabilityResponse(ApiModel):
    date: date
    available_slots: list[SlotResponse]
    booked_count: int
    total_slots: int

    @classmethod
    def from_availability(cls, availability: Availability) -> "AvailabilityResponse":
        return cls(
            date=availability.date,
            available_slots=[
                SlotResponse(start=s.start, end=s.end, display_time=s.display_time)
                for s in availability.available_slots
            ],
            booked_count=availability.booked_count,
            total_slots=availability.total_slots,
        )
