"""Tests for the slot availability engine"""

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from zimmr.domain.scheduling.availability import (
    SlotAvailabilityEngine,
    candidate_slots,
    free_slots,
    overlaps,
)
from zimmr.models import Appointment, Craftsman
from zimmr.utils.timeutils import as_utc

BERLIN = ZoneInfo("Europe/Berlin")
DAY = date(2025, 3, 12)


def _craftsman(db, user_id="user-1"):
    craftsman = Craftsman(user_id=user_id, name="Test")
    db.add(craftsman)
    db.commit()
    return craftsman


def _appointment(db, craftsman_id, hour, minute=0, duration=60, status="scheduled", day=DAY):
    local = datetime(day.year, day.month, day.day, hour, minute, tzinfo=BERLIN)
    apt = Appointment(
        craftsman_id=craftsman_id, scheduled_at=as_utc(local), duration=duration, status=status
    )
    db.add(apt)
    db.commit()
    return apt


class TestOverlap:
    def test_strict_overlap(self):
        t = datetime(2025, 1, 1, 10, tzinfo=timezone.utc)
        hour = timedelta(hours=1)
        assert overlaps(t, t + hour, t + timedelta(minutes=30), t + 2 * hour)
        assert not overlaps(t, t + hour, t + hour, t + 2 * hour)
        assert not overlaps(t + hour, t + 2 * hour, t, t + hour)

    def test_candidate_grid(self):
        slots = candidate_slots(DAY, "Europe/Berlin")
        assert len(slots) == 9
        assert slots[0].display_time == "08:00"
        assert slots[-1].display_time == "16:00"
        assert slots[-1].end.hour == 17
        assert all(s.end - s.start == timedelta(minutes=60) for s in slots)

    def test_free_slots_filters_busy(self):
        slots = candidate_slots(DAY, "Europe/Berlin")
        busy = [(slots[2].start, slots[2].end)]
        assert [s.display_time for s in free_slots(slots, busy)] == [
            s.display_time for s in slots if s is not slots[2]
        ]


class TestSlotAvailabilityEngine:
    def test_empty_day_has_all_slots(self, db_session):
        craftsman = _craftsman(db_session)

        result = SlotAvailabilityEngine(db_session, "Europe/Berlin").available_slots(craftsman.id, DAY)

        assert result.total_slots == 9
        assert result.booked_count == 0
        assert [s.display_time for s in result.available_slots] == [
            "08:00", "09:00", "10:00", "11:00", "12:00", "13:00", "14:00", "15:00", "16:00"
        ]

    def test_booked_slot_is_excluded(self, db_session):
        craftsman = _craftsman(db_session)
        _appointment(db_session, craftsman.id, 10)

        result = SlotAvailabilityEngine(db_session, "Europe/Berlin").available_slots(craftsman.id, DAY)

        times = [s.display_time for s in result.available_slots]
        assert "10:00" not in times
        assert len(times) == 8
        assert result.booked_count == 1
        assert result.total_slots == 9

    def test_touching_boundary_does_not_block(self, db_session):
        """An appointment ending exactly at 08:00 leaves the 08:00 slot free"""
        craftsman = _craftsman(db_session)
        _appointment(db_session, craftsman.id, 7)

        result = SlotAvailabilityEngine(db_session, "Europe/Berlin").available_slots(craftsman.id, DAY)

        assert len(result.available_slots) == 9
        assert result.booked_count == 1

    def test_partial_overlap_blocks_both_slots(self, db_session):
        craftsman = _craftsman(db_session)
        _appointment(db_session, craftsman.id, 11, minute=30, duration=60)

        result = SlotAvailabilityEngine(db_session, "Europe/Berlin").available_slots(craftsman.id, DAY)

        times = [s.display_time for s in result.available_slots]
        assert "11:00" not in times
        assert "12:00" not in times
        assert len(times) == 7

    def test_cancelled_appointments_are_ignored(self, db_session):
        craftsman = _craftsman(db_session)
        _appointment(db_session, craftsman.id, 10, status="cancelled")

        result = SlotAvailabilityEngine(db_session, "Europe/Berlin").available_slots(craftsman.id, DAY)

        assert len(result.available_slots) == 9
        assert result.booked_count == 0

    def test_other_days_and_tenants_are_ignored(self, db_session):
        craftsman = _craftsman(db_session)
        other = _craftsman(db_session, "user-2")
        _appointment(db_session, other.id, 10)
        _appointment(db_session, craftsman.id, 10, day=DAY + timedelta(days=1))

        result = SlotAvailabilityEngine(db_session, "Europe/Berlin").available_slots(craftsman.id, DAY)

        assert len(result.available_slots) == 9
        assert result.booked_count == 0
