"""
Tests for domain models.
"""

import pendulum
import pytest

from bookinggrid.domain.models import BusinessHours, DayHours, Slot, SlotState, TimeRange, start_of_week


TZ = "Europe/Berlin"


def _at(value: str):
    return pendulum.parse(value, tz=TZ)


class TestTimeRange:
    """Tests for TimeRange model."""

    def test_create_valid_time_range(self):
        """Test creating a valid time range."""
        start = _at("2024-11-25 09:00")
        end = _at("2024-11-25 17:00")

        tr = TimeRange(start=start, end=end)

        assert tr.start == start
        assert tr.end == end
        assert tr.end - tr.start == pendulum.duration(hours=8)

    def test_invalid_time_range_raises_error(self):
        """Test that creating an invalid time range raises ValueError."""
        with pytest.raises(ValueError, match="Start time .* must be before end time"):
            TimeRange(start=_at("2024-11-25 17:00"), end=_at("2024-11-25 09:00"))

    def test_empty_time_range_raises_error(self):
        with pytest.raises(ValueError):
            TimeRange(start=_at("2024-11-25 10:00"), end=_at("2024-11-25 10:00"))

    def test_overlaps(self):
        """Test overlap detection."""
        tr1 = TimeRange(start=_at("2024-11-25 09:00"), end=_at("2024-11-25 12:00"))
        tr2 = TimeRange(start=_at("2024-11-25 11:00"), end=_at("2024-11-25 14:00"))
        tr3 = TimeRange(start=_at("2024-11-25 14:00"), end=_at("2024-11-25 17:00"))

        assert tr1.overlaps(tr2)
        assert tr2.overlaps(tr1)
        assert not tr1.overlaps(tr3)

    def test_touching_ranges_do_not_overlap(self):
        tr1 = TimeRange(start=_at("2024-11-25 09:00"), end=_at("2024-11-25 10:00"))
        tr2 = TimeRange(start=_at("2024-11-25 10:00"), end=_at("2024-11-25 11:00"))

        assert not tr1.overlaps(tr2)
        assert not tr2.overlaps(tr1)


class TestBusinessHours:
    """Tests for BusinessHours model."""

    def test_reference_configuration(self):
        hours = BusinessHours.reference()

        assert list(hours.days) == [0, 1, 2, 3, 4, 5]
        assert hours.days[0] == DayHours(8, 18)
        assert hours.days[5] == DayHours(8, 14)
        assert hours.slot_count() == 56

    def test_days_are_sorted_and_read_only(self):
        hours = BusinessHours(days={5: DayHours(8, 14), 0: DayHours(9, 17)})

        assert list(hours.days) == [0, 5]
        assert hours.first_day() == 0
        assert hours.last_day() == 5
        with pytest.raises(TypeError):
            hours.days[1] = DayHours(8, 18)

    def test_sunday_is_rejected(self):
        with pytest.raises(ValueError, match="between 0 and 5"):
            BusinessHours(days={6: DayHours(8, 12)})

    def test_degenerate_day_has_no_hours(self):
        assert list(DayHours(12, 12).hours()) == []
        assert list(DayHours(14, 8).hours()) == []
        assert BusinessHours(days={0: DayHours(14, 8)}).slot_count() == 0

    def test_empty_configuration(self):
        hours = BusinessHours()

        assert hours.slot_count() == 0
        assert hours.first_day() is None
        assert hours.last_day() is None


class TestStartOfWeek:
    """Tests for start_of_week."""

    @pytest.mark.parametrize(
        "moment",
        [
            "2024-11-25 00:00",  # Monday midnight
            "2024-11-25 09:30",
            "2024-11-27 10:30",  # Wednesday
            "2024-11-30 13:59",  # Saturday
            "2024-12-01 23:59",  # Sunday
        ],
    )
    def test_monday_aligned(self, moment):
        monday = start_of_week(_at(moment))

        assert monday == _at("2024-11-25 00:00")
        assert monday.weekday() == 0

    def test_idempotent(self):
        monday = start_of_week(_at("2024-11-28 15:00"))

        assert start_of_week(monday) == monday

    def test_keeps_timezone(self):
        monday = start_of_week(_at("2024-11-28 15:00"))

        assert monday.timezone_name == TZ


class TestSlot:
    """Tests for Slot state precedence."""

    def _slot(self, is_past: bool, is_booked: bool) -> Slot:
        time = _at("2024-11-27 14:00")
        return Slot(date=time.date(), hour=14, time=time, day_index=2, is_past=is_past, is_booked=is_booked)

    def test_end_is_one_hour_later(self):
        slot = self._slot(False, False)

        assert slot.end == _at("2024-11-27 15:00")
        assert slot.as_range() == TimeRange(start=slot.time, end=_at("2024-11-27 15:00"))

    @pytest.mark.parametrize(
        "is_past, is_booked, state, eligible",
        [
            (False, False, SlotState.AVAILABLE, True),
            (False, True, SlotState.BOOKED, False),
            (True, False, SlotState.PAST, False),
            (True, True, SlotState.PAST, False),
        ],
    )
    def test_state_precedence(self, is_past, is_booked, state, eligible):
        slot = self._slot(is_past, is_booked)

        assert slot.state is state
        assert slot.is_eligible is eligible
