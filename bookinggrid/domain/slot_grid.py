"""
Builds the weekly grid of candidate slots from business hours.

Pure domain logic: no calendar access, no clock. The caller passes ``now``
so that past/future tagging is deterministic.
"""

from typing import List, Sequence

from pendulum import Date, DateTime

from .models import BusinessHours, Slot, TimeRange, start_of_week


def week_range(week_anchor: DateTime) -> TimeRange:
    """The [Monday 00:00, next Monday 00:00) window containing the anchor."""
    monday = start_of_week(week_anchor)
    return TimeRange(start=monday, end=monday.add(days=7))


def generate_week_slots(
    week_anchor: DateTime,
    business_hours: BusinessHours,
    now: DateTime,
) -> List[Slot]:
    """
    Generate the unclassified slots for the week containing ``week_anchor``.

    Slots are grouped by day (ascending day index) and ordered by hour
    within a day; callers iterate this order directly to build the grid.
    A day whose opening window is empty contributes no slots.

    Args:
        week_anchor: Any moment inside the target week
        business_hours: Weekly opening hours
        now: Reference moment; slots strictly before it are past

    Returns:
        List of Slot objects with ``is_booked`` left False
    """
    monday = start_of_week(week_anchor)
    slots: List[Slot] = []

    for day_index, day_hours in business_hours.days.items():
        day = monday.add(days=day_index)

        for hour in day_hours.hours():
            slot_time = day.set(hour=hour, minute=0, second=0, microsecond=0)
            slots.append(
                Slot(
                    date=day.date(),
                    hour=hour,
                    time=slot_time,
                    day_index=day_index,
                    is_past=slot_time < now,
                )
            )

    return slots


def grid_days(slots: Sequence[Slot]) -> List[Date]:
    """Distinct slot dates in grid order (one column or tab per day)."""
    days: List[Date] = []
    for slot in slots:
        if not days or days[-1] != slot.date:
            days.append(slot.date)
    return days


def grid_hours(slots: Sequence[Slot]) -> List[int]:
    """Distinct start hours across the week, ascending (one row per hour)."""
    return sorted({slot.hour for slot in slots})
