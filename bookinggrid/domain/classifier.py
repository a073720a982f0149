"""
Marks generated slots as booked where a busy interval overlaps them.
"""

from dataclasses import replace
from typing import Iterable, List, Sequence

from .models import Slot, TimeRange


def is_slot_booked(slot: Slot, busy_intervals: Iterable[TimeRange]) -> bool:
    """
    A slot is booked when any busy interval overlaps its hour.

    Half-open overlap: an interval ending exactly at the slot's start, or
    starting exactly at its end, leaves the slot free.
    """
    slot_range = slot.as_range()
    return any(busy.overlaps(slot_range) for busy in busy_intervals)


def classify_slots(
    slots: Sequence[Slot],
    busy_intervals: Sequence[TimeRange],
) -> List[Slot]:
    """
    Return copies of ``slots`` with ``is_booked`` set.

    ``is_past`` is carried through untouched. Past slots are still checked;
    ``Slot.state`` decides that past wins when presenting them.
    """
    return [
        replace(slot, is_booked=is_slot_booked(slot, busy_intervals))
        for slot in slots
    ]
