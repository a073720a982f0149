"""
Domain models for business hours, busy intervals and bookable slots.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping

import pendulum
from pendulum import Date, DateTime

SLOT_LENGTH = pendulum.duration(hours=1)


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable time range with start and end datetime.

    Busy intervals reported by a calendar are TimeRanges.
    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")

    def overlaps(self, other: "TimeRange") -> bool:
        """Check if this range overlaps with another (touching ranges do not)."""
        return self.start < other.end and self.end > other.start


@dataclass(frozen=True)
class DayHours:
    """Opening window of one business day, half-open: [open_hour, close_hour)."""
    open_hour: int
    close_hour: int

    def hours(self) -> range:
        """Bookable start hours; empty when the window is degenerate."""
        return range(self.open_hour, self.close_hour)


@dataclass(frozen=True)
class BusinessHours:
    """
    Weekly business hours keyed by weekday index (0=Monday .. 5=Saturday).

    Days missing from the mapping are closed. The mapping is stored sorted
    by day index and exposed read-only.
    """
    days: Mapping[int, DayHours] = field(default_factory=dict)

    def __post_init__(self):
        for index in self.days:
            if not 0 <= index <= 5:
                raise ValueError(f"Day index must be between 0 and 5, got {index}")
        ordered = {index: self.days[index] for index in sorted(self.days)}
        object.__setattr__(self, "days", MappingProxyType(ordered))

    @classmethod
    def reference(cls) -> "BusinessHours":
        """Mon-Fri 8-18, Saturday 8-14."""
        days: Dict[int, DayHours] = {index: DayHours(8, 18) for index in range(5)}
        days[5] = DayHours(8, 14)
        return cls(days=days)

    def slot_count(self) -> int:
        """Number of one-hour slots in a full week."""
        return sum(len(day.hours()) for day in self.days.values())

    def first_day(self) -> int | None:
        return next(iter(self.days), None)

    def last_day(self) -> int | None:
        return next(reversed(list(self.days)), None)


def start_of_week(moment: DateTime) -> DateTime:
    """Monday at local midnight on or before ``moment``."""
    return moment.subtract(days=moment.weekday()).start_of("day")


class SlotState(str, Enum):
    """How a slot is presented; PAST wins over BOOKED, BOOKED over AVAILABLE."""
    AVAILABLE = "available"
    BOOKED = "booked"
    PAST = "past"


@dataclass(frozen=True)
class Slot:
    """
    One hour-long candidate appointment window.
    """
    date: Date
    hour: int
    time: DateTime
    day_index: int
    is_past: bool
    is_booked: bool = False

    @property
    def end(self) -> DateTime:
        return self.time + SLOT_LENGTH

    @property
    def state(self) -> SlotState:
        if self.is_past:
            return SlotState.PAST
        if self.is_booked:
            return SlotState.BOOKED
        return SlotState.AVAILABLE

    @property
    def is_eligible(self) -> bool:
        """Only slots that are neither past nor booked can be selected."""
        return not self.is_past and not self.is_booked

    def as_range(self) -> TimeRange:
        return TimeRange(start=self.time, end=self.end)
