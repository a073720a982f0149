"""
Mock calendar source for running without Google Calendar credentials.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import pendulum
from pendulum import DateTime

from ..domain.models import TimeRange

DEFAULT_DATA_FILE = Path(__file__).parent / "mock_calendar_data.json"


class MockCalendarSource:
    """
    Busy-interval source that serves events from a JSON file.

    Each event is ``{"start": "...", "end": "..."}``. Times without an
    offset are read in ``timezone``. Times written as ``"<day> HH:MM"`` are
    offsets into the requested week instead (``"start":
    "2 10:00"`` = Wednesday 10:00), which keeps the demo calendar populated
    for whichever week is being viewed.
    """

    def __init__(
        self,
        data_file: Optional[Path] = None,
        events: Optional[List[Dict[str, Any]]] = None,
        timezone: str = "UTC",
    ):
        self.timezone = timezone
        self.data_file = data_file or DEFAULT_DATA_FILE
        if events is not None:
            self.calendar_events = events
        else:
            self._load_calendar_data()

    def _load_calendar_data(self):
        """Load mock calendar data from JSON file."""
        if self.data_file.exists():
            with open(self.data_file, "r", encoding="utf-8") as f:
                self.calendar_events = json.load(f)
        else:
            self.calendar_events = []

    async def fetch_busy(self, range_start: DateTime, range_end: DateTime) -> List[TimeRange]:
        return self.get_busy_intervals(range_start, range_end)

    def get_busy_intervals(self, range_start: DateTime, range_end: DateTime) -> List[TimeRange]:
        """
        Return the events overlapping the requested window.

        Invalid events are skipped.
        """
        window = TimeRange(start=range_start, end=range_end)
        busy: List[TimeRange] = []

        for event in self.calendar_events:
            try:
                interval = TimeRange(
                    start=self._resolve(event["start"], range_start),
                    end=self._resolve(event["end"], range_start),
                )
            except (KeyError, TypeError, ValueError):
                continue

            if interval.overlaps(window):
                busy.append(interval)

        return busy

    def _resolve(self, value: str, range_start: DateTime) -> DateTime:
        """Parse an absolute timestamp or a ``"<day offset> HH:MM"`` week offset."""
        if not isinstance(value, str):
            raise TypeError(f"Event time must be a string, got {type(value).__name__}")
        day, _, clock = value.partition(" ")
        if day.isdigit() and clock:
            hour, minute = (int(part) for part in clock.split(":"))
            monday = range_start.in_timezone(self.timezone).start_of("day")
            return monday.add(days=int(day)).set(hour=hour, minute=minute)

        return pendulum.parse(value, tz=self.timezone)
