"""
Google Calendar API client for fetching busy intervals.
"""

import asyncio
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import pendulum
import requests
from pendulum import DateTime
from rich.console import Console

from ..domain.exceptions import SourceUnavailableError
from ..domain.models import TimeRange

console = Console(stderr=True)


class GoogleCalendarSource:
    """
    Busy-interval source backed by a public Google Calendar.

    Uses the v3 ``events.list`` endpoint with an API key. Every event on the
    calendar counts as busy time; the loosely typed event payload is only
    ever inspected here.
    """

    CALENDAR_API_ENDPOINT = "https://www.googleapis.com/calendar/v3"

    def __init__(
        self,
        api_key: str,
        calendar_id: str,
        timezone: str = "UTC",
        timeout: float = 30,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the Calendar API client.

        Args:
            api_key: Google API key with Calendar API access
            calendar_id: Calendar to read (usually an email-like id)
            timezone: IANA timezone busy intervals are converted to
            timeout: Request timeout in seconds
            session: Optional requests session (shared connection pool)
        """
        self.api_key = api_key
        self.calendar_id = calendar_id
        self.timezone = timezone
        self.timeout = timeout
        self.session = session or requests.Session()

    async def fetch_busy(self, range_start: DateTime, range_end: DateTime) -> List[TimeRange]:
        """Fetch busy intervals without blocking the event loop."""
        return await asyncio.to_thread(self.get_busy_intervals, range_start, range_end)

    def get_busy_intervals(self, range_start: DateTime, range_end: DateTime) -> List[TimeRange]:
        """
        Get all events overlapping the window as busy intervals.

        Args:
            range_start: Start of the time window
            range_end: End of the time window (exclusive)

        Returns:
            List of busy TimeRange objects, in the calendar's start order

        Raises:
            SourceUnavailableError: If the API call fails
        """
        url = f"{self.CALENDAR_API_ENDPOINT}/calendars/{quote(self.calendar_id, safe='')}/events"
        params: Dict[str, Any] = {
            "key": self.api_key,
            "timeMin": range_start.in_timezone("UTC").to_iso8601_string(),
            "timeMax": range_end.in_timezone("UTC").to_iso8601_string(),
            "showDeleted": "false",
            "singleEvents": "true",
            "orderBy": "startTime",
        }

        busy: List[TimeRange] = []
        while True:
            data = self._get_page(url, params)
            busy.extend(self._parse_events(data.get("items") or []))

            page_token = data.get("nextPageToken")
            if not page_token:
                return busy
            params["pageToken"] = page_token

    def _get_page(self, url: str, params: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise SourceUnavailableError(f"Failed to reach Google Calendar: {e}") from e

        if not response.ok:
            raise SourceUnavailableError(self._error_message(response))

        try:
            data = response.json()
        except ValueError as e:
            raise SourceUnavailableError(f"Google Calendar returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise SourceUnavailableError("Google Calendar returned an unexpected payload.")
        return data

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        """Prefer the API's own error message, e.g. for quota or bad keys."""
        try:
            message = response.json()["error"]["message"]
        except (ValueError, KeyError, TypeError):
            message = None
        return message or f"Unable to load calendar (HTTP {response.status_code})."

    def _parse_events(self, items: List[Dict[str, Any]]) -> List[TimeRange]:
        """
        Parse ``events.list`` items into busy intervals.

        Item format:
        {
            "status": "confirmed",
            "start": {"dateTime": "2024-11-25T10:00:00+01:00"} | {"date": "2024-11-25"},
            "end": {"dateTime": "..."} | {"date": "2024-11-26"}
        }
        """
        busy: List[TimeRange] = []

        for item in items:
            if not isinstance(item, dict) or item.get("status") == "cancelled":
                continue

            try:
                start = self._parse_event_time(item.get("start"))
                end = self._parse_event_time(item.get("end"))
                busy.append(TimeRange(start=start, end=end))

            except (KeyError, TypeError, ValueError) as e:
                console.print(
                    f"[yellow]Warning: Could not parse calendar event "
                    f"{item.get('id', '?')}: {e}[/yellow]"
                )
                continue

        return busy

    def _parse_event_time(self, value: Any) -> DateTime:
        """
        Parse an event boundary; timed events carry ``dateTime``, all-day
        events carry ``date`` (midnight in the calendar timezone).
        """
        if not isinstance(value, dict):
            raise ValueError(f"Missing event time: {value!r}")

        if value.get("dateTime"):
            dt = pendulum.parse(value["dateTime"], tz=self.timezone)
        elif value.get("date"):
            dt = pendulum.parse(value["date"], tz=self.timezone)
        else:
            raise KeyError("dateTime")

        if isinstance(dt, DateTime):
            return dt.in_timezone(self.timezone)

        raise ValueError(f"Could not parse event time: {value!r}")
