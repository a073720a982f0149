"""
Week-by-week navigation over the availability grid.

The navigator owns the displayed week, asks a busy-interval source for that
week's bookings and publishes the classified grid. Every fetch is tagged
with a fetch epoch; a response whose epoch is no longer current is dropped
on arrival, so the grid always reflects the most recently requested week
even when responses come back out of order.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Protocol, Set, Tuple

import pendulum
from pendulum import DateTime

from ..domain.classifier import classify_slots
from ..domain.exceptions import NavigatorStateError, SourceUnavailableError
from ..domain.models import BusinessHours, Slot, TimeRange, start_of_week
from ..domain.slot_grid import generate_week_slots, week_range


class BusyIntervalSource(Protocol):
    """Protocol describing the calendar behaviour needed by the navigator."""

    async def fetch_busy(
        self,
        range_start: DateTime,
        range_end: DateTime,
    ) -> List[TimeRange]:
        """Return busy intervals in the window; raise on failure (SourceUnavailableError preferred)."""


class NavigatorStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class WeekSnapshot:
    """What a view needs to draw the navigator's current state."""
    anchor_week: DateTime
    fetch_epoch: int
    status: NavigatorStatus
    slots: Tuple[Slot, ...]
    error: Optional[str] = None


Listener = Callable[[WeekSnapshot], None]


def _failure_message(error: Exception) -> str:
    if isinstance(error, SourceUnavailableError) and str(error):
        return str(error)
    return "Unable to load calendar."


class WeekNavigator:
    """
    Stateful controller for one availability view.

    ``init``, ``navigate`` and ``retry`` update the state synchronously and
    schedule the fetch as an asyncio task on the running loop; awaiting the
    returned task yields the applied snapshot, or None when the response
    turned out to be stale. In-flight fetches are never cancelled.
    """

    def __init__(
        self,
        source: BusyIntervalSource,
        business_hours: BusinessHours,
        *,
        timezone: str = "UTC",
        clock: Callable[[], DateTime] | None = None,
    ) -> None:
        self._source = source
        self._business_hours = business_hours
        self._clock = clock or (lambda: pendulum.now(timezone))

        self._anchor_week: Optional[DateTime] = None
        self._fetch_epoch = 0
        self._status = NavigatorStatus.IDLE
        self._slots: Tuple[Slot, ...] = ()
        self._error: Optional[str] = None

        self._listeners: List[Listener] = []
        self._pending: Set[asyncio.Task] = set()

    @property
    def anchor_week(self) -> Optional[DateTime]:
        return self._anchor_week

    @property
    def fetch_epoch(self) -> int:
        return self._fetch_epoch

    @property
    def status(self) -> NavigatorStatus:
        return self._status

    @property
    def slots(self) -> Tuple[Slot, ...]:
        """Last published grid; kept while a newer week is loading or failed."""
        return self._slots

    @property
    def error(self) -> Optional[str]:
        return self._error

    def snapshot(self) -> WeekSnapshot:
        if self._anchor_week is None:
            raise NavigatorStateError("Navigator has not been initialised")
        return WeekSnapshot(
            anchor_week=self._anchor_week,
            fetch_epoch=self._fetch_epoch,
            status=self._status,
            slots=self._slots,
            error=self._error,
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener for state changes; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def init(self, reference_now: DateTime | None = None) -> asyncio.Task:
        """Show the week containing ``reference_now`` (defaults to the clock)."""
        if self._status is not NavigatorStatus.IDLE:
            raise NavigatorStateError("Navigator is already initialised")

        loop = asyncio.get_running_loop()

        moment = reference_now if reference_now is not None else self._clock()
        self._anchor_week = start_of_week(moment)
        self._fetch_epoch = 0
        return self._issue_fetch(loop)

    def navigate(self, direction: int) -> asyncio.Task:
        """Move one week back (-1) or forward (+1)."""
        if direction not in (-1, 1):
            raise ValueError(f"Direction must be -1 or +1, got {direction}")
        anchor = self._require_anchor()
        loop = asyncio.get_running_loop()

        self._anchor_week = anchor.add(days=7 * direction)
        self._fetch_epoch += 1
        return self._issue_fetch(loop)

    def retry(self) -> asyncio.Task:
        """Fetch the current week again under a fresh epoch."""
        self._require_anchor()
        loop = asyncio.get_running_loop()

        self._fetch_epoch += 1
        return self._issue_fetch(loop)

    def _require_anchor(self) -> DateTime:
        if self._anchor_week is None:
            raise NavigatorStateError("Call init() before navigating")
        return self._anchor_week

    def _issue_fetch(self, loop: asyncio.AbstractEventLoop) -> asyncio.Task:
        self._status = NavigatorStatus.LOADING
        self._error = None
        self._publish()

        task = loop.create_task(self._fetch(self._fetch_epoch, self._anchor_week))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _fetch(self, epoch: int, anchor: DateTime) -> Optional[WeekSnapshot]:
        window = week_range(anchor)

        try:
            busy = await self._source.fetch_busy(window.start, window.end)
        except Exception as e:
            if epoch != self._fetch_epoch:
                return None
            self._status = NavigatorStatus.FAILED
            self._error = _failure_message(e)
            return self._publish()

        if epoch != self._fetch_epoch:
            return None

        slots = generate_week_slots(anchor, self._business_hours, self._clock())
        self._slots = tuple(classify_slots(slots, busy))
        self._status = NavigatorStatus.READY
        return self._publish()

    def _publish(self) -> WeekSnapshot:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)
        return snapshot
