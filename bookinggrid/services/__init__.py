"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .booking import (
    BookingDraftSink,
    BookingMessage,
    BookingRequest,
    SelectionSink,
    activate_slot,
    render_booking_message,
)
from .week_navigator import BusyIntervalSource, NavigatorStatus, WeekNavigator, WeekSnapshot

__all__ = [
    "BookingDraftSink",
    "BookingMessage",
    "BookingRequest",
    "SelectionSink",
    "activate_slot",
    "render_booking_message",
    "BusyIntervalSource",
    "NavigatorStatus",
    "WeekNavigator",
    "WeekSnapshot",
]
