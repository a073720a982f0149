"""
Adapters layer - External busy-interval sources (Google Calendar, mock data).
"""

from .google_calendar import GoogleCalendarSource
from .mock_calendar import MockCalendarSource

__all__ = ["GoogleCalendarSource", "MockCalendarSource"]
