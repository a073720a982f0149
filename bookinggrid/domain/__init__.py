"""
Domain layer - Pure business logic without external dependencies.
"""

from .classifier import classify_slots, is_slot_booked
from .models import BusinessHours, DayHours, Slot, SlotState, TimeRange, start_of_week
from .slot_grid import generate_week_slots, grid_days, grid_hours, week_range

__all__ = [
    "BusinessHours",
    "DayHours",
    "Slot",
    "SlotState",
    "TimeRange",
    "start_of_week",
    "classify_slots",
    "is_slot_booked",
    "generate_week_slots",
    "grid_days",
    "grid_hours",
    "week_range",
]
