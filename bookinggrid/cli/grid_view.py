"""
Terminal rendering of the weekly availability grid.
"""

from typing import Dict, Sequence, Tuple

from pendulum import Date, DateTime
from rich.table import Table

from ..domain.models import BusinessHours, Slot, SlotState, start_of_week
from ..domain.slot_grid import grid_days, grid_hours

CELL_TEXT = {
    SlotState.AVAILABLE: "[green]Available[/green]",
    SlotState.BOOKED: "[red]Booked[/red]",
    SlotState.PAST: "[dim]—[/dim]",
}
UNAVAILABLE_CELL = "[dim]—[/dim]"


def format_day(day: Date) -> str:
    """Short day label, e.g. ``Mon, Nov 25``."""
    return day.format("ddd, MMM D", locale="en")


def format_hour(hour: int) -> str:
    """12-hour clock label: 8:00 AM, 12:00 PM, 1:00 PM."""
    hour %= 24
    suffix = "PM" if hour >= 12 else "AM"
    return f"{hour % 12 or 12}:00 {suffix}"


def week_label(anchor: DateTime, business_hours: BusinessHours) -> str:
    """First to last business day of the anchor's week."""
    monday = start_of_week(anchor)
    first = business_hours.first_day() or 0
    last = business_hours.last_day() or first
    return f"{format_day(monday.add(days=first).date())} - {format_day(monday.add(days=last).date())}"


def build_week_table(slots: Sequence[Slot], title: str = "") -> Table:
    """
    One row per hour, one column per day. Hours a day does not have (e.g.
    Saturday afternoon) are shown as unavailable.
    """
    table = Table(title=title or None, show_header=True, header_style="bold cyan")
    table.add_column("Time", style="bold")

    days = grid_days(slots)
    for day in days:
        table.add_column(format_day(day), justify="center")

    cells: Dict[Tuple[Date, int], Slot] = {(slot.date, slot.hour): slot for slot in slots}

    for hour in grid_hours(slots):
        row = [format_hour(hour)]
        for day in days:
            slot = cells.get((day, hour))
            row.append(CELL_TEXT[slot.state] if slot else UNAVAILABLE_CELL)
        table.add_row(*row)

    return table
