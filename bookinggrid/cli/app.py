"""
Main CLI application using Typer.
"""

import asyncio
from pathlib import Path
from typing import Optional, Annotated

import pendulum
import typer
from pendulum import DateTime
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..config import AppConfig, get_default_config_path
from ..adapters.google_calendar import GoogleCalendarSource
from ..adapters.mock_calendar import MockCalendarSource
from ..domain.exceptions import BookingGridError
from ..services.booking import BookingDraftSink, BookingRequest, activate_slot, render_booking_message
from ..services.week_navigator import BusyIntervalSource, NavigatorStatus, WeekNavigator, WeekSnapshot
from .grid_view import build_week_table, format_hour, week_label

app = typer.Typer(
    name="bookinggrid",
    help="Show bookable appointment slots from the shop calendar",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")]
MockOption = Annotated[bool, typer.Option("--mock", help="Use mock calendar data instead of Google Calendar.")]


def _load_config(config_file: Optional[Path]) -> AppConfig:
    config_path = config_file or get_default_config_path()
    return AppConfig.load_from_yaml(config_path)


def _build_source(config: AppConfig, mock: bool) -> BusyIntervalSource:
    """Pick the busy-interval source for this run."""
    if mock:
        return MockCalendarSource(timezone=config.timezone)

    if not config.calendar.is_configured():
        raise BookingGridError(
            "Google Calendar is not configured (calendar.calendar_id / calendar.api_key). "
            "Use --mock to try the grid with demo data."
        )

    return GoogleCalendarSource(
        api_key=config.calendar.api_key,
        calendar_id=config.calendar.calendar_id,
        timezone=config.timezone,
        timeout=config.calendar.timeout_seconds,
    )


async def _load_week(navigator: WeekNavigator, reference: DateTime, offset: int) -> WeekSnapshot:
    """Initialise on ``reference`` and step ``offset`` weeks, one fetch per step."""
    snapshot = await navigator.init(reference)
    step = 1 if offset > 0 else -1
    for _ in range(abs(offset)):
        snapshot = await navigator.navigate(step)
    return snapshot


def _print_failure(snapshot: WeekSnapshot) -> None:
    console.print(f"[bold red]Error:[/bold red] {snapshot.error}")
    console.print("Run the command again to retry.")


@app.command()
def week(
    config_file: ConfigOption = None,
    mock: MockOption = False,
    offset: Annotated[int, typer.Option("--offset", "-o", help="Weeks to move from the current week (negative = back).")] = 0,
):
    """
    Show the availability grid for a week.

    Examples:

        bookinggrid week
        bookinggrid week --offset 1
        bookinggrid week --mock
    """
    try:
        config = _load_config(config_file)
        business_hours = config.to_business_hours()
        navigator = WeekNavigator(
            _build_source(config, mock),
            business_hours,
            timezone=config.timezone,
        )

        if mock:
            console.print("[yellow]⚠  Mock mode: using demo calendar data[/yellow]\n")

        snapshot = asyncio.run(_load_week(navigator, pendulum.now(config.timezone), offset))

        if snapshot.status is NavigatorStatus.FAILED:
            _print_failure(snapshot)
            raise typer.Exit(1)

        title = week_label(snapshot.anchor_week, business_hours)
        if config.business.name:
            title = f"{config.business.name}: {title}"

        console.print()
        console.print(build_week_table(snapshot.slots, title=title))
        console.print("[green]Available[/green]  [red]Booked[/red]  [dim]—[/dim] Unavailable")
        console.print()

    except BookingGridError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def book(
    slot_time: Annotated[str, typer.Argument(help="Slot start, e.g. '2024-11-27 11:00'")],
    name: Annotated[str, typer.Option("--name", help="Customer name")],
    email: Annotated[str, typer.Option("--email", help="Customer email")],
    phone: Annotated[str, typer.Option("--phone", help="Customer phone")],
    service: Annotated[str, typer.Option("--service", help="Requested service")] = "",
    notes: Annotated[str, typer.Option("--notes", help="Additional notes")] = "",
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    Select a slot and print the prefilled appointment request message.

    Nothing is reserved: the message is what the shop receives.
    """
    try:
        config = _load_config(config_file)
        tz = config.timezone

        try:
            selected = pendulum.parse(slot_time, tz=tz)
        except Exception as e:
            console.print(f"[red]Could not parse slot time: {e}[/red]")
            raise typer.Exit(1)

        if not isinstance(selected, DateTime):
            console.print(f"[red]Could not parse slot time: {slot_time!r} is not a date and time[/red]")
            raise typer.Exit(1)

        navigator = WeekNavigator(
            _build_source(config, mock),
            config.to_business_hours(),
            timezone=tz,
        )
        snapshot = asyncio.run(_load_week(navigator, selected, 0))

        if snapshot.status is NavigatorStatus.FAILED:
            _print_failure(snapshot)
            raise typer.Exit(1)

        slot = next((s for s in snapshot.slots if s.time == selected), None)
        if slot is None:
            console.print(f"[red]{selected.format('ddd, MMM D h:mm A')} is outside business hours.[/red]")
            raise typer.Exit(1)

        sink = BookingDraftSink()
        if not activate_slot(slot, sink):
            console.print(f"[red]That slot is {slot.state.value} and cannot be booked.[/red]")
            raise typer.Exit(1)

        request = BookingRequest(
            **{
                **sink.draft().model_dump(),
                "name": name,
                "email": email,
                "phone": phone,
                "service": service,
                "notes": notes,
            }
        )
        missing = request.missing_fields(config.business.services)
        if missing:
            console.print(f"[red]Missing or invalid: {', '.join(missing)}[/red]")
            if "service" in missing and config.business.services:
                console.print(f"Services: {', '.join(config.business.services)}")
            raise typer.Exit(1)

        message = render_booking_message(request, config.business.name)
        console.print()
        console.print(Panel.fit(
            f"[bold]Subject:[/bold] {message.subject}\n"
            f"[bold]Reply-To:[/bold] {message.reply_to}\n\n"
            f"{message.body}",
            title="✓ Appointment request"
        ))
        console.print()

    except BookingGridError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def hours(config_file: ConfigOption = None):
    """
    List the configured business hours.
    """
    try:
        config = _load_config(config_file)
    except BookingGridError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    day_names = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

    table = Table(title="Business hours", show_header=True, header_style="bold cyan")
    table.add_column("Day", style="bold yellow")
    table.add_column("Open")
    table.add_column("Close")
    table.add_column("Slots", justify="right")

    business_hours = config.to_business_hours()
    for index, day in business_hours.days.items():
        table.add_row(
            day_names[index],
            format_hour(day.open_hour),
            format_hour(day.close_hour),
            str(len(day.hours())),
        )

    console.print()
    console.print(table)
    console.print(f"{business_hours.slot_count()} slots per week ({config.timezone})")
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]bookinggrid[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
