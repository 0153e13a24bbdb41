"""
Main CLI application using Typer.
"""

import asyncio
import logging
from pathlib import Path
from typing import List, NoReturn, Optional, Annotated

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from ..adapters.json_calendar_client import JsonCalendarClient
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import InputValidationError, MeetslotError
from ..domain.parsing import parse_duration
from ..domain.slot_calculator import SlotCalculator
from ..services.availability import AvailabilityService, SearchRequest

app = typer.Typer(
    name="meetslot",
    help="Find shared free time across calendars",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")]
ParticipantsArgument = Annotated[Optional[List[str]], typer.Argument(help="Participant names or emails. Defaults to all configured colleagues.")]
DatesOption = Annotated[str, typer.Option("--dates", help="Date or date range, e.g. '12/30~1/3', '2025-01-06..2025-01-10' or '1/6'")]
HoursOption = Annotated[Optional[str], typer.Option("--hours", help="Daily window, e.g. '09:00-18:00'")]
DurationOption = Annotated[Optional[str], typer.Option("--duration", "-d", help="Meeting length: '45', '30m' or '2h'")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Show log output.")]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True
    )


def _fail(message: str) -> NoReturn:
    console.print(f"[bold red]Error:[/bold red] {escape(message)}")
    raise typer.Exit(1)


def _load_config(config_file: Optional[Path]) -> AppConfig:
    config_path = config_file or get_default_config_path()
    return AppConfig.load_from_yaml(config_path)


def _prepare_search(
    config: AppConfig,
    participants: Optional[List[str]],
    dates: str,
    hours: Optional[str],
    duration: Optional[str]
) -> tuple[AvailabilityService, List[str], SearchRequest]:
    """Resolve participants, parse the search input and wire up the service."""
    if config.events_file is None:
        raise MeetslotError("No events_file configured.")

    identifiers = participants or [colleague.name for colleague in config.colleagues]
    emails = config.resolve_participants(identifiers)

    request = AvailabilityService.parse_request(
        date_range_text=dates,
        time_range_text=hours or config.defaults.time_range,
        duration_text=duration or config.defaults.duration,
        reference=pendulum.now(config.timezone)
    )

    service = AvailabilityService(
        calendar_client=JsonCalendarClient(config.events_file, config=config),
        slot_calculator=SlotCalculator(),
        timezone=config.timezone
    )
    return service, emails, request


@app.command()
def free(
    dates: DatesOption,
    participants: ParticipantsArgument = None,
    hours: HoursOption = None,
    duration: DurationOption = None,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """
    Show free time of all participants for each day.

    Examples:

        meetslot free alice bob --dates 12/30~1/3

        meetslot free --dates 1/6-1/10 --hours 10:00-16:00 --duration 1h
    """
    _configure_logging(verbose)
    try:
        config = _load_config(config_file)
        service, emails, request = _prepare_search(config, participants, dates, hours, duration)
        report = asyncio.run(service.availability(participants=emails, request=request))
    except (FileNotFoundError, ValueError, MeetslotError) as e:
        _fail(str(e))

    console.print(f"[bold cyan]Participants:[/bold cyan] {', '.join(emails)}")
    console.print(f"[bold cyan]Minimum length:[/bold cyan] {request.duration_minutes} min\n")
    console.print(escape(report.format_display()))


@app.command()
def first(
    dates: DatesOption,
    participants: ParticipantsArgument = None,
    hours: HoursOption = None,
    duration: DurationOption = None,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """
    Find the earliest slot where all participants are free.
    """
    _configure_logging(verbose)
    try:
        config = _load_config(config_file)
        service, emails, request = _prepare_search(config, participants, dates, hours, duration)
        slot = asyncio.run(service.find_first_slot(participants=emails, request=request))
    except (FileNotFoundError, ValueError, MeetslotError) as e:
        _fail(str(e))

    if slot is None:
        console.print("[yellow]No free slot found in the given period.[/yellow]")
        return

    end = slot.add(minutes=request.duration_minutes)
    console.print(
        f"[bold green]Earliest slot:[/bold green] "
        f"{slot.format('ddd YYYY-MM-DD HH:mm')} - {end.format('HH:mm')}"
    )


@app.command()
def at(
    date: Annotated[str, typer.Argument(help="Date, e.g. '1/6' or '2025-01-06'")],
    time: Annotated[str, typer.Argument(help="Start time, e.g. '9:30'")],
    duration: DurationOption = None,
    config_file: ConfigOption = None,
):
    """
    Resolve a typed date and time to the exact meeting start and end.
    """
    try:
        config = _load_config(config_file)
        start = AvailabilityService.resolve_manual_start(
            date, time, pendulum.now(config.timezone)
        )
        duration_text = duration or config.defaults.duration
        minutes = parse_duration(duration_text)
        if minutes is None or minutes <= 0:
            raise InputValidationError(f"Invalid duration: '{duration_text}'")
        try:
            end = start.add(minutes=minutes)
        except OverflowError as exc:
            raise InputValidationError(f"Duration is too long: '{duration_text}'") from exc
    except (FileNotFoundError, ValueError, MeetslotError) as e:
        _fail(str(e))

    console.print(f"Start: {start.to_iso8601_string()}")
    console.print(f"End:   {end.to_iso8601_string()}")


@app.command()
def colleagues(
    config_file: ConfigOption = None,
):
    """
    List all configured colleagues.
    """
    try:
        config = _load_config(config_file)
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))

    if not config.colleagues:
        console.print("[yellow]No colleagues defined in the config file.[/yellow]")
        return

    table = Table(
        title="Configured colleagues",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Name (alias)", style="bold yellow")
    table.add_column("E-mail", style="dim")
    table.add_column("Calendar", style="dim")

    for colleague in config.colleagues:
        table.add_row(
            colleague.name,
            colleague.email,
            colleague.calendar_id or colleague.email
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]meetslot[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
