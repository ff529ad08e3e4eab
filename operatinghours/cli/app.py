"""
Main CLI application using Typer.
"""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, Any, Dict, Optional

import pendulum
import typer
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.json_location_store import JsonLocationStore
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import InvalidScheduleError, OperatingHoursError
from ..domain.models import OperatingHours
from ..domain.schedule_engine import ScheduleEngine
from ..services.location_hours import LocationHoursService

app = typer.Typer(
    name="operatinghours",
    help="Check and maintain weekly operating hours of locations",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml"),
]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")]


def _load_config(config_file: Optional[Path]) -> AppConfig:
    """
    Load the configuration.

    An explicit --config must exist; without it a missing default config
    file just means built-in defaults.
    """
    if config_file is not None:
        return AppConfig.load_from_yaml(config_file)

    default_path = get_default_config_path()
    if default_path.exists():
        return AppConfig.load_from_yaml(default_path)
    return AppConfig()


def _setup_logging(config: AppConfig, verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, config.log_level)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=False)],
        force=True,
    )


def _build_service(config: AppConfig) -> LocationHoursService:
    store = JsonLocationStore(data_file=config.data_file)
    return LocationHoursService(store=store, engine=ScheduleEngine(clock=config.now))


def _fail(message: str) -> None:
    console.print(f"[bold red]Error:[/bold red] {message}")
    raise typer.Exit(1)


def _read_schedule_file(path: Path) -> Dict[str, Any]:
    """Read a schedule from a JSON or YAML file (JSON is valid YAML)."""
    if not path.exists():
        raise FileNotFoundError(f"Schedule file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid schedule file {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ValueError("Schedule file must contain a mapping at the root level.")

    # Accept a whole location record as well as a bare schedule
    return data.get("operatingHours", data)


def _schedule_table(title: str, hours: OperatingHours) -> Table:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Day", style="bold yellow")
    table.add_column("Opens")
    table.add_column("Closes")
    table.add_column("Note", style="dim")

    for day, day_schedule in hours.items():
        if day_schedule.closed:
            table.add_row(day.capitalize(), "-", "-", "closed")
            continue

        note = "until next day" if day_schedule.crosses_midnight else ""
        table.add_row(day.capitalize(), day_schedule.open, day_schedule.close, note)

    return table


def _format_instant(instant: Optional[pendulum.DateTime]) -> str:
    if instant is None:
        return "not within the next 7 days"
    return instant.format("dddd, DD.MM.YYYY HH:mm")


@app.command()
def validate(
    schedule_file: Annotated[Path, typer.Argument(help="JSON or YAML file holding a weekly schedule.")],
    sanitize: Annotated[bool, typer.Option("--sanitize", help="Fill gaps from the default schedule before validating.")] = False,
    verbose: VerboseOption = False,
):
    """
    Validate a weekly schedule file and list every problem found.

    Examples:

        operatinghours validate hours.json

        operatinghours validate partial.yaml --sanitize
    """
    _setup_logging(AppConfig(), verbose)
    engine = ScheduleEngine()

    try:
        data = _read_schedule_file(schedule_file)
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))

    schedule: Any = engine.sanitize(data) if sanitize else data
    result = engine.validate(schedule)

    if result.is_valid:
        console.print(f"[green]✓ {schedule_file} is a valid schedule[/green]")
        if sanitize:
            console.print(_schedule_table("Sanitized schedule", schedule))
        return

    console.print(f"[bold red]✗ {len(result.errors)} problem(s) in {schedule_file}:[/bold red]")
    for error in result.errors:
        console.print(f"  • {error}")
    raise typer.Exit(1)


@app.command()
def show(
    location_id: Annotated[str, typer.Argument(help="Location id.")],
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """
    Show the weekly schedule of a location.
    """
    try:
        config = _load_config(config_file)
        _setup_logging(config, verbose)
        service = _build_service(config)
        hours = asyncio.run(service.get_operating_hours(location_id))
    except (OperatingHoursError, FileNotFoundError, ValueError) as e:
        _fail(str(e))

    console.print()
    console.print(_schedule_table(f"Operating hours of location {location_id}", hours))
    console.print()


@app.command()
def status(
    location_id: Annotated[str, typer.Argument(help="Location id.")],
    at: Annotated[Optional[str], typer.Option("--at", help="Point in time (ISO 8601). Defaults to now.")] = None,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """
    Tell whether a location is open, and when it opens next if not.

    Examples:

        operatinghours status 1

        operatinghours status 1 --at 2024-11-29T23:30
    """
    try:
        config = _load_config(config_file)
        _setup_logging(config, verbose)
        service = _build_service(config)

        instant = None
        if at:
            try:
                instant = pendulum.parse(at, tz=config.timezone).in_timezone(config.timezone)
            except Exception as e:
                _fail(f"Could not parse --at value '{at}': {e}")

        result = asyncio.run(service.get_status(location_id, at=instant))
    except (OperatingHoursError, FileNotFoundError, ValueError) as e:
        _fail(str(e))

    checked = result.checked_at.strftime("%A %H:%M")
    if result.is_open:
        console.print(f"[bold green]● Open[/bold green] (location {location_id}, {checked})")
    else:
        console.print(f"[bold red]● Closed[/bold red] (location {location_id}, {checked})")
        console.print(f"  Next opening: {_format_instant(result.next_opening)}")


@app.command()
def set_day(
    location_id: Annotated[str, typer.Argument(help="Location id.")],
    day: Annotated[str, typer.Argument(help="Weekday name, e.g. monday.")],
    open_time: Annotated[Optional[str], typer.Option("--open", help="Opening time (HH:MM).")] = None,
    close_time: Annotated[Optional[str], typer.Option("--close", help="Closing time (HH:MM).")] = None,
    closed: Annotated[Optional[bool], typer.Option("--closed/--not-closed", help="Mark the day closed or open.")] = None,
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """
    Change one day of a location's schedule.

    Examples:

        operatinghours set-day 1 friday --open 18:00 --close 02:00

        operatinghours set-day 1 sunday --closed
    """
    if open_time is None and close_time is None and closed is None:
        _fail("Nothing to change. Pass --open, --close or --closed/--not-closed.")

    try:
        config = _load_config(config_file)
        _setup_logging(config, verbose)
        service = _build_service(config)
        hours = asyncio.run(
            service.patch_day(location_id, day, open=open_time, close=close_time, closed=closed)
        )
    except InvalidScheduleError as e:
        console.print("[bold red]✗ Schedule not saved:[/bold red]")
        for error in e.errors:
            console.print(f"  • {error}")
        raise typer.Exit(1)
    except (OperatingHoursError, FileNotFoundError, ValueError) as e:
        _fail(str(e))

    day_schedule = hours.for_day(day)
    console.print(f"[green]✓ {day.strip().lower()} updated: {day_schedule}[/green]")


@app.command()
def list_locations(
    config_file: ConfigOption = None,
    verbose: VerboseOption = False,
):
    """
    List all stored locations.
    """
    try:
        config = _load_config(config_file)
        _setup_logging(config, verbose)
        service = _build_service(config)
        locations = asyncio.run(service.list_locations())
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))

    if not locations:
        console.print("[yellow]No locations stored.[/yellow]")
        return

    table = Table(title="Locations", show_header=True, header_style="bold cyan")
    table.add_column("Id", style="bold yellow")
    table.add_column("Name")
    table.add_column("Address", style="dim")
    table.add_column("Schedule")

    for location in locations:
        table.add_row(
            location.id,
            location.name,
            location.address,
            "custom" if location.operating_hours else "default",
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
    console.print(f"\n[bold cyan]operatinghours[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
