"""
Main CLI application using Typer.
"""

import json
import logging
from datetime import date
from pathlib import Path
from typing import Annotated, Optional

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.marketplace_client import MarketplaceClient
from ..adapters.mock_marketplace_client import MockMarketplaceClient
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import ConnectError
from ..services.availability_service import AvailabilityService, MarketplaceClientProtocol

app = typer.Typer(
    name="helensvale",
    help="Inspect bookable slots of Helensvale Connect vendors",
    add_completion=False
)

logger = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)

ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")]
MockOption = Annotated[bool, typer.Option("--mock", help="Use bundled mock data instead of the marketplace API.")]
DateOption = Annotated[str, typer.Option("--date", "-d", help="Booking date (YYYY-MM-DD)")]
ServiceOption = Annotated[str, typer.Option("--service", "-s", help="Service id")]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """
    Helensvale Connect availability tooling.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


def _load_config(config_file: Optional[Path], mock: bool) -> AppConfig:
    """
    Load the YAML config; mock mode falls back to defaults when no file exists.
    """
    config_path = config_file or get_default_config_path()
    if mock and config_file is None and not config_path.exists():
        return AppConfig()
    return AppConfig.load_from_yaml(config_path)


def _build_client(config: AppConfig, mock: bool) -> MarketplaceClientProtocol:
    if mock:
        client = MockMarketplaceClient()
        logger.info("Mock mode: serving marketplace data from %s", client.data_file)
        return client

    return MarketplaceClient(
        base_url=config.api_base_url,
        token=config.api_token,
        timeout=config.request_timeout_seconds,
    )


def _build_service(config: AppConfig, mock: bool) -> AvailabilityService:
    return AvailabilityService(
        marketplace_client=_build_client(config, mock),
        settings=config.booking,
        timezone=config.timezone,
    )


def _parse_date(value: str, tz: str) -> date:
    try:
        return pendulum.from_format(value, "YYYY-MM-DD", tz=tz).date()
    except ValueError as e:
        console.print(f"[red]Could not parse date {value!r}: {e}[/red]")
        raise typer.Exit(1)


def _fail(error: Exception) -> None:
    console.print(f"[bold red]Error:[/bold red] {error}")
    raise typer.Exit(1)


@app.command()
def slots(
    vendor_id: Annotated[str, typer.Argument(help="Vendor id")],
    day: DateOption,
    service_id: ServiceOption,
    config_file: ConfigOption = None,
    mock: MockOption = False,
    as_json: Annotated[bool, typer.Option("--json", help="Print the API response body instead of a table.")] = False,
):
    """
    Show the bookable slots of a vendor for one service and date.

    Examples:

        helensvale slots v-detailing --date 2026-03-16 --service s-express --mock

        helensvale slots v-detailing -d 2026-03-16 -s s-express --json
    """
    try:
        config = _load_config(config_file, mock)
        service = _build_service(config, mock)
        booking_date = _parse_date(day, config.timezone)

        payload = service.slots_payload(vendor_id=vendor_id, day=booking_date, service_id=service_id)
    except (ConnectError, FileNotFoundError, ValueError) as e:
        _fail(e)

    if as_json:
        typer.echo(json.dumps(payload, indent=2))
        return

    if not payload["slots"]:
        console.print(
            f"[yellow]⚠ No slots on {payload['weekday'].title()} {payload['date']}.[/yellow]\n"
            "The vendor is closed or the service does not fit into the opening hours."
        )
        return

    table = Table(
        title=f"{payload['weekday'].title()} {payload['date']} ({payload['durationMinutes']} min)",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Start", style="bold")
    table.add_column("End")
    table.add_column("Status")

    for slot in payload["slots"]:
        status = "[green]available[/green]" if slot["available"] else "[red]booked[/red]"
        table.add_row(slot["startTime"], slot["endTime"], status)

    console.print()
    console.print(table)
    console.print()


@app.command()
def open_days(
    vendor_id: Annotated[str, typer.Argument(help="Vendor id")],
    start: Annotated[Optional[str], typer.Option("--start", help="Reference date (YYYY-MM-DD), defaults to today")] = None,
    days: Annotated[Optional[int], typer.Option("--days", help="Days to look ahead, defaults to the booking window")] = None,
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    List the upcoming dates on which a vendor takes bookings.
    """
    try:
        config = _load_config(config_file, mock)
        service = _build_service(config, mock)
        reference = _parse_date(start, config.timezone) if start else None

        dates = service.open_dates(vendor_id=vendor_id, start=reference, days=days)
    except (ConnectError, FileNotFoundError, ValueError) as e:
        _fail(e)

    if not dates:
        console.print("[yellow]⚠ The vendor has no open days in this window.[/yellow]")
        return

    console.print(f"[bold green]✓ {len(dates)} open day(s):[/bold green]\n")
    for open_day in dates:
        console.print(f"  {open_day.strftime('%A')}, {open_day.isoformat()}")


@app.command()
def services(
    vendor_id: Annotated[str, typer.Argument(help="Vendor id")],
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    List a vendor's services.
    """
    try:
        config = _load_config(config_file, mock)
        client = _build_client(config, mock)
        vendor = client.get_vendor(vendor_id)
    except (ConnectError, FileNotFoundError, ValueError) as e:
        _fail(e)

    if not vendor.services:
        console.print(f"[yellow]{vendor.name or vendor.id} has no services.[/yellow]")
        return

    table = Table(title=vendor.name or vendor.id, show_header=True, header_style="bold cyan")
    table.add_column("Id", style="dim")
    table.add_column("Service", style="bold yellow")
    table.add_column("Duration")
    table.add_column("Price", justify="right")
    table.add_column("Active")

    for item in vendor.services:
        table.add_row(
            item.id,
            item.name,
            f"{item.duration_minutes} min",
            f"${item.price_amount:.2f}",
            "yes" if item.is_active else "no",
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def check(
    vendor_id: Annotated[str, typer.Argument(help="Vendor id")],
    start_time: Annotated[str, typer.Argument(help="Start time (HH:MM)")],
    day: DateOption,
    service_id: ServiceOption,
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    Check whether a start time can still be booked. Exits with 2 when it cannot.
    """
    try:
        config = _load_config(config_file, mock)
        service = _build_service(config, mock)
        booking_date = _parse_date(day, config.timezone)

        available = service.check_slot(
            vendor_id=vendor_id,
            day=booking_date,
            service_id=service_id,
            start_time=start_time,
        )
    except (ConnectError, FileNotFoundError, ValueError) as e:
        _fail(e)

    if available:
        console.print(f"[green]✓ {start_time} on {booking_date.isoformat()} is available.[/green]")
    else:
        console.print(f"[red]✗ {start_time} on {booking_date.isoformat()} is not available.[/red]")
        raise typer.Exit(2)


@app.command()
def quote(
    vendor_id: Annotated[str, typer.Argument(help="Vendor id")],
    start_time: Annotated[str, typer.Argument(help="Start time (HH:MM)")],
    day: DateOption,
    service_id: ServiceOption,
    participants: Annotated[int, typer.Option("--participants", "-p", help="Number of participants")] = 1,
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    Price a prospective booking after confirming its slot is free.
    """
    try:
        config = _load_config(config_file, mock)
        service = _build_service(config, mock)
        booking_date = _parse_date(day, config.timezone)

        booking_quote = service.quote_booking(
            vendor_id=vendor_id,
            day=booking_date,
            service_id=service_id,
            start_time=start_time,
            participants=participants,
        )
    except (ConnectError, FileNotFoundError, ValueError) as e:
        _fail(e)

    console.print(f"[bold]{booking_quote.service_name}[/bold] on {booking_quote.booking_date.isoformat()}")
    console.print(f"  Time: {booking_quote.slot.start_time} - {booking_quote.slot.end_time}")
    console.print(f"  Participants: {booking_quote.participants} x ${booking_quote.unit_price:.2f}")
    console.print(f"  [bold green]Total: ${booking_quote.total_amount:.2f}[/bold green]")


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]helensvale[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
