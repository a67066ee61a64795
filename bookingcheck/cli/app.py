"""
Main CLI application using Typer.
"""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, List, Optional

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ..adapters.json_repository import JsonRepository
from ..config import AppConfig, get_default_config_path
from ..domain.business_hours import BusinessHoursGate
from ..domain.models import Appointment, AvailabilityResult, parse_date
from ..domain.pricing import effective_value, is_in_promotion
from ..services.booking import BookingService
from ..services.responses import to_http_error

app = typer.Typer(
    name="bookingcheck",
    help="Check appointment availability, open windows and service prices",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml"),
]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")] = False,
):
    """Configure logging for every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _load(config_file: Optional[Path]) -> tuple[AppConfig, JsonRepository]:
    config = AppConfig.load_from_yaml(config_file or get_default_config_path())
    return config, JsonRepository(config.data_file)


def _build_service(config: AppConfig, repository: JsonRepository) -> BookingService:
    return BookingService(
        appointments=repository,
        business_hours=repository,
        professionals=repository,
        services=repository,
        gate=BusinessHoursGate(open_when_unconfigured=config.booking.open_when_unconfigured),
        min_window_minutes=config.booking.min_window_minutes,
    )


def _print_verdict(candidate: Appointment, result: AvailabilityResult) -> None:
    if result.available:
        console.print(Panel.fit(
            f"[bold green]✓ Available[/bold green]\n\n"
            f"[bold]Date:[/bold] {candidate.date}\n"
            f"[bold]Time:[/bold] {candidate.time}",
            title="Availability"
        ))
        return

    lines = [f"[bold red]✗ Unavailable:[/bold red] {result.reason.value}"]
    conflict = result.conflicting_appointment
    if conflict is not None:
        lines.append(
            f"\n[bold]Conflicts with:[/bold] {conflict.client_name or conflict.id} "
            f"{conflict.time} - {conflict.end_time}"
        )
        lines.append(f"[bold]Earliest start after it:[/bold] {conflict.end_time}")
    console.print(Panel.fit("\n".join(lines), title="Availability"))

    status, body = to_http_error(result)
    console.print(f"\n[dim]HTTP {status}[/dim]")
    console.print_json(data=body)


@app.command()
def check(
    date: Annotated[str, typer.Argument(help="Appointment date (YYYY-MM-DD)")],
    time: Annotated[str, typer.Argument(help="Start time (HH:MM)")],
    service: Annotated[Optional[List[str]], typer.Option("--service", "-s", help="Service id, repeatable")] = None,
    professional: Annotated[Optional[str], typer.Option("--professional", "-p", help="Professional id")] = None,
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Explicit duration in minutes")] = None,
    exclude: Annotated[Optional[str], typer.Option("--exclude", help="Appointment id being edited")] = None,
    config_file: ConfigOption = None,
):
    """
    Check whether an appointment can be booked.

    Examples:

        bookingcheck check 2025-01-13 10:00 --service svc-cut --service svc-beard

        bookingcheck check 2025-01-13 14:30 -p pro-ana --duration 45

        # Move an existing appointment
        bookingcheck check 2025-01-13 15:00 --exclude apt-42
    """
    try:
        config, repository = _load(config_file)
        candidate = Appointment(
            id=exclude or "candidate",
            tenant_id=config.tenant_id,
            client_id="candidate",
            date=date,
            time=time,
            duration=duration,
            service_ids=service or [],
            professional_id=professional,
        )
        service_layer = _build_service(config, repository)
        result = asyncio.run(
            service_layer.check_booking(
                config.tenant_id,
                candidate,
                exclude_appointment_id=exclude,
            )
        )
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    _print_verdict(candidate, result)
    if not result.available:
        raise typer.Exit(2)


@app.command()
def windows(
    start: Annotated[Optional[str], typer.Option("--start", help="First date (YYYY-MM-DD). Defaults to today")] = None,
    days: Annotated[int, typer.Option("--days", "-n", help="Number of days to list")] = 7,
    professional: Annotated[Optional[str], typer.Option("--professional", "-p", help="Professional id")] = None,
    config_file: ConfigOption = None,
):
    """
    List open booking windows per day.
    """
    try:
        config, repository = _load(config_file)
        service_layer = _build_service(config, repository)

        first_day = parse_date(start) if start else pendulum.today(config.timezone).date()

        async def collect():
            return [
                await service_layer.find_open_windows(
                    config.tenant_id,
                    first_day.add(days=offset).to_date_string(),
                    professional_id=professional,
                )
                for offset in range(days)
            ]

        results = asyncio.run(collect())
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    table = Table(
        title=f"Open windows (min. {config.booking.min_window_minutes} min)",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Date", style="bold yellow")
    table.add_column("Windows")

    for day in results:
        label = parse_date(day.date).format("ddd DD.MM.YYYY")
        if day.windows:
            table.add_row(label, ", ".join(str(window) for window in day.windows))
        else:
            table.add_row(label, "[dim]closed or fully booked[/dim]")

    console.print()
    console.print(table)
    console.print()


@app.command()
def prices(
    today: Annotated[Optional[str], typer.Option("--today", help="Reference date (YYYY-MM-DD). Defaults to today")] = None,
    config_file: ConfigOption = None,
):
    """
    List services with their effective prices.
    """
    try:
        config, repository = _load(config_file)
        reference = parse_date(today).to_date_string() if today else config.today()
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    services = repository.list_services(config.tenant_id)
    if not services:
        console.print("[yellow]No services configured for this tenant.[/yellow]")
        return

    table = Table(
        title=f"Service prices on {reference}",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Service", style="bold yellow")
    table.add_column("Category", style="dim")
    table.add_column("Duration", justify="right")
    table.add_column("Price", justify="right")
    table.add_column("Charged", justify="right", style="bold")

    for item in services:
        charged = effective_value(item, reference)
        if is_in_promotion(item, reference):
            charged_label = f"[green]{charged:.2f}[/green] (until {item.promotion_end_date})"
        else:
            charged_label = f"{charged:.2f}"
        table.add_row(
            item.name,
            item.category,
            f"{item.duration or 60} min",
            f"{item.value:.2f}",
            charged_label,
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def quote(
    service: Annotated[List[str], typer.Argument(help="Service ids of the appointment")],
    today: Annotated[Optional[str], typer.Option("--today", help="Reference date (YYYY-MM-DD). Defaults to today")] = None,
    config_file: ConfigOption = None,
):
    """
    Show the price charged for an appointment made of the given services.
    """
    try:
        config, repository = _load(config_file)
        reference = parse_date(today).to_date_string() if today else config.today()
        total = asyncio.run(
            _build_service(config, repository).quote(config.tenant_id, service, reference)
        )
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    console.print(f"\n[bold]Total on {reference}:[/bold] {total:.2f}\n")


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]bookingcheck[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
