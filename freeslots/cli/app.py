"""
Main CLI application using Typer.
"""

import logging
from pathlib import Path
from typing import Annotated, List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from ..config import AppConfig, DefaultsConfig
from ..domain.exceptions import FreeSlotsError
from ..domain.gap_formatter import format_window
from ..domain.models import WorkingHoursConfig
from ..services.factory import build_service

app = typer.Typer(
    name="freeslots",
    help="Find free meeting slots in a public ICS calendar feed",
    add_completion=False
)

console = Console()


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """
    freeslots - free meeting slots from a calendar feed.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _parse_days(days_option: str) -> List[int]:
    """
    Parse a comma-separated weekday list such as ``1,2,3,4,5``.

    Raises:
        typer.BadParameter: If an entry is not a number
    """
    days: List[int] = []
    for item in days_option.split(","):
        item = item.strip()
        if not item:
            continue
        if not item.isdigit():
            raise typer.BadParameter(f"'{item}' is not a weekday number (1=Monday ... 7=Sunday)")
        days.append(int(item))
    return days


def _load_config(config_file: Optional[Path], lookahead: Optional[int]) -> AppConfig:
    config = AppConfig.load(config_file)
    if lookahead is not None:
        config = config.model_copy(update={"lookahead_days": lookahead})
    return config


def _resolve_working_hours(
    config: AppConfig,
    *,
    days: Optional[str],
    start_hour: Optional[int],
    end_hour: Optional[int],
    timezone: Optional[str],
) -> WorkingHoursConfig:
    """
    Merge command-line overrides with the configured defaults.
    """
    overrides = {
        "working_days": _parse_days(days) if days else None,
        "start_hour": start_hour,
        "end_hour": end_hour,
        "timezone": timezone,
    }
    merged = config.defaults.model_dump()
    merged.update({key: value for key, value in overrides.items() if value is not None})
    try:
        return DefaultsConfig(**merged).working_hours()
    except ValueError as e:
        raise typer.BadParameter(str(e))


ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")]
DaysOption = Annotated[Optional[str], typer.Option("--days", help="Working days, e.g. 1,2,3,4,5 (1=Monday)")]
StartOption = Annotated[Optional[int], typer.Option("--start", help="Working day start hour (0-23)")]
EndOption = Annotated[Optional[int], typer.Option("--end", help="Working day end hour (0-24, 24 = midnight)")]
TimezoneOption = Annotated[Optional[str], typer.Option("--timezone", "-t", help="IANA timezone, e.g. Europe/Berlin")]
LookaheadOption = Annotated[Optional[int], typer.Option("--lookahead", min=1, help="Number of days to search")]


@app.command()
def gaps(
    ics_link: Annotated[str, typer.Argument(help="URL of the ICS calendar feed")],
    config_file: ConfigOption = None,
    days: DaysOption = None,
    start_hour: StartOption = None,
    end_hour: EndOption = None,
    timezone: TimezoneOption = None,
    lookahead: LookaheadOption = None,
):
    """
    Print the raw free windows of a calendar feed (no LLM involved).

    Examples:

        freeslots gaps https://example.com/calendar.ics

        freeslots gaps webcal://example.com/cal.ics --days 1,3,5 --start 10 --end 16
    """
    try:
        config = _load_config(config_file, lookahead)
        working_hours = _resolve_working_hours(
            config,
            days=days,
            start_hour=start_hour,
            end_hour=end_hour,
            timezone=timezone,
        )

        service = build_service(config)
        with console.status("Fetching calendar..."):
            windows = service.find_free_windows(
                ics_link=ics_link,
                working_hours=working_hours,
            )

        console.print()
        if not windows:
            console.print(
                "[yellow]⚠ No free windows found.[/yellow]\n"
                "Try other working hours or a longer lookahead."
            )
        else:
            console.print(f"[bold green]✓ {len(windows)} free window(s) found:[/bold green]\n")
            for window in windows:
                console.print(f"  {format_window(window)}")
        console.print()

    except (FileNotFoundError, ValueError, FreeSlotsError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def generate(
    ics_link: Annotated[str, typer.Argument(help="URL of the ICS calendar feed")],
    prompt: Annotated[Optional[str], typer.Option("--prompt", "-p", help="What to ask the assistant")] = None,
    config_file: ConfigOption = None,
    days: DaysOption = None,
    start_hour: StartOption = None,
    end_hour: EndOption = None,
    timezone: TimezoneOption = None,
    lookahead: LookaheadOption = None,
):
    """
    Find free slots and let the assistant format them per the prompt.

    Examples:

        freeslots generate https://example.com/calendar.ics

        freeslots generate https://example.com/calendar.ics -p "Only mornings next week"
    """
    try:
        config = _load_config(config_file, lookahead)
        working_hours = _resolve_working_hours(
            config,
            days=days,
            start_hour=start_hour,
            end_hour=end_hour,
            timezone=timezone,
        )
        request_prompt = prompt or config.defaults.prompt

        service = build_service(config)
        with console.status("Finding free slots..."):
            slots = service.generate_slots(
                ics_link=ics_link,
                working_hours=working_hours,
                prompt=request_prompt,
            )

        console.print()
        console.print(Panel(slots, title=request_prompt))
        console.print()

    except (FileNotFoundError, ValueError, FreeSlotsError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def serve(
    config_file: ConfigOption = None,
    host: Annotated[Optional[str], typer.Option("--host", help="Host to bind to")] = None,
    port: Annotated[Optional[int], typer.Option("--port", help="Port to bind to")] = None,
):
    """
    Run the HTTP API.
    """
    from ..api.app import run_api_server

    try:
        config = AppConfig.load(config_file)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    run_api_server(config, host=host, port=port)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]freeslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
