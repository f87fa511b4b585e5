"""
Main CLI application for TrafficIndex
Provides commands for the traffic index, commute comparison, events and the API server
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from trafficindex.config.models import DatasetConfig, Settings
from trafficindex.config.parser import ConfigParser, ConfigParserError
from trafficindex.core.errors import TrafficIndexError
from trafficindex.core.models import GeoPoint
from trafficindex.services import Services, build_event_service, build_services

# Initialize Typer app
app = typer.Typer(
    name="trafficindex",
    help="TrafficIndex - City-wide congestion index and commute comparison",
    add_completion=False,
)

# Console for rich output
console = Console()

state = {"config": None, "verbose": False}


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


def load_settings() -> Settings:
    try:
        settings = Settings.from_env()
    except ValidationError as e:
        console.print(f"[red]Invalid environment settings: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    if state["config"] is not None:
        settings = settings.model_copy(update={"config_path": state["config"]})
    return settings


def load_dataset(settings: Settings) -> DatasetConfig:
    try:
        return ConfigParser.load_or_default(settings.config_path)
    except ConfigParserError as e:
        console.print(f"[red]Configuration error: {escape(str(e))}[/red]")
        raise typer.Exit(1)


def load_services() -> Services:
    settings = load_settings()
    dataset = load_dataset(settings)
    try:
        return build_services(settings, dataset)
    except ValueError as e:
        console.print(f"[red]Directions API error: {escape(str(e))}[/red]")
        console.print("Please set the GOOGLE_MAPS_SERVER_KEY environment variable")
        raise typer.Exit(1)


def _format_optional(value, suffix: str = "") -> str:
    return "-" if value is None else f"{value}{suffix}"


@app.command()
def index():
    """Compute the city-wide traffic index"""
    services = load_services()

    try:
        snapshot = asyncio.run(services.index.get_index())
    except TrafficIndexError as e:
        console.print(f"[red]Error computing traffic index: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    console.print(f"\n[bold cyan]Traffic index: {snapshot.index}[/bold cyan]")
    console.print(f"Average increase: {snapshot.avg_increase_pct}%")
    console.print(f"Updated: {snapshot.updated_at.isoformat()}")

    table = Table(title="\nCorridors")
    table.add_column("Corridor", style="cyan")
    table.add_column("Increase", justify="right")

    for route in snapshot.routes:
        if route.ok:
            table.add_row(route.name, f"{route.increase_pct:.1f}%")
        else:
            table.add_row(route.name, f"[red]{escape(route.error)}[/red]")

    console.print(table)


@app.command()
def commute(
    origin: str = typer.Argument(..., help="Origin as lat,lng"),
    destination: str = typer.Argument(..., help="Destination as lat,lng"),
    modes: Optional[str] = typer.Option(None, "--modes", help="Comma-separated modes (driving,transit,walking,bicycling)"),
):
    """
    Compare travel modes between two points

    Examples:
        trafficindex commute 41.0,29.0 41.08,29.01
        trafficindex commute 41.0,29.0 41.08,29.01 --modes driving,bicycling
    """
    services = load_services()

    try:
        response = asyncio.run(services.commute.compare(origin, destination, modes))
    except TrafficIndexError as e:
        console.print(f"[red]Error comparing commute: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    table = Table(title=f"\nFastest: {response.fastest_mode or 'N/A'}")
    table.add_column("Mode", style="cyan")
    table.add_column("Now", justify="right")
    table.add_column("Typical", justify="right")
    table.add_column("vs Typical", justify="right")
    table.add_column("vs Fastest", justify="right")
    table.add_column("Distance", justify="right")
    table.add_column("Warning")

    for route in response.routes:
        table.add_row(
            route.mode,
            _format_optional(route.now_minutes, "min"),
            _format_optional(route.typical_minutes, "min"),
            _format_optional(route.delta_pct_vs_typical, "%"),
            _format_optional(route.diff_to_fastest_minutes, "min"),
            _format_optional(route.distance_km, "km"),
            route.warning or "",
        )

    console.print(table)


@app.command()
def events(
    near: Optional[str] = typer.Option(None, "--near", help="Only events near lat,lng"),
    radius: Optional[float] = typer.Option(None, "--radius", help="Radius in km around --near"),
):
    """List active and upcoming events"""
    settings = load_settings()
    dataset = load_dataset(settings)

    point = None
    if near:
        try:
            point = GeoPoint.parse(near)
        except ValueError as e:
            console.print(f"[red]Invalid --near: {escape(str(e))}[/red]")
            raise typer.Exit(1)

    # Events need no directions key
    response = build_event_service(dataset).upcoming(near=point, radius_km=radius)

    for title, items in (("Active", response.active), ("Upcoming", response.upcoming)):
        table = Table(title=f"\n{title} events")
        table.add_column("Event", style="cyan")
        table.add_column("Venue")
        table.add_column("Start")
        table.add_column("End")
        if point is not None:
            table.add_column("Distance", justify="right")

        for item in items:
            row = [item.title, item.venue, item.start_iso, item.end_iso]
            if point is not None:
                row.append(_format_optional(item.distance_km, "km"))
            table.add_row(*row)

        if items:
            console.print(table)
        else:
            console.print(f"[yellow]No {title.lower()} events[/yellow]")


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (defaults to HOST or 127.0.0.1)"),
    port: Optional[int] = typer.Option(None, "--port", help="Port (defaults to PORT or 5050)"),
):
    """Run the HTTP API server"""
    import uvicorn

    from trafficindex.api.app import create_app

    settings = load_settings()
    services = load_services()

    host = host or settings.host
    port = port or settings.port
    console.print(f"[green]✓ TrafficIndex API on http://{host}:{port}[/green]")
    uvicorn.run(create_app(services), host=host, port=port)


@app.command(name="init-config")
def init_config(
    path: Path = typer.Argument(Path("trafficindex.yaml"), help="Where to write the template (.yaml/.json)"),
    overwrite: bool = typer.Option(False, "--overwrite", help="Replace an existing file"),
):
    """Write a dataset template with the built-in corridors and events"""
    if path.exists() and not overwrite:
        console.print(f"[red]File already exists: {path}. Use --overwrite to replace it.[/red]")
        raise typer.Exit(1)

    try:
        ConfigParser.save_file(ConfigParser.create_template_config(), path)
    except ConfigParserError as e:
        console.print(f"[red]Error writing configuration: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✓ Configuration template written to {path}[/green]")


@app.command(name="show-config")
def show_config():
    """Show the active dataset configuration"""
    settings = load_settings()
    dataset = load_dataset(settings)

    source = settings.config_path or "built-in defaults"
    console.print(f"\n[bold cyan]{dataset.city}[/bold cyan] ({source})")
    ttl = settings.index_ttl_seconds if settings.index_ttl_seconds is not None else dataset.index_ttl_seconds
    console.print(f"Index TTL: {ttl}s")
    console.print(f"Default modes: {', '.join(dataset.default_modes)}")

    table = Table(title="\nCorridors")
    table.add_column("Name", style="cyan")
    table.add_column("From")
    table.add_column("To")
    for corridor in dataset.corridors:
        table.add_row(corridor.name, str(corridor.from_), str(corridor.to))
    console.print(table)
    console.print(f"Events configured: {len(dataset.events)}")


@app.callback()
def callback(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Dataset file (YAML/JSON)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """
    TrafficIndex - City-wide congestion index and commute comparison

    Derives a congestion index from reference corridors and compares travel
    modes for a trip using the Google Directions API.
    """
    state["config"] = config
    state["verbose"] = verbose
    setup_logging(verbose)


def main():
    """Main entry point for CLI"""
    # Load environment variables
    from dotenv import load_dotenv
    load_dotenv()

    app()


if __name__ == "__main__":
    main()
