"""CLI entry point for Podsync."""

import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from podsync.config.logging import setup_logging
from podsync.config.manager import ConfigManager
from podsync.config.schema import DeviceConfig, SyncConfig
from podsync.device.client import DeviceClient
from podsync.feeds.search import PodcastSearch
from podsync.http import create_session
from podsync.sync.orchestrator import SyncOptions, SyncOrchestrator, SyncReport
from podsync.utils.errors import ConfigError, PodsyncError

app = typer.Typer(
    name="podsync",
    help="Sync podcast feeds as playlists onto an ESPuino audio player",
    no_args_is_help=True,
)
console = Console()


def _apply_overrides(
    config: SyncConfig, host: str | None = None, proxy: str | None = None
) -> SyncConfig:
    """Return a copy of the config with command-line device overrides applied."""
    overrides = {}
    if host:
        overrides["host"] = host
    if proxy:
        overrides["proxy"] = proxy
    if not overrides:
        return config
    device = DeviceConfig(**{**config.device.model_dump(), **overrides})
    return config.model_copy(update={"device": device})


def _print_report(report: SyncReport) -> None:
    table = Table(title="[bold]Podcast Playlists[/bold]")
    table.add_column("Podcast", style="cyan", no_wrap=True)
    table.add_column("Episodes", justify="right")
    table.add_column("Local file", style="dim")
    table.add_column("Device path", style="blue")
    table.add_column("Status")

    for result in report.results:
        episodes = str(len(result.playlist.episodes)) if result.playlist else "—"
        local = str(result.local_path) if result.local_path else "—"
        remote = result.remote_path or "—"
        if result.ok:
            status = "[green]✓[/green]"
        else:
            status = f"[red]✗ {result.failed_stage.value}[/red]"
        table.add_row(result.name, episodes, local, remote, status)

    console.print(table)

    for result in report.failed:
        console.print(f"[red]✗[/red] {result.name}: {escape(result.error or '')}")

    if report.created_base_directory:
        console.print(f"[dim]Created {report.base_directory} on device[/dim]")

    if report.remote_entries:
        console.print(f"\n[bold]{report.base_directory}[/bold]")
        for entry in report.remote_entries:
            suffix = "/" if entry.is_directory else ""
            console.print(f"  • {entry.name}{suffix}")


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose (DEBUG) logging"
    ),
    log_file: Path | None = typer.Option(
        None, "--log-file", help="Write logs to file"
    ),
) -> None:
    """Podsync - Sync podcast feeds onto an ESPuino."""
    setup_logging(verbose=verbose, log_file=log_file)


@app.command("version")
def show_version() -> None:
    """Show version information."""
    from podsync import __version__

    console.print(f"[bold cyan]Podsync[/bold cyan] v{__version__}")


@app.command("sync")
def sync_command(
    config_file: Path = typer.Argument(..., help="Path to the podsync YAML config"),
    host: str | None = typer.Option(
        None, "--host", "-H", help="Device address, overrides espuino.host"
    ),
    proxy: str | None = typer.Option(
        None, "--proxy", help="Forward proxy for all HTTP calls (debugging)"
    ),
    write_all: bool = typer.Option(
        False, "--write-all", "-w", help="Write every playlist to a local file"
    ),
    output_dir: Path = typer.Option(
        Path("."), "--output-dir", "-o", help="Directory for playlists written by --write-all"
    ),
    no_upload: bool = typer.Option(
        False, "--no-upload", help="Only resolve feeds and write local files"
    ),
    workers: int | None = typer.Option(
        None, "--workers", min=1, max=32, help="Number of feeds resolved in parallel"
    ),
) -> None:
    """Convert podcast feeds to M3U playlists and upload them to the device.

    Examples:
        podsync sync podsync.yaml

        podsync sync podsync.yaml --host 192.168.1.40 --write-all -o ./playlists
    """
    try:
        config = ConfigManager(config_file).load()
        config = _apply_overrides(config, host=host, proxy=proxy)
    except (ConfigError, ValueError) as e:
        console.print(f"[red]✗[/red] {escape(str(e))}")
        sys.exit(1)

    options = SyncOptions(
        write_all=write_all,
        output_dir=output_dir,
        upload=not no_upload,
        workers=workers,
    )

    try:
        with SyncOrchestrator(config, options=options) as orchestrator:
            report = orchestrator.run()
    except PodsyncError as e:
        console.print(f"[red]✗[/red] Error: {escape(str(e))}")
        sys.exit(1)

    _print_report(report)

    if report.aborted:
        console.print(f"[red]✗[/red] Upload aborted: {escape(report.aborted)}")
    if not report.ok:
        console.print(
            f"\n[yellow]{len(report.failed)} of {len(report.results)} podcast(s) failed[/yellow]"
        )
        sys.exit(1)

    console.print(f"\n[green]✓[/green] Synced {len(report.results)} podcast(s)")


@app.command("ls")
def list_remote(
    path: str | None = typer.Argument(None, help="Device directory (default: configured base path)"),
    config_file: Path | None = typer.Option(
        None, "--config", "-c", help="Path to the podsync YAML config"
    ),
    host: str | None = typer.Option(None, "--host", "-H", help="Device address"),
    proxy: str | None = typer.Option(None, "--proxy", help="Forward proxy for HTTP calls"),
) -> None:
    """List a directory on the device.

    Examples:
        podsync ls / --host espuino.local

        podsync ls --config podsync.yaml
    """
    try:
        config = ConfigManager(config_file).load() if config_file else SyncConfig()
        device = _apply_overrides(config, host=host, proxy=proxy).device
    except (ConfigError, ValueError) as e:
        console.print(f"[red]✗[/red] {escape(str(e))}")
        sys.exit(1)

    target = path or device.path

    try:
        with create_session(proxy=device.proxy) as session:
            entries = DeviceClient(device.host, session, timeout=device.timeout).list(target)
    except PodsyncError as e:
        console.print(f"[red]✗[/red] Error: {escape(str(e))}")
        sys.exit(1)

    if not entries:
        console.print(f"[yellow]{target} is empty[/yellow]")
        return

    table = Table(title=f"[bold]{device.host}:{target}[/bold]")
    table.add_column("Name", style="cyan")
    table.add_column("Type", style="green")
    for entry in entries:
        table.add_row(entry.name, "dir" if entry.is_directory else "file")
    console.print(table)


@app.command("search")
def search_command(
    terms: list[str] = typer.Argument(..., help="Search terms"),
    limit: int = typer.Option(20, "--limit", "-n", min=1, max=200, help="Maximum results"),
) -> None:
    """Search the podcast directory for feed URLs.

    Examples:
        podsync search sendung mit der maus
    """
    query = " ".join(terms)
    try:
        with create_session() as session:
            results = PodcastSearch(session).search(query, limit=limit)
    except PodsyncError as e:
        console.print(f"[red]✗[/red] Error: {escape(str(e))}")
        sys.exit(1)

    if not results:
        console.print(f'[yellow]No podcasts found for "{query}"[/yellow]')
        return

    console.print(f"Found {len(results)} results:")
    for index, result in enumerate(results, start=1):
        console.print(f"{index}:\t[bold]{result.name}[/bold]\n\t[blue]{result.feed_url}[/blue]")
