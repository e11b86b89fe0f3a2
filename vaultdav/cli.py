"""vaultdav CLI."""
import logging
from datetime import datetime, timezone

import typer
from rich.console import Console
from rich.table import Table


def _version_callback(value: bool):
    if value:
        from vaultdav import __version__
        print(f"vaultdav {__version__}")
        raise typer.Exit()


app = typer.Typer(name="vaultdav", help="WebDAV storage for encrypted backups")
console = Console()


@app.callback()
def main(
    version: bool = typer.Option(False, "--version", "-V", callback=_version_callback, is_eager=True, help="Show version"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every WebDAV response"),
):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_plugin():
    from .config import get_plugin
    from .errors import ConfigError
    try:
        return get_plugin()
    except ConfigError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


def _token_time(token: int) -> str:
    try:
        return datetime.fromtimestamp(token / 1000, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
    except (OverflowError, OSError, ValueError):
        return ""


@app.command()
def config(
    url: str = typer.Option(..., "--url", help="WebDAV base URL"),
    username: str = typer.Option("", "--username", "-u"),
    password: str = typer.Option("", "--password", "-p"),
    root: str = typer.Option(None, "--root", help="Backup folder below the base URL"),
):
    """Save the WebDAV server to back up to."""
    from .config import WebDavConfig, get_plugin, save_config
    cfg = WebDavConfig.from_dict({"url": url, "username": username, "password": password, "root": root})
    save_config(cfg.to_dict())
    if get_plugin(cfg).test_connection():
        console.print(f"✅ {url} configured and reachable")
    else:
        console.print(f"[yellow]⚠️  {url} configured but connection test failed[/yellow]")
    if password:
        console.print("[dim]🔒 Password saved to ~/.vaultdav/config.json (mode 600)[/dim]")


@app.command()
def init():
    """Create the backup folder on the server if it is missing."""
    from .errors import TransportFailure
    plugin = _load_plugin()
    try:
        plugin.initialize_device()
    except TransportFailure as e:
        console.print(f"[red]Could not initialize {plugin.root}: {e}[/red]")
        raise typer.Exit(1)
    console.print(f"✅ {plugin.root} is ready")


@app.command()
def ls():
    """List the restore sets found on the server."""
    plugin = _load_plugin()
    backups = plugin.get_available_backups()
    if backups is None:
        console.print("[red]Could not list backups, run with --verbose for details.[/red]")
        raise typer.Exit(1)

    table = Table(title=f"📦 Restore sets in {plugin.root}")
    table.add_column("Token", style="cyan")
    table.add_column("Started (UTC)", style="dim")
    count = 0
    for metadata in backups:
        table.add_row(str(metadata.token), _token_time(metadata.token))
        count += 1
    if not count:
        console.print("[yellow]No restore sets found.[/yellow]")
        return
    console.print(table)
