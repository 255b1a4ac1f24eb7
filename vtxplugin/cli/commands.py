"""CLI commands for vtxplugin.

Loads a plugin entry and runs its entry points against the local host.
"""

from __future__ import annotations

import json
import uuid
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from vtxplugin import __version__
from vtxplugin.architecture_guard import collect_violations
from vtxplugin.config.access import get_settings
from vtxplugin.core.errors import HostCallError, VtxError
from vtxplugin.core.types import Err, EventContext, HttpRequest, PluginEvent
from vtxplugin.host.stream import read_all
from vtxplugin.plugin import PluginGuest
from vtxplugin.runtime.buffers import MemoryBuffer
from vtxplugin.runtime.loader import apply_migrations, load_plugin
from vtxplugin.runtime.local_host import LocalHost
from vtxplugin.utils.logging_utils import configure_logging

app = typer.Typer(
    name="vtxplugin",
    help="vtxplugin - run plugin entry points against a local host",
    no_args_is_help=True,
)

console = Console()

_ENTRY_HELP = "Plugin entry, e.g. plugin.py:plugin or my_pkg.plugin:MyPlugin"


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"vtxplugin v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    debug: bool = typer.Option(False, "--debug", help="Print SDK debug logs"),
    version: Optional[bool] = typer.Option(None, "--version", "-v", callback=_version_callback, is_eager=True),
) -> None:
    """vtxplugin developer tools."""
    configure_logging(get_settings(), debug=debug)


def parse_headers(raw: list[str]) -> list[tuple[str, str]]:
    """Parse repeated `Name: value` options, keeping order and duplicates."""
    headers: list[tuple[str, str]] = []
    for item in raw:
        name, sep, value = item.partition(":")
        if not sep or not name.strip():
            raise typer.BadParameter(f"header must look like 'Name: value': {item!r}")
        headers.append((name.strip(), value.strip()))
    return headers


def _load(entry: str, base_dir: Path | None) -> PluginGuest:
    try:
        return load_plugin(entry, base_dir=base_dir)
    except (ImportError, AttributeError, FileNotFoundError, TypeError, ValueError) as exc:
        console.print(f"[red]Failed to load {entry}: {exc}[/red]")
        raise typer.Exit(1) from exc


def _prepared_host(guest: PluginGuest) -> LocalHost:
    host = LocalHost(get_settings().local_host)
    try:
        apply_migrations(host, guest)
    except HostCallError as exc:
        host.close()
        console.print(f"[red]{exc.message}[/red]")
        raise typer.Exit(1) from exc
    return host


def _print_body(data: bytes) -> None:
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        console.print(f"[dim]<{len(data)} bytes of binary data>[/dim]")
        return
    try:
        console.print_json(text)
    except json.JSONDecodeError:
        console.print(text)


@app.command("manifest")
def manifest_command(
    entry: str = typer.Argument(..., help=_ENTRY_HELP),
    base_dir: Optional[Path] = typer.Option(None, "--base-dir", help="Directory entries are resolved against"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
) -> None:
    """Show the plugin manifest."""
    guest = _load(entry, base_dir)
    try:
        manifest = guest.get_manifest()
    except VtxError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from exc
    if as_json:
        console.print_json(json.dumps(manifest.to_dict()))
        return
    table = Table(title=f"Manifest: {manifest.name}")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for key, value in manifest.to_dict().items():
        table.add_row(key, ", ".join(value) if isinstance(value, list) else str(value))
    console.print(table)


@app.command("migrations")
def migrations_command(
    entry: str = typer.Argument(..., help=_ENTRY_HELP),
    base_dir: Optional[Path] = typer.Option(None, "--base-dir"),
) -> None:
    """List migration scripts in order."""
    guest = _load(entry, base_dir)
    scripts = guest.get_migrations()
    if not scripts:
        console.print("[dim]No migrations.[/dim]")
        return
    for index, script in enumerate(scripts, start=1):
        console.print(f"[cyan]-- migration {index}[/cyan]")
        console.print(script)


@app.command("resources")
def resources_command(
    entry: str = typer.Argument(..., help=_ENTRY_HELP),
    base_dir: Optional[Path] = typer.Option(None, "--base-dir"),
) -> None:
    """List static resources the plugin declares."""
    guest = _load(entry, base_dir)
    resources = guest.get_resources()
    if not resources:
        console.print("[dim]No resources.[/dim]")
        return
    for item in resources:
        console.print(item)


@app.command("request")
def request_command(
    entry: str = typer.Argument(..., help=_ENTRY_HELP),
    path: str = typer.Argument("/", help="Request path"),
    method: str = typer.Option("GET", "--method", "-X"),
    header: Optional[list[str]] = typer.Option(None, "--header", "-H", help="Header as 'Name: value' (repeatable)"),
    body: Optional[str] = typer.Option(None, "--body", "-d", help="Request body"),
    query: str = typer.Option("", "--query", help="Raw query string"),
    base_dir: Optional[Path] = typer.Option(None, "--base-dir"),
) -> None:
    """Send one request to the plugin's handler."""
    guest = _load(entry, base_dir)
    with _prepared_host(guest) as host:
        request = HttpRequest(
            method=method.upper(),
            path=path,
            query=query,
            headers=parse_headers(header or []),
            body=MemoryBuffer(body.encode("utf-8")) if body is not None else None,
        )
        response = guest.handle(host, request)
        console.print(f"[bold]status[/bold] {response.status}")
        if response.body is not None:
            _print_body(read_all(response.body))


@app.command("auth")
def auth_command(
    entry: str = typer.Argument(..., help=_ENTRY_HELP),
    header: Optional[list[str]] = typer.Option(None, "--header", "-H", help="Header as 'Name: value' (repeatable)"),
    base_dir: Optional[Path] = typer.Option(None, "--base-dir"),
) -> None:
    """Run authenticate with the given headers."""
    guest = _load(entry, base_dir)
    with _prepared_host(guest) as host:
        result = guest.authenticate(host, parse_headers(header or []))
    if isinstance(result, Err):
        console.print(f"[red]denied[/red] {result.error}")
        raise typer.Exit(1)
    user = result.value
    table = Table(title="Identity")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("user_id", user.user_id)
    table.add_row("username", user.username)
    table.add_row("groups", ", ".join(user.groups))
    table.add_row("metadata", user.metadata)
    console.print(table)


@app.command("emit")
def emit_command(
    entry: str = typer.Argument(..., help=_ENTRY_HELP),
    topic: str = typer.Argument(...),
    payload: str = typer.Argument("{}", help="JSON payload"),
    source: str = typer.Option("cli", "--source"),
    base_dir: Optional[Path] = typer.Option(None, "--base-dir"),
) -> None:
    """Deliver one event to the plugin."""
    guest = _load(entry, base_dir)
    with _prepared_host(guest) as host:
        event = PluginEvent(
            id=uuid.uuid4().hex,
            topic=topic,
            source=source,
            payload=payload,
            context=EventContext(request_id=uuid.uuid4().hex),
        )
        result = guest.handle_event(host, event)
        if isinstance(result, Err):
            console.print(f"[red]failed[/red] {result.error}")
            raise typer.Exit(1)
        console.print("[green]ok[/green]")
        for published in host.events:
            console.print(f"[dim]published[/dim] {published.topic} {json.dumps(published.payload)}")


@app.command("check")
def check_command(
    path: Path = typer.Argument(..., help="Plugin file or directory"),
) -> None:
    """Check plugin code for local-host imports and import-time host calls."""
    if not path.exists():
        console.print(f"[red]No such file or directory: {path}[/red]")
        raise typer.Exit(1)
    violations = collect_violations(path)
    if not violations:
        console.print("[green]No boundary problems found.[/green]")
        return
    for violation in violations:
        console.print(f"[red]{violation}[/red]")
    console.print(f"{len(violations)} problem(s)")
    raise typer.Exit(1)


if __name__ == "__main__":
    app()
