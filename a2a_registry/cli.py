"""a2a-registry CLI — run the server or manage the registry directly."""

from __future__ import annotations

import asyncio
import json
import logging
import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from a2a_registry import __version__, exit_codes
from a2a_registry.config import RegistryConfig
from a2a_registry.errors import RegistryError
from a2a_registry.fetch import AgentCardFetcher
from a2a_registry.models import Outcome
from a2a_registry.service import AgentService
from a2a_registry.store import STORE_TYPES, create_store
from a2a_registry.store.json_store import ON_CORRUPT_POLICIES

console = Console()

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


def _load_config(**overrides) -> RegistryConfig:
    try:
        return RegistryConfig.from_env(**overrides)
    except ValueError as e:
        raise click.UsageError(str(e))


def store_options(func):
    """Shared --store/--file/--on-corrupt options."""
    func = click.option(
        "--on-corrupt",
        type=click.Choice(ON_CORRUPT_POLICIES),
        default=None,
        help="JSON store: start empty ('reset') or refuse to start ('fail') on an unreadable file",
    )(func)
    func = click.option(
        "--file",
        "file_path",
        default=None,
        help="JSON or SQLite file path (default: a2a-registry.json / a2a-registry.db)",
    )(func)
    func = click.option(
        "--store",
        type=click.Choice(STORE_TYPES),
        default=None,
        help="Storage backend (default: json, or $A2A_REGISTRY_STORE)",
    )(func)
    return func


def _build_service(store: str | None, file_path: str | None, on_corrupt: str | None) -> AgentService:
    config = _load_config(store=store, file=file_path, on_corrupt=on_corrupt)
    try:
        backend = create_store(config)
    except RegistryError as e:
        console.print(f"[red]x[/] {escape(str(e))}")
        sys.exit(exit_codes.GENERAL_ERROR)
    return AgentService(backend, AgentCardFetcher(timeout=config.fetch_timeout))


def _fail(outcome: Outcome) -> None:
    console.print(f"[red]x[/] {escape(outcome.message)}")
    sys.exit(exit_codes.FOR_KIND[outcome.kind])


def _echo_data(data, fmt: str) -> None:
    if fmt == "yaml":
        import yaml

        click.echo(yaml.safe_dump(data, sort_keys=False, allow_unicode=True), nl=False)
    else:
        click.echo(json.dumps(data, indent=2))


@click.group()
@click.version_option(version=__version__)
def main():
    """A2A Registry — register and look up A2A AgentCards.

    Run ``serve`` for the HTTP API and MCP server, or use the other commands
    to manage the registry file directly.
    """


# ── Serve ────────────────────────────────────────────────────────────


@main.command()
@store_options
@click.option("--host", default=None, help="Interface to bind (default: 127.0.0.1)")
@click.option("--port", type=int, default=None, help="HTTP port (default: 3000)")
@click.option("--log-level", default=None, help="Logging level (default: INFO)")
def serve(store, file_path, on_corrupt, host, port, log_level):
    """Start the REST API (/agents) and MCP server (/mcp)."""
    import uvicorn

    from web.backend.app import dependencies
    from web.backend.app.main import app

    config = _load_config(
        store=store, file=file_path, on_corrupt=on_corrupt, host=host, port=port, log_level=log_level
    )
    configure_logging(config.log_level)
    dependencies.configure(config)

    base = f"http://{config.host}:{config.port}"
    console.print(
        Panel(
            f"Storage:     {config.store}\n"
            f"File:        {config.file}\n"
            f"REST API:    {base}/agents\n"
            f"MCP Server:  {base}/mcp/sse\n"
            f"Health:      {base}/health",
            title="A2A Registry Server",
        )
    )

    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())


@main.command(name="mcp")
@store_options
def run_mcp(store, file_path, on_corrupt):
    """Run the MCP server on stdio."""
    from web.backend.app import dependencies
    from web.backend.app.mcp_server import mcp

    config = _load_config(store=store, file=file_path, on_corrupt=on_corrupt)
    # stdout carries the protocol; keep logs on stderr
    configure_logging(config.log_level)
    dependencies.configure(config)
    mcp.run(transport="stdio")


# ── Registry commands ────────────────────────────────────────────────


@main.command()
@click.argument("url")
@store_options
def register(url, store, file_path, on_corrupt):
    """Register the agent whose AgentCard is published at URL.

    URL can be the agent's base URL or a direct link to a .json card.
    """
    service = _build_service(store, file_path, on_corrupt)
    try:
        outcome = asyncio.run(service.register_agent(url))
    finally:
        service.store.close()

    if not outcome.ok:
        _fail(outcome)
    card = outcome.value
    console.print(f"[green]v[/] Registered [cyan]{card['name']}[/] ({card['version']})")


@main.command(name="list")
@store_options
@click.option(
    "--format", "fmt", type=click.Choice(["table", "json", "yaml"]), default="table"
)
def list_agents(store, file_path, on_corrupt, fmt):
    """List all registered agents."""
    service = _build_service(store, file_path, on_corrupt)
    try:
        outcome = service.list_agents()
    finally:
        service.store.close()

    if not outcome.ok:
        _fail(outcome)
    agents = outcome.value

    if fmt != "table":
        _echo_data(agents, fmt)
        return

    if not agents:
        console.print("[yellow]Registry is empty.[/]")
        return

    table = Table(title=f"Registry ({len(agents)} agents)")
    table.add_column("Name", style="cyan")
    table.add_column("Version")
    table.add_column("Skills", justify="right")
    table.add_column("URL")

    for card in agents:
        table.add_row(card["name"], card["version"], str(len(card["skills"])), card["url"])

    console.print(table)


@main.command()
@click.argument("name")
@store_options
@click.option("--format", "fmt", type=click.Choice(["json", "yaml"]), default="json")
def get(name, store, file_path, on_corrupt, fmt):
    """Print the AgentCard of agent NAME."""
    service = _build_service(store, file_path, on_corrupt)
    try:
        outcome = service.get_agent(name)
    finally:
        service.store.close()

    if not outcome.ok:
        _fail(outcome)
    if outcome.value is None:
        console.print(f"[red]x[/] Agent '{name}' not found")
        sys.exit(exit_codes.NOT_FOUND)
    _echo_data(outcome.value, fmt)


@main.command()
@click.argument("name")
@click.option("--url", default=None, help="Fetch from this URL instead of the stored card's url")
@store_options
def update(name, url, store, file_path, on_corrupt):
    """Re-fetch and replace the AgentCard of agent NAME."""
    service = _build_service(store, file_path, on_corrupt)
    try:
        outcome = asyncio.run(service.update_agent(name, url))
    finally:
        service.store.close()

    if not outcome.ok:
        _fail(outcome)
    if outcome.value is None:
        console.print(f"[red]x[/] Agent '{name}' not found")
        sys.exit(exit_codes.NOT_FOUND)
    console.print(f"[green]v[/] Updated [cyan]{name}[/] ({outcome.value['version']})")


@main.command()
@click.argument("name")
@store_options
def delete(name, store, file_path, on_corrupt):
    """Remove agent NAME from the registry."""
    service = _build_service(store, file_path, on_corrupt)
    try:
        outcome = service.delete_agent(name)
    finally:
        service.store.close()

    if not outcome.ok:
        _fail(outcome)
    if not outcome.value:
        console.print(f"[yellow]![/] Agent '{name}' not found")
        sys.exit(exit_codes.NOT_FOUND)
    console.print(f"[green]v[/] Deleted [cyan]{name}[/]")


if __name__ == "__main__":
    main()
