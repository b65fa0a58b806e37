"""CLI entry point for keepalive-registry.

Invoked as::

    keepalive-registry [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m keepalive_registry.cli.main

Commands
--------
serve     Run the registry server with its reaper and operator shell
agent     Register with a registry and keep the identity alive
version   Show version information
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich.console import Console

from keepalive_registry.config import (
    DEFAULT_SERVER_URL,
    ConfigurationError,
    load_agent_settings,
    load_server_settings,
)

console = Console()

_LOG_LEVELS = click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ------------------------------------------------------------------
# Root group
# ------------------------------------------------------------------


@click.group()
@click.version_option(package_name="keepalive-registry")
def cli() -> None:
    """Liveness-tracking client registry and heartbeat agent"""


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from keepalive_registry import __version__

    console.print(f"[bold]keepalive-registry[/bold] v{__version__}")


# ------------------------------------------------------------------
# serve
# ------------------------------------------------------------------


@cli.command(name="serve")
@click.option("--host", default="0.0.0.0", show_default=True, help="Bind address.")
@click.option("--port", type=int, default=8000, show_default=True, help="TCP port.")
@click.option(
    "--reap-interval",
    type=float,
    default=30.0,
    show_default=True,
    help="Seconds between stale-client sweeps.",
)
@click.option(
    "--stale-after",
    type=float,
    default=120.0,
    show_default=True,
    help="Seconds without a keep-alive before a client is evicted.",
)
@click.option(
    "--identity-length",
    type=int,
    default=8,
    show_default=True,
    help="Characters per issued identity.",
)
@click.option(
    "--access-log",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path("access.log"),
    show_default=True,
    help="JSONL file receiving one line per handled request.",
)
@click.option(
    "--no-access-log",
    is_flag=True,
    default=False,
    help="Keep the access log in memory instead of writing a file.",
)
@click.option(
    "--no-shell",
    is_flag=True,
    default=False,
    help="Do not read operator commands from stdin.",
)
@click.option("--log-level", type=_LOG_LEVELS, default="INFO", show_default=True)
def serve_command(
    host: str,
    port: int,
    reap_interval: float,
    stale_after: float,
    identity_length: int,
    access_log: Path,
    no_access_log: bool,
    no_shell: bool,
    log_level: str,
) -> None:
    """Run the heartbeat registry server."""
    from keepalive_registry.server.app import run_server

    try:
        settings = load_server_settings(
            host=host,
            port=port,
            reap_interval=reap_interval,
            stale_after=stale_after,
            identity_length=identity_length,
            access_log=None if no_access_log else access_log,
            shell=not no_shell,
        )
    except ConfigurationError as exc:
        console.print(f"[red]Error:[/red] invalid server configuration: {exc}")
        sys.exit(1)

    _configure_logging(log_level)
    console.print(f"Starting server on port [bold]{settings.port}[/bold]...")
    try:
        run_server(settings)
    except OSError as exc:
        console.print(f"[red]Fatal error:[/red] {exc}")
        sys.exit(1)


# ------------------------------------------------------------------
# agent
# ------------------------------------------------------------------


@cli.command(name="agent")
@click.option(
    "--server",
    "server_url",
    default=DEFAULT_SERVER_URL,
    show_default=True,
    help="Registry base URL.",
)
@click.option(
    "--interval",
    type=int,
    default=30,
    show_default=True,
    help="Seconds between keep-alive calls (positive integer).",
)
@click.option(
    "--timeout",
    type=float,
    default=10.0,
    show_default=True,
    help="Per-request timeout in seconds.",
)
@click.option("--log-level", type=_LOG_LEVELS, default="INFO", show_default=True)
def agent_command(server_url: str, interval: int, timeout: float, log_level: str) -> None:
    """Register with a registry and renew the identity until interrupted."""
    from keepalive_registry.agent.client import AgentState, ClientAgent, RegistrationError

    try:
        settings = load_agent_settings(server_url=server_url, interval=interval, timeout=timeout)
    except ConfigurationError as exc:
        console.print(f"[red]Error:[/red] invalid agent configuration: {exc}")
        sys.exit(1)

    _configure_logging(log_level)
    agent = ClientAgent(settings)
    try:
        agent.register()
    except RegistrationError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)

    console.print(f"Server assigned ID: [bold]{agent.identity}[/bold]")
    try:
        final_state = agent.run()
    except KeyboardInterrupt:
        console.print("Stopping agent.")
        return

    if final_state is AgentState.UNREGISTERED:
        console.print(
            f"[red]Rejected:[/red] the registry no longer recognizes {agent.identity}; "
            "re-registration required."
        )
        sys.exit(2)


if __name__ == "__main__":
    cli()
