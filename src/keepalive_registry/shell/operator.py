"""OperatorShell — line-oriented inspection commands for a running registry.

Grammar::

    clients list                 list every live client
    client <identity> remove     evict one client
    help [...]                   (not implemented yet)

Each line is tokenized into a verb and its arguments, the arguments are
shape-checked, and only then is the registry touched. Malformed input
produces a usage message and never changes registry state.
"""
from __future__ import annotations

import logging
import sys
import threading
from dataclasses import dataclass
from typing import Callable, Iterable

from rich.console import Console

from keepalive_registry.registry.client_registry import ClientRegistry, RemoveOutcome
from keepalive_registry.registry.identity import IDENTITY_ALPHABET, IDENTITY_LENGTH

logger = logging.getLogger(__name__)

CLIENTS_HINT = "Type 'help clients' for usage"
CLIENT_HINT = "Type 'help client' for usage"
GENERAL_HINT = "Type 'help' for usage"


@dataclass(frozen=True)
class ShellCommand:
    """A tokenized operator command line."""

    verb: str
    args: tuple[str, ...] = ()


def parse_command(line: str) -> ShellCommand | None:
    """Split *line* on whitespace into a :class:`ShellCommand`.

    Returns None for a blank line.
    """
    tokens = line.split()
    if not tokens:
        return None
    return ShellCommand(verb=tokens[0], args=tuple(tokens[1:]))


def _usage(message: str, hint: str) -> str:
    return f"{message}\n{hint}"


class OperatorShell:
    """Runs operator commands against a :class:`ClientRegistry`.

    Parameters
    ----------
    registry:
        The registry to inspect and mutate.
    console:
        Rich console used by :meth:`run` for output. Defaults to stdout.
    identity_length:
        Expected identity length for ``client <identity> ...`` commands.
    """

    def __init__(
        self,
        registry: ClientRegistry,
        console: Console | None = None,
        identity_length: int = IDENTITY_LENGTH,
    ) -> None:
        self._registry = registry
        self._console = console or Console()
        self._identity_length = identity_length
        self._handlers: dict[str, Callable[[tuple[str, ...]], str]] = {
            "clients": self._clients,
            "client": self._client,
            "help": self._help,
        }

    def execute(self, line: str) -> str:
        """Run one command line and return the text to show the operator."""
        command = parse_command(line)
        if command is None:
            return ""
        handler = self._handlers.get(command.verb)
        if handler is None:
            return _usage(f"Unknown command: {command.verb}", GENERAL_HINT)
        return handler(command.args)

    def run(
        self,
        stream: Iterable[str] | None = None,
        stop: threading.Event | None = None,
    ) -> None:
        """Read and execute commands until *stream* ends or *stop* is set."""
        lines = sys.stdin if stream is None else stream
        for line in lines:
            if stop is not None and stop.is_set():
                break
            output = self.execute(line)
            if output:
                self._console.print(output, markup=False, highlight=False)
        logger.debug("Operator shell input closed")

    # ------------------------------------------------------------------
    # Verbs
    # ------------------------------------------------------------------

    def _clients(self, args: tuple[str, ...]) -> str:
        if not args:
            return _usage("Missing action", CLIENTS_HINT)
        if len(args) > 1:
            return _usage("Too many arguments", CLIENTS_HINT)
        action = args[0]
        if action != "list":
            return _usage(f"Unknown action: {action}", CLIENTS_HINT)

        lines = ["Active clients:"]
        for entry in self._registry.list():
            lines.append(f"ID: {entry.identity}, IP: {entry.origin}")
        return "\n".join(lines)

    def _client(self, args: tuple[str, ...]) -> str:
        if not args:
            return _usage("Missing arguments", CLIENT_HINT)

        identity = args[0]
        shape_error = self._check_identity(identity)
        if shape_error:
            return _usage(shape_error, CLIENT_HINT)
        if len(args) == 1:
            return _usage("Missing action", CLIENT_HINT)
        if len(args) > 2:
            return _usage("Too many arguments", CLIENT_HINT)

        action = args[1]
        if action != "remove":
            return _usage(f"Unknown action: {action}", CLIENT_HINT)

        if self._registry.remove(identity) is RemoveOutcome.REMOVED:
            logger.info("Operator removed client %s", identity)
            return f"Client with ID {identity} removed"
        return _usage(f"Client with ID {identity} not found", CLIENT_HINT)

    def _help(self, args: tuple[str, ...]) -> str:
        return "Not implemented yet"

    def _check_identity(self, identity: str) -> str | None:
        if any(ch not in IDENTITY_ALPHABET for ch in identity):
            return f"Invalid ID: must be {self._identity_length} alphanumeric characters"
        if len(identity) < self._identity_length:
            return "ID too short"
        if len(identity) > self._identity_length:
            return "ID too long"
        return None
