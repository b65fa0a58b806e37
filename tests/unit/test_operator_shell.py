"""Tests for keepalive_registry.shell.operator — OperatorShell."""
from __future__ import annotations

import io
import threading

import pytest
from rich.console import Console

from keepalive_registry.registry.client_registry import ClientRegistry
from keepalive_registry.shell.operator import OperatorShell, ShellCommand, parse_command


@pytest.fixture()
def shell(registry: ClientRegistry) -> OperatorShell:
    return OperatorShell(registry, console=Console(file=io.StringIO()))


class SpyRegistry(ClientRegistry):
    """Registry that records calls to remove()."""

    def __init__(self) -> None:
        super().__init__()
        self.removed: list[str] = []

    def remove(self, identity: str):  # type: ignore[no-untyped-def]
        self.removed.append(identity)
        return super().remove(identity)


# ---------------------------------------------------------------------------
# parse_command
# ---------------------------------------------------------------------------


class TestParseCommand:
    def test_blank_line(self) -> None:
        assert parse_command("   \n") is None

    def test_verb_and_args(self) -> None:
        assert parse_command("client abcd1234 remove\n") == ShellCommand(
            "client", ("abcd1234", "remove")
        )

    def test_collapses_whitespace(self) -> None:
        assert parse_command("  clients   list ") == ShellCommand("clients", ("list",))


# ---------------------------------------------------------------------------
# clients
# ---------------------------------------------------------------------------


class TestClientsCommand:
    def test_list_empty(self, shell: OperatorShell) -> None:
        assert shell.execute("clients list") == "Active clients:"

    def test_list_shows_identity_and_origin(
        self, shell: OperatorShell, registry: ClientRegistry
    ) -> None:
        identity = registry.register("10.1.2.3")
        output = shell.execute("clients list")
        assert output.splitlines() == ["Active clients:", f"ID: {identity}, IP: 10.1.2.3"]

    def test_missing_action(self, shell: OperatorShell) -> None:
        assert shell.execute("clients").startswith("Missing action")

    def test_unknown_action(self, shell: OperatorShell) -> None:
        output = shell.execute("clients purge")
        assert output.startswith("Unknown action: purge")
        assert "help clients" in output

    def test_too_many_arguments(self, shell: OperatorShell) -> None:
        assert shell.execute("clients list now").startswith("Too many arguments")


# ---------------------------------------------------------------------------
# client
# ---------------------------------------------------------------------------


class TestClientCommand:
    def test_remove_existing(self, shell: OperatorShell, registry: ClientRegistry) -> None:
        identity = registry.register("10.0.0.1")
        assert shell.execute(f"client {identity} remove") == f"Client with ID {identity} removed"
        assert identity not in registry

    def test_remove_twice_reports_not_found(
        self, shell: OperatorShell, registry: ClientRegistry
    ) -> None:
        identity = registry.register("10.0.0.1")
        shell.execute(f"client {identity} remove")
        assert shell.execute(f"client {identity} remove").startswith(
            f"Client with ID {identity} not found"
        )

    def test_unknown_action_does_not_mutate(
        self, shell: OperatorShell, registry: ClientRegistry
    ) -> None:
        identity = registry.register("10.0.0.1")
        output = shell.execute(f"client {identity} kick")
        assert output.startswith("Unknown action: kick")
        assert identity in registry

    def test_missing_arguments(self, shell: OperatorShell) -> None:
        assert shell.execute("client").startswith("Missing arguments")

    def test_missing_action(self, shell: OperatorShell) -> None:
        assert shell.execute("client abcd1234").startswith("Missing action")

    def test_id_too_short(self, shell: OperatorShell) -> None:
        assert shell.execute("client abc remove").startswith("ID too short")

    def test_id_too_long(self, shell: OperatorShell) -> None:
        assert shell.execute("client abcdefghij remove").startswith("ID too long")

    def test_id_with_invalid_characters(self, shell: OperatorShell) -> None:
        assert shell.execute("client abcd-123 remove").startswith("Invalid ID")

    def test_too_many_arguments(self, shell: OperatorShell) -> None:
        assert shell.execute("client abcd1234 remove now").startswith("Too many arguments")

    @pytest.mark.parametrize(
        "line",
        [
            "client",
            "client abc remove",
            "client abcdefghij remove",
            "client abcd!234 remove",
            "client abcd1234",
            "client abcd1234 kick",
        ],
    )
    def test_malformed_commands_never_call_remove(self, line: str) -> None:
        registry = SpyRegistry()
        OperatorShell(registry, console=Console(file=io.StringIO())).execute(line)
        assert registry.removed == []


# ---------------------------------------------------------------------------
# help / other
# ---------------------------------------------------------------------------


class TestOtherCommands:
    @pytest.mark.parametrize("line", ["help", "help clients", "help client"])
    def test_help_placeholder(self, shell: OperatorShell, line: str) -> None:
        assert shell.execute(line) == "Not implemented yet"

    def test_unknown_verb(self, shell: OperatorShell) -> None:
        assert shell.execute("reboot").startswith("Unknown command: reboot")

    def test_blank_line_is_ignored(self, shell: OperatorShell) -> None:
        assert shell.execute("") == ""


# ---------------------------------------------------------------------------
# run loop
# ---------------------------------------------------------------------------


class TestRun:
    def test_executes_each_line(self, registry: ClientRegistry) -> None:
        identity = registry.register("10.0.0.1")
        buffer = io.StringIO()
        shell = OperatorShell(registry, console=Console(file=buffer, width=200))

        shell.run(io.StringIO(f"clients list\n\nclient {identity} remove\n"))

        output = buffer.getvalue()
        assert f"ID: {identity}, IP: 10.0.0.1" in output
        assert f"Client with ID {identity} removed" in output
        assert identity not in registry

    def test_stops_when_event_set(self, registry: ClientRegistry) -> None:
        identity = registry.register("10.0.0.1")
        stop = threading.Event()
        stop.set()
        shell = OperatorShell(registry, console=Console(file=io.StringIO()))

        shell.run(io.StringIO(f"client {identity} remove\n"), stop=stop)

        assert identity in registry
