"""Interactive operator shell for inspecting a running registry."""
from __future__ import annotations

from keepalive_registry.shell.operator import OperatorShell, ShellCommand, parse_command

__all__ = ["OperatorShell", "ShellCommand", "parse_command"]
