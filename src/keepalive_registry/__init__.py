"""keepalive-registry — liveness-tracking client registry with heartbeat renewal.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import keepalive_registry
>>> keepalive_registry.__version__
'0.1.0'

Quick start
-----------
::

    from keepalive_registry import ClientRegistry, Reaper, create_server

    registry = ClientRegistry()
    Reaper(registry).start()
    create_server(registry, port=8000).serve_forever()
"""
from __future__ import annotations

__version__: str = "0.1.0"

# ------------------------------------------------------------------
# Registry core
# ------------------------------------------------------------------
from keepalive_registry.registry.client_registry import (
    ClientEntry,
    ClientRecord,
    ClientRegistry,
    ExpireOutcome,
    IdentitySpaceExhaustedError,
    RemoveOutcome,
    RenewOutcome,
)
from keepalive_registry.registry.identity import IdentityGenerator, is_valid_identity
from keepalive_registry.registry.reaper import Reaper

# ------------------------------------------------------------------
# Protocol and transport
# ------------------------------------------------------------------
from keepalive_registry.server.access_log import AccessLog, AccessRecord
from keepalive_registry.server.app import create_server, run_server
from keepalive_registry.server.protocol import HeartbeatProtocol

# ------------------------------------------------------------------
# Operator shell and client agent
# ------------------------------------------------------------------
from keepalive_registry.shell.operator import OperatorShell
from keepalive_registry.agent.client import (
    AgentState,
    ClientAgent,
    RegistrationError,
    RenewalResult,
)
from keepalive_registry.config import (
    AgentSettings,
    ConfigurationError,
    ServerSettings,
)

__all__ = [
    "__version__",
    # Registry core
    "ClientEntry",
    "ClientRecord",
    "ClientRegistry",
    "ExpireOutcome",
    "IdentityGenerator",
    "IdentitySpaceExhaustedError",
    "Reaper",
    "RemoveOutcome",
    "RenewOutcome",
    "is_valid_identity",
    # Protocol and transport
    "AccessLog",
    "AccessRecord",
    "HeartbeatProtocol",
    "create_server",
    "run_server",
    # Operator shell and client agent
    "AgentSettings",
    "AgentState",
    "ClientAgent",
    "ConfigurationError",
    "OperatorShell",
    "RegistrationError",
    "RenewalResult",
    "ServerSettings",
]
