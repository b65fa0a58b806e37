"""HTTP server mode for the heartbeat registry.

Provides a lightweight stdlib-based HTTP transport, the heartbeat protocol
it routes to, and the per-request access log.
"""
from __future__ import annotations

from keepalive_registry.server.access_log import AccessLog, AccessRecord
from keepalive_registry.server.app import (
    HeartbeatRequestHandler,
    HeartbeatServer,
    create_server,
    run_server,
)
from keepalive_registry.server.protocol import HeartbeatProtocol

__all__ = [
    "AccessLog",
    "AccessRecord",
    "HeartbeatProtocol",
    "HeartbeatRequestHandler",
    "HeartbeatServer",
    "create_server",
    "run_server",
]
