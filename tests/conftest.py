"""Shared fixtures for the keepalive-registry test suite."""
from __future__ import annotations

import threading
from collections.abc import Iterator

import pytest

from keepalive_registry.registry.client_registry import ClientRegistry
from keepalive_registry.server.access_log import AccessLog
from keepalive_registry.server.app import HeartbeatServer, create_server


class ManualClock:
    """Monotonic clock that only moves when a test advances it."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture()
def registry(clock: ManualClock) -> ClientRegistry:
    return ClientRegistry(clock=clock)


@pytest.fixture()
def access_log() -> AccessLog:
    return AccessLog()


@pytest.fixture()
def live_server(registry: ClientRegistry, access_log: AccessLog) -> Iterator[HeartbeatServer]:
    """A real HTTP server on an ephemeral localhost port."""
    server = create_server(registry, access_log, host="127.0.0.1", port=0)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield server
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)


@pytest.fixture()
def base_url(live_server: HeartbeatServer) -> str:
    return f"http://127.0.0.1:{live_server.server_port}/"
