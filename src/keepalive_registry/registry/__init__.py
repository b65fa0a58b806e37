"""Client liveness registry.

Provides the ClientRegistry holding live heartbeat clients, the
IdentityGenerator that issues their tokens, and the Reaper that evicts
clients whose heartbeats stopped.

Quick start
-----------
::

    from keepalive_registry.registry import ClientRegistry, Reaper

    registry = ClientRegistry()
    reaper = Reaper(registry, interval=30, stale_after=120)
    reaper.start()

    identity = registry.register("10.0.0.7")
    registry.renew(identity, "10.0.0.7")
"""
from __future__ import annotations

from keepalive_registry.registry.client_registry import (
    ClientEntry,
    ClientRecord,
    ClientRegistry,
    ExpireOutcome,
    IdentitySpaceExhaustedError,
    RemoveOutcome,
    RenewOutcome,
)
from keepalive_registry.registry.identity import (
    IDENTITY_ALPHABET,
    IDENTITY_LENGTH,
    IdentityGenerator,
    is_valid_identity,
)
from keepalive_registry.registry.reaper import Reaper

__all__ = [
    "IDENTITY_ALPHABET",
    "IDENTITY_LENGTH",
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
]
