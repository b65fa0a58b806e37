"""ClientRegistry — the live set of heartbeat clients.

Maps identity tokens to ClientRecord objects. Each public operation is a
single atomic step under one lock; expected conditions (unknown identity,
nothing to remove) are reported as outcome enums rather than exceptions.
"""
from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from keepalive_registry.registry.identity import IdentityGenerator


@dataclass
class ClientRecord:
    """One registered, currently live client.

    Parameters
    ----------
    identity:
        Token issued at registration. Never changes.
    origin:
        Network address of the most recent registration or renewal.
    last_seen:
        Registry clock reading of the most recent registration or renewal.
    """

    identity: str
    origin: str
    last_seen: float


@dataclass(frozen=True)
class ClientEntry:
    """Read-only ``(identity, origin)`` pair returned by :meth:`ClientRegistry.list`."""

    identity: str
    origin: str


class RenewOutcome(str, Enum):
    SUCCESS = "success"
    UNKNOWN = "unknown"


class ExpireOutcome(str, Enum):
    REMOVED = "removed"
    KEPT = "kept"


class RemoveOutcome(str, Enum):
    REMOVED = "removed"
    NOT_FOUND = "not_found"


class IdentitySpaceExhaustedError(RuntimeError):
    """Raised when every possible identity is already held by a live client."""

    def __init__(self, capacity: int) -> None:
        super().__init__(
            f"All {capacity} identities are in use; cannot issue a new one."
        )


class ClientRegistry:
    """Thread-safe registry of live clients.

    Parameters
    ----------
    generator:
        Source of candidate identities. Defaults to an 8-character
        :class:`IdentityGenerator`.
    clock:
        Monotonic clock used for ``last_seen``. Defaults to
        :func:`time.monotonic`.

    Example
    -------
    ::

        registry = ClientRegistry()
        identity = registry.register("10.0.0.7")
        registry.renew(identity, "10.0.0.7")   # RenewOutcome.SUCCESS
    """

    def __init__(
        self,
        generator: IdentityGenerator | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._generator = generator or IdentityGenerator()
        self._clock = clock
        self._records: dict[str, ClientRecord] = {}
        self._lock = threading.Lock()

    @property
    def clock(self) -> Callable[[], float]:
        return self._clock

    @property
    def generator(self) -> IdentityGenerator:
        return self._generator

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def register(self, origin: str) -> str:
        """Issue a fresh identity for a client at *origin*.

        Candidates are drawn until one is not held by a live record; the
        check and the insert happen under the same lock acquisition.

        Returns
        -------
        str
            The newly issued identity.

        Raises
        ------
        IdentitySpaceExhaustedError
            If no unused identity remains.
        """
        with self._lock:
            if len(self._records) >= self._generator.capacity:
                raise IdentitySpaceExhaustedError(self._generator.capacity)
            identity = self._generator.generate()
            while identity in self._records:
                identity = self._generator.generate()
            self._records[identity] = ClientRecord(
                identity=identity,
                origin=origin,
                last_seen=self._clock(),
            )
            return identity

    def renew(self, identity: str, origin: str) -> RenewOutcome:
        """Refresh ``last_seen`` and ``origin`` for *identity* if it is live."""
        with self._lock:
            record = self._records.get(identity)
            if record is None:
                return RenewOutcome.UNKNOWN
            record.last_seen = max(record.last_seen, self._clock())
            record.origin = origin
            return RenewOutcome.SUCCESS

    def expire_if_stale(self, identity: str, now: float, threshold: float) -> ExpireOutcome:
        """Remove *identity* iff ``now - last_seen > threshold``.

        ``last_seen`` is read under the lock, so a renewal that wins the
        race keeps the record alive.
        """
        with self._lock:
            record = self._records.get(identity)
            if record is None or now - record.last_seen <= threshold:
                return ExpireOutcome.KEPT
            del self._records[identity]
            return ExpireOutcome.REMOVED

    def remove(self, identity: str) -> RemoveOutcome:
        """Unconditionally remove *identity*. Idempotent."""
        with self._lock:
            if self._records.pop(identity, None) is None:
                return RemoveOutcome.NOT_FOUND
            return RemoveOutcome.REMOVED

    # ------------------------------------------------------------------
    # Query
    # ------------------------------------------------------------------

    def list(self) -> list[ClientEntry]:
        """Return a snapshot of all live clients. Order is not guaranteed."""
        with self._lock:
            return [ClientEntry(r.identity, r.origin) for r in self._records.values()]

    def identities(self) -> list[str]:
        """Return a snapshot of all live identities."""
        with self._lock:
            return list(self._records)

    def last_seen(self, identity: str) -> float | None:
        """Return the ``last_seen`` reading for *identity*, or None if absent."""
        with self._lock:
            record = self._records.get(identity)
            return None if record is None else record.last_seen

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, identity: object) -> bool:
        """Support ``"a8Kq02Zx" in registry`` membership test."""
        with self._lock:
            return identity in self._records
