"""Reaper — background sweep that evicts clients whose heartbeats stopped."""
from __future__ import annotations

import logging
import threading

from keepalive_registry.registry.client_registry import ClientRegistry, ExpireOutcome

logger = logging.getLogger(__name__)

DEFAULT_SWEEP_INTERVAL: float = 30.0
DEFAULT_STALE_AFTER: float = 120.0


class Reaper:
    """Periodically removes stale records from a :class:`ClientRegistry`.

    Each sweep snapshots the live identities and checks them one at a
    time, taking the registry lock once per record, so registrations and
    renewals interleave with a long sweep. Eviction latency is bounded by
    ``stale_after + interval``.

    Parameters
    ----------
    registry:
        The registry to sweep.
    interval:
        Seconds between sweeps. Defaults to 30.
    stale_after:
        Staleness threshold in seconds. Defaults to 120.
    """

    def __init__(
        self,
        registry: ClientRegistry,
        interval: float = DEFAULT_SWEEP_INTERVAL,
        stale_after: float = DEFAULT_STALE_AFTER,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"Sweep interval must be positive, got {interval}.")
        if stale_after < 0:
            raise ValueError(f"Staleness threshold must not be negative, got {stale_after}.")
        self._registry = registry
        self._interval = interval
        self._stale_after = stale_after
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def stale_after(self) -> float:
        return self._stale_after

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def sweep(self) -> int:
        """Run one pass over the registry and return the number of evictions."""
        now = self._registry.clock()
        evicted = 0
        for identity in self._registry.identities():
            outcome = self._registry.expire_if_stale(identity, now, self._stale_after)
            if outcome is ExpireOutcome.REMOVED:
                evicted += 1
                logger.debug("Evicted stale client %s", identity)
        if evicted:
            logger.info("Sweep evicted %d stale client(s)", evicted)
        return evicted

    def start(self) -> None:
        """Start sweeping in a daemon thread."""
        if self._thread is not None:
            raise RuntimeError("Reaper has already been started.")
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="reaper", daemon=True)
        self._thread.start()
        logger.info(
            "Reaper started (interval=%ss, stale_after=%ss)", self._interval, self._stale_after
        )

    def stop(self, timeout: float | None = None) -> None:
        """Signal the sweep loop to exit and wait for it."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
            logger.info("Reaper stopped")

    def _run(self) -> None:
        while not self._stop.wait(self._interval):
            self.sweep()
