"""AccessLog — append-only JSONL record of every handled HTTP request.

Each request the transport answers is appended as a single JSON line with
the client origin, timestamp, method, path, protocol version and status.
If no file path is configured the records go to an in-memory buffer that
can be drained via :meth:`AccessLog.drain_buffer`.
"""
from __future__ import annotations

import datetime
import json
import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class AccessRecord:
    """One handled request.

    Parameters
    ----------
    origin:
        Client network address.
    method:
        HTTP method, e.g. ``"GET"``.
    path:
        Request target as received.
    version:
        Protocol version string, e.g. ``"HTTP/1.1"``.
    status:
        Status code sent back to the client.
    timestamp:
        Local datetime the request was handled. Defaults to now.
    """

    origin: str
    method: str
    path: str
    version: str
    status: int
    timestamp: datetime.datetime = field(
        default_factory=lambda: datetime.datetime.now().astimezone()
    )

    def to_dict(self) -> dict[str, object]:
        """Serialize to a plain dictionary suitable for JSON encoding."""
        return {
            "timestamp": self.timestamp.isoformat(timespec="seconds"),
            "origin": self.origin,
            "method": self.method,
            "path": self.path,
            "version": self.version,
            "status": self.status,
        }


class AccessLog:
    """Thread-safe access log sink.

    Parameters
    ----------
    log_path:
        Path to the JSONL file. Parent directories are created. If None,
        records are buffered in memory only.
    """

    def __init__(self, log_path: Path | None = None) -> None:
        self._log_path = log_path
        self._buffer: list[str] = []
        self._lock = threading.Lock()

        if log_path is not None:
            log_path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def log_path(self) -> Path | None:
        return self._log_path

    def record(self, entry: AccessRecord) -> None:
        """Append *entry*. A failed file write is logged, never raised."""
        line = json.dumps(entry.to_dict(), separators=(",", ":"))
        with self._lock:
            if self._log_path is None:
                self._buffer.append(line)
                return
            try:
                with self._log_path.open("a", encoding="utf-8") as fh:
                    fh.write(line + "\n")
            except OSError as exc:
                logger.error("Unable to write access log %s: %s", self._log_path, exc)

    def drain_buffer(self) -> list[str]:
        """Return and clear the in-memory buffer, oldest first."""
        with self._lock:
            lines = list(self._buffer)
            self._buffer.clear()
        return lines

    def read_log(self, tail: int | None = None) -> list[dict[str, object]]:
        """Read records back from the file (or the buffer if there is no file).

        Parameters
        ----------
        tail:
            If provided, return only the last *tail* records.
        """
        with self._lock:
            if self._log_path is None or not self._log_path.exists():
                lines = list(self._buffer)
            else:
                lines = self._log_path.read_text(encoding="utf-8").splitlines()

        parsed: list[dict[str, object]] = []
        for line in lines:
            stripped = line.strip()
            if not stripped:
                continue
            try:
                parsed.append(json.loads(stripped))
            except json.JSONDecodeError:
                continue

        if tail is not None:
            return parsed[-tail:]
        return parsed
