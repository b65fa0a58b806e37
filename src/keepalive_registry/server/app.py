"""HTTP transport for the heartbeat registry using stdlib http.server.

Routes:
    GET    /get-id                 — issue a new client identity
    GET    /keep-alive/{identity}  — renew a client identity
    GET    /health                 — service health check

Every response, including stdlib error responses, is written to the
access log. Each connection is served on its own thread.

Usage:
    keepalive-registry serve --port 8000
"""
from __future__ import annotations

import logging
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

from keepalive_registry.config import ServerSettings
from keepalive_registry.registry.client_registry import (
    ClientRegistry,
    IdentitySpaceExhaustedError,
)
from keepalive_registry.registry.identity import IdentityGenerator
from keepalive_registry.registry.reaper import Reaper
from keepalive_registry.server.access_log import AccessLog, AccessRecord
from keepalive_registry.server.protocol import HeartbeatProtocol
from keepalive_registry.shell.operator import OperatorShell

logger = logging.getLogger(__name__)


class HeartbeatServer(ThreadingHTTPServer):
    """ThreadingHTTPServer carrying the protocol and access log its handlers use."""

    daemon_threads = True
    allow_reuse_port = False

    def __init__(
        self,
        server_address: tuple[str, int],
        protocol: HeartbeatProtocol,
        access_log: AccessLog,
    ) -> None:
        self.protocol = protocol
        self.access_log = access_log
        super().__init__(server_address, HeartbeatRequestHandler)


class HeartbeatRequestHandler(BaseHTTPRequestHandler):
    """HTTP request handler for the heartbeat registry.

    Every method is routed through :class:`HeartbeatProtocol`; methods other
    than GET are answered with 404 by the protocol itself.
    """

    server: HeartbeatServer

    def log_message(self, format: str, *args: object) -> None:
        """Override to route stdlib diagnostics through the Python logging system."""
        logger.debug(format, *args)

    def log_request(self, code: int | str = "-", size: int | str = "-") -> None:
        """Record one access log entry per response sent."""
        self.server.access_log.record(
            AccessRecord(
                origin=self.client_address[0],
                method=self.command or "-",
                path=self.path if hasattr(self, "path") else "-",
                version=self.request_version,
                status=int(code) if isinstance(code, int) else 0,
            )
        )

    def do_GET(self) -> None:
        self._dispatch()

    def do_HEAD(self) -> None:
        self._dispatch(include_body=False)

    def do_POST(self) -> None:
        self._dispatch()

    def do_PUT(self) -> None:
        self._dispatch()

    def do_DELETE(self) -> None:
        self._dispatch()

    def do_PATCH(self) -> None:
        self._dispatch()

    # ── Helpers ───────────────────────────────────────────────────────────────

    def _dispatch(self, include_body: bool = True) -> None:
        try:
            status, body = self.server.protocol.dispatch(
                self.command, self.path, self.client_address[0]
            )
        except IdentitySpaceExhaustedError:
            logger.exception("Registration failed for %s", self.client_address[0])
            status, body = 500, "Internal Server Error"
        self._send_text(status, body, include_body)

    def _send_text(self, status: int, text: str, include_body: bool = True) -> None:
        """Send *text* as a plain-text response with *status*."""
        body = text.encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "text/plain; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        if include_body:
            self.wfile.write(body)


def create_server(
    registry: ClientRegistry,
    access_log: AccessLog | None = None,
    host: str = "0.0.0.0",
    port: int = 8000,
) -> HeartbeatServer:
    """Create (but do not start) the heartbeat HTTP server.

    Parameters
    ----------
    registry:
        Registry the server's protocol operates on.
    access_log:
        Sink for per-request records. Defaults to an in-memory log.
    host:
        Bind address (default ``"0.0.0.0"``, all interfaces).
    port:
        TCP port to listen on (default 8000; 0 picks a free port).

    Raises
    ------
    OSError
        If the address cannot be bound.
    """
    server = HeartbeatServer(
        (host, port),
        protocol=HeartbeatProtocol(registry),
        access_log=access_log or AccessLog(),
    )
    logger.info("heartbeat registry created at http://%s:%d", host, server.server_port)
    return server


def run_server(settings: ServerSettings) -> None:
    """Run the registry server, its reaper and the operator shell (blocking).

    Raises
    ------
    OSError
        If the listening socket cannot be bound.
    """
    registry = ClientRegistry(generator=IdentityGenerator(length=settings.identity_length))
    access_log = AccessLog(settings.access_log)
    server = create_server(registry, access_log, host=settings.host, port=settings.port)

    reaper = Reaper(registry, interval=settings.reap_interval, stale_after=settings.stale_after)
    shell_stop = threading.Event()
    reaper.start()
    if settings.shell:
        shell = OperatorShell(registry, identity_length=settings.identity_length)
        threading.Thread(
            target=shell.run, kwargs={"stop": shell_stop}, name="operator-shell", daemon=True
        ).start()

    logger.info("Serving heartbeat registry on http://%s:%d", settings.host, server.server_port)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down heartbeat registry.")
    finally:
        shell_stop.set()
        reaper.stop()
        server.server_close()
