"""Heartbeat protocol — maps transport requests onto registry operations.

Each handler returns a tuple of (status_code, body). The HTTP handler in
app.py sends the body as plain text; nothing here touches sockets, so the
whole contract can be exercised without a server.
"""
from __future__ import annotations

import logging
import re
import urllib.parse

from keepalive_registry.registry.client_registry import ClientRegistry, RenewOutcome

logger = logging.getLogger(__name__)

OK_BODY = "OK"
UNAUTHORIZED_BODY = "Unauthorized"
NOT_FOUND_BODY = "404"

# URL pattern for /keep-alive/{identity}
_KEEP_ALIVE_PATTERN = re.compile(r"^/keep-alive/([^/]+)$")


class HeartbeatProtocol:
    """Server side of the register / keep-alive / health contract.

    Parameters
    ----------
    registry:
        The registry every request operates on.
    """

    def __init__(self, registry: ClientRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> ClientRegistry:
        return self._registry

    def dispatch(self, method: str, target: str, origin: str) -> tuple[int, str]:
        """Route one request.

        Only ``GET`` is served. The query string is ignored and a single
        trailing slash is tolerated; anything unroutable yields 404.
        """
        if method != "GET":
            return self.handle_not_found()

        path = urllib.parse.urlparse(target).path
        if path != "/" and path.endswith("/"):
            path = path[:-1]

        if path == "/get-id":
            return self.handle_get_id(origin)
        if path == "/health":
            return self.handle_health()

        match = _KEEP_ALIVE_PATTERN.match(path)
        if match:
            identity = urllib.parse.unquote(match.group(1))
            return self.handle_keep_alive(identity, origin)
        return self.handle_not_found()

    def handle_get_id(self, origin: str) -> tuple[int, str]:
        """Handle GET /get-id: issue a new identity."""
        identity = self._registry.register(origin)
        logger.info("Issued identity %s to %s", identity, origin)
        return 200, identity

    def handle_keep_alive(self, identity: str, origin: str) -> tuple[int, str]:
        """Handle GET /keep-alive/{identity}.

        Returns 200 for a live identity and 401 for one the registry does
        not know (never issued, evicted or removed). A 401 tells the client
        it must register again; retrying the same identity cannot succeed.
        """
        outcome = self._registry.renew(identity, origin)
        if outcome is RenewOutcome.SUCCESS:
            logger.debug("Keep-alive from %s (%s)", identity, origin)
            return 200, OK_BODY
        logger.warning("Keep-alive for unknown identity %s from %s", identity, origin)
        return 401, UNAUTHORIZED_BODY

    def handle_health(self) -> tuple[int, str]:
        """Handle GET /health. Independent of any client identity."""
        return 200, OK_BODY

    def handle_not_found(self) -> tuple[int, str]:
        return 404, NOT_FOUND_BODY


__all__ = [
    "HeartbeatProtocol",
    "NOT_FOUND_BODY",
    "OK_BODY",
    "UNAUTHORIZED_BODY",
]
