"""ClientAgent — registers with a heartbeat registry and keeps the identity alive.

The agent asks ``/get-id`` for an identity once, then calls
``/keep-alive/<identity>`` on a fixed interval. Network errors are retried
on the next interval with the same identity. A 401 means the registry no
longer knows the identity; the agent records that and stops renewing
rather than registering again.
"""
from __future__ import annotations

import logging
import threading
import urllib.error
import urllib.parse
import urllib.request
from enum import Enum

from keepalive_registry.config import AgentSettings

logger = logging.getLogger(__name__)


class AgentState(str, Enum):
    UNREGISTERED = "unregistered"
    LIVE = "live"


class RenewalResult(str, Enum):
    """Outcome of one keep-alive call."""

    OK = "ok"
    REJECTED = "rejected"
    FAILED = "failed"
    TRANSPORT_ERROR = "transport_error"


class RegistrationError(RuntimeError):
    """Raised when the registry does not issue an identity."""


class ClientAgent:
    """Heartbeat client for one registry.

    Parameters
    ----------
    settings:
        Server URL, renewal interval and request timeout.
    opener:
        Optional urllib opener. Defaults to one that bypasses proxies.

    Example
    -------
    ::

        agent = ClientAgent(AgentSettings(server_url="http://localhost:8000/"))
        agent.register()
        agent.run()          # blocks, renewing every 30s
    """

    def __init__(
        self,
        settings: AgentSettings | None = None,
        opener: urllib.request.OpenerDirector | None = None,
    ) -> None:
        self._settings = settings or AgentSettings()
        self._opener = opener or urllib.request.build_opener(urllib.request.ProxyHandler({}))
        self._identity: str | None = None
        self._state = AgentState.UNREGISTERED

    @property
    def identity(self) -> str | None:
        return self._identity

    @property
    def state(self) -> AgentState:
        return self._state

    @property
    def settings(self) -> AgentSettings:
        return self._settings

    def register(self) -> str:
        """Obtain a new identity from ``/get-id``.

        Raises
        ------
        RegistrationError
            On a non-200 response or a transport failure.
        """
        url = self._settings.server_url + "get-id"
        logger.info("Connecting to server at %s", self._settings.server_url)
        try:
            with self._opener.open(url, timeout=self._settings.timeout) as resp:
                body = resp.read().decode("utf-8").strip()
                status = resp.status
        except urllib.error.HTTPError as exc:
            raise RegistrationError(f"Failed to get ID with status code: {exc.code}") from exc
        except (urllib.error.URLError, OSError) as exc:
            raise RegistrationError(f"Failed to reach {url}: {exc}") from exc

        if status != 200 or not body:
            raise RegistrationError(f"Failed to get ID with status code: {status}")

        self._identity = body
        self._state = AgentState.LIVE
        logger.info("Server assigned ID: %s", body)
        return body

    def renew(self) -> RenewalResult:
        """Send one keep-alive for the current identity."""
        if self._identity is None or self._state is not AgentState.LIVE:
            raise RuntimeError("Agent is not registered; call register() first.")

        url = self._settings.server_url + "keep-alive/" + urllib.parse.quote(self._identity)
        try:
            with self._opener.open(url, timeout=self._settings.timeout) as resp:
                status = resp.status
        except urllib.error.HTTPError as exc:
            status = exc.code
        except (urllib.error.URLError, OSError) as exc:
            logger.warning("Keep-alive for %s could not reach server: %s", self._identity, exc)
            return RenewalResult.TRANSPORT_ERROR

        if status == 200:
            logger.info("Keep-alive successful.")
            return RenewalResult.OK
        if status == 401:
            logger.error(
                "Keep-alive rejected: server no longer recognizes %s; re-registration required",
                self._identity,
            )
            self._state = AgentState.UNREGISTERED
            return RenewalResult.REJECTED
        logger.warning("Keep-alive failed with status code: %d", status)
        return RenewalResult.FAILED

    def run(self, stop: threading.Event | None = None) -> AgentState:
        """Renew every ``interval`` seconds until rejected or *stop* is set.

        Registers first if the agent holds no identity. Returns the final
        state: UNREGISTERED after a rejection, LIVE after a stop request.
        """
        stop = stop or threading.Event()
        if self._state is not AgentState.LIVE:
            self.register()

        while not stop.wait(self._settings.interval):
            if self.renew() is RenewalResult.REJECTED:
                break
        return self._state
