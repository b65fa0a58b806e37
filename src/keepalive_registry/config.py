"""Validated settings for the registry server and the client agent."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, PositiveInt, StrictInt, ValidationError, field_validator

DEFAULT_SERVER_URL = "http://localhost:8000/"


class ConfigurationError(ValueError):
    """Raised when settings fail validation. Reported before any network activity."""


class ServerSettings(BaseModel):
    """Settings for ``keepalive-registry serve``."""

    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=0, le=65535)
    reap_interval: float = Field(default=30.0, gt=0)
    stale_after: float = Field(default=120.0, ge=0)
    identity_length: PositiveInt = 8
    access_log: Optional[Path] = Path("access.log")
    shell: bool = True


class AgentSettings(BaseModel):
    """Settings for ``keepalive-registry agent``.

    ``interval`` is a whole number of seconds; zero, negative and
    fractional values are rejected.
    """

    server_url: str = DEFAULT_SERVER_URL
    interval: StrictInt = Field(default=30, gt=0)
    timeout: float = Field(default=10.0, gt=0)

    @field_validator("server_url")
    @classmethod
    def _normalise_url(cls, value: str) -> str:
        value = value.strip()
        if not value.startswith(("http://", "https://")):
            raise ValueError("server_url must start with http:// or https://")
        return value if value.endswith("/") else value + "/"


def load_server_settings(**values: object) -> ServerSettings:
    """Build :class:`ServerSettings`, wrapping validation failures."""
    try:
        return ServerSettings.model_validate(values)
    except ValidationError as exc:
        raise ConfigurationError(str(exc)) from exc


def load_agent_settings(**values: object) -> AgentSettings:
    """Build :class:`AgentSettings`, wrapping validation failures."""
    try:
        return AgentSettings.model_validate(values)
    except ValidationError as exc:
        raise ConfigurationError(str(exc)) from exc


__all__ = [
    "DEFAULT_SERVER_URL",
    "AgentSettings",
    "ConfigurationError",
    "ServerSettings",
    "load_agent_settings",
    "load_server_settings",
]
