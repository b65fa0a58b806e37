"""Client side of the heartbeat protocol."""
from __future__ import annotations

from keepalive_registry.agent.client import (
    AgentState,
    ClientAgent,
    RegistrationError,
    RenewalResult,
)

__all__ = ["AgentState", "ClientAgent", "RegistrationError", "RenewalResult"]
