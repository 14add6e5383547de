"""Failure taxonomy for the connectivity check."""

from __future__ import annotations

LOAD_STEP = "load dotenv"
CLIENT_STEP = "new client"
PING_STEP = "ping"
DISCONNECT_STEP = "disconnect"


class ProbeFailure(Exception):
    """Base error carrying the name of the step that failed."""

    step: str = "unknown"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.step}: {self.message}"


class LoadError(ProbeFailure):
    """Dotfile is missing, unreadable or malformed."""

    step = LOAD_STEP


class ConfigError(ProbeFailure):
    """Connection URI is absent or malformed."""

    step = CLIENT_STEP


class ConnectError(ProbeFailure):
    """Initial handshake failed or the deadline elapsed during setup."""

    step = CLIENT_STEP


class ProbeError(ProbeFailure):
    """Liveness probe failed."""

    step = PING_STEP


class DisconnectError(ProbeFailure):
    """Graceful shutdown failed."""

    step = DISCONNECT_STEP
