"""Core session models for qrshare.

Enumerations describing the lifecycle of a sharing session, the signals
a viewer can send over its channel, and a read-only snapshot of the
session state for logging and the status endpoint.
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class SessionPhase(str, enum.Enum):
    """Lifecycle phase of the sharing session."""

    IDLE = "idle"  # Nobody has connected yet
    ACTIVE = "active"  # At least one viewer is live
    DRAINING = "draining"  # A viewer was just removed, checking for emptiness
    TERMINAL = "terminal"  # Shutdown triggered


class ShutdownReason(str, enum.Enum):
    """Why the session ended."""

    EXPLICIT_CLOSE = "explicit_close"
    ALL_DISCONNECTED = "all_disconnected"
    HEARTBEAT_TIMEOUT = "heartbeat_timeout"
    REQUESTED = "requested"


class ViewerSignal(str, enum.Enum):
    """Text payloads a viewer may send over its channel."""

    HEARTBEAT = "heartbeat"
    CLOSE = "close"

    @classmethod
    def parse(cls, payload: str | None) -> ViewerSignal | None:
        """Classify a raw payload, returning None for anything unrecognized."""
        if payload is None:
            return None
        try:
            return cls(payload)
        except ValueError:
            return None


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------


class SessionSnapshot(BaseModel):
    """Point-in-time view of the session state."""

    model_config = ConfigDict(frozen=True)

    phase: SessionPhase
    viewer_count: int = Field(ge=0, description="Number of live viewer channels")
    ever_registered: bool = Field(
        default=False, description="Whether any viewer has connected since startup"
    )
    shutdown_reason: ShutdownReason | None = Field(default=None)
