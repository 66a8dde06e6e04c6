"""Session lifecycle for qrshare.

Public API:
    SessionEngine -- Live viewer registry and shutdown decisions
    ViewerChannel -- Abstract base class for a viewer's connection
"""

from qrshare.session.base import ViewerChannel
from qrshare.session.engine import SessionEngine
from qrshare.session.models import (
    SessionPhase,
    SessionSnapshot,
    ShutdownReason,
    ViewerSignal,
)

__all__ = [
    "SessionEngine",
    "SessionPhase",
    "SessionSnapshot",
    "ShutdownReason",
    "ViewerChannel",
    "ViewerSignal",
]
