"""Abstract interface for a viewer's persistent channel.

The session engine only needs two things from a connection: a stable
identity to key its registry with, and a way to ask the transport to
drop the connection when the viewer has gone quiet. Everything else
about the transport (WebSocket framing, the HTTP upgrade) stays in
the server package.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class ViewerChannel(ABC):
    """One connected viewer's persistent connection.

    Instances are hashed by identity, so each connection is its own
    registry key for as long as it lives.
    """

    @property
    @abstractmethod
    def channel_id(self) -> str:
        """Short human-readable identifier, used in log messages."""
        ...

    @abstractmethod
    def request_close(self) -> None:
        """Ask the transport to close this connection.

        Fire-and-forget: must not block and must not raise. The engine
        does not wait for the close to complete.
        """
        ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.channel_id}>"
