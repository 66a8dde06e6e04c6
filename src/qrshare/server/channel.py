"""WebSocket adapter for the session engine's ViewerChannel interface."""

from __future__ import annotations

import asyncio
import itertools
import logging

from fastapi import WebSocket
from starlette.websockets import WebSocketState

from qrshare.session.base import ViewerChannel

logger = logging.getLogger(__name__)

_ids = itertools.count(1)


class WebSocketChannel(ViewerChannel):
    """A viewer connected over a WebSocket."""

    def __init__(self, websocket: WebSocket) -> None:
        self._websocket = websocket
        client = websocket.client
        peer = f"{client.host}:{client.port}" if client else "unknown"
        self._channel_id = f"ws-{next(_ids)}@{peer}"
        self._close_task: asyncio.Task[None] | None = None

    @property
    def channel_id(self) -> str:
        return self._channel_id

    def request_close(self) -> None:
        """Schedule a close of the WebSocket without waiting for it."""
        if self._close_task is not None:
            return
        if self._websocket.application_state == WebSocketState.DISCONNECTED:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running loop, cannot close %s", self._channel_id)
            return
        self._close_task = loop.create_task(self._close())

    async def wait_closed(self) -> None:
        """Wait for a close scheduled by request_close(), if any."""
        if self._close_task is not None:
            await self._close_task

    async def _close(self) -> None:
        try:
            await self._websocket.close(code=1000)
        except Exception as e:
            logger.debug("Closing %s failed: %s", self._channel_id, e)
