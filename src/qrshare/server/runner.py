"""Runs the share server until the session engine says the share is over."""

from __future__ import annotations

import asyncio
import logging

import uvicorn
from fastapi import FastAPI

from qrshare.config.settings import ServerConfig
from qrshare.session.engine import SessionEngine
from qrshare.session.models import ShutdownReason

logger = logging.getLogger(__name__)


class ShareServer:
    """Wraps a uvicorn server whose lifetime is bound to a SessionEngine.

    When the engine shuts down, the server is asked to exit; uvicorn then
    closes the remaining connections and ``serve()`` returns normally.
    """

    def __init__(self, app: FastAPI, engine: SessionEngine, config: ServerConfig) -> None:
        self._engine = engine
        self._server = uvicorn.Server(
            uvicorn.Config(
                app,
                host=config.host,
                port=config.port,
                ssl_certfile=config.ssl_certfile if config.tls_enabled else None,
                ssl_keyfile=config.ssl_keyfile if config.tls_enabled else None,
                timeout_graceful_shutdown=config.graceful_shutdown_timeout,
                log_config=None,
            )
        )
        engine.add_shutdown_callback(self._on_session_end)

    @property
    def should_exit(self) -> bool:
        return self._server.should_exit

    def _on_session_end(self, reason: ShutdownReason) -> None:
        logger.info("Stopping server (%s)", reason.value)
        self._server.should_exit = True

    async def serve(self) -> None:
        try:
            await self._server.serve()
        finally:
            # Covers Ctrl+C and other external stops.
            self._engine.shutdown(ShutdownReason.REQUESTED)

    def run(self) -> None:
        """Block until the share session is over."""
        asyncio.run(self.serve())
