"""FastAPI application serving a single shared file.

One listener multiplexes three kinds of request:

    WS   /ws        <- "heartbeat" | "close"   (viewer liveness channel)
    GET  /<name>    -> the shared file, as an attachment
    GET  /status    -> {"phase": "active", "viewer_count": 1, ...}
    GET  /*         -> the status page with the QR code

Channel events are handed to the SessionEngine, which decides when the
session is over.
"""

from __future__ import annotations

import asyncio
import logging
import webbrowser
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, WebSocket
from fastapi.responses import FileResponse, HTMLResponse, Response
from pydantic import BaseModel

from qrshare.server.channel import WebSocketChannel
from qrshare.session.engine import SessionEngine
from qrshare.session.models import SessionSnapshot, ViewerSignal
from qrshare.sharing import SharedFile

logger = logging.getLogger(__name__)


class StatusResponse(BaseModel):
    file_name: str
    url: str
    session: SessionSnapshot


def create_app(
    engine: SessionEngine,
    shared_file: SharedFile,
    page_html: str,
    share_url: str,
    browser_url: str | None = None,
) -> FastAPI:
    """Create the share server application.

    Args:
        engine: Session engine tracking the viewers of this share.
        shared_file: The file offered for download.
        page_html: Pre-rendered status page.
        share_url: The advertised download URL, reported by /status.
        browser_url: If set, opened in the local browser at startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        e: SessionEngine = app.state.engine
        e.start_sweeper()
        if browser_url:
            asyncio.get_running_loop().run_in_executor(None, webbrowser.open, browser_url)
        logger.info("Share server started for %s", app.state.shared_file.name)
        yield
        e.stop_sweeper()
        logger.info("Share server stopped")

    app = FastAPI(
        title="qrshare",
        description="Ephemeral local-network file share",
        version="0.1.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.engine = engine
    app.state.shared_file = shared_file

    def _download(shared: SharedFile) -> FileResponse:
        return FileResponse(
            shared.path,
            media_type="application/octet-stream",
            headers={"Content-Disposition": shared.content_disposition()},
        )

    @app.websocket("/ws")
    async def viewer_channel(websocket: WebSocket) -> None:
        e: SessionEngine = app.state.engine
        if e.is_terminal:
            await websocket.close(code=1001)
            return
        await websocket.accept()
        channel = WebSocketChannel(websocket)
        if not e.register_channel(channel):
            await channel.wait_closed()
            return
        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    break
                signal = ViewerSignal.parse(message.get("text"))
                if signal is ViewerSignal.HEARTBEAT:
                    e.record_heartbeat(channel)
                elif signal is ViewerSignal.CLOSE:
                    e.record_explicit_close(channel)
                else:
                    logger.debug("Ignoring unrecognized message from %s", channel.channel_id)
        finally:
            e.record_channel_closed(channel)

    @app.get("/status", response_model=None)
    async def status() -> StatusResponse | FileResponse:
        shared: SharedFile = app.state.shared_file
        if shared.matches("status"):
            return _download(shared)
        return StatusResponse(
            file_name=shared.name,
            url=share_url,
            session=app.state.engine.snapshot(),
        )

    @app.get("/{request_path:path}", response_model=None)
    async def file_or_page(request_path: str) -> Response:
        shared: SharedFile = app.state.shared_file
        if shared.matches(request_path):
            logger.info("Serving %s", shared.name)
            return _download(shared)
        return HTMLResponse(page_html)

    return app
