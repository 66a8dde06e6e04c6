"""Session lifecycle engine.

Tracks the live viewer channels of a sharing session and decides when
the session is over:

- an explicit ``close`` from any viewer ends the session immediately;
- otherwise the session ends when the last live viewer disappears,
  either because its connection dropped or because it stopped sending
  heartbeats and was evicted by the periodic sweep.

The engine never terminates the process itself. ``shutdown()`` fires the
registered callbacks and sets the ``finished`` event; the server runner
turns that into a normal process exit.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from typing import Callable

from qrshare.session.base import ViewerChannel
from qrshare.session.models import SessionPhase, SessionSnapshot, ShutdownReason

logger = logging.getLogger(__name__)

DEFAULT_STALE_TIMEOUT = 15.0
DEFAULT_SWEEP_INTERVAL = 5.0

ShutdownCallback = Callable[[ShutdownReason], None]


class SessionEngine:
    """Owns the live-channel registry for a single sharing session.

    All operations are synchronous, in-memory and never raise to the
    caller. A re-entrant lock serializes registry mutations; on the
    server they are additionally serialized by running on the event loop.

    Usage::

        engine = SessionEngine(on_shutdown=lambda reason: server.stop())
        engine.start_sweeper()          # inside a running event loop
        engine.register_channel(channel)
        engine.record_heartbeat(channel)
        engine.record_channel_closed(channel)  # last one -> shutdown
    """

    def __init__(
        self,
        stale_timeout: float = DEFAULT_STALE_TIMEOUT,
        sweep_interval: float = DEFAULT_SWEEP_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
        on_shutdown: ShutdownCallback | None = None,
    ) -> None:
        if stale_timeout <= 0:
            raise ValueError("stale_timeout must be positive")
        if sweep_interval <= 0:
            raise ValueError("sweep_interval must be positive")
        self._stale_timeout = stale_timeout
        self._sweep_interval = sweep_interval
        self._clock = clock
        self._registry: dict[ViewerChannel, float] = {}
        self._lock = threading.RLock()
        self._phase = SessionPhase.IDLE
        self._ever_registered = False
        self._shutdown_reason: ShutdownReason | None = None
        self._callbacks: list[ShutdownCallback] = []
        self._sweep_task: asyncio.Task[None] | None = None
        self._finished = threading.Event()
        if on_shutdown is not None:
            self._callbacks.append(on_shutdown)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def stale_timeout(self) -> float:
        return self._stale_timeout

    @property
    def sweep_interval(self) -> float:
        return self._sweep_interval

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def viewer_count(self) -> int:
        return len(self._registry)

    @property
    def ever_registered(self) -> bool:
        return self._ever_registered

    @property
    def is_terminal(self) -> bool:
        return self._phase is SessionPhase.TERMINAL

    @property
    def shutdown_reason(self) -> ShutdownReason | None:
        return self._shutdown_reason

    @property
    def finished(self) -> threading.Event:
        """Set once, when the session reaches its terminal phase."""
        return self._finished

    @property
    def sweeper_running(self) -> bool:
        return self._sweep_task is not None and not self._sweep_task.done()

    def __contains__(self, channel: object) -> bool:
        return channel in self._registry

    def last_heartbeat(self, channel: ViewerChannel) -> float | None:
        """Timestamp of the channel's last heartbeat, or None if not live."""
        return self._registry.get(channel)

    def snapshot(self) -> SessionSnapshot:
        with self._lock:
            return SessionSnapshot(
                phase=self._phase,
                viewer_count=len(self._registry),
                ever_registered=self._ever_registered,
                shutdown_reason=self._shutdown_reason,
            )

    def add_shutdown_callback(self, callback: ShutdownCallback) -> None:
        """Register a callable invoked once with the reason at shutdown."""
        self._callbacks.append(callback)

    # ------------------------------------------------------------------
    # Channel events
    # ------------------------------------------------------------------

    def register_channel(self, channel: ViewerChannel) -> bool:
        """Admit a newly upgraded channel.

        Returns:
            False if the session is already terminal; the channel is then
            asked to close and is not admitted.
        """
        with self._lock:
            if self.is_terminal:
                rejected = True
            else:
                rejected = False
                self._registry[channel] = self._clock()
                self._ever_registered = True
                self._phase = SessionPhase.ACTIVE
                count = len(self._registry)
        if rejected:
            logger.info("Rejecting viewer %s, session is shutting down", channel.channel_id)
            channel.request_close()
            return False
        logger.info("Viewer %s connected (%d live)", channel.channel_id, count)
        return True

    def record_heartbeat(self, channel: ViewerChannel) -> None:
        """Refresh the channel's heartbeat; unknown channels are ignored."""
        with self._lock:
            if self.is_terminal or channel not in self._registry:
                logger.debug("Ignoring heartbeat from unknown viewer %s", channel.channel_id)
                return
            self._registry[channel] = self._clock()

    def record_explicit_close(self, channel: ViewerChannel) -> None:
        """A viewer announced it is leaving: the whole session ends now."""
        with self._lock:
            if self.is_terminal or channel not in self._registry:
                logger.debug("Ignoring close from unknown viewer %s", channel.channel_id)
                return
            del self._registry[channel]
        logger.info("Viewer %s closed the page, shutting down", channel.channel_id)
        self.shutdown(ShutdownReason.EXPLICIT_CLOSE)

    def record_channel_closed(self, channel: ViewerChannel) -> None:
        """The channel's transport connection dropped."""
        with self._lock:
            if self.is_terminal or channel not in self._registry:
                return
            del self._registry[channel]
            remaining = len(self._registry)
        logger.info("Viewer %s disconnected (%d live)", channel.channel_id, remaining)
        self._evaluate_emptiness(ShutdownReason.ALL_DISCONNECTED)

    # ------------------------------------------------------------------
    # Liveness sweep
    # ------------------------------------------------------------------

    def sweep_stale_channels(self) -> list[ViewerChannel]:
        """Evict every channel whose last heartbeat is at least stale_timeout old.

        Returns:
            The evicted channels, each of which has been asked to close.
        """
        with self._lock:
            if self.is_terminal:
                return []
            now = self._clock()
            evicted = [
                channel
                for channel, last in self._registry.items()
                if now - last >= self._stale_timeout
            ]
            for channel in evicted:
                del self._registry[channel]

        for channel in evicted:
            logger.info("Viewer %s heartbeat timed out, closing connection", channel.channel_id)
            channel.request_close()

        if evicted:
            self._evaluate_emptiness(ShutdownReason.HEARTBEAT_TIMEOUT)
        return evicted

    def start_sweeper(self) -> None:
        """Start the periodic sweep on the running event loop."""
        if self.sweeper_running or self.is_terminal:
            return
        self._sweep_task = asyncio.get_running_loop().create_task(
            self._sweep_loop(), name="qrshare-sweeper"
        )
        logger.debug("Sweeper started (every %.1fs)", self._sweep_interval)

    def stop_sweeper(self) -> None:
        """Cancel the periodic sweep. Safe to call more than once."""
        task = self._sweep_task
        self._sweep_task = None
        if task is None or task.done():
            return
        loop = task.get_loop()
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is loop:
            task.cancel()
        elif not loop.is_closed():
            loop.call_soon_threadsafe(task.cancel)
        logger.debug("Sweeper stopped")

    async def _sweep_loop(self) -> None:
        # The next tick is only scheduled after the current sweep returns.
        while not self.is_terminal:
            await asyncio.sleep(self._sweep_interval)
            self.sweep_stale_channels()

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    def shutdown(self, reason: ShutdownReason = ShutdownReason.REQUESTED) -> bool:
        """End the session. Only the first call has any effect.

        Returns:
            True if this call performed the shutdown.
        """
        with self._lock:
            if self.is_terminal:
                return False
            self.stop_sweeper()
            self._phase = SessionPhase.TERMINAL
            self._shutdown_reason = reason
            callbacks = list(self._callbacks)

        logger.info("Session finished (%s)", reason.value)
        self._finished.set()
        for callback in callbacks:
            try:
                callback(reason)
            except Exception as e:
                logger.error("Shutdown callback %r failed: %s", callback, e)
        return True

    def _evaluate_emptiness(self, reason: ShutdownReason) -> None:
        with self._lock:
            if self.is_terminal:
                return
            self._phase = SessionPhase.DRAINING
            if self._registry:
                self._phase = SessionPhase.ACTIVE
                return
        logger.info("No live viewers left")
        self.shutdown(reason)
