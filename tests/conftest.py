"""Shared test fixtures for the qrshare test suite.

Provides a controllable clock, fake viewer channels, a session engine
wired to both, and a small file to share.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable

import pytest

from qrshare.session.base import ViewerChannel
from qrshare.session.engine import SessionEngine
from qrshare.session.models import ShutdownReason
from qrshare.sharing import SharedFile


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakeClock:
    """A clock that only moves when told to."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def set(self, t: float) -> None:
        self.now = t


class FakeChannel(ViewerChannel):
    """A viewer channel that records close requests."""

    def __init__(self, name: str) -> None:
        self._name = name
        self.close_requests = 0

    @property
    def channel_id(self) -> str:
        return self._name

    def request_close(self) -> None:
        self.close_requests += 1


def wait_for(predicate: Callable[[], bool], timeout: float = 2.0) -> bool:
    """Poll ``predicate`` until it is true or ``timeout`` seconds pass."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


# ---------------------------------------------------------------------------
# Session Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def shutdowns() -> list[ShutdownReason]:
    """Collects every shutdown callback invocation."""
    return []


@pytest.fixture
def engine(clock: FakeClock, shutdowns: list[ShutdownReason]) -> SessionEngine:
    """An engine with the default 15s timeout on a fake clock."""
    return SessionEngine(
        stale_timeout=15.0,
        sweep_interval=5.0,
        clock=clock,
        on_shutdown=shutdowns.append,
    )


@pytest.fixture
def make_channel() -> Callable[[str], FakeChannel]:
    return FakeChannel


# ---------------------------------------------------------------------------
# File Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    path = tmp_path / "notes.txt"
    path.write_bytes(b"hello from qrshare\n")
    return path


@pytest.fixture
def shared_file(sample_file: Path) -> SharedFile:
    return SharedFile.from_path(sample_file)


@pytest.fixture
def wait_until() -> Callable[..., bool]:
    return wait_for


@pytest.fixture(autouse=True)
def _reset_qrshare_logger():
    """Drop handlers installed by setup_logging() during a test."""
    yield
    logger = logging.getLogger("qrshare")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
