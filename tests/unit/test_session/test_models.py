"""Tests for session enumerations and the snapshot model."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from qrshare.session.models import SessionPhase, SessionSnapshot, ViewerSignal


class TestViewerSignal:
    @pytest.mark.parametrize(
        ("payload", "expected"),
        [
            ("heartbeat", ViewerSignal.HEARTBEAT),
            ("close", ViewerSignal.CLOSE),
            ("HEARTBEAT", None),
            ("ping", None),
            ("", None),
            (None, None),
        ],
    )
    def test_parse(self, payload: str | None, expected: ViewerSignal | None) -> None:
        assert ViewerSignal.parse(payload) is expected


class TestSessionSnapshot:
    def test_serializes_enum_values(self) -> None:
        snap = SessionSnapshot(phase=SessionPhase.ACTIVE, viewer_count=2, ever_registered=True)
        assert snap.model_dump(mode="json") == {
            "phase": "active",
            "viewer_count": 2,
            "ever_registered": True,
            "shutdown_reason": None,
        }

    def test_negative_count_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SessionSnapshot(phase=SessionPhase.IDLE, viewer_count=-1)
