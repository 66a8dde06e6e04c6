"""Tests for the automation workflow installer."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from qrshare import automation
from qrshare.automation import configure_workflow, find_qrshare_executable
from qrshare.errors import WorkflowConfigError

TEMPLATE = (
    "<plist><string>{{PYTHON_PATH}} -m qrshare.cli share \"$1\"</string>"
    "<string>{{QRSHARE_PATH}}</string></plist>"
)


@pytest.fixture
def bundle(tmp_path: Path) -> Path:
    root = tmp_path / "Share via QR.workflow"
    document = root / "Contents" / "document.wflow"
    document.parent.mkdir(parents=True)
    document.write_text(TEMPLATE)
    return root


class TestConfigureWorkflow:
    def test_replaces_placeholders_in_bundle(self, bundle: Path) -> None:
        document = configure_workflow(
            bundle, qrshare_path="/opt/bin/qrshare", python_path="/usr/bin/python3"
        )
        content = document.read_text()
        assert document == bundle / "Contents" / "document.wflow"
        assert "/usr/bin/python3 -m qrshare.cli" in content
        assert "<string>/opt/bin/qrshare</string>" in content
        assert "{{" not in content

    def test_accepts_document_path(self, bundle: Path) -> None:
        document = bundle / "Contents" / "document.wflow"
        assert configure_workflow(document, qrshare_path="/q", python_path="/p") == document

    def test_locates_executable_when_not_given(self, bundle: Path) -> None:
        with patch.object(automation, "find_qrshare_executable", return_value=Path("/found/qrshare")):
            document = configure_workflow(bundle, python_path="/p")
        assert "/found/qrshare" in document.read_text()

    def test_missing_template(self, tmp_path: Path) -> None:
        with pytest.raises(WorkflowConfigError, match="not found"):
            configure_workflow(tmp_path / "Missing.workflow", qrshare_path="/q")

    def test_already_configured_template(self, bundle: Path) -> None:
        configure_workflow(bundle, qrshare_path="/q", python_path="/p")
        with pytest.raises(WorkflowConfigError, match="No placeholders"):
            configure_workflow(bundle, qrshare_path="/q", python_path="/p")


class TestFindExecutable:
    def test_uses_path_lookup(self) -> None:
        with patch.object(automation.shutil, "which", return_value="/usr/local/bin/qrshare"):
            assert find_qrshare_executable() == Path("/usr/local/bin/qrshare")

    def test_not_installed(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(automation.sys, "prefix", str(tmp_path / "venv"))
        monkeypatch.setenv("HOME", str(tmp_path / "home"))
        with patch.object(automation.shutil, "which", return_value=None):
            with pytest.raises(WorkflowConfigError, match="not found"):
                find_qrshare_executable()
