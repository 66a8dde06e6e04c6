"""Configures a desktop automation workflow that launches qrshare.

The workflow template (for example the document of a macOS Automator
"Share via QR" quick action) contains placeholders for the interpreter
and the ``qrshare`` executable. This module fills them in place so the
workflow can run qrshare on the selected file.
"""

from __future__ import annotations

import logging
import shutil
import sys
from pathlib import Path

from qrshare.errors import WorkflowConfigError

logger = logging.getLogger(__name__)

PYTHON_PLACEHOLDER = "{{PYTHON_PATH}}"
QRSHARE_PLACEHOLDER = "{{QRSHARE_PATH}}"

# Where an Automator bundle keeps the document to patch
WORKFLOW_DOCUMENT = Path("Contents") / "document.wflow"


def find_qrshare_executable() -> Path:
    """Locate the installed ``qrshare`` console script.

    Raises:
        WorkflowConfigError: If no executable can be found.
    """
    found = shutil.which("qrshare")
    if found:
        return Path(found)
    bin_dir = "Scripts" if sys.platform == "win32" else "bin"
    for candidate in (
        Path(sys.prefix) / bin_dir / "qrshare",
        Path.home() / ".local" / "bin" / "qrshare",
    ):
        if candidate.is_file():
            return candidate
    raise WorkflowConfigError(
        "qrshare executable not found. Install the package first (pip install qrshare)."
    )


def resolve_template(path: Path | str) -> Path:
    """Accept either a workflow bundle directory or the document itself."""
    path = Path(path)
    if path.is_dir():
        path = path / WORKFLOW_DOCUMENT
    if not path.is_file():
        raise WorkflowConfigError(f"Workflow template not found: {path}")
    return path


def configure_workflow(
    template: Path | str,
    qrshare_path: Path | str | None = None,
    python_path: Path | str | None = None,
) -> Path:
    """Replace the placeholders in the workflow template.

    Args:
        template: Workflow bundle directory or document file.
        qrshare_path: Path substituted for {{QRSHARE_PATH}}. Located
                      automatically if not given.
        python_path: Path substituted for {{PYTHON_PATH}}. Defaults to
                     the running interpreter.

    Returns:
        The path of the document that was written.

    Raises:
        WorkflowConfigError: If the template or the executable is missing,
                             or the template has no placeholders.
    """
    document = resolve_template(template)
    qrshare_path = Path(qrshare_path) if qrshare_path else find_qrshare_executable()
    python_path = Path(python_path) if python_path else Path(sys.executable)

    content = document.read_text(encoding="utf-8")
    if PYTHON_PLACEHOLDER not in content and QRSHARE_PLACEHOLDER not in content:
        raise WorkflowConfigError(f"No placeholders to replace in {document}")

    content = content.replace(PYTHON_PLACEHOLDER, str(python_path))
    content = content.replace(QRSHARE_PLACEHOLDER, str(qrshare_path))
    document.write_text(content, encoding="utf-8")

    logger.info("Configured workflow %s", document)
    logger.info("Python path: %s", python_path)
    logger.info("qrshare path: %s", qrshare_path)
    return document
