"""Exception types raised by qrshare's collaborators.

The session engine itself never raises; these cover the surrounding
glue (the shared file, the workflow installer) and are reported by the
CLI as a message plus exit status 1.
"""

from __future__ import annotations


class QrShareError(Exception):
    """Base class for qrshare errors."""


class SharedFileError(QrShareError):
    """Raised when the file to share cannot be served."""

    def __init__(self, message: str, path: str = "") -> None:
        super().__init__(message)
        self.path = path


class WorkflowConfigError(QrShareError):
    """Raised when the automation workflow template cannot be configured."""
