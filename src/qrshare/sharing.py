"""The file being shared."""

from __future__ import annotations

from pathlib import Path
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field

from qrshare.errors import SharedFileError


class SharedFile(BaseModel):
    """A single regular file offered for download."""

    model_config = ConfigDict(frozen=True)

    path: Path = Field(description="Absolute path of the file on disk")

    @classmethod
    def from_path(cls, path: Path | str) -> SharedFile:
        """Resolve ``path`` and check that it is a readable regular file.

        Raises:
            SharedFileError: If the path does not exist or is not a file.
        """
        resolved = Path(path).expanduser().resolve()
        if not resolved.exists():
            raise SharedFileError(f"File not found: {path}", path=str(path))
        if not resolved.is_file():
            raise SharedFileError(f"Not a regular file: {path}", path=str(path))
        return cls(path=resolved)

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def size(self) -> int:
        return self.path.stat().st_size

    def matches(self, request_path: str) -> bool:
        """Whether an already URL-decoded request path names this file."""
        return request_path.lstrip("/") == self.name

    def content_disposition(self) -> str:
        """Header value telling browsers to download rather than display."""
        try:
            self.name.encode("latin-1")
        except UnicodeEncodeError:
            return f"attachment; filename*=utf-8''{quote(self.name)}"
        escaped = self.name.replace("\\", "\\\\").replace('"', '\\"')
        return f'attachment; filename="{escaped}"'
