"""Selected file data model."""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class SelectedFile:
    """A local image chosen by the user."""

    name: str
    byte_size: int
    path: Path

    @property
    def mime_type(self) -> str:
        return mimetypes.guess_type(self.name)[0] or "application/octet-stream"
