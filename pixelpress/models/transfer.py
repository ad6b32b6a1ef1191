"""Transfer request and outcome data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from pixelpress.models.file import SelectedFile


@dataclass(frozen=True)
class TransferRequest:
    """One outbound call to the image service."""

    request_id: int
    url: str
    params: dict[str, str]
    file: SelectedFile
    field_name: str = "image"
    method: str = "POST"


@dataclass(frozen=True)
class TransferSuccess:
    """Binary body returned by a 2xx response."""

    content: bytes = field(repr=False)
    byte_size: int
    content_type: str | None = None


@dataclass(frozen=True)
class TransferFailure:
    """Service or connectivity failure of a transfer."""

    message: str
    status_code: int | None = None


TransferOutcome = Union[TransferSuccess, TransferFailure]
