"""Turns successful transfers into displayable, downloadable results."""

from __future__ import annotations

import logging
import mimetypes
import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import final

from pixelpress.models.file import SelectedFile
from pixelpress.models.parameters import WorkflowParameters
from pixelpress.models.transfer import TransferSuccess
from pixelpress.models.workflow import WorkflowDefinition

logger = logging.getLogger(__name__)

BYTE_UNITS = ["Bytes", "KB", "MB", "GB"]


def format_bytes(byte_count: int, decimals: int = 2) -> str:
    """Format a byte count using base-1024 units.

    Args:
        byte_count: Non-negative number of bytes
        decimals: Maximum number of decimal digits

    Returns:
        e.g. "0 Bytes", "512 Bytes", "1.5 KB", "2.38 MB"
    """
    if byte_count < 0:
        raise ValueError(f"Byte count must not be negative, got {byte_count}")
    if byte_count == 0:
        return "0 Bytes"

    digits = max(decimals, 0)
    value = float(byte_count)
    unit_index = 0

    while value >= 1024 and unit_index < len(BYTE_UNITS) - 1:
        value /= 1024
        unit_index += 1

    text = f"{value:.{digits}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return f"{text} {BYTE_UNITS[unit_index]}"


@dataclass(frozen=True)
class SizeMetrics:
    """Size comparison between the original and the compressed image."""

    original_size: int
    compressed_size: int

    @property
    def reduction_percent(self) -> float | None:
        if self.original_size == 0:
            return None
        return (self.original_size - self.compressed_size) / self.original_size * 100

    def format_reduction(self) -> str:
        reduction = self.reduction_percent
        if reduction is None:
            return "n/a"
        return f"{reduction:.2f}%"

    def format_original(self) -> str:
        return format_bytes(self.original_size)

    def format_compressed(self) -> str:
        return format_bytes(self.compressed_size)


@final
class EphemeralResource:
    """Short-lived local copy of a binary result."""

    def __init__(self, content: bytes, suffix: str = "") -> None:
        fd, name = tempfile.mkstemp(prefix="pixelpress-", suffix=suffix)
        try:
            with os.fdopen(fd, "wb") as handle:
                _ = handle.write(content)
        except OSError:
            os.unlink(name)
            raise
        self.path = Path(name)
        self.byte_size = len(content)
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    @property
    def uri(self) -> str:
        self._ensure_alive()
        return self.path.resolve().as_uri()

    def read_bytes(self) -> bytes:
        self._ensure_alive()
        return self.path.read_bytes()

    def release(self) -> None:
        """Delete the backing file. Safe to call more than once."""
        if self._released:
            return
        self._released = True
        self.path.unlink(missing_ok=True)
        logger.debug("Released %s", self.path)

    def _ensure_alive(self) -> None:
        if self._released:
            raise RuntimeError(f"Resource {self.path} has already been released")


@dataclass
class DisplayableResult:
    """A rendered transfer result ready to be shown or saved."""

    resource: EphemeralResource
    suggested_filename: str
    metrics: SizeMetrics | None = None
    content_type: str | None = None

    @property
    def released(self) -> bool:
        return self.resource.released

    def save(self, directory: Path) -> Path:
        """Copy the result to ``directory`` under its suggested filename.

        Returns:
            Path of the saved file
        """
        directory.mkdir(parents=True, exist_ok=True)
        target = directory / self.suggested_filename
        _ = shutil.copyfile(self.resource.path, target)
        return target

    def release(self) -> None:
        self.resource.release()


class ResultRenderer:
    """Materializes successful transfers as DisplayableResults."""

    def render(
        self,
        definition: WorkflowDefinition,
        success: TransferSuccess,
        selected_file: SelectedFile,
        parameters: WorkflowParameters,
    ) -> DisplayableResult:
        """Write the response body to an ephemeral resource.

        The body is not inspected; its format is whatever the service returned.

        Args:
            definition: Workflow that produced the result
            success: The successful transfer outcome
            selected_file: The file that was submitted
            parameters: Parameters the request was built from

        Returns:
            DisplayableResult owning a fresh EphemeralResource
        """
        filename = definition.filename_for(selected_file, parameters)
        suffix = Path(filename).suffix or (
            mimetypes.guess_extension(success.content_type or "") or ""
        )
        resource = EphemeralResource(success.content, suffix=suffix)

        metrics = None
        if definition.reports_size:
            metrics = SizeMetrics(
                original_size=selected_file.byte_size,
                compressed_size=success.byte_size,
            )

        return DisplayableResult(
            resource=resource,
            suggested_filename=filename,
            metrics=metrics,
            content_type=success.content_type,
        )
