"""Workflow definitions for the image service operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from pixelpress.models.file import SelectedFile
from pixelpress.models.parameters import (
    CompressParameters,
    ConvertParameters,
    FlipParameters,
    ResizeParameters,
    RotateParameters,
    WorkflowParameters,
)


@dataclass(frozen=True)
class WorkflowDefinition:
    """Everything that differs between two workflow instances."""

    name: str
    endpoint: str
    default_parameters: WorkflowParameters
    busy_caption: str
    submit_label: str
    failure_fallback: str
    filename_for: Callable[[SelectedFile, WorkflowParameters], str]
    reports_size: bool = False


def _compressed_filename(file: SelectedFile, _params: WorkflowParameters) -> str:
    return f"compressed-{file.name}.jpg"


def _converted_filename(file: SelectedFile, params: WorkflowParameters) -> str:
    target_format = getattr(params, "target_format", "jpeg")
    return f"converted-{file.name}.{target_format}"


def _resized_filename(file: SelectedFile, _params: WorkflowParameters) -> str:
    return f"resized-{file.name}.jpg"


def _flipped_filename(file: SelectedFile, _params: WorkflowParameters) -> str:
    return f"flipped-{file.name}.jpg"


def _rotated_filename(file: SelectedFile, _params: WorkflowParameters) -> str:
    return f"rotated-{file.name}.jpg"


COMPRESS = WorkflowDefinition(
    name="compress",
    endpoint="/api/compress",
    default_parameters=CompressParameters(),
    busy_caption="Compressing...",
    submit_label="Compress Image",
    failure_fallback="An unknown error occurred.",
    filename_for=_compressed_filename,
    reports_size=True,
)

CONVERT = WorkflowDefinition(
    name="convert",
    endpoint="/api/convert",
    default_parameters=ConvertParameters(),
    busy_caption="Converting...",
    submit_label="Convert Image",
    failure_fallback="Conversion failed.",
    filename_for=_converted_filename,
)

RESIZE = WorkflowDefinition(
    name="resize",
    endpoint="/api/resize",
    default_parameters=ResizeParameters(),
    busy_caption="Resizing...",
    submit_label="Resize Image",
    failure_fallback="Resizing failed.",
    filename_for=_resized_filename,
)

FLIP = WorkflowDefinition(
    name="flip",
    endpoint="/api/flip",
    default_parameters=FlipParameters(),
    busy_caption="Flipping...",
    submit_label="Flip Image",
    failure_fallback="Flipping failed.",
    filename_for=_flipped_filename,
)

ROTATE = WorkflowDefinition(
    name="rotate",
    endpoint="/api/rotate",
    default_parameters=RotateParameters(),
    busy_caption="Rotating...",
    submit_label="Rotate Image",
    failure_fallback="Rotation failed.",
    filename_for=_rotated_filename,
)

WORKFLOWS: dict[str, WorkflowDefinition] = {
    definition.name: definition for definition in (COMPRESS, CONVERT, RESIZE, FLIP, ROTATE)
}
