"""Workflow parameter data models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

DEFAULT_QUALITY = 75
MIN_QUALITY = 1
MAX_QUALITY = 100

SUPPORTED_TARGET_FORMATS = ("jpeg", "png")
DEFAULT_TARGET_FORMAT = "jpeg"


@dataclass(frozen=True)
class CompressParameters:
    """JPEG quality level for the compress workflow."""

    quality: int = DEFAULT_QUALITY

    def __post_init__(self) -> None:
        if not MIN_QUALITY <= self.quality <= MAX_QUALITY:
            raise ValueError(
                f"Quality must be between {MIN_QUALITY} and {MAX_QUALITY}, got {self.quality}"
            )

    def query_params(self) -> dict[str, str]:
        return {"quality": str(self.quality)}


@dataclass(frozen=True)
class ConvertParameters:
    """Target encoding for the convert workflow."""

    target_format: str = DEFAULT_TARGET_FORMAT

    def __post_init__(self) -> None:
        if self.target_format not in SUPPORTED_TARGET_FORMATS:
            raise ValueError(
                f"Unsupported target format '{self.target_format}'. "
                + f"Supported formats: {', '.join(SUPPORTED_TARGET_FORMATS)}"
            )

    def query_params(self) -> dict[str, str]:
        return {"format": self.target_format}


@dataclass(frozen=True)
class ResizeParameters:
    """Target dimensions for the resize workflow.

    A dimension of 0 lets the service derive it from the aspect ratio. With
    both at 0 the service falls back to its default width.
    """

    width: int = 0
    height: int = 0

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(
                f"Dimensions must not be negative, got {self.width}x{self.height}"
            )

    def query_params(self) -> dict[str, str]:
        return {"width": str(self.width), "height": str(self.height)}


SUPPORTED_FLIP_DIRECTIONS = ("horizontal", "vertical")
SUPPORTED_ROTATION_ANGLES = (90, 180, 270)


@dataclass(frozen=True)
class FlipParameters:
    """Mirror axis for the flip workflow."""

    direction: str = "horizontal"

    def __post_init__(self) -> None:
        if self.direction not in SUPPORTED_FLIP_DIRECTIONS:
            raise ValueError(
                f"Unsupported flip direction '{self.direction}'. "
                + f"Supported: {', '.join(SUPPORTED_FLIP_DIRECTIONS)}"
            )

    def query_params(self) -> dict[str, str]:
        return {"direction": self.direction}


@dataclass(frozen=True)
class RotateParameters:
    """Rotation angle in degrees for the rotate workflow."""

    angle: int = 90

    def __post_init__(self) -> None:
        if self.angle not in SUPPORTED_ROTATION_ANGLES:
            raise ValueError(
                f"Unsupported rotation angle {self.angle}. "
                + f"Supported: {', '.join(str(a) for a in SUPPORTED_ROTATION_ANGLES)}"
            )

    def query_params(self) -> dict[str, str]:
        return {"angle": str(self.angle)}


WorkflowParameters = Union[
    CompressParameters,
    ConvertParameters,
    ResizeParameters,
    FlipParameters,
    RotateParameters,
]
