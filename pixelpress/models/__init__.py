"""Data models for the image service client."""

from .file import SelectedFile
from .parameters import (
    CompressParameters,
    ConvertParameters,
    FlipParameters,
    ResizeParameters,
    RotateParameters,
    WorkflowParameters,
)
from .state import Phase, WorkflowState
from .transfer import TransferFailure, TransferOutcome, TransferRequest, TransferSuccess
from .workflow import COMPRESS, CONVERT, FLIP, RESIZE, ROTATE, WORKFLOWS, WorkflowDefinition

__all__ = [
    "COMPRESS",
    "CONVERT",
    "CompressParameters",
    "ConvertParameters",
    "FLIP",
    "FlipParameters",
    "Phase",
    "RESIZE",
    "ROTATE",
    "ResizeParameters",
    "RotateParameters",
    "SelectedFile",
    "TransferFailure",
    "TransferOutcome",
    "TransferRequest",
    "TransferSuccess",
    "WORKFLOWS",
    "WorkflowDefinition",
    "WorkflowParameters",
    "WorkflowState",
]
