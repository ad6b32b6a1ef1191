"""Console progress and logging."""

from .tracker import ProgressTracker, TransferProgressContext, configure_logging

__all__ = ["ProgressTracker", "TransferProgressContext", "configure_logging"]
