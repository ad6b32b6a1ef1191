"""Image service transfer."""

from .image_service import (
    CONNECTION_ERROR_MESSAGE,
    TransferExecutor,
    TransferInFlightError,
    check_connection,
)

__all__ = [
    "CONNECTION_ERROR_MESSAGE",
    "TransferExecutor",
    "TransferInFlightError",
    "check_connection",
]
