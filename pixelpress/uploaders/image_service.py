"""Image service transfer execution."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Callable, final

import requests
from requests.exceptions import RequestException
from requests_toolbelt.multipart.encoder import MultipartEncoder, MultipartEncoderMonitor

from pixelpress.models.transfer import (
    TransferFailure,
    TransferOutcome,
    TransferRequest,
    TransferSuccess,
)

logger = logging.getLogger(__name__)

CONNECTION_ERROR_MESSAGE = "Failed to connect to the server."
HEALTH_ENDPOINT = "/api/health"


def is_success_status(status_code: int) -> bool:
    return 200 <= status_code < 300


class TransferInFlightError(RuntimeError):
    """Raised when a transfer is requested while another one is running."""


@final
class TransferExecutor:
    """Sends transfer requests to the image service, one at a time."""

    def __init__(self, failure_fallback: str, timeout: float | None = None) -> None:
        """Initialize the executor.

        Args:
            failure_fallback: Message used when an error response has no body
            timeout: Optional request timeout in seconds. None waits indefinitely.
        """
        self.failure_fallback = failure_fallback
        self.timeout = timeout
        self._guard = threading.Lock()
        self._last_request_id = 0

    @property
    def busy(self) -> bool:
        return self._guard.locked()

    @contextmanager
    def claim(self) -> Iterator[int]:
        """Reserve the executor for one transfer.

        Yields:
            A fresh request id

        Raises:
            TransferInFlightError: If another transfer holds the executor
        """
        if not self._guard.acquire(blocking=False):
            raise TransferInFlightError("A transfer is already in progress.")
        try:
            self._last_request_id += 1
            yield self._last_request_id
        finally:
            self._guard.release()

    def send(
        self,
        request: TransferRequest,
        progress_callback: Callable[[int, int], None] | None = None,
    ) -> TransferOutcome:
        """Send a request and wait for the full response.

        Args:
            request: The request to send
            progress_callback: Callback(bytes_sent, total_bytes) for the upload

        Returns:
            TransferSuccess with the response body, or TransferFailure
        """
        logger.debug(
            "Request %d: %s %s params=%s file=%s (%d bytes)",
            request.request_id,
            request.method,
            request.url,
            request.params,
            request.file.name,
            request.file.byte_size,
        )

        try:
            with request.file.path.open("rb") as handle:
                encoder = MultipartEncoder(
                    fields=[
                        (request.field_name, (request.file.name, handle, request.file.mime_type))
                    ]
                )

                # Wrap with monitor if callback provided
                data: MultipartEncoder | MultipartEncoderMonitor
                if progress_callback:
                    data = MultipartEncoderMonitor(
                        encoder,
                        lambda monitor: progress_callback(monitor.bytes_read, monitor.len),
                    )
                else:
                    data = encoder

                response = requests.request(
                    request.method,
                    request.url,
                    params=request.params,
                    data=data,
                    headers={"Content-Type": data.content_type},
                    timeout=self.timeout,
                )
        # RequestException subclasses OSError, so it must be caught first
        except RequestException as e:
            logger.debug("Request %d could not complete: %s", request.request_id, e)
            return TransferFailure(CONNECTION_ERROR_MESSAGE)
        except OSError as e:
            logger.debug("Request %d could not read %s: %s", request.request_id, request.file.path, e)
            return TransferFailure(f"Could not read {request.file.name}: {e.strerror or e}")

        logger.debug(
            "Request %d: status %d, %d bytes",
            request.request_id,
            response.status_code,
            len(response.content),
        )

        # requests counts 3xx as ok; only 2xx carries a result
        if not is_success_status(response.status_code):
            message = response.text.strip()
            return TransferFailure(message or self.failure_fallback, response.status_code)

        content = response.content
        return TransferSuccess(
            content=content,
            byte_size=len(content),
            content_type=response.headers.get("Content-Type"),
        )


def check_connection(base_url: str, timeout: float | None = 10.0) -> bool:
    """Check that the image service answers its health endpoint.

    Returns:
        True if the service responded with a success status
    """
    try:
        response = requests.request("GET", f"{base_url.rstrip('/')}{HEALTH_ENDPOINT}", timeout=timeout)
    except RequestException as e:
        logger.debug("Health check failed: %s", e)
        return False
    return is_success_status(response.status_code)
