"""Shared fixtures.

The image service is replaced by a fake ``requests.request`` that records
every call and answers with a configurable response.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

import pytest

from pixelpress.models.workflow import COMPRESS, CONVERT, WorkflowDefinition
from pixelpress.processors.workflow import Workflow
from pixelpress.uploaders.image_service import TransferExecutor

SERVICE_URL = "http://service.test"
PNG_HEADER = b"\x89PNG\r\n\x1a\n"


class FakeResponse:
    def __init__(
        self,
        status_code: int = 200,
        content: bytes = b"",
        headers: dict[str, str] | None = None,
    ) -> None:
        self.status_code = status_code
        self.content = content
        self.headers = headers or {}

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")


@dataclass
class FakeCall:
    method: str
    url: str
    params: dict[str, str] | None
    headers: dict[str, str] | None
    timeout: float | None
    body: bytes


@dataclass
class FakeService:
    response: FakeResponse = field(
        default_factory=lambda: FakeResponse(200, b"compressed!", {"Content-Type": "image/jpeg"})
    )
    error: Exception | None = None
    on_request: Callable[[FakeCall], None] | None = None
    calls: list[FakeCall] = field(default_factory=list)

    def __call__(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        data = kwargs.get("data")
        body = data.read() if data is not None else b""
        call = FakeCall(
            method=method,
            url=url,
            params=kwargs.get("params"),
            headers=kwargs.get("headers"),
            timeout=kwargs.get("timeout"),
            body=body,
        )
        self.calls.append(call)
        if self.on_request is not None:
            self.on_request(call)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def fake_service(monkeypatch: pytest.MonkeyPatch) -> FakeService:
    service = FakeService()
    monkeypatch.setattr("pixelpress.uploaders.image_service.requests.request", service)
    return service


def write_image(path: Path, size: int = 1000) -> Path:
    _ = path.write_bytes(PNG_HEADER + b"\x00" * (size - len(PNG_HEADER)))
    return path


@pytest.fixture
def image_file(tmp_path: Path) -> Path:
    return write_image(tmp_path / "photo.png")


@pytest.fixture
def other_image(tmp_path: Path) -> Path:
    return write_image(tmp_path / "other.jpg", size=2000)


def make_workflow(definition: WorkflowDefinition) -> Workflow:
    return Workflow(
        definition=definition,
        executor=TransferExecutor(definition.failure_fallback),
        base_url=SERVICE_URL,
    )


@pytest.fixture
def compress_workflow() -> Iterator[Workflow]:
    with make_workflow(COMPRESS) as workflow:
        yield workflow


@pytest.fixture
def convert_workflow() -> Iterator[Workflow]:
    with make_workflow(CONVERT) as workflow:
        yield workflow
