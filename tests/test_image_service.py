import pytest
import requests

from conftest import SERVICE_URL, FakeResponse
from pixelpress.models.file import SelectedFile
from pixelpress.models.transfer import TransferFailure, TransferRequest, TransferSuccess
from pixelpress.uploaders.image_service import (
    CONNECTION_ERROR_MESSAGE,
    TransferExecutor,
    TransferInFlightError,
    check_connection,
)


def _request(path, request_id=1):
    return TransferRequest(
        request_id=request_id,
        url=f"{SERVICE_URL}/api/compress",
        params={"quality": "40"},
        file=SelectedFile(name=path.name, byte_size=path.stat().st_size, path=path),
    )


def test_success_returns_body(fake_service, image_file):
    fake_service.response = FakeResponse(200, b"\xff\xd8jpeg", {"Content-Type": "image/jpeg"})

    outcome = TransferExecutor("fallback").send(_request(image_file))

    assert outcome == TransferSuccess(content=b"\xff\xd8jpeg", byte_size=6, content_type="image/jpeg")
    call = fake_service.calls[0]
    assert call.method == "POST"
    assert call.url == f"{SERVICE_URL}/api/compress"
    assert call.params == {"quality": "40"}
    assert call.headers["Content-Type"].startswith("multipart/form-data")
    assert b'name="image"; filename="photo.png"' in call.body
    assert image_file.read_bytes() in call.body


def test_error_body_is_surfaced(fake_service, image_file):
    fake_service.response = FakeResponse(400, b"Could not decode image: bad header\n")

    outcome = TransferExecutor("fallback").send(_request(image_file))

    assert outcome == TransferFailure("Could not decode image: bad header", status_code=400)


@pytest.mark.parametrize("body", [b"", b"  \n"])
def test_empty_error_body_uses_fallback(fake_service, image_file, body):
    fake_service.response = FakeResponse(500, body)

    outcome = TransferExecutor("Conversion failed.").send(_request(image_file))

    assert outcome == TransferFailure("Conversion failed.", status_code=500)


@pytest.mark.parametrize("status_code", [301, 302, 304])
def test_redirect_status_is_not_success(fake_service, image_file, status_code):
    fake_service.response = FakeResponse(status_code, b"")

    outcome = TransferExecutor("An unknown error occurred.").send(_request(image_file))

    assert outcome == TransferFailure("An unknown error occurred.", status_code=status_code)


@pytest.mark.parametrize(
    "error",
    [requests.ConnectionError("refused"), requests.Timeout("slow"), requests.RequestException("x")],
)
def test_network_errors_are_generic(fake_service, image_file, error):
    fake_service.error = error

    outcome = TransferExecutor("fallback").send(_request(image_file))

    assert outcome == TransferFailure(CONNECTION_ERROR_MESSAGE)


def test_unreadable_file_fails_without_request(fake_service, image_file):
    request = _request(image_file)
    image_file.unlink()

    outcome = TransferExecutor("fallback").send(request)

    assert isinstance(outcome, TransferFailure)
    assert outcome.message.startswith("Could not read photo.png")
    assert fake_service.calls == []


def test_timeout_defaults_to_none(fake_service, image_file):
    TransferExecutor("fallback").send(_request(image_file))
    TransferExecutor("fallback", timeout=12.5).send(_request(image_file))

    assert [call.timeout for call in fake_service.calls] == [None, 12.5]


def test_progress_callback_reports_upload(fake_service, image_file):
    updates = []

    TransferExecutor("fallback").send(
        _request(image_file), progress_callback=lambda sent, total: updates.append((sent, total))
    )

    assert updates
    sent, total = updates[-1]
    assert sent == total
    assert total > image_file.stat().st_size


def test_claim_is_exclusive():
    executor = TransferExecutor("fallback")
    assert not executor.busy

    with executor.claim() as first:
        assert executor.busy
        with pytest.raises(TransferInFlightError):
            with executor.claim():
                pass

    assert not executor.busy
    with executor.claim() as second:
        assert second == first + 1


def test_claim_is_released_after_exception():
    executor = TransferExecutor("fallback")
    with pytest.raises(KeyError):
        with executor.claim():
            raise KeyError("boom")
    assert not executor.busy


def test_check_connection(fake_service):
    assert check_connection(SERVICE_URL)
    assert fake_service.calls[0].method == "GET"
    assert fake_service.calls[0].url == f"{SERVICE_URL}/api/health"

    fake_service.response = FakeResponse(302)
    assert not check_connection(SERVICE_URL)

    fake_service.response = FakeResponse(404)
    assert not check_connection(SERVICE_URL)

    fake_service.error = requests.ConnectionError("down")
    assert not check_connection(SERVICE_URL)
