"""Transfer request construction."""

from __future__ import annotations

from pixelpress.models.file import SelectedFile
from pixelpress.models.parameters import WorkflowParameters
from pixelpress.models.transfer import TransferRequest
from pixelpress.models.workflow import WorkflowDefinition

MISSING_FILE_MESSAGE = "Please select a file first."
IMAGE_FIELD_NAME = "image"


class MissingFileError(ValueError):
    """Raised when a submission is attempted without a selected file."""

    def __init__(self, message: str = MISSING_FILE_MESSAGE) -> None:
        super().__init__(message)


def build_request(
    definition: WorkflowDefinition,
    selected_file: SelectedFile | None,
    parameters: WorkflowParameters,
    base_url: str,
    request_id: int,
) -> TransferRequest:
    """Assemble the request for one submission.

    Parameters are taken as-is; range checks belong to whoever produced them.

    Raises:
        MissingFileError: If no file is selected
    """
    if selected_file is None:
        raise MissingFileError()

    return TransferRequest(
        request_id=request_id,
        url=f"{base_url.rstrip('/')}{definition.endpoint}",
        params=parameters.query_params(),
        file=selected_file,
        field_name=IMAGE_FIELD_NAME,
    )
