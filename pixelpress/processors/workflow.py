"""Workflow orchestration for one image service operation."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Callable, final

from pixelpress.builders.request_builder import MissingFileError, build_request
from pixelpress.config import ServiceConfig
from pixelpress.models import state as transitions
from pixelpress.models.file import SelectedFile
from pixelpress.models.parameters import WorkflowParameters
from pixelpress.models.state import WorkflowState
from pixelpress.models.transfer import TransferFailure, TransferSuccess
from pixelpress.models.workflow import WORKFLOWS, WorkflowDefinition
from pixelpress.renderers.result_renderer import DisplayableResult, ResultRenderer
from pixelpress.selectors.file_selector import FileSelector
from pixelpress.uploaders.image_service import TransferExecutor

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR_MESSAGE = "The transfer ended unexpectedly."


@final
class Workflow:
    """One workflow instance: a selected file, its parameters and at most one transfer."""

    def __init__(
        self,
        definition: WorkflowDefinition,
        executor: TransferExecutor,
        renderer: ResultRenderer | None = None,
        selector: FileSelector | None = None,
        base_url: str = "http://localhost:8080",
    ) -> None:
        """Initialize the workflow.

        Args:
            definition: Which operation this instance performs
            executor: Transfer executor owned by this instance
            renderer: Result renderer, created if None
            selector: File selector, created if None
            base_url: Base address of the image service
        """
        self.definition = definition
        self.executor = executor
        self.renderer = renderer or ResultRenderer()
        self.selector = selector or FileSelector()
        self.base_url = base_url

        self._state = transitions.initial_state(definition.default_parameters)
        self._state_lock = threading.RLock()

    @property
    def state(self) -> WorkflowState:
        with self._state_lock:
            return self._state

    @property
    def busy(self) -> bool:
        return self.executor.busy or self.state.busy

    def _transition(
        self,
        reducer: Callable[..., WorkflowState],
        *args: Any,
        discard: DisplayableResult | None = None,
    ) -> WorkflowState:
        """Apply a reducer and release any result the new state no longer holds."""
        with self._state_lock:
            previous = self._state
            self._state = reducer(previous, *args)
            current = self._state

        for candidate in (previous.result, discard):
            if candidate is not None and candidate is not current.result:
                candidate.release()
        return current

    def select_file(self, path: Path | None) -> WorkflowState:
        """Select a file by path. A None path (cancelled picker) changes nothing.

        Raises:
            FileSelectionError: If the path does not pass the picker filter
        """
        return self.apply_selection(self.selector.select(path))

    def apply_selection(self, selected_file: SelectedFile | None) -> WorkflowState:
        if selected_file is None:
            return self.state
        logger.debug("Selected %s (%d bytes)", selected_file.name, selected_file.byte_size)
        return self._transition(transitions.select_file, selected_file)

    def update_parameters(self, parameters: WorkflowParameters) -> WorkflowState:
        return self._transition(transitions.update_parameters, parameters)

    def submit(
        self,
        progress_callback: Callable[[int, int], None] | None = None,
    ) -> WorkflowState:
        """Send the selected file to the service and apply the outcome.

        Service and connectivity errors end in a FAILED state rather than an
        exception. The busy flag is cleared on every path.

        Args:
            progress_callback: Callback(bytes_sent, total_bytes) for the upload

        Returns:
            The state after the outcome was applied

        Raises:
            TransferInFlightError: If a transfer is already running
        """
        snapshot = self.state
        if snapshot.selected_file is None:
            return self._transition(transitions.reject_submission, str(MissingFileError()))

        with self.executor.claim() as request_id:
            self._transition(transitions.begin_transfer, request_id)
            resolved = False
            try:
                try:
                    request = build_request(
                        self.definition,
                        snapshot.selected_file,
                        snapshot.parameters,
                        self.base_url,
                        request_id,
                    )
                except MissingFileError as e:
                    state = self._transition(transitions.abort_transfer, request_id, str(e))
                    resolved = True
                    return state

                outcome = self.executor.send(request, progress_callback)

                result = None
                if isinstance(outcome, TransferSuccess):
                    try:
                        result = self.renderer.render(
                            self.definition, outcome, snapshot.selected_file, snapshot.parameters
                        )
                    except OSError as e:
                        outcome = TransferFailure(f"Could not store the result: {e}")

                state = self._transition(
                    transitions.resolve_transfer,
                    request_id,
                    snapshot.selection_id,
                    outcome,
                    result,
                    discard=result,
                )
                resolved = True
                if state.selection_id != snapshot.selection_id:
                    logger.debug("Dropped outcome of request %d: selection changed", request_id)
                return state
            finally:
                if not resolved:
                    self._transition(
                        transitions.abort_transfer, request_id, UNEXPECTED_ERROR_MESSAGE
                    )

    def close(self) -> None:
        """Release the displayed result, if any."""
        with self._state_lock:
            result = self._state.result
        if result is not None:
            result.release()

    def __enter__(self) -> Workflow:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def create_workflow(
    name: str,
    config: ServiceConfig,
    selector: FileSelector | None = None,
) -> Workflow:
    """Create a workflow instance by name, e.g. "compress" or "rotate".

    Raises:
        KeyError: If the name is unknown
    """
    definition = WORKFLOWS[name]
    return Workflow(
        definition=definition,
        executor=TransferExecutor(definition.failure_fallback, timeout=config.timeout),
        selector=selector,
        base_url=config.base_url,
    )
