"""Workflow state and the transitions applied to it.

Every transition is a pure function that takes a ``WorkflowState`` and returns
a new one. Releasing resources that drop out of the state is left to the
owner of the state (see ``pixelpress.processors.workflow``).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING

from pixelpress.models.file import SelectedFile
from pixelpress.models.parameters import WorkflowParameters
from pixelpress.models.transfer import TransferFailure, TransferOutcome

if TYPE_CHECKING:
    from pixelpress.renderers.result_renderer import DisplayableResult


class Phase(Enum):
    """Lifecycle phase of a workflow instance."""

    IDLE = "idle"
    BUSY = "busy"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class WorkflowState:
    """Snapshot of one workflow instance."""

    parameters: WorkflowParameters
    selected_file: SelectedFile | None = None
    phase: Phase = Phase.IDLE
    error: str | None = None
    result: DisplayableResult | None = None
    in_flight: int | None = None
    selection_id: int = 0

    @property
    def busy(self) -> bool:
        return self.phase is Phase.BUSY


def initial_state(parameters: WorkflowParameters) -> WorkflowState:
    return WorkflowState(parameters=parameters)


def select_file(state: WorkflowState, file: SelectedFile) -> WorkflowState:
    """Replace the selected file and clear any previous result or error.

    A selection made while a transfer is in flight keeps the workflow busy;
    the pending outcome is dropped once it resolves.
    """
    return replace(
        state,
        selected_file=file,
        selection_id=state.selection_id + 1,
        phase=Phase.BUSY if state.busy else Phase.IDLE,
        error=None,
        result=None,
    )


def update_parameters(state: WorkflowState, parameters: WorkflowParameters) -> WorkflowState:
    """Apply new parameters. Inert while no file is selected."""
    if state.selected_file is None:
        return state
    return replace(state, parameters=parameters)


def reject_submission(state: WorkflowState, message: str) -> WorkflowState:
    return replace(state, phase=Phase.FAILED, error=message)


def begin_transfer(state: WorkflowState, request_id: int) -> WorkflowState:
    return replace(state, phase=Phase.BUSY, error=None, in_flight=request_id)


def resolve_transfer(
    state: WorkflowState,
    request_id: int,
    selection_id: int,
    outcome: TransferOutcome,
    result: DisplayableResult | None = None,
) -> WorkflowState:
    """Apply the outcome of a transfer.

    Args:
        state: Current state
        request_id: Id of the request that produced the outcome
        selection_id: Selection the request was built from
        outcome: Success or failure of the transfer
        result: Rendered result for a successful outcome

    Returns:
        The new state. Outcomes for an unknown request are ignored, and
        outcomes for an outdated selection only clear the busy flag.
    """
    if state.in_flight != request_id:
        return state

    if selection_id != state.selection_id:
        return replace(state, phase=Phase.IDLE, in_flight=None)

    # A failure leaves the previous result in place; only a success replaces it
    if isinstance(outcome, TransferFailure):
        return replace(state, phase=Phase.FAILED, error=outcome.message, in_flight=None)

    return replace(state, phase=Phase.SUCCEEDED, error=None, result=result, in_flight=None)


def abort_transfer(state: WorkflowState, request_id: int, message: str) -> WorkflowState:
    """Clear the busy flag after a transfer ended without an outcome."""
    if state.in_flight != request_id:
        return state
    return replace(state, phase=Phase.FAILED, error=message, in_flight=None)
