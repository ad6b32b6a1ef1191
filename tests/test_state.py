from pathlib import Path

from pixelpress.models import state as transitions
from pixelpress.models.file import SelectedFile
from pixelpress.models.parameters import CompressParameters
from pixelpress.models.state import Phase
from pixelpress.models.transfer import TransferFailure, TransferSuccess

FIRST = SelectedFile(name="a.png", byte_size=10, path=Path("a.png"))
SECOND = SelectedFile(name="b.png", byte_size=20, path=Path("b.png"))
SUCCESS = TransferSuccess(content=b"x", byte_size=1)


def _initial():
    return transitions.initial_state(CompressParameters())


def test_initial_state_defaults():
    state = _initial()
    assert state.parameters == CompressParameters(75)
    assert state.phase is Phase.IDLE
    assert not state.busy
    assert state.selected_file is None


def test_parameters_are_inert_without_file():
    state = transitions.update_parameters(_initial(), CompressParameters(10))
    assert state.parameters.quality == 75

    state = transitions.select_file(state, FIRST)
    state = transitions.update_parameters(state, CompressParameters(10))
    assert state.parameters.quality == 10


def test_select_clears_error_and_result():
    state = transitions.select_file(_initial(), FIRST)
    state = transitions.reject_submission(state, "boom")
    state = transitions.select_file(state, SECOND)

    assert state.error is None
    assert state.result is None
    assert state.phase is Phase.IDLE
    assert state.selection_id == 2


def test_transfer_round_trip():
    state = transitions.select_file(_initial(), FIRST)
    state = transitions.begin_transfer(state, request_id=7)
    assert state.busy
    assert state.in_flight == 7

    marker = object()
    state = transitions.resolve_transfer(state, 7, state.selection_id, SUCCESS, marker)
    assert state.phase is Phase.SUCCEEDED
    assert state.result is marker
    assert not state.busy
    assert state.in_flight is None


def test_failure_keeps_previous_result():
    marker = object()
    state = transitions.select_file(_initial(), FIRST)
    state = transitions.begin_transfer(state, 1)
    state = transitions.resolve_transfer(state, 1, state.selection_id, SUCCESS, marker)

    state = transitions.begin_transfer(state, 2)
    assert state.error is None
    state = transitions.resolve_transfer(state, 2, state.selection_id, TransferFailure("nope"), None)

    assert state.phase is Phase.FAILED
    assert state.error == "nope"
    assert state.result is marker


def test_outcome_for_old_selection_is_dropped():
    state = transitions.select_file(_initial(), FIRST)
    issued_for = state.selection_id
    state = transitions.begin_transfer(state, 1)
    state = transitions.select_file(state, SECOND)
    assert state.busy

    state = transitions.resolve_transfer(state, 1, issued_for, SUCCESS, object())

    assert state.phase is Phase.IDLE
    assert state.result is None
    assert state.selected_file == SECOND
    assert not state.busy


def test_unknown_request_is_ignored():
    state = transitions.begin_transfer(transitions.select_file(_initial(), FIRST), 3)
    assert transitions.resolve_transfer(state, 99, state.selection_id, SUCCESS, None) is state
    assert transitions.abort_transfer(state, 99, "x") is state


def test_abort_clears_busy():
    state = transitions.begin_transfer(transitions.select_file(_initial(), FIRST), 3)
    state = transitions.abort_transfer(state, 3, "broken")
    assert not state.busy
    assert state.error == "broken"
