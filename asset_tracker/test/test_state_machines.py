"""
Tests for asset and request status transition tables.
"""

import pytest

from asset_tracker.buisness.assets.state_machine import AssetStateMachine, AssetStatus
from asset_tracker.buisness.core.errors import TransitionError
from asset_tracker.buisness.requests.state_machine import RequestStateMachine, RequestStatus


# ========== Asset ==========

def test_asset_initial_state():
    assert AssetStateMachine.INITIAL_STATE == AssetStatus.AVAILABLE


@pytest.mark.parametrize('from_status,to_status', [
    (AssetStatus.AVAILABLE, AssetStatus.ASSIGNED),
    (AssetStatus.ASSIGNED, AssetStatus.AVAILABLE),
    (AssetStatus.ASSIGNED, AssetStatus.MAINTENANCE),
    (AssetStatus.ASSIGNED, AssetStatus.LOST),
    (AssetStatus.MAINTENANCE, AssetStatus.AVAILABLE),
    (AssetStatus.LOST, AssetStatus.AVAILABLE),
    (AssetStatus.AVAILABLE, AssetStatus.RETIRED),
])
def test_asset_allowed_transitions(from_status, to_status):
    assert AssetStateMachine.can_transition(from_status, to_status)
    AssetStateMachine.validate_transition(from_status, to_status)


@pytest.mark.parametrize('from_status,to_status', [
    (AssetStatus.AVAILABLE, AssetStatus.MAINTENANCE),
    (AssetStatus.AVAILABLE, AssetStatus.AVAILABLE),
    (AssetStatus.ASSIGNED, AssetStatus.ASSIGNED),
    (AssetStatus.ASSIGNED, AssetStatus.RETIRED),
    (AssetStatus.MAINTENANCE, AssetStatus.ASSIGNED),
])
def test_asset_rejected_transitions(from_status, to_status):
    assert not AssetStateMachine.can_transition(from_status, to_status)
    with pytest.raises(TransitionError):
        AssetStateMachine.validate_transition(from_status, to_status)


def test_retired_is_terminal():
    assert AssetStateMachine.get_allowed_transitions(AssetStatus.RETIRED) == set()
    for status in AssetStatus:
        assert not AssetStateMachine.can_transition(AssetStatus.RETIRED, status)


@pytest.mark.parametrize('condition,expected', [
    ('GOOD', AssetStatus.AVAILABLE),
    ('DAMAGED', AssetStatus.MAINTENANCE),
    ('LOST', AssetStatus.LOST),
    ('SCRATCHED', AssetStatus.AVAILABLE),
    (None, AssetStatus.AVAILABLE),
])
def test_return_condition_mapping(condition, expected):
    assert AssetStateMachine.status_for_condition(condition) == expected


# ========== Request ==========

def test_request_forward_path():
    path = [RequestStatus.PENDING, RequestStatus.APPROVED, RequestStatus.IN_PROGRESS, RequestStatus.COMPLETED]
    for current, following in zip(path, path[1:]):
        assert RequestStateMachine.can_transition(current, following)


@pytest.mark.parametrize('terminal', [RequestStatus.REJECTED, RequestStatus.COMPLETED, RequestStatus.CANCELLED])
def test_request_terminal_states(terminal):
    for status in RequestStatus:
        assert not RequestStateMachine.can_transition(terminal, status)


def test_request_never_moves_backward():
    assert not RequestStateMachine.can_transition(RequestStatus.APPROVED, RequestStatus.PENDING)
    assert not RequestStateMachine.can_transition(RequestStatus.IN_PROGRESS, RequestStatus.APPROVED)
    assert not RequestStateMachine.can_transition(RequestStatus.APPROVED, RequestStatus.REJECTED)
    assert not RequestStateMachine.can_transition(RequestStatus.PENDING, RequestStatus.IN_PROGRESS)

    with pytest.raises(TransitionError) as exc:
        RequestStateMachine.validate_transition(RequestStatus.COMPLETED, RequestStatus.IN_PROGRESS)
    assert "COMPLETED" in exc.value.message
