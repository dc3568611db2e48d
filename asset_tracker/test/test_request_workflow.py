"""
Request workflow tests against RequestContext.
"""

import pytest

from asset_tracker.buisness.core.errors import (
    ForbiddenError,
    MissingAssetError,
    NotFoundError,
    TransitionError,
    ValidationFailedError,
)
from asset_tracker.buisness.requests.request_context import RequestContext
from asset_tracker.buisness.requests.state_machine import RequestStatus, RequestType
from asset_tracker.data.core.history.asset_history import AssetHistory


pytestmark = pytest.mark.usefixtures('app_ctx')


@pytest.fixture
def pending(user):
    return RequestContext.submit(user, 'NEW_ASSET', 'Need a laptop for onboarding', urgency='HIGH')


def test_submit(user, pending):
    request = pending.request
    assert request.status == RequestStatus.PENDING
    assert request.type == RequestType.NEW_ASSET
    assert request.requested_by_id == user.id
    assert request.priority == 'high'
    assert request.title == 'Need a laptop for onboarding'
    assert [h.action for h in pending.history] == ['request_submitted']


def test_submit_defaults_and_truncation(user):
    description = 'x' * 250
    ctx = RequestContext.submit(user, 'COMPLAINT', description)
    assert ctx.request.priority == 'medium'
    assert ctx.request.title == 'x' * 100
    assert ctx.request.description == description


@pytest.mark.parametrize('request_type,description,message', [
    (None, 'desc', "Type and description are required"),
    ('NEW_ASSET', '', "Type and description are required"),
    ('UPGRADE', 'desc', "Invalid request type"),
])
def test_submit_validation(user, request_type, description, message):
    with pytest.raises(ValidationFailedError) as exc:
        RequestContext.submit(user, request_type, description)
    assert exc.value.message == message


def test_replacement_needs_existing_asset(user, asset):
    with pytest.raises(MissingAssetError) as exc:
        RequestContext.submit(user, 'REPLACEMENT', 'Battery is dead')
    assert exc.value.status_code == 400

    with pytest.raises(NotFoundError):
        RequestContext.submit(user, 'REPLACEMENT', 'Battery is dead', asset_id=9999)

    ctx = RequestContext.submit(user, 'REPLACEMENT', 'Battery is dead', asset_id=asset.id)
    assert ctx.request.asset_id == asset.id
    entry = AssetHistory.query.filter_by(request_id=ctx.request_id).one()
    assert entry.asset_id == asset.id


def test_manager_approves(manager, pending):
    request = pending.decide(manager, RequestStatus.APPROVED)
    assert request.status == RequestStatus.APPROVED
    assert request.approved_by_id == manager.id
    assert [h.action for h in pending.history] == ['request_submitted', 'request_approved']


def test_user_cannot_decide(user, other_user, pending):
    with pytest.raises(ForbiddenError):
        pending.decide(user, RequestStatus.APPROVED)
    with pytest.raises(ForbiddenError):
        pending.decide(other_user, RequestStatus.REJECTED)
    assert RequestContext.load(pending.request_id).status == RequestStatus.PENDING


def test_decide_only_from_pending(manager, admin, pending):
    pending.decide(manager, RequestStatus.APPROVED)

    with pytest.raises(TransitionError):
        pending.decide(manager, RequestStatus.REJECTED)

    pending.advance(admin, RequestStatus.IN_PROGRESS)
    with pytest.raises(TransitionError):
        pending.decide(admin, RequestStatus.APPROVED)


def test_rejected_is_terminal(manager, admin, pending):
    pending.decide(manager, RequestStatus.REJECTED)
    with pytest.raises(TransitionError):
        pending.advance(admin, RequestStatus.IN_PROGRESS)
    with pytest.raises(TransitionError):
        pending.decide(manager, RequestStatus.APPROVED)


def test_fulfilment_path(manager, admin, pending):
    pending.decide(manager, RequestStatus.APPROVED)

    with pytest.raises(TransitionError):
        pending.advance(admin, RequestStatus.COMPLETED)

    pending.advance(admin, RequestStatus.IN_PROGRESS)
    pending.advance(admin, RequestStatus.COMPLETED)

    assert pending.status == RequestStatus.COMPLETED
    assert [h.action for h in pending.history] == [
        'request_submitted', 'request_approved', 'request_in_progress', 'request_completed',
    ]


def test_manager_cannot_advance(manager, pending):
    pending.decide(manager, RequestStatus.APPROVED)
    with pytest.raises(ForbiddenError):
        pending.advance(manager, RequestStatus.IN_PROGRESS)


def test_cancel(user, other_user, manager, pending):
    with pytest.raises(ForbiddenError):
        pending.cancel(other_user)

    pending.cancel(user)
    assert pending.status == RequestStatus.CANCELLED

    with pytest.raises(TransitionError):
        pending.cancel(user)
    with pytest.raises(TransitionError):
        pending.decide(manager, RequestStatus.APPROVED)


def test_change_status_routing(user, manager, admin, pending):
    with pytest.raises(ValidationFailedError) as exc:
        pending.change_status(manager, None)
    assert exc.value.message == "Status is required"

    with pytest.raises(ValidationFailedError):
        pending.change_status(manager, 'ARCHIVED')
    with pytest.raises(ValidationFailedError):
        pending.change_status(manager, 'PENDING')

    assert pending.change_status(manager, 'APPROVED').status == RequestStatus.APPROVED
    assert pending.change_status(admin, 'IN_PROGRESS').status == RequestStatus.IN_PROGRESS


def test_visibility(user, other_user, manager, pending):
    RequestContext.submit(other_user, 'MAINTENANCE', 'Keyboard sticks')

    assert [r.requested_by_id for r in RequestContext.list_for(user)] == [user.id]
    assert len(RequestContext.list_for(manager)) == 2

    RequestContext.load_visible(pending.request_id, user)
    RequestContext.load_visible(pending.request_id, manager)
    with pytest.raises(ForbiddenError):
        RequestContext.load_visible(pending.request_id, other_user)
    with pytest.raises(NotFoundError):
        RequestContext.load_visible(9999, manager)
