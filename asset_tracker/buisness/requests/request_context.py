"""
RequestContext - Domain facade for the request workflow

Submit, decide, advance and cancel requests. Each transition is checked
against RequestStateMachine and journaled in the history ledger in the same
transaction as the status change.
"""

from typing import List, Optional

from asset_tracker import db
from asset_tracker.buisness.core.authorization import Capability, can, require
from asset_tracker.buisness.core.errors import (
    ForbiddenError,
    MissingAssetError,
    NotFoundError,
    ValidationFailedError,
)
from asset_tracker.buisness.core.narrator import HistoryNarrator
from asset_tracker.buisness.requests.state_machine import RequestStateMachine, RequestStatus, RequestType
from asset_tracker.data.core.asset_info.asset import Asset
from asset_tracker.data.core.history.asset_history import AssetHistory
from asset_tracker.data.requests.request import Request
from asset_tracker.data.transaction import atomic
from asset_tracker.utils.logger import get_logger

logger = get_logger("asset_tracker.buisness.requests.request_context")

TITLE_LENGTH = 100
DEFAULT_PRIORITY = 'medium'


class RequestContext:
    """
    Domain facade for a single request.

    Pattern: Domain Facade / Aggregate Controller
    """

    def __init__(self, request: Request):
        self.request = request
        self.request_id = request.id

    @classmethod
    def load(cls, request_id: int) -> 'RequestContext':
        request = db.session.get(Request, request_id)
        if request is None:
            raise NotFoundError("Request not found")
        return cls(request)

    @classmethod
    def load_visible(cls, request_id: int, actor) -> 'RequestContext':
        """
        Load a request the actor is allowed to read.

        Raises:
            NotFoundError: If the request does not exist
            ForbiddenError: If a USER asks for someone else's request
        """
        ctx = cls.load(request_id)
        ctx.ensure_visible(actor)
        return ctx

    # ========== Read Model Helpers ==========

    def ensure_visible(self, actor) -> None:
        if self.request.requested_by_id == actor.id:
            return
        if not can(actor.role, Capability.VIEW_ALL_REQUESTS):
            raise ForbiddenError()

    @staticmethod
    def list_for(actor) -> List[Request]:
        """Own requests for USER, every request for MANAGER and above; newest first"""
        query = Request.query
        if not can(actor.role, Capability.VIEW_ALL_REQUESTS):
            query = query.filter(Request.requested_by_id == actor.id)
        return query.order_by(Request.created_at.desc(), Request.id.desc()).all()

    @property
    def status(self) -> RequestStatus:
        return self.request.status

    @property
    def history(self) -> List[AssetHistory]:
        return (AssetHistory.query
                .filter_by(request_id=self.request_id)
                .order_by(AssetHistory.timestamp, AssetHistory.id)
                .all())

    # ========== Request Lifecycle Operations ==========

    @classmethod
    def submit(
        cls,
        requester,
        request_type: Optional[str],
        description: Optional[str],
        urgency: Optional[str] = None,
        device_type: Optional[str] = None,
        preferences: Optional[str] = None,
        asset_id: Optional[int] = None,
    ) -> 'RequestContext':
        """
        Create a PENDING request on behalf of requester.

        Raises:
            ValidationFailedError: If type or description is missing, or type is unknown
            MissingAssetError: If a REPLACEMENT request names no asset
            NotFoundError: If asset_id names no asset
        """
        if not request_type or not description or not isinstance(description, str):
            raise ValidationFailedError("Type and description are required")

        try:
            request_type = RequestType(request_type)
        except (ValueError, TypeError):
            raise ValidationFailedError("Invalid request type")

        if request_type == RequestType.REPLACEMENT and not asset_id:
            raise MissingAssetError()

        if asset_id and db.session.get(Asset, asset_id) is None:
            raise NotFoundError("Asset not found")

        with atomic():
            request = Request(
                requested_by_id=requester.id,
                type=request_type,
                title=description[:TITLE_LENGTH],
                description=description,
                priority=urgency.lower() if isinstance(urgency, str) and urgency else DEFAULT_PRIORITY,
                device_type=device_type,
                preferences=preferences,
                asset_id=asset_id or None,
                status=RequestStateMachine.INITIAL_STATE,
            )
            db.session.add(request)
            db.session.flush()

            AssetHistory.add_entry(
                action='request_submitted',
                details=HistoryNarrator.request_submitted(request, requester),
                user_id=requester.id,
                asset_id=request.asset_id,
                request_id=request.id,
            )

        logger.info(f"Request {request.id} ({request_type.value}) submitted by user {requester.id}")
        return cls(request)

    def _transition(self, actor, new_status: RequestStatus) -> Request:
        """Validate, apply and journal a status change inside one transaction"""
        with atomic():
            self.request = db.session.execute(
                db.select(Request)
                .where(Request.id == self.request_id)
                .with_for_update()
                .execution_options(populate_existing=True)
            ).scalar_one()
            old_status = self.request.status
            RequestStateMachine.validate_transition(old_status, new_status)

            self.request.status = new_status
            if new_status in RequestStateMachine.DECISIONS:
                self.request.approved_by_id = actor.id

            AssetHistory.add_entry(
                action=f"request_{new_status.value.lower()}",
                details=HistoryNarrator.request_status_changed(
                    self.request, old_status.value, new_status.value, actor
                ),
                user_id=actor.id,
                asset_id=self.request.asset_id,
                request_id=self.request_id,
            )

        logger.info(f"Request {self.request_id} moved {old_status.value} -> {new_status.value} by user {actor.id}")
        return self.request

    def decide(self, actor, decision: RequestStatus) -> Request:
        """
        Approve or reject a PENDING request.

        Raises:
            ForbiddenError: If actor may not approve requests
            ValidationFailedError: If decision is not APPROVED or REJECTED
            TransitionError: If the request is no longer PENDING
        """
        require(actor, Capability.APPROVE_REQUESTS)
        if decision not in RequestStateMachine.DECISIONS:
            raise ValidationFailedError("Decision must be APPROVED or REJECTED")
        return self._transition(actor, decision)

    def advance(self, actor, target: RequestStatus) -> Request:
        """
        Move an approved request through fulfilment.

        Raises:
            ForbiddenError: If actor may not update request status
            ValidationFailedError: If target is not IN_PROGRESS or COMPLETED
            TransitionError: If target does not follow the current status
        """
        require(actor, Capability.UPDATE_REQUEST_STATUS)
        if target not in RequestStateMachine.ADVANCES:
            raise ValidationFailedError("Status must be IN_PROGRESS or COMPLETED")
        return self._transition(actor, target)

    def cancel(self, actor) -> Request:
        """
        Withdraw a PENDING request.

        The requester may cancel their own request; otherwise APPROVE_REQUESTS
        is needed.
        """
        if self.request.requested_by_id != actor.id:
            require(actor, Capability.APPROVE_REQUESTS)
        return self._transition(actor, RequestStatus.CANCELLED)

    def change_status(self, actor, status: Optional[str]) -> Request:
        """
        Route a requested status to decide, advance or cancel.

        Raises:
            ValidationFailedError: If status is missing or unknown
        """
        if not status:
            raise ValidationFailedError("Status is required")
        try:
            target = RequestStatus(status)
        except (ValueError, TypeError):
            raise ValidationFailedError("Invalid status")

        if target in RequestStateMachine.DECISIONS:
            return self.decide(actor, target)
        if target in RequestStateMachine.ADVANCES:
            return self.advance(actor, target)
        if target == RequestStatus.CANCELLED:
            return self.cancel(actor)
        raise ValidationFailedError(f"Cannot set status to {target.value}")
