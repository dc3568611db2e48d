"""
AssetContext - Domain facade for the asset lifecycle

Every mutating operation checks the actor's capability, validates the
transition against AssetStateMachine and OpenAssignmentPolicy, then writes the
asset row, the assignment row and one history entry in a single transaction.
"""

from datetime import datetime
from typing import List, Optional

from asset_tracker import db
from asset_tracker.buisness.assets.policies import OpenAssignmentPolicy
from asset_tracker.buisness.assets.state_machine import AssetStateMachine, AssetStatus, ReturnCondition
from asset_tracker.buisness.core.authorization import Capability, can, require
from asset_tracker.buisness.core.errors import (
    ConflictError,
    ForbiddenError,
    NotAvailableError,
    NotFoundError,
    TargetNotFoundError,
    TransitionError,
    ValidationFailedError,
)
from asset_tracker.buisness.core.narrator import HistoryNarrator
from asset_tracker.data.core.asset_info.asset import Asset
from asset_tracker.data.core.asset_info.asset_assignment import AssetAssignment
from asset_tracker.data.core.asset_info.asset_type import AssetType
from asset_tracker.data.core.history.asset_history import AssetHistory
from asset_tracker.data.core.user_info.user import User
from asset_tracker.data.transaction import atomic
from asset_tracker.utils.logger import get_logger

logger = get_logger("asset_tracker.buisness.assets.asset_context")

# Descriptive fields accepted on create besides name and category
ASSET_FIELDS = (
    'description', 'serial_number', 'model', 'brand', 'location',
    'value', 'purchase_date', 'warranty_expiry', 'asset_type_id',
)


class AssetContext:
    """
    Domain facade for a single asset.

    Load with ``AssetContext.load(asset_id)``; create with
    ``AssetContext.create(actor, ...)``.
    """

    def __init__(self, asset: Asset):
        self.asset = asset
        self.asset_id = asset.id

    @classmethod
    def load(cls, asset_id: int) -> 'AssetContext':
        """
        Raises:
            NotFoundError: If no asset has this id
        """
        asset = db.session.get(Asset, asset_id)
        if asset is None:
            raise NotFoundError("Asset not found")
        return cls(asset)

    def _lock(self) -> Asset:
        """Re-read the asset row under SELECT ... FOR UPDATE (a no-op on SQLite)"""
        asset = db.session.execute(
            db.select(Asset)
            .where(Asset.id == self.asset_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        if asset is None:
            raise NotFoundError("Asset not found")
        self.asset = asset
        return asset

    # ========== Read Model Helpers ==========

    @property
    def status(self) -> AssetStatus:
        return self.asset.status

    @property
    def current_assignment(self) -> Optional[AssetAssignment]:
        open_rows = OpenAssignmentPolicy.find_open(self.asset)
        return open_rows[0] if open_rows else None

    @property
    def history(self) -> List[AssetHistory]:
        """History entries for this asset, newest first"""
        return (AssetHistory.query
                .filter_by(asset_id=self.asset_id)
                .order_by(AssetHistory.timestamp.desc(), AssetHistory.id.desc())
                .all())

    # ========== Lifecycle Operations ==========

    @classmethod
    def create(cls, actor: User, name: Optional[str], category: Optional[str], **fields) -> 'AssetContext':
        """
        Register a new asset in AVAILABLE status.

        Args:
            actor: Acting user (needs MANAGE_ASSETS)
            name: Asset name
            category: Asset category
            **fields: Any of ASSET_FIELDS

        Raises:
            ForbiddenError: If actor may not manage assets
            ValidationFailedError: If name or category is missing
            NotFoundError: If asset_type_id names no asset type
            ConflictError: If serial_number is already registered
        """
        require(actor, Capability.MANAGE_ASSETS)

        if not isinstance(name, str) or not isinstance(category, str) or not name or not category:
            raise ValidationFailedError("Name and category are required")

        unknown = set(fields) - set(ASSET_FIELDS)
        if unknown:
            raise ValidationFailedError(f"Unknown asset fields: {', '.join(sorted(unknown))}")

        asset_type_id = fields.get('asset_type_id')
        if asset_type_id is not None and db.session.get(AssetType, asset_type_id) is None:
            raise NotFoundError("Asset type not found")

        with atomic(conflict=ConflictError("An asset with this serial number already exists")):
            asset = Asset(
                name=name,
                category=category,
                status=AssetStateMachine.INITIAL_STATE,
                created_by_id=actor.id,
                **fields
            )
            db.session.add(asset)
            db.session.flush()

            AssetHistory.add_entry(
                action='created',
                details=HistoryNarrator.asset_created(actor),
                user_id=actor.id,
                asset_id=asset.id,
            )

        logger.info(f"Asset {asset.id} ({asset.name}) created by user {actor.id}")
        return cls(asset)

    def assign(self, actor: User, target_user_id: Optional[int], notes: Optional[str] = None) -> AssetAssignment:
        """
        Assign the asset to a user.

        Preconditions are checked in order: asset AVAILABLE, no open
        assignment, target user exists.

        Raises:
            ForbiddenError: If actor may not manage assets
            ValidationFailedError: If target_user_id is missing
            NotAvailableError: If the asset is not AVAILABLE
            AlreadyAssignedError: If an open assignment exists (including a concurrent winner)
            TargetNotFoundError: If the target user does not exist
        """
        require(actor, Capability.MANAGE_ASSETS)

        if not target_user_id:
            raise ValidationFailedError("User ID is required for assignment")

        with atomic():
            asset = self._lock()
            OpenAssignmentPolicy.check_assignable(asset)

            target = db.session.get(User, target_user_id)
            if target is None:
                raise TargetNotFoundError()

            AssetStateMachine.validate_transition(asset.status, AssetStatus.ASSIGNED)

            assignment = AssetAssignment(
                asset_id=asset.id,
                user_id=target.id,
                assigned_at=datetime.utcnow(),
                notes=notes,
            )
            db.session.add(assignment)
            asset.status = AssetStatus.ASSIGNED
            db.session.flush()

            AssetHistory.add_entry(
                action='assigned',
                details=HistoryNarrator.asset_assigned(target, actor),
                user_id=actor.id,
                asset_id=asset.id,
            )

        logger.info(f"Asset {self.asset_id} assigned to user {target.id} by user {actor.id}")
        return assignment

    def return_asset(self, actor: User, condition: Optional[str] = None, notes: Optional[str] = None) -> AssetAssignment:
        """
        Close the open assignment.

        The holder may return their own asset; anyone else needs MANAGE_ASSETS.
        GOOD -> AVAILABLE, DAMAGED -> MAINTENANCE, LOST -> LOST; anything else
        returns the asset to AVAILABLE.

        Raises:
            NotAssignedError: If the asset has no open assignment
            ForbiddenError: If actor is neither the holder nor an asset manager
        """
        condition = condition or ReturnCondition.GOOD.value
        if isinstance(condition, ReturnCondition):
            condition = condition.value

        with atomic():
            asset = self._lock()
            assignment = OpenAssignmentPolicy.require_open(asset)

            if assignment.user_id != actor.id and not can(actor.role, Capability.MANAGE_ASSETS):
                raise ForbiddenError()

            new_status = AssetStateMachine.status_for_condition(condition)
            AssetStateMachine.validate_transition(asset.status, new_status)

            assignment.returned_at = datetime.utcnow()
            assignment.append_note(HistoryNarrator.return_note(condition, notes))
            asset.status = new_status

            AssetHistory.add_entry(
                action='returned',
                details=HistoryNarrator.asset_returned(assignment.user, condition),
                user_id=actor.id,
                asset_id=asset.id,
            )

        logger.info(f"Asset {self.asset_id} returned ({condition}) by user {actor.id}; now {new_status.value}")
        return assignment

    def revoke(self, actor: User, reason: Optional[str] = None) -> AssetAssignment:
        """
        Force-close the open assignment and make the asset AVAILABLE.

        Raises:
            ForbiddenError: If actor may not manage assets
            NotAssignedError: If the asset has no open assignment
        """
        require(actor, Capability.MANAGE_ASSETS)

        with atomic():
            asset = self._lock()
            assignment = OpenAssignmentPolicy.require_open(asset)
            AssetStateMachine.validate_transition(asset.status, AssetStatus.AVAILABLE)

            assignment.returned_at = datetime.utcnow()
            assignment.append_note(HistoryNarrator.revoke_note(reason))
            asset.status = AssetStatus.AVAILABLE

            AssetHistory.add_entry(
                action='revoked',
                details=HistoryNarrator.asset_revoked(assignment.user, reason),
                user_id=actor.id,
                asset_id=asset.id,
            )

        logger.info(f"Asset {self.asset_id} revoked from user {assignment.user_id} by user {actor.id}")
        return assignment

    def retire(self, actor: User, reason: Optional[str] = None) -> Asset:
        """
        Take the asset out of service permanently.

        Raises:
            ForbiddenError: If actor may not manage assets
            NotAvailableError: If the asset is still assigned
            TransitionError: If the asset is already retired
        """
        require(actor, Capability.MANAGE_ASSETS)

        with atomic():
            asset = self._lock()
            if asset.status == AssetStatus.ASSIGNED:
                raise NotAvailableError("Asset must be returned before it can be retired")
            AssetStateMachine.validate_transition(asset.status, AssetStatus.RETIRED)

            asset.status = AssetStatus.RETIRED

            AssetHistory.add_entry(
                action='retired',
                details=HistoryNarrator.asset_retired(actor, reason),
                user_id=actor.id,
                asset_id=asset.id,
            )

        logger.info(f"Asset {self.asset_id} retired by user {actor.id}")
        return asset

    def restore(self, actor: User, notes: Optional[str] = None) -> Asset:
        """
        Bring a MAINTENANCE or LOST asset back to AVAILABLE.

        Raises:
            ForbiddenError: If actor may not manage assets
            TransitionError: If the asset is not in MAINTENANCE or LOST
        """
        require(actor, Capability.MANAGE_ASSETS)

        with atomic():
            asset = self._lock()
            from_status = asset.status
            if from_status not in (AssetStatus.MAINTENANCE, AssetStatus.LOST):
                raise TransitionError(f"Only assets in MAINTENANCE or LOST can be restored (current: {from_status.value})")
            AssetStateMachine.validate_transition(from_status, AssetStatus.AVAILABLE)

            asset.status = AssetStatus.AVAILABLE

            AssetHistory.add_entry(
                action='restored',
                details=HistoryNarrator.asset_restored(from_status.value, actor, notes),
                user_id=actor.id,
                asset_id=asset.id,
            )

        logger.info(f"Asset {self.asset_id} restored from {from_status.value} by user {actor.id}")
        return asset
