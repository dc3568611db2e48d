"""
Open Assignment Policy

An asset is ASSIGNED exactly when it has one open assignment. Disagreement
between the two is a data-integrity bug: it is logged and surfaced, never
repaired here.
"""

from typing import List

from asset_tracker.buisness.assets.state_machine import AssetStatus
from asset_tracker.buisness.core.errors import (
    AlreadyAssignedError,
    AssetConsistencyError,
    NotAssignedError,
    NotAvailableError,
)
from asset_tracker.utils.logger import get_logger

logger = get_logger("asset_tracker.buisness.assets.policies")


class OpenAssignmentPolicy:
    """
    Guards assignment-related transitions.

    Always reads open assignments from the table rather than a cached
    relationship, so a row committed by a concurrent writer is seen.
    """

    @classmethod
    def find_open(cls, asset) -> List:
        from asset_tracker.data.core.asset_info.asset_assignment import AssetAssignment

        return (AssetAssignment.query
                .filter(AssetAssignment.asset_id == asset.id,
                        AssetAssignment.returned_at.is_(None))
                .order_by(AssetAssignment.assigned_at)
                .all())

    @classmethod
    def check_assignable(cls, asset) -> None:
        """
        Check that asset can take a new assignment.

        Raises:
            NotAvailableError: If asset.status is not AVAILABLE
            AlreadyAssignedError: If an open assignment already exists
        """
        if asset.status != AssetStatus.AVAILABLE:
            raise NotAvailableError()

        if cls.find_open(asset):
            logger.error(f"Data integrity: asset {asset.id} is AVAILABLE but has an open assignment")
            raise AlreadyAssignedError()

    @classmethod
    def require_open(cls, asset):
        """
        Return the single open assignment of asset.

        Raises:
            NotAssignedError: If there is no open assignment
            AssetConsistencyError: If status and open assignments disagree
        """
        open_rows = cls.find_open(asset)

        if not open_rows:
            if asset.status == AssetStatus.ASSIGNED:
                logger.error(f"Data integrity: asset {asset.id} is ASSIGNED with no open assignment")
            raise NotAssignedError()

        if len(open_rows) > 1:
            logger.error(f"Data integrity: asset {asset.id} has {len(open_rows)} open assignments")
            raise AssetConsistencyError()

        if asset.status != AssetStatus.ASSIGNED:
            logger.error(f"Data integrity: asset {asset.id} has an open assignment but status {asset.status.value}")
            raise AssetConsistencyError()

        return open_rows[0]

    @classmethod
    def is_consistent(cls, asset) -> bool:
        """True when status is ASSIGNED iff exactly one open assignment exists"""
        open_count = len(cls.find_open(asset))
        if open_count > 1:
            return False
        return (asset.status == AssetStatus.ASSIGNED) == (open_count == 1)
