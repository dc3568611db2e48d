"""
Asset Service
Presentation service for asset list retrieval.

Handles:
- Query building and filtering for the asset list
- History counts per asset for list rows
"""

from typing import Dict, List, Optional, Tuple

from sqlalchemy import func

from asset_tracker import db
from asset_tracker.buisness.assets.state_machine import AssetStatus
from asset_tracker.buisness.core.errors import ValidationFailedError
from asset_tracker.data.core.asset_info.asset import Asset
from asset_tracker.data.core.history.asset_history import AssetHistory


class AssetService:
    """Service for asset presentation data"""

    @staticmethod
    def build_filtered_query(
        status: Optional[str] = None,
        category: Optional[str] = None,
        asset_type_id: Optional[int] = None,
        q: Optional[str] = None
    ):
        """
        Build a filtered asset query, newest first.

        Args:
            status: Filter by status name
            category: Filter by category (exact match)
            asset_type_id: Filter by asset type
            q: Partial match on name or serial number

        Raises:
            ValidationFailedError: If status is not a known asset status
        """
        query = Asset.query

        if status:
            try:
                query = query.filter(Asset.status == AssetStatus(status))
            except ValueError:
                raise ValidationFailedError("Invalid status filter")

        if category:
            query = query.filter(Asset.category == category)

        if asset_type_id:
            query = query.filter(Asset.asset_type_id == asset_type_id)

        if q:
            like = f"%{q}%"
            query = query.filter((Asset.name.ilike(like)) | (Asset.serial_number.ilike(like)))

        return query.order_by(Asset.created_at.desc(), Asset.id.desc())

    @staticmethod
    def history_counts(asset_ids: List[int]) -> Dict[int, int]:
        if not asset_ids:
            return {}
        rows = (db.session.query(AssetHistory.asset_id, func.count(AssetHistory.id))
                .filter(AssetHistory.asset_id.in_(asset_ids))
                .group_by(AssetHistory.asset_id)
                .all())
        return {asset_id: count for asset_id, count in rows}

    @staticmethod
    def get_list_data(request) -> List[Tuple[Asset, int]]:
        """
        Get filtered assets with their history counts.

        Args:
            request: Flask request object (filters read from query args)

        Returns:
            List of (asset, history count) pairs
        """
        query = AssetService.build_filtered_query(
            status=request.args.get('status'),
            category=request.args.get('category'),
            asset_type_id=request.args.get('assetTypeId', type=int),
            q=request.args.get('q'),
        )
        assets = query.all()
        counts = AssetService.history_counts([a.id for a in assets])
        return [(asset, counts.get(asset.id, 0)) for asset in assets]
