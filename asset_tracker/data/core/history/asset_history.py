from asset_tracker import db
from asset_tracker.buisness.core.errors import ImmutableHistoryError
from asset_tracker.data.core.timestamped_base import isoformat
from asset_tracker.utils.logger import get_logger
from datetime import datetime
from sqlalchemy import event

logger = get_logger("asset_tracker.data.history")


class AssetHistory(db.Model):
    """
    Append-only journal of state-changing actions.

    Asset lifecycle actions carry asset_id; request workflow transitions carry
    request_id (and asset_id when the request names an asset).
    """
    __tablename__ = 'asset_history'

    id = db.Column(db.Integer, primary_key=True)
    asset_id = db.Column(db.Integer, db.ForeignKey('assets.id'), nullable=True, index=True)
    request_id = db.Column(db.Integer, db.ForeignKey('requests.id'), nullable=True, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True, index=True)
    action = db.Column(db.String(50), nullable=False)
    details = db.Column(db.Text, nullable=True)
    timestamp = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    # Relationships (no backrefs)
    asset = db.relationship('Asset')
    user = db.relationship('User')

    def __repr__(self):
        return f'<AssetHistory {self.action}: {self.details}>'

    @classmethod
    def add_entry(cls, action, details, user_id=None, asset_id=None, request_id=None):
        """
        Stage a history row in the current transaction.

        Args:
            action (str): Action tag, e.g. "assigned"
            details (str): Human-readable description
            user_id (int, optional): Acting user
            asset_id (int, optional): Asset the action applies to
            request_id (int, optional): Request the action applies to

        Returns:
            AssetHistory: The flushed entry (not committed)
        """
        entry = cls(
            action=action,
            details=details,
            user_id=user_id,
            asset_id=asset_id,
            request_id=request_id,
        )
        db.session.add(entry)
        db.session.flush()  # Get the ID without committing
        return entry

    def to_dict(self):
        return {
            'id': self.id,
            'assetId': self.asset_id,
            'requestId': self.request_id,
            'userId': self.user_id,
            'action': self.action,
            'details': self.details,
            'timestamp': isoformat(self.timestamp),
            'user': {
                'id': self.user.id,
                'name': self.user.name,
                'email': self.user.email,
            } if self.user else None,
            'asset': {
                'id': self.asset.id,
                'name': self.asset.name,
            } if self.asset else None,
        }


def _block_history_update(mapper, connection, target):
    logger.error(f"Blocked UPDATE of history entry {target.id}")
    raise ImmutableHistoryError("History entries are immutable and cannot be modified")


def _block_history_delete(mapper, connection, target):
    logger.error(f"Blocked DELETE of history entry {target.id}")
    raise ImmutableHistoryError("History entries cannot be deleted")


event.listen(AssetHistory, 'before_update', _block_history_update)
event.listen(AssetHistory, 'before_delete', _block_history_delete)
