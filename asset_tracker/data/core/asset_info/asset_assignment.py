from asset_tracker import db
from asset_tracker.data.core.timestamped_base import TimestampedBase, isoformat
from datetime import datetime


class AssetAssignment(TimestampedBase):
    """
    Custody record of an asset by a user.

    Rows are closed by stamping returned_at, never deleted. The partial unique
    index allows at most one open row per asset, so of two concurrent assigns
    only the first to commit succeeds.
    """
    __tablename__ = 'asset_assignments'
    __table_args__ = (
        db.Index('uq_asset_assignments_open', 'asset_id', unique=True,
                 sqlite_where=db.text('returned_at IS NULL'),
                 postgresql_where=db.text('returned_at IS NULL')),
    )

    asset_id = db.Column(db.Integer, db.ForeignKey('assets.id'), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    assigned_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    returned_at = db.Column(db.DateTime, nullable=True)
    notes = db.Column(db.Text, nullable=True)

    asset = db.relationship('Asset', back_populates='assignments')
    user = db.relationship('User')

    @property
    def is_open(self):
        return self.returned_at is None

    def append_note(self, note):
        self.notes = f"{self.notes} | {note}" if self.notes else note

    def to_dict(self, include_asset=False):
        data = {
            'id': self.id,
            'assetId': self.asset_id,
            'userId': self.user_id,
            'assignedAt': isoformat(self.assigned_at),
            'returnedAt': isoformat(self.returned_at),
            'notes': self.notes,
            'user': {
                'id': self.user.id,
                'name': self.user.name,
                'email': self.user.email,
            } if self.user else None,
        }
        if include_asset and self.asset is not None:
            data['asset'] = self.asset.to_dict(include_assignment=False)
        return data

    def __repr__(self):
        state = 'open' if self.is_open else 'closed'
        return f'<AssetAssignment asset={self.asset_id} user={self.user_id} {state}>'
