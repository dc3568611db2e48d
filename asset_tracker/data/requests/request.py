from asset_tracker import db
from asset_tracker.buisness.requests.state_machine import RequestStatus, RequestType
from asset_tracker.data.core.timestamped_base import TimestampedBase, isoformat


class Request(TimestampedBase):
    __tablename__ = 'requests'

    # Domain fields
    requested_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    type = db.Column(db.Enum(RequestType, name='request_type', native_enum=False, length=20), nullable=False)
    title = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text, nullable=False)
    priority = db.Column(db.String(20), nullable=False, default='medium')
    device_type = db.Column(db.String(100), nullable=True)
    preferences = db.Column(db.Text, nullable=True)
    asset_id = db.Column(db.Integer, db.ForeignKey('assets.id'), nullable=True)
    status = db.Column(db.Enum(RequestStatus, name='request_status', native_enum=False, length=20),
                       nullable=False, default=RequestStatus.PENDING)
    approved_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)

    # Relationships
    requested_by = db.relationship('User', foreign_keys=[requested_by_id])
    approved_by = db.relationship('User', foreign_keys=[approved_by_id])
    asset = db.relationship('Asset')

    def to_dict(self):
        return {
            'id': self.id,
            'type': self.type.value if self.type else None,
            'title': self.title,
            'description': self.description,
            'priority': self.priority,
            'deviceType': self.device_type,
            'preferences': self.preferences,
            'status': self.status.value if self.status else None,
            'assetId': self.asset_id,
            'requestedById': self.requested_by_id,
            'approvedById': self.approved_by_id,
            'requestedBy': self.requested_by.to_dict() if self.requested_by else None,
            'approvedBy': self.approved_by.to_dict() if self.approved_by else None,
            'asset': {
                'id': self.asset.id,
                'name': self.asset.name,
                'serialNumber': self.asset.serial_number,
            } if self.asset else None,
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }

    def __repr__(self):
        return f'<Request {self.id} {self.type.value if self.type else "?"} ({self.status.value if self.status else "?"})>'
