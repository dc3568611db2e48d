from asset_tracker import db
from asset_tracker.buisness.assets.state_machine import AssetStatus
from asset_tracker.data.core.timestamped_base import TimestampedBase, isoformat


class Asset(TimestampedBase):
    __tablename__ = 'assets'

    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text, nullable=True)
    serial_number = db.Column(db.String(100), unique=True, nullable=True)
    model = db.Column(db.String(100), nullable=True)
    brand = db.Column(db.String(100), nullable=True)
    category = db.Column(db.String(100), nullable=False)
    location = db.Column(db.String(200), nullable=True)
    value = db.Column(db.Numeric(12, 2), nullable=True)
    purchase_date = db.Column(db.DateTime, nullable=True)
    warranty_expiry = db.Column(db.DateTime, nullable=True)
    status = db.Column(db.Enum(AssetStatus, name='asset_status', native_enum=False, length=20),
                       nullable=False, default=AssetStatus.AVAILABLE)
    asset_type_id = db.Column(db.Integer, db.ForeignKey('asset_types.id'), nullable=True)
    created_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)

    # Relationships
    asset_type = db.relationship('AssetType')
    created_by = db.relationship('User', foreign_keys=[created_by_id])
    assignments = db.relationship('AssetAssignment', back_populates='asset',
                                  order_by='AssetAssignment.assigned_at')

    @property
    def open_assignments(self):
        """Assignments with no return stamp; more than one is a data-integrity bug"""
        return [a for a in self.assignments if a.returned_at is None]

    def to_dict(self, include_assignment=True, history_count=None):
        data = {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'serialNumber': self.serial_number,
            'model': self.model,
            'brand': self.brand,
            'category': self.category,
            'location': self.location,
            'value': float(self.value) if self.value is not None else None,
            'purchaseDate': isoformat(self.purchase_date),
            'warrantyExpiry': isoformat(self.warranty_expiry),
            'status': self.status.value if self.status else None,
            'assetTypeId': self.asset_type_id,
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }
        if include_assignment:
            data['assignments'] = [a.to_dict() for a in self.open_assignments]
        if history_count is not None:
            data['historyCount'] = history_count
        return data

    def __repr__(self):
        return f'<Asset {self.name} ({self.status.value if self.status else "?"})>'
