from asset_tracker import db
from asset_tracker.data.core.timestamped_base import TimestampedBase, isoformat

CONFIGURATION_DATA_TYPES = ('text', 'number', 'select', 'boolean')


class AssetType(TimestampedBase):
    __tablename__ = 'asset_types'

    name = db.Column(db.String(100), unique=True, nullable=False)
    description = db.Column(db.Text, nullable=True)
    category = db.Column(db.String(100), nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    # Relationships
    configurations = db.relationship('AssetConfiguration', back_populates='asset_type',
                                     order_by='AssetConfiguration.display_order')

    def active_configurations(self):
        return [c for c in self.configurations if c.is_active]

    def to_dict(self, include_configs=False):
        data = {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'category': self.category,
            'isActive': self.is_active,
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }
        if include_configs:
            data['configurations'] = [c.to_dict() for c in self.active_configurations()]
        return data

    def __repr__(self):
        return f'<AssetType {self.name}>'


class AssetConfiguration(TimestampedBase):
    """Per-type custom attribute definition"""
    __tablename__ = 'asset_configurations'

    asset_type_id = db.Column(db.Integer, db.ForeignKey('asset_types.id'), nullable=False)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text, nullable=True)
    data_type = db.Column(db.String(20), nullable=False)
    options = db.Column(db.Text, nullable=True)
    is_required = db.Column(db.Boolean, default=False, nullable=False)
    default_value = db.Column(db.String(255), nullable=True)
    display_order = db.Column(db.Integer, default=0, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    asset_type = db.relationship('AssetType', back_populates='configurations')

    def to_dict(self):
        return {
            'id': self.id,
            'assetTypeId': self.asset_type_id,
            'name': self.name,
            'description': self.description,
            'dataType': self.data_type,
            'options': self.options,
            'isRequired': self.is_required,
            'defaultValue': self.default_value,
            'displayOrder': self.display_order,
            'isActive': self.is_active,
        }

    def __repr__(self):
        return f'<AssetConfiguration {self.name} ({self.data_type})>'
