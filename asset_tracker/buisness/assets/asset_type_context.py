"""
Asset Type Context
Catalogue of asset types and the custom configuration fields each type defines.

Handles:
- Asset type create/update/delete with unique names
- Configuration field create/update/delete per type
"""

from typing import Any, Dict, List, Optional

from asset_tracker import db
from asset_tracker.buisness.core.authorization import Capability, require
from asset_tracker.buisness.core.errors import (
    ConflictError,
    DuplicateNameError,
    NotFoundError,
    ValidationFailedError,
)
from asset_tracker.data.core.asset_info.asset import Asset
from asset_tracker.data.core.asset_info.asset_type import (
    CONFIGURATION_DATA_TYPES,
    AssetConfiguration,
    AssetType,
)
from asset_tracker.data.transaction import atomic
from asset_tracker.utils.logger import get_logger

logger = get_logger("asset_tracker.buisness.assets.asset_type_context")

TYPE_FIELDS = ('name', 'description', 'category', 'is_active')
CONFIGURATION_FIELDS = (
    'name', 'description', 'data_type', 'options', 'is_required',
    'default_value', 'display_order', 'is_active',
)
CONFIGURATION_TEXT_FIELDS = ('name', 'description', 'data_type', 'options', 'default_value')


class AssetTypeContext:
    """Context for one asset type and its configuration fields"""

    def __init__(self, asset_type: AssetType):
        self.asset_type = asset_type
        self.asset_type_id = asset_type.id

    @classmethod
    def load(cls, asset_type_id: int) -> 'AssetTypeContext':
        asset_type = db.session.get(AssetType, asset_type_id)
        if asset_type is None:
            raise NotFoundError("Asset type not found")
        return cls(asset_type)

    @staticmethod
    def list_active() -> List[AssetType]:
        return AssetType.query.filter_by(is_active=True).order_by(AssetType.name).all()

    @staticmethod
    def _check_name_free(name: str, exclude_id: Optional[int] = None) -> None:
        query = AssetType.query.filter(AssetType.name == name)
        if exclude_id is not None:
            query = query.filter(AssetType.id != exclude_id)
        if query.first() is not None:
            raise DuplicateNameError()

    # ========== Asset Types ==========

    @classmethod
    def create(cls, actor, name: Optional[str], category: Optional[str],
               description: Optional[str] = None) -> 'AssetTypeContext':
        """
        Raises:
            ForbiddenError: If actor may not manage asset types
            ValidationFailedError: If name or category is missing
            DuplicateNameError: If the name is taken
        """
        require(actor, Capability.MANAGE_ASSET_TYPES)

        if not isinstance(name, str) or not isinstance(category, str) or not name or not category:
            raise ValidationFailedError("Name and category are required")

        cls._check_name_free(name)

        with atomic(conflict=DuplicateNameError()):
            asset_type = AssetType(name=name, category=category, description=description, is_active=True)
            db.session.add(asset_type)

        logger.info(f"Asset type {asset_type.id} ({name}) created by user {actor.id}")
        return cls(asset_type)

    def update(self, actor, changes: Dict[str, Any]) -> AssetType:
        """
        Apply a partial update.

        Raises:
            ForbiddenError: If actor may not manage asset types
            ValidationFailedError: If a required field is blanked
            DuplicateNameError: If the new name is taken by another type
        """
        require(actor, Capability.MANAGE_ASSET_TYPES)

        changes = {k: v for k, v in changes.items() if k in TYPE_FIELDS}
        for required in ('name', 'category'):
            if required in changes and not changes[required]:
                raise ValidationFailedError(f"{required.capitalize()} cannot be empty")

        if 'name' in changes and changes['name'] != self.asset_type.name:
            self._check_name_free(changes['name'], exclude_id=self.asset_type_id)

        with atomic(conflict=DuplicateNameError()):
            for key, value in changes.items():
                setattr(self.asset_type, key, value)

        logger.info(f"Asset type {self.asset_type_id} updated by user {actor.id}: {sorted(changes)}")
        return self.asset_type

    def delete(self, actor) -> None:
        """
        Delete the type together with its configurations.

        Raises:
            ForbiddenError: If actor may not manage asset types
            ConflictError: If any asset still references the type
        """
        require(actor, Capability.MANAGE_ASSET_TYPES)

        if Asset.query.filter_by(asset_type_id=self.asset_type_id).count() > 0:
            raise ConflictError("Cannot delete asset type that has associated assets")

        with atomic():
            for configuration in list(self.asset_type.configurations):
                db.session.delete(configuration)
            db.session.delete(self.asset_type)

        logger.info(f"Asset type {self.asset_type_id} deleted by user {actor.id}")

    # ========== Configurations ==========

    def configurations(self) -> List[AssetConfiguration]:
        """Active configuration fields ordered by display order"""
        return (AssetConfiguration.query
                .filter_by(asset_type_id=self.asset_type_id, is_active=True)
                .order_by(AssetConfiguration.display_order, AssetConfiguration.id)
                .all())

    def _load_configuration(self, configuration_id: int) -> AssetConfiguration:
        configuration = db.session.get(AssetConfiguration, configuration_id)
        if configuration is None or configuration.asset_type_id != self.asset_type_id:
            raise NotFoundError("Configuration not found")
        return configuration

    @staticmethod
    def _check_text_fields(fields: Dict[str, Any]) -> None:
        for key in CONFIGURATION_TEXT_FIELDS:
            if fields.get(key) is not None and not isinstance(fields[key], str):
                raise ValidationFailedError(f"Invalid text for {key}")

    @staticmethod
    def _validate_data_type(data_type) -> None:
        if data_type not in CONFIGURATION_DATA_TYPES:
            raise ValidationFailedError(
                f"Invalid data type. Must be one of: {', '.join(CONFIGURATION_DATA_TYPES)}"
            )

    def add_configuration(self, actor, fields: Dict[str, Any]) -> AssetConfiguration:
        """
        Raises:
            ForbiddenError: If actor may not manage asset types
            ValidationFailedError: If name or data type is missing or invalid
        """
        require(actor, Capability.MANAGE_ASSET_TYPES)

        fields = {k: v for k, v in fields.items() if k in CONFIGURATION_FIELDS and v is not None}
        self._check_text_fields(fields)
        if not fields.get('name') or not fields.get('data_type'):
            raise ValidationFailedError("Name and data type are required")
        self._validate_data_type(fields['data_type'])

        with atomic():
            configuration = AssetConfiguration(asset_type_id=self.asset_type_id, **fields)
            db.session.add(configuration)

        logger.info(f"Configuration {configuration.id} added to asset type {self.asset_type_id} by user {actor.id}")
        return configuration

    def update_configuration(self, actor, configuration_id: int, changes: Dict[str, Any]) -> AssetConfiguration:
        require(actor, Capability.MANAGE_ASSET_TYPES)

        configuration = self._load_configuration(configuration_id)
        changes = {k: v for k, v in changes.items() if k in CONFIGURATION_FIELDS}
        self._check_text_fields(changes)
        if 'name' in changes and not changes['name']:
            raise ValidationFailedError("Name cannot be empty")
        if 'data_type' in changes:
            self._validate_data_type(changes['data_type'])

        with atomic():
            for key, value in changes.items():
                setattr(configuration, key, value)

        logger.info(f"Configuration {configuration_id} updated by user {actor.id}")
        return configuration

    def delete_configuration(self, actor, configuration_id: int) -> None:
        require(actor, Capability.MANAGE_ASSET_TYPES)

        configuration = self._load_configuration(configuration_id)
        with atomic():
            db.session.delete(configuration)

        logger.info(f"Configuration {configuration_id} deleted by user {actor.id}")
