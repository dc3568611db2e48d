"""
Asset type catalogue and configuration field tests.
"""

import pytest

from asset_tracker.buisness.assets.asset_context import AssetContext
from asset_tracker.buisness.assets.asset_type_context import AssetTypeContext
from asset_tracker.buisness.core.errors import (
    ConflictError,
    DuplicateNameError,
    ForbiddenError,
    NotFoundError,
    ValidationFailedError,
)
from asset_tracker.data.core.asset_info.asset_type import AssetConfiguration, AssetType


pytestmark = pytest.mark.usefixtures('app_ctx')


@pytest.fixture
def laptop_type(admin):
    return AssetTypeContext.create(admin, name='Laptop', category='Computing', description='Portable computers')


def test_create_and_list(admin, laptop_type):
    AssetTypeContext.create(admin, name='Desk Phone', category='Telephony')

    names = [t.name for t in AssetTypeContext.list_active()]
    assert names == ['Desk Phone', 'Laptop']


def test_create_validation(admin):
    with pytest.raises(ValidationFailedError) as exc:
        AssetTypeContext.create(admin, name='Monitor', category='')
    assert exc.value.message == "Name and category are required"


def test_duplicate_name(admin, laptop_type):
    with pytest.raises(DuplicateNameError) as exc:
        AssetTypeContext.create(admin, name='Laptop', category='Other')
    assert exc.value.status_code == 409


def test_only_admin_manages_types(manager, laptop_type):
    with pytest.raises(ForbiddenError):
        AssetTypeContext.create(manager, name='Tablet', category='Computing')
    with pytest.raises(ForbiddenError):
        laptop_type.update(manager, {'name': 'Notebook'})
    with pytest.raises(ForbiddenError):
        laptop_type.delete(manager)


def test_update(admin, laptop_type):
    other = AssetTypeContext.create(admin, name='Tablet', category='Computing')

    updated = laptop_type.update(admin, {'description': 'Company laptops', 'is_active': False})
    assert updated.description == 'Company laptops'
    assert [t.name for t in AssetTypeContext.list_active()] == ['Tablet']

    with pytest.raises(DuplicateNameError):
        other.update(admin, {'name': 'Laptop'})
    with pytest.raises(ValidationFailedError):
        other.update(admin, {'category': ''})


def test_delete_refuses_types_in_use(admin, laptop_type):
    AssetContext.create(admin, name='XPS 13', category='Laptop', asset_type_id=laptop_type.asset_type_id)

    with pytest.raises(ConflictError) as exc:
        laptop_type.delete(admin)
    assert exc.value.message == "Cannot delete asset type that has associated assets"


def test_delete_removes_configurations(db, admin, laptop_type):
    laptop_type.add_configuration(admin, {'name': 'RAM', 'data_type': 'number'})
    type_id = laptop_type.asset_type_id

    laptop_type.delete(admin)

    assert db.session.get(AssetType, type_id) is None
    assert AssetConfiguration.query.filter_by(asset_type_id=type_id).count() == 0
    with pytest.raises(NotFoundError):
        AssetTypeContext.load(type_id)


# ========== Configurations ==========

def test_configurations_are_ordered(admin, laptop_type):
    laptop_type.add_configuration(admin, {'name': 'Storage', 'data_type': 'number', 'display_order': 2})
    laptop_type.add_configuration(admin, {'name': 'OS', 'data_type': 'select', 'options': 'Linux,Windows',
                                          'display_order': 1})
    hidden = laptop_type.add_configuration(admin, {'name': 'Legacy tag', 'data_type': 'text'})
    laptop_type.update_configuration(admin, hidden.id, {'is_active': False})

    assert [c.name for c in laptop_type.configurations()] == ['OS', 'Storage']


@pytest.mark.parametrize('fields,message', [
    ({'name': 'RAM'}, "Name and data type are required"),
    ({'data_type': 'text'}, "Name and data type are required"),
    ({'name': 'RAM', 'data_type': 'float'}, "Invalid data type. Must be one of: text, number, select, boolean"),
    ({'name': 'Color', 'data_type': 'select', 'options': ['red', 'blue']}, "Invalid text for options"),
    ({'name': 8, 'data_type': 'number'}, "Invalid text for name"),
])
def test_configuration_validation(admin, laptop_type, fields, message):
    with pytest.raises(ValidationFailedError) as exc:
        laptop_type.add_configuration(admin, fields)
    assert exc.value.message == message


def test_configuration_must_belong_to_type(admin, laptop_type):
    other = AssetTypeContext.create(admin, name='Phone', category='Mobile')
    configuration = other.add_configuration(admin, {'name': 'IMEI', 'data_type': 'text'})

    with pytest.raises(NotFoundError) as exc:
        laptop_type.update_configuration(admin, configuration.id, {'name': 'Serial'})
    assert exc.value.message == "Configuration not found"

    other.delete_configuration(admin, configuration.id)
    assert other.configurations() == []
