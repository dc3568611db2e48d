"""
Asset Type management routes
CRUD operations for AssetType and its AssetConfiguration fields
"""

from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required

from asset_tracker.buisness.assets.asset_type_context import AssetTypeContext
from asset_tracker.presentation.payload import json_body, parse_bool, parse_int, parse_str, pick
from asset_tracker.utils.logger import get_logger

bp = Blueprint('asset_types', __name__)
logger = get_logger("asset_tracker.routes.asset_types")

TYPE_KEYS = {
    'name': 'name',
    'description': 'description',
    'category': 'category',
    'isActive': 'is_active',
}

CONFIGURATION_KEYS = {
    'name': 'name',
    'description': 'description',
    'dataType': 'data_type',
    'options': 'options',
    'isRequired': 'is_required',
    'defaultValue': 'default_value',
    'displayOrder': 'display_order',
    'isActive': 'is_active',
}

TYPE_TEXT_FIELDS = ('name', 'description', 'category')
CONFIGURATION_TEXT_FIELDS = ('name', 'description', 'data_type', 'options', 'default_value')


def _configuration_fields(data):
    fields = pick(data, CONFIGURATION_KEYS, CONFIGURATION_TEXT_FIELDS)
    for flag in ('is_required', 'is_active'):
        if flag in fields:
            fields[flag] = parse_bool(fields[flag], flag)
    if 'display_order' in fields:
        fields['display_order'] = parse_int(fields['display_order'], 'displayOrder') or 0
    return fields


@bp.route('/asset-types', methods=['GET'])
@login_required
def list_asset_types():
    """List active asset types, optionally with their configuration fields"""
    include_configs = request.args.get('includeConfigs', '').lower() == 'true'
    asset_types = AssetTypeContext.list_active()
    return jsonify({
        "success": True,
        "data": [t.to_dict(include_configs=include_configs) for t in asset_types],
    })


@bp.route('/asset-types', methods=['POST'])
@login_required
def create_asset_type():
    data = json_body()
    ctx = AssetTypeContext.create(
        current_user,
        name=parse_str(data.get('name'), 'name'),
        category=parse_str(data.get('category'), 'category'),
        description=parse_str(data.get('description'), 'description'),
    )
    return jsonify({"success": True, "data": ctx.asset_type.to_dict()}), 201


@bp.route('/asset-types/<int:asset_type_id>', methods=['PATCH', 'PUT'])
@login_required
def update_asset_type(asset_type_id):
    changes = pick(json_body(), TYPE_KEYS, TYPE_TEXT_FIELDS)
    if 'is_active' in changes:
        changes['is_active'] = parse_bool(changes['is_active'], 'isActive')

    ctx = AssetTypeContext.load(asset_type_id)
    asset_type = ctx.update(current_user, changes)
    return jsonify({"success": True, "data": asset_type.to_dict()})


@bp.route('/asset-types/<int:asset_type_id>', methods=['DELETE'])
@login_required
def delete_asset_type(asset_type_id):
    ctx = AssetTypeContext.load(asset_type_id)
    ctx.delete(current_user)
    return jsonify({"success": True, "message": "Asset type deleted successfully"})


# ========== Configurations ==========

@bp.route('/asset-types/<int:asset_type_id>/configurations', methods=['GET'])
@login_required
def list_configurations(asset_type_id):
    ctx = AssetTypeContext.load(asset_type_id)
    return jsonify({
        "success": True,
        "data": [c.to_dict() for c in ctx.configurations()],
    })


@bp.route('/asset-types/<int:asset_type_id>/configurations', methods=['POST'])
@login_required
def create_configuration(asset_type_id):
    fields = _configuration_fields(json_body())
    ctx = AssetTypeContext.load(asset_type_id)
    configuration = ctx.add_configuration(current_user, fields)
    return jsonify({"success": True, "data": configuration.to_dict()}), 201


@bp.route('/asset-types/<int:asset_type_id>/configurations/<int:configuration_id>', methods=['PATCH', 'PUT'])
@login_required
def update_configuration(asset_type_id, configuration_id):
    fields = _configuration_fields(json_body())
    ctx = AssetTypeContext.load(asset_type_id)
    configuration = ctx.update_configuration(current_user, configuration_id, fields)
    return jsonify({"success": True, "data": configuration.to_dict()})


@bp.route('/asset-types/<int:asset_type_id>/configurations/<int:configuration_id>', methods=['DELETE'])
@login_required
def delete_configuration(asset_type_id, configuration_id):
    ctx = AssetTypeContext.load(asset_type_id)
    ctx.delete_configuration(current_user, configuration_id)
    return jsonify({"success": True, "message": "Configuration deleted successfully"})
