"""
Asset routes
Asset registry plus the lifecycle actions: assign, return, revoke, retire, restore.
"""

from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required

from asset_tracker.buisness.assets.asset_context import AssetContext
from asset_tracker.presentation.payload import json_body, parse_datetime, parse_decimal, parse_int, parse_str
from asset_tracker.services.asset_service import AssetService
from asset_tracker.utils.logger import get_logger

bp = Blueprint('assets', __name__)
logger = get_logger("asset_tracker.routes.assets")


@bp.route('/assets', methods=['GET'])
@login_required
def list_assets():
    """All assets with their current holder and history count"""
    rows = AssetService.get_list_data(request)
    return jsonify({
        "success": True,
        "assets": [asset.to_dict(history_count=count) for asset, count in rows],
    })


@bp.route('/assets', methods=['POST'])
@login_required
def create_asset():
    data = json_body()

    ctx = AssetContext.create(
        current_user,
        name=parse_str(data.get('name'), 'name'),
        category=parse_str(data.get('category'), 'category'),
        description=parse_str(data.get('description'), 'description'),
        serial_number=parse_str(data.get('serialNumber'), 'serialNumber') or None,
        model=parse_str(data.get('model'), 'model'),
        brand=parse_str(data.get('brand'), 'brand'),
        location=parse_str(data.get('location'), 'location'),
        value=parse_decimal(data.get('value'), 'value'),
        purchase_date=parse_datetime(data.get('purchaseDate'), 'purchaseDate'),
        warranty_expiry=parse_datetime(data.get('warrantyExpiry'), 'warrantyExpiry'),
        asset_type_id=parse_int(data.get('assetTypeId'), 'assetTypeId'),
    )
    return jsonify({"success": True, "asset": ctx.asset.to_dict()}), 201


@bp.route('/assets/<int:asset_id>', methods=['GET'])
@login_required
def get_asset(asset_id):
    ctx = AssetContext.load(asset_id)
    return jsonify({
        "success": True,
        "asset": ctx.asset.to_dict(history_count=len(ctx.history)),
    })


@bp.route('/assets/<int:asset_id>/history', methods=['GET'])
@login_required
def asset_history(asset_id):
    ctx = AssetContext.load(asset_id)
    return jsonify({
        "success": True,
        "history": [entry.to_dict() for entry in ctx.history],
    })


# ========== Lifecycle actions ==========

@bp.route('/assets/<int:asset_id>/assign', methods=['POST'])
@login_required
def assign_asset(asset_id):
    data = json_body()
    ctx = AssetContext.load(asset_id)
    assignment = ctx.assign(
        current_user,
        target_user_id=parse_int(data.get('userId'), 'userId'),
        notes=parse_str(data.get('notes'), 'notes'),
    )
    return jsonify({"success": True, "assignment": assignment.to_dict(include_asset=True)}), 201


@bp.route('/assets/<int:asset_id>/return', methods=['POST'])
@login_required
def return_asset(asset_id):
    data = json_body()
    ctx = AssetContext.load(asset_id)
    assignment = ctx.return_asset(
        current_user,
        condition=parse_str(data.get('condition'), 'condition'),
        notes=parse_str(data.get('notes'), 'notes'),
    )
    return jsonify({"success": True, "assignment": assignment.to_dict(include_asset=True)})


@bp.route('/assets/<int:asset_id>/revoke', methods=['POST'])
@login_required
def revoke_asset(asset_id):
    data = json_body()
    ctx = AssetContext.load(asset_id)
    assignment = ctx.revoke(current_user, reason=parse_str(data.get('reason'), 'reason'))
    return jsonify({"success": True, "assignment": assignment.to_dict(include_asset=True)})


@bp.route('/assets/<int:asset_id>/retire', methods=['POST'])
@login_required
def retire_asset(asset_id):
    data = json_body()
    ctx = AssetContext.load(asset_id)
    asset = ctx.retire(current_user, reason=parse_str(data.get('reason'), 'reason'))
    return jsonify({"success": True, "asset": asset.to_dict()})


@bp.route('/assets/<int:asset_id>/restore', methods=['POST'])
@login_required
def restore_asset(asset_id):
    data = json_body()
    ctx = AssetContext.load(asset_id)
    asset = ctx.restore(current_user, notes=parse_str(data.get('notes'), 'notes'))
    return jsonify({"success": True, "asset": asset.to_dict()})
