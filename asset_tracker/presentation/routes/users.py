"""
User administration routes
List users, change roles, and per-user asset overview.
"""

from flask import Blueprint, jsonify
from flask_login import current_user, login_required

from asset_tracker.buisness.core.user_context import UserContext
from asset_tracker.presentation.payload import json_body

bp = Blueprint('users', __name__)


@bp.route('/users', methods=['GET'])
@login_required
def list_users():
    users = UserContext.list_users(current_user)
    return jsonify({"success": True, "users": [u.to_dict(include_timestamps=True) for u in users]})


@bp.route('/users/<int:user_id>/role', methods=['PATCH', 'PUT'])
@login_required
def change_role(user_id):
    data = json_body()
    user = UserContext.change_role(current_user, user_id, data.get('role'))
    return jsonify({"success": True, "user": user.to_dict()})


@bp.route('/users/<int:user_id>/assets', methods=['GET'])
@login_required
def user_assets(user_id):
    """Current assignments, returned assignments and history authored by the user"""
    UserContext.ensure_can_view_assets(current_user, user_id)
    overview = UserContext.load(user_id).assets_overview(current_user)
    return jsonify({
        "success": True,
        "user": overview['user'].to_dict(),
        "currentAssignments": [a.to_dict(include_asset=True) for a in overview['current_assignments']],
        "assignmentHistory": [a.to_dict(include_asset=True) for a in overview['assignment_history']],
        "assetHistory": [entry.to_dict() for entry in overview['asset_history']],
    })
