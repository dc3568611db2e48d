"""
Request workflow routes
Submit and list requests; PATCH moves a request through its workflow.
"""

from flask import Blueprint, jsonify
from flask_login import current_user, login_required

from asset_tracker.buisness.requests.request_context import RequestContext
from asset_tracker.presentation.payload import json_body, parse_int, parse_str

bp = Blueprint('requests', __name__)


@bp.route('/requests', methods=['GET'])
@login_required
def list_requests():
    """Own requests for USER; every request for MANAGER and above"""
    requests = RequestContext.list_for(current_user)
    return jsonify({"success": True, "requests": [r.to_dict() for r in requests]})


@bp.route('/requests', methods=['POST'])
@login_required
def submit_request():
    data = json_body()
    ctx = RequestContext.submit(
        current_user,
        request_type=parse_str(data.get('type'), 'type'),
        description=parse_str(data.get('description'), 'description'),
        urgency=parse_str(data.get('urgency'), 'urgency'),
        device_type=parse_str(data.get('deviceType'), 'deviceType'),
        preferences=parse_str(data.get('preferences'), 'preferences'),
        asset_id=parse_int(data.get('assetId'), 'assetId'),
    )
    return jsonify({"success": True, "request": ctx.request.to_dict()}), 201


@bp.route('/requests/<int:request_id>', methods=['GET'])
@login_required
def get_request(request_id):
    ctx = RequestContext.load_visible(request_id, current_user)
    return jsonify({
        "success": True,
        "request": ctx.request.to_dict(),
        "history": [entry.to_dict() for entry in ctx.history],
    })


@bp.route('/requests/<int:request_id>', methods=['PATCH', 'PUT'])
@login_required
def update_request_status(request_id):
    data = json_body()
    ctx = RequestContext.load(request_id)
    request = ctx.change_status(current_user, parse_str(data.get('status'), 'status'))
    return jsonify({"success": True, "request": request.to_dict()})
