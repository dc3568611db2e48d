"""
Authentication routes
Signup, login (token issue), current user and logout.
"""

from flask import Blueprint, current_app, jsonify
from flask_login import current_user, login_required

from asset_tracker.buisness.core.identity import IdentityVerifier
from asset_tracker.buisness.core.user_context import UserContext
from asset_tracker.presentation.payload import json_body, parse_str
from asset_tracker.utils.logger import get_logger
from asset_tracker.utils.logging_sanitizer import sanitize_dict

bp = Blueprint('auth', __name__)
logger = get_logger("asset_tracker.routes.auth")


@bp.route('/auth/signup', methods=['POST'])
def signup():
    """Create an account; the proposed role is constrained to the known roles"""
    data = json_body()
    logger.debug(f"Signup payload: {sanitize_dict(data)}")

    ctx = UserContext.signup(
        email=parse_str(data.get('email'), 'email'),
        password=parse_str(data.get('password'), 'password'),
        name=parse_str(data.get('name'), 'name'),
        role=data.get('role'),
    )
    return jsonify({"success": True, "user": ctx.user.to_dict()}), 201


@bp.route('/auth/login', methods=['POST'])
def login():
    data = json_body()
    ctx = UserContext.authenticate(
        parse_str(data.get('email'), 'email'),
        parse_str(data.get('password'), 'password'),
    )

    token = IdentityVerifier.issue_token(ctx.user)
    response = jsonify({"success": True, "user": ctx.user.to_dict(), "token": token})
    response.set_cookie(
        current_app.config['AUTH_COOKIE_NAME'],
        token,
        max_age=current_app.config['AUTH_TOKEN_TTL_SECONDS'],
        httponly=True,
        secure=current_app.config['SESSION_COOKIE_SECURE'],
        samesite='Lax',
    )
    return response


@bp.route('/auth/me', methods=['GET'])
@login_required
def me():
    return jsonify({"success": True, "user": current_user.to_dict()})


@bp.route('/auth/logout', methods=['POST'])
def logout():
    """Tokens are stateless; logging out drops the auth cookie"""
    response = jsonify({"success": True})
    response.delete_cookie(current_app.config['AUTH_COOKIE_NAME'])
    return response
