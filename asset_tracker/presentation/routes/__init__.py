"""
Routes package for the asset tracker JSON API
Every blueprint is mounted under /api and shares the per-client rate limit.
"""

from flask import current_app

from asset_tracker import limiter
from asset_tracker.utils.logger import get_logger

logger = get_logger("asset_tracker.routes")

API_PREFIX = '/api'

# Import route modules
from . import auth, asset_types, assets, requests, users  # noqa: E402

API_BLUEPRINTS = (auth.bp, asset_types.bp, assets.bp, requests.bp, users.bp)


def _api_rate_limit():
    return current_app.config['RATELIMIT_DEFAULT']


for _blueprint in API_BLUEPRINTS:
    limiter.limit(_api_rate_limit)(_blueprint)


def init_app(app):
    """Initialize all route blueprints with the Flask app"""
    logger.debug("Initializing route blueprints")

    for blueprint in API_BLUEPRINTS:
        app.register_blueprint(blueprint, url_prefix=API_PREFIX)

    logger.info(f"Registered {len(API_BLUEPRINTS)} API blueprints under {API_PREFIX}")
