from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_login import LoginManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from werkzeug.middleware.proxy_fix import ProxyFix
import os
from asset_tracker.utils.logger import get_logger

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()


# Storage comes from RATELIMIT_STORAGE_URI (memory:// by default, Redis for multiple instances)
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[],
)


def _env_flag(name, default):
    return os.environ.get(name, default).lower() in ('true', '1', 'yes', 'on')


def create_app(config_overrides=None):
    from pathlib import Path

    app = Flask(__name__)

    logger = get_logger("asset_tracker")
    logger.info("Initializing Flask application")

    # Configuration
    app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY')

    base_dir = Path(__file__).parent.parent
    db_env = os.environ.get('DATABASE_URL')
    if db_env:
        app.config['SQLALCHEMY_DATABASE_URI'] = db_env
    else:
        instance_dir = base_dir / 'instance'
        instance_dir.mkdir(parents=True, exist_ok=True)
        default_db_path = instance_dir / 'asset_tracker.db'
        app.config['SQLALCHEMY_DATABASE_URI'] = f"sqlite:///{str(default_db_path.resolve())}"
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False

    # Identity tokens
    app.config['AUTH_TOKEN_TTL_SECONDS'] = int(os.environ.get('AUTH_TOKEN_TTL_SECONDS', str(7 * 24 * 3600)))
    app.config['AUTH_COOKIE_NAME'] = 'auth-token'

    # Rate limiting (fixed window per client address)
    app.config['RATELIMIT_DEFAULT'] = os.environ.get('RATELIMIT_DEFAULT', '100 per 15 minutes')
    app.config['RATELIMIT_STORAGE_URI'] = os.environ.get('RATELIMIT_STORAGE_URI', 'memory://')
    app.config['RATELIMIT_ENABLED'] = _env_flag('RATELIMIT_ENABLED', 'True')

    # Number of reverse proxies whose X-Forwarded-* headers are trusted (0 = none)
    app.config['TRUSTED_PROXY_COUNT'] = int(os.environ.get('TRUSTED_PROXY_COUNT', '0'))

    # HTTPS/TLS Configuration
    app.config['ENABLE_HTTPS'] = _env_flag('ENABLE_HTTPS', 'True')
    app.config['FORCE_HTTPS_REDIRECT'] = _env_flag('FORCE_HTTPS_REDIRECT', 'True')

    # Session cookie security configuration
    app.config['SESSION_COOKIE_SECURE'] = _env_flag('SESSION_COOKIE_SECURE', 'True')
    app.config['SESSION_COOKIE_HTTPONLY'] = True
    app.config['SESSION_COOKIE_SAMESITE'] = 'Lax'

    # Bootstrap administrator created by build_database()
    app.config['ADMIN_EMAIL'] = os.environ.get('ADMIN_EMAIL')
    app.config['ADMIN_PASSWORD'] = os.environ.get('ADMIN_PASSWORD')

    if config_overrides:
        app.config.update(config_overrides)

    # SECURITY: Require SECRET_KEY - no fallback
    if not app.config['SECRET_KEY']:
        logger.critical("SECRET_KEY not set in environment! Application cannot start.")
        raise RuntimeError("SECRET_KEY environment variable is required")

    if app.config['ENABLE_HTTPS']:
        logger.info("HTTPS enforcement enabled")
        if app.config['FORCE_HTTPS_REDIRECT']:
            logger.info("Automatic HTTP to HTTPS redirect enabled")
    else:
        logger.warning("HTTPS enforcement DISABLED - Acceptable for development only!")

    proxy_count = app.config['TRUSTED_PROXY_COUNT']
    if proxy_count:
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=proxy_count, x_proto=proxy_count, x_host=proxy_count)
        logger.info(f"Trusting X-Forwarded-* headers from {proxy_count} proxy hop(s)")

    # Initialize extensions with app
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    limiter.init_app(app)

    logger.debug("Extensions initialized")

    # Import models to ensure they're registered with SQLAlchemy
    from asset_tracker.data.core.user_info.user import User
    from asset_tracker.data.core.asset_info.asset_type import AssetType, AssetConfiguration
    from asset_tracker.data.core.asset_info.asset import Asset
    from asset_tracker.data.core.asset_info.asset_assignment import AssetAssignment
    from asset_tracker.data.core.history.asset_history import AssetHistory
    from asset_tracker.data.requests.request import Request

    logger.debug("Models imported and registered")

    _register_identity_loader()

    from asset_tracker.presentation.routes import init_app as init_routes
    from asset_tracker.presentation.errors import register_error_handlers

    init_routes(app)
    register_error_handlers(app)

    # Add HTTPS redirect before request processing
    @app.before_request
    def enforce_https():
        """Redirect HTTP requests to HTTPS if HTTPS enforcement is enabled"""
        if app.config.get('ENABLE_HTTPS') and app.config.get('FORCE_HTTPS_REDIRECT'):
            from flask import request, redirect

            if not request.is_secure and not request.headers.get('X-Forwarded-Proto') == 'https':
                url = request.url.replace('http://', 'https://', 1)
                return redirect(url, code=301)

    # Add security headers to all responses
    @app.after_request
    def set_security_headers(response):
        response.headers['X-Frame-Options'] = 'DENY'
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-XSS-Protection'] = '1; mode=block'
        response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'
        response.headers['Content-Security-Policy'] = "default-src 'none'; frame-ancestors 'none'"

        if app.config.get('ENABLE_HTTPS'):
            response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'

        return response

    logger.info("Flask application initialized")
    return app


def _register_identity_loader():
    """
    Wire Flask-Login to the bearer token verifier.

    Every request re-derives the caller from the token and reloads the user row,
    so the role used for authorization is always the stored one.
    """
    from flask import current_app
    from asset_tracker.buisness.core.identity import IdentityVerifier
    from asset_tracker.buisness.core.errors import UnauthenticatedError
    from asset_tracker.data.core.user_info.user import User

    @login_manager.request_loader
    def load_user_from_request(req):
        token = IdentityVerifier.extract_token(req.headers.get('Authorization'),
                                               req.cookies.get(current_app.config['AUTH_COOKIE_NAME']))
        if not token:
            return None
        try:
            user_id = IdentityVerifier.verify_token(token)
        except UnauthenticatedError:
            return None
        user = db.session.get(User, user_id)
        if user is None or not user.is_active:
            return None
        return user

    @login_manager.unauthorized_handler
    def unauthorized():
        raise UnauthenticatedError("Not authenticated")
