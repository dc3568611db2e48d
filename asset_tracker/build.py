"""
Database build for the asset tracker
Creates tables and makes sure the bootstrap super administrator exists.
"""

from flask import current_app

from asset_tracker import db
from asset_tracker.buisness.core.authorization import Role
from asset_tracker.utils.logger import get_logger

logger = get_logger("asset_tracker.build")


def ensure_bootstrap_admin():
    """
    Create (or promote) the SUPER_ADMIN named by ADMIN_EMAIL / ADMIN_PASSWORD.

    Returns:
        User or None: The admin user, or None when no credentials are configured
    """
    from asset_tracker.data.core.user_info.user import User

    email = current_app.config.get('ADMIN_EMAIL')
    password = current_app.config.get('ADMIN_PASSWORD')
    if not email or not password:
        logger.warning("ADMIN_EMAIL/ADMIN_PASSWORD not set - no bootstrap administrator created")
        return None

    email = email.strip().lower()
    admin = User.query.filter_by(email=email).first()
    if admin is None:
        admin = User(email=email, name='Administrator', role=Role.SUPER_ADMIN, is_active=True)
        admin.set_password(password)
        db.session.add(admin)
        logger.info(f"Created bootstrap administrator {email}")
    elif admin.role != Role.SUPER_ADMIN:
        admin.role = Role.SUPER_ADMIN
        logger.info(f"Promoted {email} to SUPER_ADMIN")
    else:
        logger.debug(f"Bootstrap administrator {email} already present")

    db.session.commit()
    return admin


def build_database(app=None, create_admin=True):
    """
    Create all tables and the bootstrap administrator.

    Args:
        app: Flask application (defaults to current_app)
        create_admin: Skip the administrator when False
    """
    app = app or current_app._get_current_object()
    with app.app_context():
        logger.info("Creating database tables")
        db.create_all()
        if create_admin:
            ensure_bootstrap_admin()
        logger.info("Database build complete")
