"""
Database build and bootstrap administrator tests.
"""

import pytest

from asset_tracker import db as _db
from asset_tracker.build import build_database, ensure_bootstrap_admin
from asset_tracker.buisness.core.authorization import Role
from asset_tracker.data.core.user_info.user import User
from asset_tracker.test.conftest import create_user, make_app


@pytest.fixture
def admin_app():
    app = make_app(ADMIN_EMAIL='Root@Example.com', ADMIN_PASSWORD='bootstrap-pass')
    yield app
    with app.app_context():
        _db.session.remove()
        _db.drop_all()


def test_build_creates_bootstrap_admin(admin_app):
    build_database(admin_app)

    with admin_app.app_context():
        admin = User.query.filter_by(email='root@example.com').one()
        assert admin.role == Role.SUPER_ADMIN
        assert admin.check_password('bootstrap-pass')

    build_database(admin_app)
    with admin_app.app_context():
        assert User.query.count() == 1, "Rebuilding should not duplicate the administrator"


def test_existing_account_is_promoted(admin_app):
    with admin_app.app_context():
        _db.create_all()
        create_user('root@example.com', Role.USER)

        admin = ensure_bootstrap_admin()
        assert admin.role == Role.SUPER_ADMIN
        assert User.query.count() == 1


def test_build_without_admin_credentials(app_ctx):
    assert ensure_bootstrap_admin() is None
    assert User.query.count() == 0
