"""
Pytest configuration and fixtures for the asset tracker tests

`app` leaves no application context pushed, so every test-client request gets
its own context (and its own Flask-Login user), as it would in production.
Tests that call the business layer directly take `app_ctx` instead.
"""
from contextlib import contextmanager

import pytest
from flask import has_app_context

from asset_tracker import create_app
from asset_tracker import db as _db
from asset_tracker.buisness.core.authorization import Role
from asset_tracker.buisness.core.identity import IdentityVerifier

TEST_PASSWORD = 'password123'

TEST_CONFIG = {
    'TESTING': True,
    'SECRET_KEY': 'test-secret-key-not-for-production-use-0123456789',
    'SQLALCHEMY_DATABASE_URI': 'sqlite://',
    'ENABLE_HTTPS': False,
    'FORCE_HTTPS_REDIRECT': False,
    'SESSION_COOKIE_SECURE': False,
    'RATELIMIT_ENABLED': False,
    'TRUSTED_PROXY_COUNT': 0,
    'ADMIN_EMAIL': None,
    'ADMIN_PASSWORD': None,
}


def make_app(**overrides):
    config = dict(TEST_CONFIG)
    config.update(overrides)
    return create_app(config)


@contextmanager
def setup_context(app):
    """Reuse the test's application context, or push a short-lived one"""
    if has_app_context():
        yield
    else:
        with app.app_context():
            yield


@pytest.fixture(scope='function')
def app():
    """Create Flask application on a fresh in-memory database"""
    app = make_app()

    with app.app_context():
        _db.create_all()

    yield app

    with app.app_context():
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope='function')
def app_ctx(app):
    """Hold an application context for tests that drive the business layer directly"""
    with app.app_context():
        yield app
        _db.session.remove()


@pytest.fixture(scope='function')
def db(app_ctx):
    return _db


@pytest.fixture(scope='function')
def client(app):
    """Create Flask test client (do not combine with app_ctx)"""
    return app.test_client()


def create_user(email, role=Role.USER, name=None, password=TEST_PASSWORD):
    """Helper function to insert a user directly; needs an application context"""
    from asset_tracker.data.core.user_info.user import User

    user = User(email=email, name=name, role=role, is_active=True)
    user.set_password(password)
    _db.session.add(user)
    _db.session.commit()
    _db.session.refresh(user)
    return user


@pytest.fixture
def auth_headers(app):
    """Build a Bearer header for a user"""
    def headers_for(user):
        with setup_context(app):
            return {'Authorization': f'Bearer {IdentityVerifier.issue_token(user)}'}
    return headers_for


@pytest.fixture
def user(app):
    with setup_context(app):
        return create_user('alice@example.com', Role.USER, name='Alice')


@pytest.fixture
def other_user(app):
    with setup_context(app):
        return create_user('bob@example.com', Role.USER, name='Bob')


@pytest.fixture
def manager(app):
    with setup_context(app):
        return create_user('manager@example.com', Role.MANAGER, name='Morgan Manager')


@pytest.fixture
def admin(app):
    with setup_context(app):
        return create_user('admin@example.com', Role.SUPER_ADMIN, name='Ada Admin')


@pytest.fixture
def asset(app, admin):
    """An AVAILABLE laptop registered by the admin"""
    from asset_tracker.buisness.assets.asset_context import AssetContext

    with setup_context(app):
        asset = AssetContext.create(admin, name='ThinkPad X1', category='Laptop',
                                    serial_number='SN-0001', brand='Lenovo').asset
        _db.session.refresh(asset)
        return asset
