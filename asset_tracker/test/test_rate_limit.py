"""
Per-client rate limiting on the API blueprints.
"""

import pytest

from asset_tracker import db as _db
from asset_tracker.test.conftest import make_app


def limited_app(**overrides):
    app = make_app(RATELIMIT_ENABLED=True, RATELIMIT_DEFAULT='2 per minute', **overrides)
    with app.app_context():
        _db.create_all()
    return app


@pytest.fixture
def limited_client():
    app = limited_app()
    yield app.test_client()
    with app.app_context():
        _db.drop_all()


@pytest.fixture
def proxied_client():
    app = limited_app(TRUSTED_PROXY_COUNT=1)
    yield app.test_client()
    with app.app_context():
        _db.drop_all()


def test_third_request_in_window_is_rejected(limited_client):
    for _ in range(2):
        assert limited_client.get('/api/assets').status_code == 401

    response = limited_client.get('/api/assets')
    assert response.status_code == 429
    assert response.get_json() == {"success": False, "error": "Too many requests"}


def test_forwarded_header_is_ignored_without_trusted_proxy(limited_client):
    """A client cannot mint a fresh window by rotating X-Forwarded-For"""
    for hop in range(2):
        limited_client.get('/api/requests', headers={'X-Forwarded-For': f'203.0.113.{hop}'})

    response = limited_client.get('/api/requests', headers={'X-Forwarded-For': '198.51.100.23'})
    assert response.status_code == 429


def test_limit_is_keyed_by_client_behind_trusted_proxy(proxied_client):
    first = {'X-Forwarded-For': '203.0.113.7'}
    second = {'X-Forwarded-For': '198.51.100.23'}

    for _ in range(2):
        proxied_client.get('/api/requests', headers=first)
    assert proxied_client.get('/api/requests', headers=first).status_code == 429

    assert proxied_client.get('/api/requests', headers=second).status_code == 401


def test_trusted_proxy_uses_its_own_hop_only(proxied_client):
    """With one trusted proxy, spoofed entries to the left of its hop are ignored"""
    for spoofed in ('10.0.0.1', '10.0.0.2'):
        proxied_client.get('/api/requests', headers={'X-Forwarded-For': f'{spoofed}, 203.0.113.7'})

    response = proxied_client.get('/api/requests', headers={'X-Forwarded-For': '10.0.0.3, 203.0.113.7'})
    assert response.status_code == 429
