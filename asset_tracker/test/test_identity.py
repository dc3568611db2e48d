"""
Tests for bearer token issue and verification.
"""

import jwt
import pytest

from asset_tracker.buisness.core.errors import UnauthenticatedError
from asset_tracker.buisness.core.identity import ALGORITHM, IdentityVerifier


pytestmark = pytest.mark.usefixtures('app_ctx')


def test_issue_and_verify(user):
    token = IdentityVerifier.issue_token(user)
    assert IdentityVerifier.verify_token(token) == user.id


def test_expired_token(user):
    token = IdentityVerifier.issue_token(user, ttl_seconds=-10)
    with pytest.raises(UnauthenticatedError) as exc:
        IdentityVerifier.verify_token(token)
    assert exc.value.message == "Token expired"
    assert exc.value.status_code == 401


def test_tampered_token(user):
    token = IdentityVerifier.issue_token(user)
    header, payload, signature = token.split('.')
    tampered = '.'.join([header, payload, signature[:-2] + ('AA' if signature[-2:] != 'AA' else 'BB')])

    with pytest.raises(UnauthenticatedError) as exc:
        IdentityVerifier.verify_token(tampered)
    assert exc.value.message == "Invalid token"


def test_token_signed_with_other_key(user):
    forged = jwt.encode({'sub': str(user.id)}, 'some-other-secret-key-of-sufficient-length', algorithm=ALGORITHM)
    with pytest.raises(UnauthenticatedError):
        IdentityVerifier.verify_token(forged)


@pytest.mark.parametrize('token', [None, '', 'garbage'])
def test_missing_or_malformed_token(token):
    with pytest.raises(UnauthenticatedError):
        IdentityVerifier.verify_token(token)


def test_extract_token():
    assert IdentityVerifier.extract_token('Bearer abc.def.ghi') == 'abc.def.ghi'
    assert IdentityVerifier.extract_token('bearer   abc ') == 'abc'
    assert IdentityVerifier.extract_token('Basic dXNlcjpwYXNz') is None
    assert IdentityVerifier.extract_token(None, 'cookie-token') == 'cookie-token'
    assert IdentityVerifier.extract_token('Bearer header-token', 'cookie-token') == 'header-token'
    assert IdentityVerifier.extract_token('Bearer ', None) is None
