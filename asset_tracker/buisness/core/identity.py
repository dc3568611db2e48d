"""
Identity Verifier

Issues and verifies signed session tokens. A token only names the user; the
role is always re-read from the user row by the request loader.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from flask import current_app

from asset_tracker.buisness.core.errors import UnauthenticatedError
from asset_tracker.utils.logger import get_logger

logger = get_logger("asset_tracker.buisness.core.identity")

ALGORITHM = "HS256"


class IdentityVerifier:
    """Bearer token issue/verify against the application SECRET_KEY"""

    @staticmethod
    def issue_token(user, ttl_seconds: Optional[int] = None) -> str:
        ttl = ttl_seconds if ttl_seconds is not None else current_app.config['AUTH_TOKEN_TTL_SECONDS']
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user.id),
            "iat": now,
            "exp": now + timedelta(seconds=ttl),
        }
        return jwt.encode(payload, current_app.config['SECRET_KEY'], algorithm=ALGORITHM)

    @staticmethod
    def verify_token(token: Optional[str]) -> int:
        """
        Resolve a token to the user id it was issued for.

        Raises:
            UnauthenticatedError: If the token is missing, expired, tampered or malformed
        """
        if not token:
            raise UnauthenticatedError("Not authenticated")
        try:
            payload = jwt.decode(token, current_app.config['SECRET_KEY'], algorithms=[ALGORITHM])
        except jwt.ExpiredSignatureError:
            logger.info("Rejected expired token")
            raise UnauthenticatedError("Token expired")
        except jwt.InvalidTokenError:
            logger.warning("Rejected invalid token")
            raise UnauthenticatedError("Invalid token")

        subject = payload.get("sub")
        try:
            return int(subject)
        except (TypeError, ValueError):
            raise UnauthenticatedError("Invalid token")

    @staticmethod
    def extract_token(authorization_header: Optional[str], cookie_value: Optional[str] = None) -> Optional[str]:
        """Pull the raw token from an ``Authorization: Bearer`` header, else the auth cookie"""
        if authorization_header:
            scheme, _, value = authorization_header.partition(' ')
            if scheme.lower() == 'bearer' and value.strip():
                return value.strip()
        return cookie_value or None
