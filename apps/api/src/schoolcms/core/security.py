"""
Security Utilities

Bearer token decoding. Tokens are issued by the identity service; this API
only verifies signatures and expiry and reads the claims.
"""

import logging
from typing import Any

import jwt

from schoolcms.core.config import settings

logger = logging.getLogger(__name__)


def decode_token(token: str) -> dict[str, Any] | None:
    """
    Decode and verify a JWT.

    Args:
        token: Encoded JWT string

    Returns:
        The token payload, or None if the token is invalid or expired
    """
    try:
        return jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        logger.debug("Rejected expired token")
        return None
    except jwt.InvalidTokenError as e:
        logger.debug(f"Rejected invalid token: {e}")
        return None
