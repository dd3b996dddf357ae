"""Verification of Supabase-issued access tokens."""

import jwt

from ...config import settings
from ...core.logging import get_logger

logger = get_logger(__name__)

ALGORITHM = "HS256"


def decode_access_token(token: str) -> dict | None:
    """Decode and validate a Supabase JWT access token.

    Returns:
        Token payload if valid, None if invalid or expired.
    """
    try:
        return jwt.decode(
            token,
            settings.supabase_jwt_secret,
            algorithms=[ALGORITHM],
            audience=settings.supabase_jwt_audience,
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired access token")
        return None
    except jwt.InvalidTokenError as e:
        logger.warning(f"Rejected invalid access token: {e}")
        return None
