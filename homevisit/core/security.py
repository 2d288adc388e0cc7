# homevisit/core/security.py

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from jose import jwt, JWTError

logger = logging.getLogger(__name__)


# --------------------------------------
# Token inspection helpers
# --------------------------------------
# The client never holds the signing key, so claims are read unverified.
# They are only used to avoid sending a token we already know is expired;
# the server remains the authority on validity.

def read_token_claims(token: str) -> Optional[Dict[str, Any]]:
    """
    Return the token's claims, or None for opaque / malformed tokens.
    """
    try:
        return jwt.get_unverified_claims(token)
    except JWTError:
        logger.debug("bearer token is not a decodable JWT")
        return None


def token_expires_at(token: str) -> Optional[datetime]:
    claims = read_token_claims(token)
    if not claims or "exp" not in claims:
        return None
    try:
        return datetime.fromtimestamp(int(claims["exp"]), tz=timezone.utc)
    except (TypeError, ValueError, OverflowError):
        logger.debug("bearer token has a non-numeric exp claim")
        return None


def is_token_expired(
    token: str,
    *,
    leeway_seconds: int = 0,
    now: Optional[datetime] = None,
) -> bool:
    """
    True only when the token carries an exp claim that is already in the past.
    """
    expires_at = token_expires_at(token)
    if expires_at is None:
        return False
    now = now or datetime.now(timezone.utc)
    return (expires_at - now).total_seconds() <= leeway_seconds
