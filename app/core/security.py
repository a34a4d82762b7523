"""Bearer tokens issued by the portal's login service and verified here."""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from app.config import settings

ACCESS_TOKEN_TYPE = "access"


def create_access_token(
    user_id: int,
    role: str,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Issue an access token carrying the user id and portal role.

    Login is handled elsewhere; this is used by scripts and tests to mint
    tokens the API accepts.

    Args:
        user_id: Value for the ``sub`` claim
        role: Value for the ``role`` claim, e.g. ``Patient``
        expires_delta: Lifetime; defaults to ACCESS_TOKEN_EXPIRE_MINUTES

    Returns:
        Encoded JWT token
    """
    issued_at = datetime.now(UTC)
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)

    claims = {
        "sub": str(user_id),
        "role": role,
        "type": ACCESS_TOKEN_TYPE,
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict[str, Any] | None:
    """
    Verify signature, expiry and token type.

    Returns:
        Claims, or None if the token is not a valid access token
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError:
        return None

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        return None
    return payload
