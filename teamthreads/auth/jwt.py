"""JWT access token management for caller identity."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError

from teamthreads.settings import Settings, load_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenPayload:
    """Decoded JWT token payload."""

    sub: UUID
    exp: datetime
    token_type: str


def create_access_token(user_id: UUID, settings: Optional[Settings] = None) -> str:
    """
    Create a JWT access token for an authenticated user.

    The token only carries the user id; team context is resolved from the
    database on every request, never from token claims.

    Args:
        user_id: User UUID to encode in token
        settings: Optional settings override (defaults to load_settings())

    Returns:
        Signed JWT access token string

    Raises:
        ValueError: If jwt_secret_key is not configured
    """
    settings = settings or load_settings()

    if not settings.jwt_secret_key:
        raise ValueError("jwt_secret_key must be configured in settings")

    now = datetime.now(timezone.utc)
    exp = now + timedelta(minutes=settings.jwt_access_token_expire_minutes)

    payload = {
        "sub": str(user_id),
        "exp": exp,
        "type": "access",
    }

    try:
        token: str = jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)
        logger.info(f"access_token_created: user_id={user_id}, exp={exp.isoformat()}")
        return token
    except Exception as e:
        logger.exception(f"access_token_creation_error: user_id={user_id}, error={str(e)}")
        raise ValueError(f"Failed to create access token: {str(e)}") from e


def decode_token(token: str, settings: Optional[Settings] = None) -> TokenPayload:
    """
    Decode and validate a JWT token.

    Args:
        token: JWT token string to decode
        settings: Optional settings override (defaults to load_settings())

    Returns:
        TokenPayload with decoded user_id, expiry, and token_type

    Raises:
        ValueError: If token is expired, invalid, or malformed
    """
    settings = settings or load_settings()

    if not settings.jwt_secret_key:
        raise ValueError("jwt_secret_key must be configured in settings")

    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])

        user_id = UUID(payload["sub"])
        token_type = payload["type"]
        exp = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)

        logger.debug(f"token_decoded: user_id={user_id}, type={token_type}")

        return TokenPayload(sub=user_id, exp=exp, token_type=token_type)
    except ExpiredSignatureError as e:
        logger.warning(f"token_expired: error={str(e)}")
        raise ValueError("Token has expired") from e
    except JWTError as e:
        logger.warning(f"token_invalid: error={str(e)}")
        raise ValueError("Invalid token") from e
    except (KeyError, ValueError) as e:
        logger.warning(f"token_parse_error: error={str(e)}")
        raise ValueError("Invalid token") from e
