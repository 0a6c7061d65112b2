"""
Authentication Core Module

Password hashing and the dual-JWT token issuer. Access tokens are stateless
and short-lived; refresh tokens are longer-lived and only honoured while their
row exists in the refresh token store.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, Dict, Optional, Tuple

from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError
from passlib.context import CryptContext

from halolight.config import get_settings
from halolight.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


@dataclass(frozen=True)
class TokenPair:
    """Tokens handed to a client after register, login or refresh."""
    token: str
    refresh_token: str
    refresh_expires_at: datetime
    expires_in: int


def get_password_hash(password: str) -> str:
    """Create password hash using bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Malformed hash in storage; treat as a mismatch
        logger.warning("Stored password hash could not be parsed")
        return False


def _encode(claims: Dict[str, Any], lifetime_seconds: int, secret_key: str, token_type: str) -> Tuple[str, datetime]:
    now = datetime.now(UTC)
    expire = now + timedelta(seconds=lifetime_seconds)

    to_encode = dict(claims)
    to_encode.update(
        {
            "type": token_type,
            "iat": int(now.timestamp()),
            "exp": int(expire.timestamp()),
            # Keeps tokens minted in the same second distinct
            "jti": uuid.uuid4().hex,
        }
    )

    settings = get_settings()
    encoded_jwt = jwt.encode(to_encode, secret_key, algorithm=settings.JWT_ALGORITHM)
    return encoded_jwt, datetime.fromtimestamp(to_encode["exp"], UTC)


def issue_access_token(user_id: str, email: str) -> str:
    """
    Create a signed access token.

    Args:
        user_id: Subject user id, stored in the ``userId`` claim
        email: User email, stored in the ``email`` claim

    Returns:
        JWT access token string
    """
    settings = get_settings()
    token, _ = _encode(
        {"userId": user_id, "email": email},
        settings.access_token_ttl_seconds,
        settings.JWT_SECRET,
        ACCESS_TOKEN_TYPE,
    )
    return token


def issue_refresh_token(user_id: str) -> Tuple[str, datetime]:
    """
    Create a signed refresh token.

    Returns:
        The token string and its expiry instant, equal to the ``exp`` claim
    """
    settings = get_settings()
    return _encode(
        {"userId": user_id},
        settings.refresh_token_ttl_seconds,
        settings.JWT_REFRESH_SECRET,
        REFRESH_TOKEN_TYPE,
    )


def issue_token_pair(user_id: str, email: str) -> TokenPair:
    settings = get_settings()
    refresh_token, refresh_expires_at = issue_refresh_token(user_id)
    return TokenPair(
        token=issue_access_token(user_id, email),
        refresh_token=refresh_token,
        refresh_expires_at=refresh_expires_at,
        expires_in=settings.access_token_ttl_seconds,
    )


def verify_token(token: str, secret_key: str, token_type: str) -> Optional[Dict[str, Any]]:
    """
    Verify and decode a JWT.

    Args:
        token: JWT token to verify
        secret_key: Secret key for verification
        token_type: Expected ``type`` claim (access/refresh)

    Returns:
        Token payload if valid, None otherwise
    """
    settings = get_settings()
    try:
        payload = jwt.decode(token, secret_key, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        logger.info("Token signature has expired")
        return None
    except JWTError as e:
        logger.warning(f"Invalid token: {e}")
        return None

    if payload.get("type") != token_type:
        logger.warning(f"Invalid token type: expected {token_type}, got {payload.get('type')}")
        return None

    if not isinstance(payload.get("userId"), str):
        logger.warning("Token is missing the userId claim")
        return None

    return payload


def verify_access_token(token: str) -> Dict[str, Any]:
    """Decode an access token or raise 401 INVALID_TOKEN."""
    payload = verify_token(token, get_settings().JWT_SECRET, ACCESS_TOKEN_TYPE)
    if payload is None:
        raise UnauthorizedError("Invalid or expired access token", code="INVALID_TOKEN")
    return payload


def verify_refresh_token(token: str) -> Dict[str, Any]:
    """Decode a refresh token or raise 401 INVALID_TOKEN."""
    payload = verify_token(token, get_settings().JWT_REFRESH_SECRET, REFRESH_TOKEN_TYPE)
    if payload is None:
        raise UnauthorizedError("Invalid or expired refresh token", code="INVALID_TOKEN")
    return payload
