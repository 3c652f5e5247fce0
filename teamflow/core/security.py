# teamflow/core/security.py
"""Token issuing/verification and password hashing."""
from __future__ import annotations

import hashlib
import logging
import secrets
from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

import bcrypt
from jose import JWTError, jwt

from teamflow.core.config import settings
from teamflow.core.errors import Unauthenticated

logger = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"
ACCESS_TOKEN_TYPE = "access"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False


def create_access_token(user_id: UUID, *, expires_delta: timedelta | None = None) -> str:
    issued_at = _now()
    expire = issued_at + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    claims = {
        "sub": str(user_id),
        "type": ACCESS_TOKEN_TYPE,
        "iat": issued_at,
        "exp": expire,
        "jti": str(uuid4()),
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def new_refresh_token() -> str:
    """Opaque refresh token; only its hash is stored."""
    return secrets.token_urlsafe(32)


def hash_refresh_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def refresh_token_expiry() -> datetime:
    return _now() + timedelta(days=settings.refresh_token_expire_days)


def extract_token(authorization: str | None) -> str:
    """
    Strip an optional scheme prefix from the Authorization header value.

    Accepts "Bearer <token>" (scheme is case-insensitive) or a bare token.
    """
    if not authorization or not authorization.strip():
        raise Unauthenticated("Missing token")

    parts = authorization.split()
    if len(parts) == 1:
        return parts[0]
    if len(parts) == 2 and parts[0].lower() == BEARER_SCHEME:
        return parts[1]
    raise Unauthenticated("Malformed authorization header")


def verify_access_token(token: str) -> UUID:
    """Verify signature + expiry and return the subject user id."""
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        logger.info("Token rejected: %s", e)
        raise Unauthenticated("Invalid token") from e

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise Unauthenticated("Invalid token")

    try:
        return UUID(str(payload.get("sub")))
    except ValueError as e:
        raise Unauthenticated("Invalid token") from e


def authenticate(authorization: str | None) -> UUID:
    return verify_access_token(extract_token(authorization))
