"""
Password hashing and access tokens.

Password hashes come from werkzeug (`method$salt$hash`), so the method
can be strengthened later without invalidating old rows.
Tokens are HS256 JWTs carrying the profile id in `sub`.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import jwt
from werkzeug.security import check_password_hash, generate_password_hash

from app.core.config import settings

_ALGORITHM = "HS256"


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password: str, stored: Optional[str]) -> bool:
    if not stored:
        return False
    try:
        return check_password_hash(stored, password)
    except ValueError:
        # Unknown or malformed hash method in the stored value.
        return False


def create_access_token(
    subject: str,
    email: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    now = datetime.now(tz=timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    claims: dict[str, Any] = {
        "sub": subject,
        "aud": settings.JWT_AUDIENCE,
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
    }
    if email:
        claims["email"] = email
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=_ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any]:
    """Raises jose.JWTError (or ExpiredSignatureError) on a bad token."""
    return jwt.decode(
        token,
        settings.SECRET_KEY,
        algorithms=[_ALGORITHM],
        audience=settings.JWT_AUDIENCE,
    )
