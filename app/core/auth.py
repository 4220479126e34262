"""
Request authentication.

    @router.get("/protected")
    def protected(user: Profile = Depends(get_current_user)):
        ...
"""
from __future__ import annotations

import logging
import uuid
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError
from sqlalchemy.orm import Session

from app.core.errors import AuthenticationRequiredError
from app.core.security import decode_access_token
from app.db.base import get_db
from app.models.profile import Profile

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Profile:
    if credentials is None:
        raise AuthenticationRequiredError()

    try:
        payload = decode_access_token(credentials.credentials)
    except ExpiredSignatureError:
        raise AuthenticationRequiredError("Token has expired")
    except JWTError as exc:
        logger.warning("JWT validation failed: %s", exc)
        raise AuthenticationRequiredError("Invalid token")

    try:
        user_id = uuid.UUID(str(payload.get("sub")))
    except ValueError:
        raise AuthenticationRequiredError("Invalid token: malformed user ID")

    profile = db.get(Profile, user_id)
    if profile is None:
        raise AuthenticationRequiredError("User not found")
    return profile
