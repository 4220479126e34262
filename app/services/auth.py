"""
Auth service: account creation and credential checks.

Failures are raised as provider-style messages ("User already registered",
"Invalid login credentials", ...) and passed through `parse_auth_error`
so every client sees the same codes and copy.
"""
from __future__ import annotations

import logging
import re
from typing import NoReturn, Optional

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from app.core.auth_errors import parse_auth_error
from app.core.config import settings
from app.core.errors import AuthError
from app.core.security import create_access_token, hash_password, verify_password
from app.models.profile import Profile

logger = logging.getLogger(__name__)

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _reject(provider_message: str) -> NoReturn:
    parsed = parse_auth_error(provider_message)
    logger.warning("Auth request rejected: %s", parsed.code)
    raise AuthError(parsed)


def normalise_email(email: str) -> str:
    return email.strip().lower()


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL_RE.match(email))


def find_profile_by_email(db: Session, email: str) -> Optional[Profile]:
    return db.query(Profile).filter(Profile.email == normalise_email(email)).first()


def sign_up(db: Session, email: str, password: str, full_name: Optional[str] = None) -> Profile:
    if not settings.SIGNUP_ENABLED:
        _reject("Signup is disabled")

    email = normalise_email(email)
    if not is_valid_email(email):
        _reject("Invalid email")
    if len(password) < settings.PASSWORD_MIN_LENGTH:
        _reject(f"Password should be at least {settings.PASSWORD_MIN_LENGTH} characters")

    try:
        if find_profile_by_email(db, email) is not None:
            _reject("User already registered")

        profile = Profile(
            email=email,
            password_hash=hash_password(password),
            full_name=full_name,
        )
        db.add(profile)
        db.commit()
    except IntegrityError:
        db.rollback()
        _reject("User already registered")
    except OperationalError as exc:
        db.rollback()
        logger.error("Signup failed, database unavailable: %s", exc.orig)
        _reject("Database connection failed")

    db.refresh(profile)
    logger.info("Created profile %s", profile.id)
    return profile


def sign_in(db: Session, email: str, password: str) -> Profile:
    try:
        profile = find_profile_by_email(db, email)
    except OperationalError as exc:
        logger.error("Login failed, database unavailable: %s", exc.orig)
        _reject("Database connection failed")

    if profile is None or not verify_password(password, profile.password_hash):
        _reject("Invalid login credentials")

    logger.info("Profile %s signed in", profile.id)
    return profile


def issue_token(profile: Profile) -> str:
    return create_access_token(subject=str(profile.id), email=profile.email)
