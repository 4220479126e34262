from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from app.core.clock import is_valid_timezone
from app.core.errors import DomainValidationError
from app.models.profile import Profile
from app.services.auth import find_profile_by_email, is_valid_email, normalise_email
from app.services.common import apply_changes

logger = logging.getLogger(__name__)


def update_profile(db: Session, profile: Profile, changes: dict[str, Any]) -> Profile:
    if "timezone" in changes and changes["timezone"] is not None:
        if not is_valid_timezone(changes["timezone"]):
            raise DomainValidationError(
                f"Unknown timezone: {changes['timezone']}", "timezone"
            )

    if changes.get("email") is not None:
        email = normalise_email(changes["email"])
        if not is_valid_email(email):
            raise DomainValidationError("Please enter a valid email address", "email")
        other = find_profile_by_email(db, email)
        if other is not None and other.id != profile.id:
            raise DomainValidationError("Email address is already registered", "email")
        changes["email"] = email

    apply_changes(
        profile,
        changes,
        required=("email", "timezone", "local_mode", "privacy_mode"),
    )
    db.commit()
    db.refresh(profile)
    logger.info("Updated profile %s fields=%s", profile.id, sorted(changes))
    return profile
