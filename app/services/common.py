"""
Helpers shared by the per-entity services.
"""
from __future__ import annotations

from typing import Any, Iterable, Optional

from sqlalchemy.orm import Query

from app.core.config import settings
from app.core.errors import DomainValidationError


def clamp_page(limit: Optional[int], offset: Optional[int]) -> tuple[int, int]:
    size = settings.DEFAULT_PAGE_SIZE if limit is None else limit
    return max(1, min(size, settings.MAX_PAGE_SIZE)), max(0, offset or 0)


def paginate(query: Query, limit: Optional[int], offset: Optional[int]) -> tuple[int, list]:
    """Return (total matching rows, one page of rows)."""
    size, skip = clamp_page(limit, offset)
    total = query.order_by(None).count()
    return total, query.limit(size).offset(skip).all()


def apply_changes(
    obj: Any,
    changes: dict[str, Any],
    required: Iterable[str] = (),
    messages: Optional[dict[str, str]] = None,
) -> None:
    """
    Copy `changes` onto an ORM object.

    Fields listed in `required` map to NOT NULL columns; an explicit null
    for them is rejected instead of reaching the database.
    """
    messages = messages or {}
    for field in required:
        if field in changes and changes[field] is None:
            raise DomainValidationError(
                messages.get(field, f"{field} cannot be null"), field
            )
    for field, value in changes.items():
        setattr(obj, field, value)
