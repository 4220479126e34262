"""
Nudges router.

GET  /nudges               — active nudges; marks them shown
POST /nudges
GET  /nudges/impact        — kg CO2 saved so far
POST /nudges/{id}/act      — perform the nudge's action
POST /nudges/{id}/dismiss  — expire it now
"""
from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.auth import get_current_user
from app.core.rate_limit import rate_limit
from app.db.base import get_db
from app.models.nudge import NudgeType
from app.models.profile import Profile
from app.schemas.common import ErrorResponse
from app.schemas.nudge import (
    ImpactSummary,
    NudgeActionResponse,
    NudgeCreate,
    NudgeListResponse,
    NudgeOut,
)
from app.services import nudges as nudge_service

router = APIRouter(prefix="/nudges", tags=["nudges"])

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Nudge not found."}}


@router.get("", response_model=NudgeListResponse, summary="Active nudges")
def list_nudges(
    nudge_type: Optional[NudgeType] = Query(default=None, alias="type"),
    limit: Optional[int] = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0),
    user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Nudges that are neither expired nor acted on, newest first."""
    total, items = nudge_service.list_active(
        db, user, nudge_type=nudge_type.value if nudge_type else None,
        limit=limit, offset=offset,
    )
    return NudgeListResponse(total=total, items=items)


@router.post(
    "",
    response_model=NudgeOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create a nudge",
    responses={422: {"model": ErrorResponse, "description": "A nudge rule was violated."}},
    dependencies=[Depends(rate_limit("forms"))],
)
def create_nudge(
    payload: NudgeCreate,
    user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return nudge_service.create_nudge(db, user, payload.model_dump())


@router.get("/impact", response_model=ImpactSummary, summary="Estimated CO2 saved")
def impact(
    user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    totals = nudge_service.impact_summary(db, user)
    return ImpactSummary(
        nudges_acted_on=totals.nudges_acted_on,
        nudge_impact_kg=float(totals.nudge_impact_kg),
        habit_impact_kg=float(totals.habit_impact_kg),
        total_impact_kg=float(totals.total_impact_kg),
    )


@router.post(
    "/{nudge_id}/act",
    response_model=NudgeActionResponse,
    summary="Act on a nudge",
    responses={
        **_NOT_FOUND,
        422: {"model": ErrorResponse, "description": "Already acted on or expired."},
    },
    dependencies=[Depends(rate_limit("forms"))],
)
def act_on_nudge(
    nudge_id: uuid.UUID,
    user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    result = nudge_service.act_on_nudge(db, user, nudge_id)
    return NudgeActionResponse(
        nudge=NudgeOut.model_validate(result.nudge),
        created_task_id=result.created_task_id,
        created_habit_id=result.created_habit_id,
    )


@router.post(
    "/{nudge_id}/dismiss",
    response_model=NudgeOut,
    summary="Dismiss a nudge",
    responses=_NOT_FOUND,
    dependencies=[Depends(rate_limit("forms"))],
)
def dismiss_nudge(
    nudge_id: uuid.UUID,
    user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return nudge_service.dismiss_nudge(db, user, nudge_id)
