"""
Calendar integrations router.

Provider OAuth and real syncing are out of scope; `/sync` only stamps
`last_sync` so clients can show when a calendar was last refreshed.
"""
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.core.auth import get_current_user
from app.core.rate_limit import rate_limit
from app.db.base import get_db
from app.models.profile import Profile
from app.schemas.common import ErrorResponse
from app.schemas.event import IntegrationCreate, IntegrationOut, IntegrationUpdate
from app.services import events as event_service

router = APIRouter(prefix="/integrations", tags=["integrations"])

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Integration not found."}}


@router.get("", response_model=list[IntegrationOut], summary="List connected calendars")
def list_integrations(
    user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return event_service.list_integrations(db, user)


@router.post(
    "",
    response_model=IntegrationOut,
    status_code=status.HTTP_201_CREATED,
    summary="Connect a calendar",
    dependencies=[Depends(rate_limit("forms"))],
)
def create_integration(
    payload: IntegrationCreate,
    user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return event_service.create_integration(db, user, payload.model_dump())


@router.patch(
    "/{integration_id}",
    response_model=IntegrationOut,
    summary="Update a calendar connection",
    responses=_NOT_FOUND,
    dependencies=[Depends(rate_limit("forms"))],
)
def update_integration(
    integration_id: uuid.UUID,
    payload: IntegrationUpdate,
    user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return event_service.update_integration(
        db, user, integration_id, payload.model_dump(exclude_unset=True)
    )


@router.delete(
    "/{integration_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Disconnect a calendar",
    responses=_NOT_FOUND,
    dependencies=[Depends(rate_limit("forms"))],
)
def delete_integration(
    integration_id: uuid.UUID,
    user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    event_service.delete_integration(db, user, integration_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{integration_id}/sync",
    response_model=IntegrationOut,
    summary="Mark a calendar as synced",
    responses={
        **_NOT_FOUND,
        422: {"model": ErrorResponse, "description": "Integration inactive or sync disabled."},
    },
    dependencies=[Depends(rate_limit("forms"))],
)
def sync_integration(
    integration_id: uuid.UUID,
    user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return event_service.mark_synced(db, user, integration_id)
