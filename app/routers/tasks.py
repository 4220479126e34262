"""
Tasks router.

GET    /tasks                 — list (optional ?date, include_completed, paging)
POST   /tasks                 — create
GET    /tasks/{id}
PATCH  /tasks/{id}            — partial update
POST   /tasks/{id}/toggle     — flip completion
DELETE /tasks/{id}            — soft delete
POST   /tasks/{id}/restore    — undo soft delete
"""
from __future__ import annotations

import uuid
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.core.auth import get_current_user
from app.core.rate_limit import rate_limit
from app.db.base import get_db
from app.models.profile import Profile
from app.schemas.common import ErrorResponse
from app.schemas.task import TaskCreate, TaskListResponse, TaskOut, TaskUpdate
from app.services import tasks as task_service

router = APIRouter(prefix="/tasks", tags=["tasks"])

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Task not found."}}


@router.get("", response_model=TaskListResponse, summary="List tasks")
def list_tasks(
    day: Optional[date] = Query(
        default=None, alias="date", description="Only tasks due on this date.",
        examples=["2026-10-19"],
    ),
    include_completed: bool = Query(default=True),
    limit: Optional[int] = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0),
    user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Ordered by priority (urgent first), then due time, then creation time."""
    total, items = task_service.list_tasks(
        db, user, day=day, include_completed=include_completed, limit=limit, offset=offset
    )
    return TaskListResponse(total=total, items=items)


@router.post(
    "",
    response_model=TaskOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create a task",
    responses={422: {"model": ErrorResponse, "description": "Invalid recurring rule or fields."}},
    dependencies=[Depends(rate_limit("tasks"))],
)
def create_task(
    payload: TaskCreate,
    user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return task_service.create_task(db, user, payload.model_dump())


@router.get("/{task_id}", response_model=TaskOut, summary="Get a task", responses=_NOT_FOUND)
def get_task(
    task_id: uuid.UUID,
    user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return task_service.get_task(db, user, task_id)


@router.patch(
    "/{task_id}",
    response_model=TaskOut,
    summary="Update a task",
    responses=_NOT_FOUND,
    dependencies=[Depends(rate_limit("tasks"))],
)
def update_task(
    task_id: uuid.UUID,
    payload: TaskUpdate,
    user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return task_service.update_task(db, user, task_id, payload.model_dump(exclude_unset=True))


@router.post(
    "/{task_id}/toggle",
    response_model=TaskOut,
    summary="Toggle completion",
    responses=_NOT_FOUND,
    dependencies=[Depends(rate_limit("tasks"))],
)
def toggle_task(
    task_id: uuid.UUID,
    user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return task_service.toggle_task(db, user, task_id)


@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Soft-delete a task",
    responses={
        **_NOT_FOUND,
        409: {"model": ErrorResponse, "description": "Task is already deleted."},
    },
    dependencies=[Depends(rate_limit("tasks"))],
)
def delete_task(
    task_id: uuid.UUID,
    user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    task_service.delete_task(db, user, task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{task_id}/restore",
    response_model=TaskOut,
    summary="Restore a deleted task",
    responses=_NOT_FOUND,
    dependencies=[Depends(rate_limit("tasks"))],
)
def restore_task(
    task_id: uuid.UUID,
    user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return task_service.restore_task(db, user, task_id)
