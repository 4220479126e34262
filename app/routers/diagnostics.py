"""
Diagnostics router.

GET  /api/test-db               — connection, tables and index checks
HEAD /api/test-db               — 200 if the DB answers, else 503
GET  /api/performance-metrics   — row and index counts per table
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.db.base import get_db
from app.services.diagnostics import (
    build_test_db_payload,
    check_database,
    performance_metrics,
    ping,
)

router = APIRouter(prefix="/api", tags=["diagnostics"])


@router.get(
    "/test-db",
    summary="Database self-test",
    responses={
        200: {"description": "All checks passed."},
        206: {"description": "Connected, but some checks failed."},
        500: {"description": "Database connection failed."},
    },
)
def test_db(db: Session = Depends(get_db)):
    report = check_database(db)
    if not report.connection:
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
    elif report.success:
        code = status.HTTP_200_OK
    else:
        code = status.HTTP_206_PARTIAL_CONTENT
    return JSONResponse(status_code=code, content=build_test_db_payload(report))


@router.head("/test-db", summary="Database ping")
def test_db_head(db: Session = Depends(get_db)):
    ok = ping(db)
    return Response(status_code=status.HTTP_200_OK if ok else status.HTTP_503_SERVICE_UNAVAILABLE)


@router.get("/performance-metrics", summary="Table sizes and index counts")
def get_performance_metrics(db: Session = Depends(get_db)):
    return {"tables": performance_metrics(db)}
