"""
Database diagnostics behind /health, /api/test-db and /api/performance-metrics.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from sqlalchemy import func, inspect, select, table, column, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.clock import as_utc, utcnow
from app.core.config import settings

logger = logging.getLogger(__name__)

EXPECTED_TABLES = (
    "profiles", "households", "tasks", "events", "integrations",
    "habits", "reminders", "nudges",
)
EXPECTED_INDEXES = {
    "tasks": "tasks_user_due_date_idx",
    "events": "events_user_start_time_idx",
    "reminders": "reminders_user_scheduled_time_idx",
}


@dataclass
class DatabaseReport:
    connection: bool
    tests: dict[str, bool] = field(default_factory=dict)
    details: dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.connection and all(self.tests.values())


def redact_database_url(url: str) -> str:
    try:
        return make_url(url).render_as_string(hide_password=True)
    except ArgumentError:
        return "[REDACTED]"


def ping(db: Session) -> bool:
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.warning("Database ping failed", exc_info=True)
        return False
    return True


def check_database(db: Session) -> DatabaseReport:
    try:
        profiles_count = db.execute(
            select(func.count()).select_from(table("profiles"))
        ).scalar_one()
    except SQLAlchemyError as exc:
        logger.error("Database connection test failed: %s", exc)
        db.rollback()
        return DatabaseReport(connection=False, error=str(exc.__cause__ or exc))

    inspector = inspect(db.get_bind())
    present = set(inspector.get_table_names())
    missing = [name for name in EXPECTED_TABLES if name not in present]

    indexes_ok = True
    for table_name, index_name in EXPECTED_INDEXES.items():
        if table_name not in present:
            indexes_ok = False
            continue
        names = {ix["name"] for ix in inspector.get_indexes(table_name)}
        indexes_ok = indexes_ok and index_name in names

    return DatabaseReport(
        connection=True,
        tests={
            "connection": True,
            "profiles_table": True,
            "tables_exist": not missing,
            "indexes_present": indexes_ok,
        },
        details={
            "profiles_count": profiles_count,
            "dialect": inspector.dialect.name,
            "missing_tables": missing,
        },
    )


def build_test_db_payload(report: DatabaseReport) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "success": report.success,
        "timestamp": utcnow().isoformat(),
        "database_url": redact_database_url(settings.DATABASE_URL),
    }
    if not report.connection:
        payload["error"] = "Database connection test failed"
        payload["details"] = report.error
        return payload
    payload["tests"] = report.tests
    payload["details"] = report.details
    return payload


def performance_metrics(db: Session) -> list[dict[str, Any]]:
    """Row and index counts per application table, plus the latest updated_at."""
    inspector = inspect(db.get_bind())
    present = set(inspector.get_table_names())
    metrics = []
    for table_name in EXPECTED_TABLES:
        if table_name not in present:
            continue
        columns = {c["name"] for c in inspector.get_columns(table_name)}
        target = table(table_name, column("updated_at")) if "updated_at" in columns \
            else table(table_name)
        row_count = db.execute(select(func.count()).select_from(target)).scalar_one()
        last_updated = None
        if "updated_at" in columns:
            last_updated = db.execute(select(func.max(target.c.updated_at))).scalar_one()
            if isinstance(last_updated, str):
                # SQLite returns aggregates over DateTime columns as text
                last_updated = last_updated or None
            elif last_updated is not None:
                last_updated = as_utc(last_updated).isoformat()
        metrics.append({
            "table_name": table_name,
            "row_count": row_count,
            "index_count": len(inspector.get_indexes(table_name)),
            "last_updated": last_updated,
        })
    return metrics
