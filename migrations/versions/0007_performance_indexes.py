"""performance indexes

Revision ID: 0007
Revises: 0006
Create Date: 2026-10-19 00:00:00.000000

Composite indexes for the dashboard and list queries, plus partial indexes
over the rows those queries actually touch (open tasks, pending reminders).
Partial predicates are emitted on PostgreSQL and SQLite only.
"""
from alembic import op
import sqlalchemy as sa

revision = "0007"
down_revision = "0006"
branch_labels = None
depends_on = None

# name → (table, columns)
_COMPOSITE = {
    "tasks_user_priority_idx": ("tasks", ["user_id", "priority"]),
    "tasks_user_completed_at_idx": ("tasks", ["user_id", "completed_at"]),
    "events_user_start_end_idx": ("events", ["user_id", "start_time", "end_time"]),
    "reminders_user_scheduled_dismissed_idx": (
        "reminders", ["user_id", "scheduled_time", "dismissed"]
    ),
    "nudges_user_type_expires_idx": ("nudges", ["user_id", "type", "expires_at"]),
    "nudges_user_created_at_idx": ("nudges", ["user_id", "created_at"]),
    "habits_user_category_idx": ("habits", ["user_id", "category"]),
    "habits_user_frequency_streak_idx": ("habits", ["user_id", "frequency", "current_streak"]),
}

# name → (table, columns, predicate)
_PARTIAL = {
    "tasks_active_user_idx": (
        "tasks", ["user_id", "due_date"], "deleted_at IS NULL AND completed = false"
    ),
    "reminders_pending_user_idx": (
        "reminders", ["user_id", "scheduled_time"], "dismissed = false"
    ),
    "nudges_open_user_idx": ("nudges", ["user_id", "created_at"], "acted_on = false"),
}


def upgrade() -> None:
    for name, (table, columns) in _COMPOSITE.items():
        op.create_index(name, table, columns)
    for name, (table, columns, predicate) in _PARTIAL.items():
        op.create_index(
            name, table, columns,
            postgresql_where=sa.text(predicate),
            sqlite_where=sa.text(predicate),
        )


def downgrade() -> None:
    for name, (table, *_rest) in reversed(list(_PARTIAL.items())):
        op.drop_index(name, table_name=table)
    for name, (table, _columns) in reversed(list(_COMPOSITE.items())):
        op.drop_index(name, table_name=table)
