"""tasks

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-19 00:00:00.000000

Soft delete via deleted_at. Completion stamping and recurring_rule checks
are done by the task service, not by triggers.
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

revision = "0002"
down_revision = "0001"
branch_labels = None
depends_on = None

JSONType = sa.JSON().with_variant(JSONB(), "postgresql")


def upgrade() -> None:
    op.create_table(
        "tasks",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("household_id", sa.Uuid(), nullable=True),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("due_time", sa.Time(), nullable=True),
        sa.Column("completed", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("priority", sa.Integer(), server_default="2", nullable=False),
        sa.Column("tags", JSONType, server_default=sa.text("'[]'"), nullable=False),
        sa.Column("recurring_rule", JSONType, nullable=True),
        sa.Column("source", sa.String(32), server_default="manual", nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["household_id"], ["households.id"], ondelete="SET NULL"),
        sa.CheckConstraint("LENGTH(title) > 0", name="ck_tasks_title_not_empty"),
        sa.CheckConstraint("priority IN (1,2,3,4)", name="ck_tasks_priority"),
        sa.CheckConstraint(
            "source IN ('manual', 'calendar', 'habit', 'ai_suggested')", name="ck_tasks_source"
        ),
    )
    op.create_index("ix_tasks_user_id", "tasks", ["user_id"])
    op.create_index("tasks_user_due_date_idx", "tasks", ["user_id", "due_date"])

    if op.get_bind().dialect.name == "postgresql":
        op.execute(
            "CREATE TRIGGER update_tasks_updated_at BEFORE UPDATE ON tasks "
            "FOR EACH ROW EXECUTE FUNCTION update_updated_at_column()"
        )


def downgrade() -> None:
    if op.get_bind().dialect.name == "postgresql":
        op.execute("DROP TRIGGER IF EXISTS update_tasks_updated_at ON tasks")
    op.drop_index("tasks_user_due_date_idx", table_name="tasks")
    op.drop_index("ix_tasks_user_id", table_name="tasks")
    op.drop_table("tasks")
