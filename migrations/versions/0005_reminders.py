"""reminders

Revision ID: 0005
Revises: 0004
Create Date: 2026-10-19 00:00:00.000000

strategy and effectiveness_score are stored as given; nothing schedules
from them.
"""
from alembic import op
import sqlalchemy as sa

revision = "0005"
down_revision = "0004"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "reminders",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("task_id", sa.Uuid(), nullable=True),
        sa.Column("event_id", sa.Uuid(), nullable=True),
        sa.Column("habit_id", sa.Uuid(), nullable=True),
        sa.Column("type", sa.String(16), nullable=False),
        sa.Column("strategy", sa.String(16), server_default="smart", nullable=False),
        sa.Column("scheduled_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("actual_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("dismissed", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("snoozed_until", sa.DateTime(timezone=True), nullable=True),
        sa.Column("personalization_label", sa.Text(), nullable=True),
        sa.Column("effectiveness_score", sa.Numeric(4, 3), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["task_id"], ["tasks.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["event_id"], ["events.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["habit_id"], ["habits.id"], ondelete="CASCADE"),
        sa.CheckConstraint("type IN ('task', 'event', 'habit')", name="ck_reminders_type"),
        sa.CheckConstraint(
            "strategy IN ('aggressive', 'gentle', 'smart')", name="ck_reminders_strategy"
        ),
        sa.CheckConstraint(
            "effectiveness_score IS NULL OR "
            "(effectiveness_score >= 0 AND effectiveness_score <= 1)",
            name="ck_reminders_effectiveness_score",
        ),
    )
    for column in ("user_id", "task_id", "event_id", "habit_id"):
        op.create_index(f"ix_reminders_{column}", "reminders", [column])
    op.create_index(
        "reminders_user_scheduled_time_idx", "reminders", ["user_id", "scheduled_time"]
    )

    if op.get_bind().dialect.name == "postgresql":
        op.execute(
            "CREATE TRIGGER update_reminders_updated_at BEFORE UPDATE ON reminders "
            "FOR EACH ROW EXECUTE FUNCTION update_updated_at_column()"
        )


def downgrade() -> None:
    if op.get_bind().dialect.name == "postgresql":
        op.execute("DROP TRIGGER IF EXISTS update_reminders_updated_at ON reminders")
    op.drop_index("reminders_user_scheduled_time_idx", table_name="reminders")
    for column in ("habit_id", "event_id", "task_id", "user_id"):
        op.drop_index(f"ix_reminders_{column}", table_name="reminders")
    op.drop_table("reminders")
