"""habits

Revision ID: 0004
Revises: 0003
Create Date: 2026-10-19 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

revision = "0004"
down_revision = "0003"
branch_labels = None
depends_on = None

JSONType = sa.JSON().with_variant(JSONB(), "postgresql")


def upgrade() -> None:
    op.create_table(
        "habits",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("frequency", sa.String(16), nullable=False),
        sa.Column("target_count", sa.Integer(), server_default="1", nullable=False),
        sa.Column("current_streak", sa.Integer(), server_default="0", nullable=False),
        sa.Column("longest_streak", sa.Integer(), server_default="0", nullable=False),
        sa.Column("auto_rules", JSONType, server_default=sa.text("'{}'"), nullable=False),
        sa.Column("reminder_time", sa.Time(), nullable=True),
        sa.Column("category", sa.String(32), nullable=True),
        sa.Column("impact_per_completion", sa.Numeric(10, 3), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.CheckConstraint("frequency IN ('daily', 'weekly', 'monthly')", name="ck_habits_frequency"),
        sa.CheckConstraint(
            "category IS NULL OR category IN ('health', 'productivity', 'eco', 'social', 'other')",
            name="ck_habits_category",
        ),
        sa.CheckConstraint("target_count > 0", name="ck_habits_target_count"),
        sa.CheckConstraint("current_streak >= 0", name="ck_habits_current_streak"),
        sa.CheckConstraint("longest_streak >= 0", name="ck_habits_longest_streak"),
        sa.CheckConstraint(
            "impact_per_completion IS NULL OR impact_per_completion >= 0",
            name="ck_habits_impact_per_completion",
        ),
    )
    op.create_index("ix_habits_user_id", "habits", ["user_id"])
    op.create_index("habits_user_frequency_idx", "habits", ["user_id", "frequency"])

    if op.get_bind().dialect.name == "postgresql":
        op.execute(
            "CREATE TRIGGER update_habits_updated_at BEFORE UPDATE ON habits "
            "FOR EACH ROW EXECUTE FUNCTION update_updated_at_column()"
        )


def downgrade() -> None:
    if op.get_bind().dialect.name == "postgresql":
        op.execute("DROP TRIGGER IF EXISTS update_habits_updated_at ON habits")
    op.drop_index("habits_user_frequency_idx", table_name="habits")
    op.drop_index("ix_habits_user_id", table_name="habits")
    op.drop_table("habits")
