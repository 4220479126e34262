"""nudges

Revision ID: 0006
Revises: 0005
Create Date: 2026-10-19 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

revision = "0006"
down_revision = "0005"
branch_labels = None
depends_on = None

JSONType = sa.JSON().with_variant(JSONB(), "postgresql")


def upgrade() -> None:
    op.create_table(
        "nudges",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("type", sa.String(16), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("action_type", sa.String(32), nullable=True),
        sa.Column("action_data", JSONType, server_default=sa.text("'{}'"), nullable=False),
        sa.Column("impact_kg", sa.Numeric(10, 3), nullable=True),
        sa.Column("shown_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("acted_on", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("acted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.CheckConstraint(
            "type IN ('eco', 'health', 'productivity', 'social')", name="ck_nudges_type"
        ),
        sa.CheckConstraint(
            "action_type IS NULL OR "
            "action_type IN ('task_creation', 'habit_start', 'reminder_set')",
            name="ck_nudges_action_type",
        ),
        sa.CheckConstraint("impact_kg IS NULL OR impact_kg >= 0", name="ck_nudges_impact_kg"),
    )
    op.create_index("ix_nudges_user_id", "nudges", ["user_id"])
    op.create_index("nudges_user_type_idx", "nudges", ["user_id", "type"])

    if op.get_bind().dialect.name == "postgresql":
        op.execute(
            "CREATE TRIGGER update_nudges_updated_at BEFORE UPDATE ON nudges "
            "FOR EACH ROW EXECUTE FUNCTION update_updated_at_column()"
        )


def downgrade() -> None:
    if op.get_bind().dialect.name == "postgresql":
        op.execute("DROP TRIGGER IF EXISTS update_nudges_updated_at ON nudges")
    op.drop_index("nudges_user_type_idx", table_name="nudges")
    op.drop_index("ix_nudges_user_id", table_name="nudges")
    op.drop_table("nudges")
