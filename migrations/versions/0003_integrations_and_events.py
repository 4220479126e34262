"""integrations and events

Revision ID: 0003
Revises: 0002
Create Date: 2026-10-19 00:00:00.000000

Deleting an integration keeps its events (integration_id SET NULL).
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

revision = "0003"
down_revision = "0002"
branch_labels = None
depends_on = None

JSONType = sa.JSON().with_variant(JSONB(), "postgresql")


def upgrade() -> None:
    # --- integrations ---
    op.create_table(
        "integrations",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("provider", sa.String(32), nullable=False),
        sa.Column("access_token", sa.Text(), nullable=True),
        sa.Column("refresh_token", sa.Text(), nullable=True),
        sa.Column("token_expiry", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_sync", sa.DateTime(timezone=True), nullable=True),
        sa.Column("sync_enabled", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("active", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("settings", JSONType, server_default=sa.text("'{}'"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.CheckConstraint(
            "provider IN ('google_calendar', 'outlook', 'apple_calendar', 'ical')",
            name="ck_integrations_provider",
        ),
    )
    op.create_index("ix_integrations_user_id", "integrations", ["user_id"])
    op.create_index("integrations_user_id_provider_idx", "integrations", ["user_id", "provider"])

    # --- events ---
    op.create_table(
        "events",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("integration_id", sa.Uuid(), nullable=True),
        sa.Column("external_id", sa.Text(), nullable=True),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("all_day", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("location", sa.Text(), nullable=True),
        sa.Column("attendees", JSONType, server_default=sa.text("'[]'"), nullable=False),
        sa.Column("travel_time", sa.Integer(), nullable=True),
        sa.Column("preparation_time", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["integration_id"], ["integrations.id"], ondelete="SET NULL"),
        sa.CheckConstraint("LENGTH(title) > 0", name="ck_events_title_not_empty"),
        sa.CheckConstraint("travel_time IS NULL OR travel_time >= 0", name="ck_events_travel_time"),
        sa.CheckConstraint(
            "preparation_time IS NULL OR preparation_time >= 0", name="ck_events_preparation_time"
        ),
    )
    op.create_index("ix_events_user_id", "events", ["user_id"])
    op.create_index("ix_events_integration_id", "events", ["integration_id"])
    op.create_index("events_user_start_time_idx", "events", ["user_id", "start_time"])
    op.create_index("events_user_end_time_idx", "events", ["user_id", "end_time"])

    if op.get_bind().dialect.name == "postgresql":
        for table in ("integrations", "events"):
            op.execute(
                f"CREATE TRIGGER update_{table}_updated_at BEFORE UPDATE ON {table} "
                "FOR EACH ROW EXECUTE FUNCTION update_updated_at_column()"
            )


def downgrade() -> None:
    if op.get_bind().dialect.name == "postgresql":
        for table in ("events", "integrations"):
            op.execute(f"DROP TRIGGER IF EXISTS update_{table}_updated_at ON {table}")
    op.drop_index("events_user_end_time_idx", table_name="events")
    op.drop_index("events_user_start_time_idx", table_name="events")
    op.drop_index("ix_events_integration_id", table_name="events")
    op.drop_index("ix_events_user_id", table_name="events")
    op.drop_table("events")
    op.drop_index("integrations_user_id_provider_idx", table_name="integrations")
    op.drop_index("ix_integrations_user_id", table_name="integrations")
    op.drop_table("integrations")
