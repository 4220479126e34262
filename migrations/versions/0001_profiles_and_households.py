"""profiles and households

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00.000000

profiles.household_id and households.owner_id reference each other, so the
profiles → households FK is added after both tables exist.
Also installs update_updated_at_column(), used by every later revision.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _is_postgres() -> bool:
    return op.get_bind().dialect.name == "postgresql"


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    if _is_postgres():
        op.execute(
            """
            CREATE OR REPLACE FUNCTION update_updated_at_column()
            RETURNS TRIGGER AS $$
            BEGIN
                NEW.updated_at = NOW();
                RETURN NEW;
            END;
            $$ LANGUAGE plpgsql
            """
        )

    # --- profiles ---
    op.create_table(
        "profiles",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("password_hash", sa.String(256), nullable=True),
        sa.Column("full_name", sa.Text(), nullable=True),
        sa.Column("avatar_url", sa.Text(), nullable=True),
        sa.Column("household_id", sa.Uuid(), nullable=True),
        sa.Column("role", sa.String(32), server_default="user", nullable=False),
        sa.Column("privacy_mode", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("local_mode", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("timezone", sa.String(64), server_default="UTC", nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("role IN ('user', 'admin', 'household_admin')", name="ck_profiles_role"),
    )
    op.create_index("ix_profiles_email", "profiles", ["email"], unique=True)
    op.create_index("ix_profiles_household_id", "profiles", ["household_id"])

    # --- households ---
    op.create_table(
        "households",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("owner_id", sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["owner_id"], ["profiles.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_households_owner_id", "households", ["owner_id"])

    if op.get_bind().dialect.name != "sqlite":
        op.create_foreign_key(
            "profiles_household_id_fkey", "profiles", "households",
            ["household_id"], ["id"], ondelete="SET NULL",
        )

    if _is_postgres():
        for table in ("profiles", "households"):
            op.execute(
                f"CREATE TRIGGER update_{table}_updated_at BEFORE UPDATE ON {table} "
                "FOR EACH ROW EXECUTE FUNCTION update_updated_at_column()"
            )


def downgrade() -> None:
    if _is_postgres():
        for table in ("households", "profiles"):
            op.execute(f"DROP TRIGGER IF EXISTS update_{table}_updated_at ON {table}")
    if op.get_bind().dialect.name != "sqlite":
        op.drop_constraint("profiles_household_id_fkey", "profiles", type_="foreignkey")
    op.drop_index("ix_households_owner_id", table_name="households")
    op.drop_table("households")
    op.drop_index("ix_profiles_household_id", table_name="profiles")
    op.drop_index("ix_profiles_email", table_name="profiles")
    op.drop_table("profiles")
    if _is_postgres():
        op.execute("DROP FUNCTION IF EXISTS update_updated_at_column()")
