"""create users, resources and activities tables

Revision ID: 20260110_create_activity_tables
Revises:
Create Date: 2026-01-10 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20260110_create_activity_tables"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # -------------------------------
    # users table
    # -------------------------------
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False, unique=True),
        sa.Column("role", sa.String(length=15), nullable=False, server_default="VIEWER"),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text("now()")),
    )

    # -------------------------------
    # resources table
    # -------------------------------
    op.create_table(
        "resources",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("type", sa.String(length=8), nullable=False),
        sa.Column("url", sa.String(length=2048), nullable=False),
        sa.Column("tags", sa.String(length=1024), nullable=True),
        sa.Column("status", sa.String(length=9), nullable=False, server_default="Draft"),
        sa.Column("created_by_user_id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text("now()")),
    )
    op.create_foreign_key(
        "fk_resources_created_by_user",
        "resources",
        "users",
        ["created_by_user_id"],
        ["id"],
        onupdate="CASCADE",
        ondelete="CASCADE",
    )
    op.create_index("ix_resources_created_by_user_id", "resources", ["created_by_user_id"])
    op.create_index("ix_resources_created_at", "resources", ["created_at"])

    # -------------------------------
    # activities table
    # -------------------------------
    op.create_table(
        "activities",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("resource_id", sa.Uuid(), nullable=True),
        sa.Column("action_type", sa.String(length=6), nullable=False),
        sa.Column("details", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("ip_address", sa.String(length=45), nullable=True),
        sa.Column("user_agent", sa.Text(), nullable=True),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text("now()")),
    )

    # history goes with the actor, survives the resource
    op.create_foreign_key(
        "fk_activities_user",
        "activities",
        "users",
        ["user_id"],
        ["id"],
        onupdate="CASCADE",
        ondelete="CASCADE",
    )
    op.create_foreign_key(
        "fk_activities_resource",
        "activities",
        "resources",
        ["resource_id"],
        ["id"],
        onupdate="CASCADE",
        ondelete="SET NULL",
    )

    # Indexes
    op.create_index("ix_activities_user_id", "activities", ["user_id"])
    op.create_index("ix_activities_resource_id", "activities", ["resource_id"])
    op.create_index("ix_activities_action_type", "activities", ["action_type"])
    op.create_index("ix_activities_created_at", "activities", ["created_at"])


def downgrade():
    op.drop_table("activities")
    op.drop_table("resources")
    op.drop_table("users")
