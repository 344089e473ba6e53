"""create users and careers tables

Revision ID: b7c8d9e0f1a2
Revises:
Create Date: 2026-10-18 09:00:00.000000

This migration:
1. Creates the user_role and entity_status enum types
2. Creates the users table (principals referenced by audit columns)
3. Creates the careers table with indexes on status and created_at

careers.created_by / updated_by deliberately carry no foreign key so audit
history survives user removal.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "b7c8d9e0f1a2"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


user_role_enum = postgresql.ENUM(
    "super_admin",
    "school_admin",
    "teacher",
    "student",
    "parent",
    "finance_officer",
    name="user_role",
    create_type=False,
)

entity_status_enum = postgresql.ENUM(
    "active",
    "pending",
    "inactive",
    name="entity_status",
    create_type=False,
)


def upgrade() -> None:
    """Create enum types, users and careers."""
    bind = op.get_bind()
    user_role_enum.create(bind, checkfirst=True)
    entity_status_enum.create(bind, checkfirst=True)

    op.create_table(
        "users",
        # Primary key and timestamps (from BaseModel)
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        # Profile
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("middle_name", sa.String(length=100), nullable=True),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("role", user_role_enum, nullable=False, server_default="student"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)

    op.create_table(
        "careers",
        # Primary key and timestamps (from BaseModel)
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        # Audit (from AuditMixin)
        sa.Column("created_by", sa.Uuid(), nullable=False),
        sa.Column("updated_by", sa.Uuid(), nullable=True),
        # Window and status (from WindowedMixin)
        sa.Column("starts_from", sa.DateTime(timezone=True), nullable=True),
        sa.Column("ends_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("status", entity_status_enum, nullable=False, server_default="active"),
        # Content
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("position", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("requirements", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "starts_from IS NULL OR ends_at IS NULL OR starts_from <= ends_at",
            name="ck_careers_window_order",
        ),
    )
    op.create_index(op.f("ix_careers_status"), "careers", ["status"], unique=False)
    op.create_index("ix_careers_created_at", "careers", ["created_at"], unique=False)


def downgrade() -> None:
    """Drop careers, users and their enum types."""
    op.drop_index("ix_careers_created_at", table_name="careers")
    op.drop_index(op.f("ix_careers_status"), table_name="careers")
    op.drop_table("careers")

    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")

    bind = op.get_bind()
    entity_status_enum.drop(bind, checkfirst=True)
    user_role_enum.drop(bind, checkfirst=True)
