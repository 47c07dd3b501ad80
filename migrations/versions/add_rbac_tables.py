"""add_rbac_tables

Users with role and permission overrides, and the append-only RBAC audit log.

Revision ID: add_rbac_tables
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "add_rbac_tables"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users and rbac_audit_log."""
    # USERS
    op.create_table(
        "users",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("role", sa.String(32), nullable=False, server_default="VIEWER"),
        sa.Column("role_level", sa.Integer(), nullable=False, server_default="10"),
        sa.Column("permissions", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index("idx_users_role", "users", ["role"])

    # RBAC AUDIT LOG
    op.create_table(
        "rbac_audit_log",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("actor_id", sa.String(), nullable=False),
        sa.Column("actor_email", sa.String(255), nullable=False),
        sa.Column("target_id", sa.String(), nullable=False),
        sa.Column("target_email", sa.String(255), nullable=False),
        sa.Column("action", sa.String(32), nullable=False),
        sa.Column("old_value", sa.JSON(), nullable=True),
        sa.Column("new_value", sa.JSON(), nullable=True),
        sa.Column("metadata", sa.JSON(), nullable=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_rbac_audit_log_actor_id", "rbac_audit_log", ["actor_id"])
    op.create_index("idx_rbac_audit_log_target_id", "rbac_audit_log", ["target_id"])
    op.create_index("idx_rbac_audit_log_timestamp", "rbac_audit_log", ["timestamp"])


def downgrade() -> None:
    """Drop RBAC tables."""
    op.drop_index("idx_rbac_audit_log_timestamp", table_name="rbac_audit_log")
    op.drop_index("idx_rbac_audit_log_target_id", table_name="rbac_audit_log")
    op.drop_index("idx_rbac_audit_log_actor_id", table_name="rbac_audit_log")
    op.drop_table("rbac_audit_log")

    op.drop_index("idx_users_role", table_name="users")
    op.drop_table("users")
