"""SQLAlchemy table definitions - dialect-agnostic (works with SQLite and PostgreSQL)."""

from sqlalchemy import (
    Column,
    DateTime,
    Index,
    Integer,
    MetaData,
    String,
    Table,
)
from sqlalchemy.types import JSON

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# USERS TABLE
# ============================================================================
users_table = Table(
    "users",
    metadata,
    Column("id", String, primary_key=True),
    Column("email", String(255), nullable=False, unique=True),
    Column("name", String(255), nullable=True),
    Column("role", String(32), nullable=False, server_default="VIEWER"),  # Role name
    Column("role_level", Integer, nullable=False, server_default="10"),  # Cache, never read back
    Column("permissions", JSON, nullable=False),  # Override tokens, list of strings
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=True),
)

Index("idx_users_role", users_table.c.role)


# ============================================================================
# RBAC AUDIT LOG TABLE (append-only)
# ============================================================================
rbac_audit_log_table = Table(
    "rbac_audit_log",
    metadata,
    Column("id", String, primary_key=True),
    Column("actor_id", String, nullable=False),
    Column("actor_email", String(255), nullable=False),
    Column("target_id", String, nullable=False),
    Column("target_email", String(255), nullable=False),
    Column("action", String(32), nullable=False),  # AuditAction as string
    Column("old_value", JSON, nullable=True),
    Column("new_value", JSON, nullable=True),
    Column("metadata", JSON, nullable=True),
    Column("timestamp", DateTime(timezone=True), nullable=False),
)

Index("idx_rbac_audit_log_actor_id", rbac_audit_log_table.c.actor_id)
Index("idx_rbac_audit_log_target_id", rbac_audit_log_table.c.target_id)
Index("idx_rbac_audit_log_timestamp", rbac_audit_log_table.c.timestamp)
