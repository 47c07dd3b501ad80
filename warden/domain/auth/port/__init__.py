"""Auth domain ports."""

from .audit_store import AuditStore
from .user_store import HolderCounter, RoleChangeGuard, UserStore

__all__ = ["AuditStore", "HolderCounter", "RoleChangeGuard", "UserStore"]
