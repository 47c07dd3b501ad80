"""Auth domain models."""

from .audit import AuditAction, AuditLogEntry
from .bulk import BulkFailure, BulkResult, BulkSkip
from .permission import PERMISSION_DESCRIPTIONS, Permission, Resource
from .role import ROLE_PERMISSIONS, Role, default_permissions, level_of, parse_role
from .user import User
from .value import AuditEntryId, UserId

__all__ = [
    "AuditAction",
    "AuditEntryId",
    "AuditLogEntry",
    "BulkFailure",
    "BulkResult",
    "BulkSkip",
    "PERMISSION_DESCRIPTIONS",
    "Permission",
    "ROLE_PERMISSIONS",
    "Resource",
    "Role",
    "User",
    "UserId",
    "default_permissions",
    "level_of",
    "parse_role",
]
