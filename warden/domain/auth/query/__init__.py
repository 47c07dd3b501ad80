"""Auth domain queries."""

from .get_effective_permissions import (
    EffectivePermissions,
    GetEffectivePermissions,
    GetEffectivePermissionsHandler,
)
from .list_audit_log import AuditLog, AuditLogEntryDTO, ListAuditLog, ListAuditLogHandler
from .list_manageable_users import (
    ListManageableUsers,
    ListManageableUsersHandler,
    ManageableUsers,
)
from .user_dto import UserDTO

__all__ = [
    "AuditLog",
    "AuditLogEntryDTO",
    "EffectivePermissions",
    "GetEffectivePermissions",
    "GetEffectivePermissionsHandler",
    "ListAuditLog",
    "ListAuditLogHandler",
    "ListManageableUsers",
    "ListManageableUsersHandler",
    "ManageableUsers",
    "UserDTO",
]
