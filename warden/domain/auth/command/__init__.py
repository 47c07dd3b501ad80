"""Auth domain commands."""

from .bulk_change_role import BulkChangeRole, BulkChangeRoleHandler, BulkRoleChanged
from .change_role import ChangeRole, ChangeRoleHandler, RoleChanged
from .reset_permissions import ResetPermissions, ResetPermissionsHandler
from .update_permissions import PermissionsUpdated, UpdatePermissions, UpdatePermissionsHandler

__all__ = [
    "BulkChangeRole",
    "BulkChangeRoleHandler",
    "BulkRoleChanged",
    "ChangeRole",
    "ChangeRoleHandler",
    "PermissionsUpdated",
    "ResetPermissions",
    "ResetPermissionsHandler",
    "RoleChanged",
    "UpdatePermissions",
    "UpdatePermissionsHandler",
]
