"""Role registry: hierarchy levels and default permission sets."""

from enum import IntEnum
from types import MappingProxyType
from typing import Mapping

from warden.domain.auth.model.permission import Permission, is_known_permission
from warden.domain.shared.error import ConfigurationError, InvalidRoleValue


class Role(IntEnum):
    """Hierarchical roles; the value is the role's level.

    Higher values carry more authority. Gaps allow future role insertion
    without renumbering.
    """

    VIEWER = 10
    CONTENT_EDITOR = 15
    STAFF = 20
    ADMIN = 50
    SUPER_ADMIN = 100


PRIVILEGED_ROLES = frozenset({Role.ADMIN, Role.SUPER_ADMIN})
"""Roles that only a super admin may hand out, and whose last holder is protected."""


_DASHBOARD_WIDGETS = (
    Permission.DASHBOARD_VIEW,
    Permission.DASHBOARD_MESSAGE_CENTER,
    Permission.DASHBOARD_ENGAGEMENT_OVERVIEW,
    Permission.DASHBOARD_PRODUCT_INSIGHTS,
    Permission.DASHBOARD_SEARCH_ANALYTICS,
    Permission.DASHBOARD_STATISTICS,
    Permission.DASHBOARD_RECENT_ACTIVITY,
)

ROLE_PERMISSIONS: Mapping[Role, frozenset[str]] = MappingProxyType(
    {
        Role.SUPER_ADMIN: frozenset(
            {
                Permission.PRODUCTS_ALL,
                Permission.CATEGORIES_ALL,
                Permission.PAGES_ALL,
                Permission.MENU_ALL,
                Permission.MEDIA_ALL,
                Permission.USERS_ALL,
                Permission.SETTINGS_ALL,
                Permission.MESSAGES_ALL,
                Permission.COLLECTIONS_ALL,
                Permission.HOMEPAGE_ALL,
                Permission.DASHBOARD_ALL,
            }
        ),
        # No users.manage_roles / users.edit_permissions: admins change roles
        # only within the scope the role-change guards allow.
        Role.ADMIN: frozenset(
            {
                Permission.PRODUCTS_ALL,
                Permission.CATEGORIES_ALL,
                Permission.PAGES_ALL,
                Permission.MENU_ALL,
                Permission.MEDIA_ALL,
                Permission.USERS_VIEW,
                Permission.USERS_CREATE,
                Permission.USERS_EDIT,
                Permission.USERS_DELETE,
                Permission.MESSAGES_ALL,
                Permission.COLLECTIONS_ALL,
                Permission.HOMEPAGE_ALL,
                *_DASHBOARD_WIDGETS,
            }
        ),
        Role.STAFF: frozenset(
            {
                Permission.PRODUCTS_VIEW,
                Permission.PRODUCTS_EDIT,
                Permission.CATEGORIES_VIEW,
                Permission.PAGES_VIEW,
                Permission.PAGES_EDIT,
                Permission.MENU_VIEW,
                Permission.MEDIA_VIEW,
                Permission.MEDIA_UPLOAD,
                Permission.USERS_VIEW,
                Permission.USERS_EDIT,
                Permission.MESSAGES_VIEW,
                Permission.HOMEPAGE_VIEW,
                Permission.HOMEPAGE_EDIT,
                Permission.DASHBOARD_VIEW,
                Permission.DASHBOARD_MESSAGE_CENTER,
                Permission.DASHBOARD_STATISTICS,
                Permission.DASHBOARD_RECENT_ACTIVITY,
            }
        ),
        Role.CONTENT_EDITOR: frozenset(
            {
                Permission.PRODUCTS_VIEW,
                Permission.PRODUCTS_CREATE,
                Permission.PRODUCTS_EDIT,
                Permission.CATEGORIES_VIEW,
                Permission.PAGES_VIEW,
                Permission.PAGES_CREATE,
                Permission.PAGES_EDIT,
                Permission.MENU_VIEW,
                Permission.MEDIA_VIEW,
                Permission.MEDIA_UPLOAD,
                Permission.MESSAGES_VIEW,
                Permission.HOMEPAGE_VIEW,
                Permission.HOMEPAGE_EDIT,
                Permission.DASHBOARD_VIEW,
                Permission.DASHBOARD_MESSAGE_CENTER,
                Permission.DASHBOARD_RECENT_ACTIVITY,
            }
        ),
        Role.VIEWER: frozenset(
            {
                Permission.PRODUCTS_VIEW,
                Permission.CATEGORIES_VIEW,
                Permission.PAGES_VIEW,
                Permission.MENU_VIEW,
                Permission.MEDIA_VIEW,
                Permission.MESSAGES_VIEW,
                Permission.HOMEPAGE_VIEW,
                Permission.DASHBOARD_VIEW,
                Permission.DASHBOARD_STATISTICS,
                Permission.COLLECTIONS_VIEW,
            }
        ),
    }
)


def _require_role(role: object) -> Role:
    if not isinstance(role, Role):
        raise TypeError(f"Expected Role, got {type(role).__name__}: {role!r}")
    return role


def level_of(role: Role) -> int:
    """Hierarchy level of ``role``. Non-Role input is a programming error."""
    return int(_require_role(role))


def default_permissions(role: Role) -> frozenset[str]:
    """Default permission set for ``role``."""
    return ROLE_PERMISSIONS[_require_role(role)]


def parse_role(value: str | Role) -> Role:
    """Parse external input (role name, any case) into a Role.

    Raises:
        InvalidRoleValue: If the value names no registered role.
    """
    if isinstance(value, Role):
        return value
    if not isinstance(value, str):
        raise InvalidRoleValue(value)
    try:
        return Role[value.strip().upper()]
    except KeyError:
        raise InvalidRoleValue(value) from None


def validate_registry() -> None:
    """Startup check: every role has defaults drawn from the known vocabulary."""
    missing = set(Role) - set(ROLE_PERMISSIONS)
    if missing:
        raise ConfigurationError(
            f"Roles without default permissions: {sorted(r.name for r in missing)}"
        )

    unknown = sorted(
        f"{role.name}:{perm}"
        for role, perms in ROLE_PERMISSIONS.items()
        for perm in perms
        if not is_known_permission(perm)
    )
    if unknown:
        raise ConfigurationError(f"Role defaults reference unknown permissions: {unknown}")
