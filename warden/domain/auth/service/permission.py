"""Permission resolver: answers whether a user holds a capability.

A user's effective set is the role's defaults plus their individual
overrides. A token is granted on an exact match or when the set contains the
``resource.*`` wildcard for the token's resource. There is exactly one
wildcard level: ``products.*`` grants ``products.view`` but nothing grants
``*``.
"""

from collections.abc import Iterable

from warden.domain.auth.model.permission import split_permission, wildcard_for
from warden.domain.auth.model.role import default_permissions
from warden.domain.auth.model.user import User


def effective_permissions(user: User) -> frozenset[str]:
    return default_permissions(user.role) | user.permissions


def _granted(granted: frozenset[str], permission: str) -> bool:
    resource, _ = split_permission(permission)
    return permission in granted or wildcard_for(resource) in granted


def has_permission(user: User, permission: str) -> bool:
    """Check whether ``user`` holds ``permission``.

    Raises:
        InvalidPermissionFormat: If ``permission`` is not ``resource.action``.
    """
    return _granted(effective_permissions(user), permission)


def has_any_permission(user: User, permissions: Iterable[str]) -> bool:
    granted = effective_permissions(user)
    # Validate every token even after a match so bad input is never masked.
    results = [_granted(granted, p) for p in permissions]
    return any(results)


def has_all_permissions(user: User, permissions: Iterable[str]) -> bool:
    granted = effective_permissions(user)
    results = [_granted(granted, p) for p in permissions]
    return all(results)
