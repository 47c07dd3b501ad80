"""Read-only views of the role registry and the permission vocabulary.

These need no database and no acting user.
"""

from warden.cli.console import get_console
from warden.cli.runtime import fail
from warden.domain.auth.model.permission import PERMISSION_DESCRIPTIONS, split_permission
from warden.domain.auth.model.role import Role, default_permissions, level_of, parse_role
from warden.domain.shared.error import InvalidRoleValue


def roles(role: str | None = None, /) -> None:
    """Show roles with their level and default permissions.

    Args:
        role: Only this role.
    """
    console = get_console()
    try:
        selected = [parse_role(role)] if role else sorted(Role, reverse=True)
    except InvalidRoleValue as e:
        fail(e)
    for r in selected:
        console.panel(
            "\n".join(sorted(default_permissions(r))),
            title=f"[bold]{r.name}[/bold] (level {level_of(r)})",
        )


def permissions(resource: str | None = None, /) -> None:
    """List known permission tokens with their description.

    Args:
        resource: Only tokens of this resource, e.g. products.
    """
    rows = [
        {"token": token.value, "description": description}
        for token, description in PERMISSION_DESCRIPTIONS.items()
        if resource is None or split_permission(token)[0] == resource
    ]
    if not rows:
        get_console().warning(f"No permissions for resource {resource!r}")
        return
    get_console().table(rows, [("token", "Permission"), ("description", "Description")])
