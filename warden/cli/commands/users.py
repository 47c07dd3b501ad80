"""User role and permission management commands."""

import sys
from typing import Annotated

import cyclopts
from dishka import AsyncContainer

from warden.cli.console import get_console
from warden.cli.runtime import resolve_user_id, run
from warden.domain.auth.command.bulk_change_role import BulkChangeRole, BulkChangeRoleHandler
from warden.domain.auth.command.change_role import ChangeRole, ChangeRoleHandler
from warden.domain.auth.command.reset_permissions import ResetPermissions, ResetPermissionsHandler
from warden.domain.auth.command.update_permissions import (
    UpdatePermissions,
    UpdatePermissionsHandler,
)
from warden.domain.auth.model.role import parse_role
from warden.domain.auth.model.user import User
from warden.domain.auth.port.user_store import UserStore
from warden.domain.auth.query.get_effective_permissions import (
    GetEffectivePermissions,
    GetEffectivePermissionsHandler,
)
from warden.domain.auth.query.list_manageable_users import (
    ListManageableUsers,
    ListManageableUsersHandler,
)
from warden.domain.auth.query.user_dto import UserDTO
from warden.domain.auth.service.permission import effective_permissions, has_permission
from warden.domain.auth.service.role_management import RoleManagementService
from warden.domain.shared.error import ConflictError, TargetNotFound

app = cyclopts.App(name="users", help="Inspect and manage user roles and permissions")

Actor = Annotated[str, cyclopts.Parameter(name="--as", help="Email of the acting user")]
OptionalActor = Annotated[
    str | None, cyclopts.Parameter(name="--as", help="Email of the acting user")
]


@app.command(name="list")
def list_users(role: str | None = None, *, actor: OptionalActor = None) -> None:
    """List users.

    With --as, only users the actor can manage are listed.

    Args:
        role: Only users holding this role.
        actor: Email of the acting user.
    """

    async def work(uow: AsyncContainer) -> list[UserDTO]:
        if actor:
            handler = await uow.get(ListManageableUsersHandler)
            return (await handler.run(ListManageableUsers(role=role))).users
        store = await uow.get(UserStore)
        users = await store.list(role=parse_role(role) if role else None)
        return [UserDTO.from_user(u) for u in users]

    get_console().users(run(work, actor=actor))


@app.command
def show(user: str, /, *, actor: OptionalActor = None) -> None:
    """Show a user's role, overrides and effective permissions.

    Args:
        user: User id or email.
        actor: Email of the acting user. Without it the user is shown directly.
    """

    async def work(uow: AsyncContainer) -> tuple[UserDTO, list[str]]:
        user_id = await resolve_user_id(uow, user)
        store = await uow.get(UserStore)
        target = await store.get(user_id)
        if target is None:
            raise TargetNotFound(user_id)
        if actor:
            handler = await uow.get(GetEffectivePermissionsHandler)
            result = await handler.run(GetEffectivePermissions(user_id=str(user_id)))
            return UserDTO.from_user(target), result.effective
        return UserDTO.from_user(target), sorted(effective_permissions(target))

    dto, effective = run(work, actor=actor)
    get_console().user_detail(dto, effective)


@app.command
def check(user: str, permission: str, /) -> None:
    """Check whether a user holds a permission. Exits 1 when denied.

    Args:
        user: User id or email.
        permission: Permission token, e.g. products.edit.
    """

    async def work(uow: AsyncContainer) -> tuple[User, bool]:
        store = await uow.get(UserStore)
        target = await store.get(await resolve_user_id(uow, user))
        if target is None:
            raise TargetNotFound(user)
        return target, has_permission(target, permission)

    target, allowed = run(work)
    console = get_console()
    if allowed:
        console.success(f"{target.email} ({target.role.name}) has {permission}")
    else:
        console.error(f"{target.email} ({target.role.name}) lacks {permission}")
        sys.exit(1)


@app.command
def add(email: str, /, *, name: str | None = None) -> None:
    """Register a user as VIEWER, as the identity sync would.

    Args:
        email: Email address of the new user.
        name: Display name.
    """

    async def work(uow: AsyncContainer) -> User:
        store = await uow.get(UserStore)
        if await store.get_by_email(email) is not None:
            raise ConflictError(f"User already exists: {email}", code="user_exists")
        user = User.create(email=email, name=name)
        await store.save(user)
        return user

    user = run(work)
    get_console().success(f"Added {user.email} as {user.role.name} ({user.id})")


@app.command(name="set-role")
def set_role(user: str, role: str, /, *, actor: Actor) -> None:
    """Change a user's role.

    Args:
        user: User id or email.
        role: New role name, e.g. STAFF.
        actor: Email of the acting user.
    """

    async def work(uow: AsyncContainer) -> UserDTO:
        user_id = await resolve_user_id(uow, user)
        handler = await uow.get(ChangeRoleHandler)
        return (await handler.run(ChangeRole(user_id=str(user_id), role=role))).user

    dto = run(work, actor=actor)
    get_console().success(f"{dto.email} is now {dto.role}")


@app.command(name="bulk-set-role")
def bulk_set_role(role: str, /, *users: str, actor: Actor) -> None:
    """Change the role of many users. Super admins are always skipped.

    Args:
        role: New role name.
        users: User ids or emails.
        actor: Email of the acting user.
    """

    async def work(uow: AsyncContainer):
        user_ids = [str(await resolve_user_id(uow, u)) for u in users]
        handler = await uow.get(BulkChangeRoleHandler)
        return await handler.run(BulkChangeRole(user_ids=user_ids, role=role))

    result = run(work, actor=actor)
    get_console().bulk_result(result.result, result.message)


@app.command(name="set-permissions")
def set_permissions(user: str, /, *permissions: str, actor: Actor) -> None:
    """Replace a user's permission overrides.

    Args:
        user: User id or email.
        permissions: Permission tokens; resource.* grants every action on a resource.
        actor: Email of the acting user.
    """

    async def work(uow: AsyncContainer) -> UserDTO:
        user_id = await resolve_user_id(uow, user)
        handler = await uow.get(UpdatePermissionsHandler)
        cmd = UpdatePermissions(user_id=str(user_id), permissions=list(permissions))
        return (await handler.run(cmd)).user

    dto = run(work, actor=actor)
    get_console().success(f"{dto.email} overrides: {', '.join(dto.permissions) or '-'}")


@app.command(name="reset-permissions")
def reset_permissions(user: str, /, *, actor: Actor) -> None:
    """Clear a user's overrides back to the role defaults.

    Args:
        user: User id or email.
        actor: Email of the acting user.
    """

    async def work(uow: AsyncContainer) -> UserDTO:
        user_id = await resolve_user_id(uow, user)
        handler = await uow.get(ResetPermissionsHandler)
        return (await handler.run(ResetPermissions(user_id=str(user_id)))).user

    dto = run(work, actor=actor)
    get_console().success(f"Reset overrides of {dto.email}")


@app.command
def bootstrap(user: str, /) -> None:
    """Promote the first super admin. Refused once any super admin exists.

    Args:
        user: User id or email.
    """

    async def work(uow: AsyncContainer) -> User:
        user_id = await resolve_user_id(uow, user)
        service = await uow.get(RoleManagementService)
        return await service.bootstrap_super_admin(user_id)

    promoted = run(work)
    get_console().success(f"{promoted.email} is now SUPER_ADMIN")
