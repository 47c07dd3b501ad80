"""UpdatePermissions command and handler."""

import logfire

from warden.domain.auth.model.permission import Permission
from warden.domain.auth.model.user import User
from warden.domain.auth.model.value import parse_user_id
from warden.domain.auth.query.user_dto import UserDTO
from warden.domain.auth.service.role_management import RoleManagementService
from warden.domain.shared.authorization.gate import requires
from warden.domain.shared.command import Command, CommandHandler, Result


class UpdatePermissions(Command):
    """Replace a user's individual permission overrides."""

    user_id: str
    permissions: list[str]


class PermissionsUpdated(Result):
    user: UserDTO


class UpdatePermissionsHandler(CommandHandler[UpdatePermissions, PermissionsUpdated]):
    __auth__ = requires(Permission.USERS_EDIT_PERMISSIONS)
    actor: User
    role_management: RoleManagementService

    async def run(self, cmd: UpdatePermissions) -> PermissionsUpdated:
        with logfire.span("UpdatePermissions", target=cmd.user_id):
            user = await self.role_management.update_permissions(
                self.actor,
                parse_user_id(cmd.user_id),
                cmd.permissions,
            )
            return PermissionsUpdated(user=UserDTO.from_user(user))
