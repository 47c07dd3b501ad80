"""ResetPermissions command and handler."""

import logfire

from warden.domain.auth.command.update_permissions import PermissionsUpdated
from warden.domain.auth.model.permission import Permission
from warden.domain.auth.model.user import User
from warden.domain.auth.model.value import parse_user_id
from warden.domain.auth.query.user_dto import UserDTO
from warden.domain.auth.service.role_management import RoleManagementService
from warden.domain.shared.authorization.gate import requires
from warden.domain.shared.command import Command, CommandHandler


class ResetPermissions(Command):
    """Drop every override so the user holds only the role defaults."""

    user_id: str


class ResetPermissionsHandler(CommandHandler[ResetPermissions, PermissionsUpdated]):
    __auth__ = requires(Permission.USERS_EDIT_PERMISSIONS)
    actor: User
    role_management: RoleManagementService

    async def run(self, cmd: ResetPermissions) -> PermissionsUpdated:
        with logfire.span("ResetPermissions", target=cmd.user_id):
            user = await self.role_management.reset_permissions(self.actor, parse_user_id(cmd.user_id))
            return PermissionsUpdated(user=UserDTO.from_user(user))
