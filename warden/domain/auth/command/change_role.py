"""ChangeRole command and handler."""

import logfire

from warden.domain.auth.model.permission import Permission
from warden.domain.auth.model.role import parse_role
from warden.domain.auth.model.user import User
from warden.domain.auth.model.value import parse_user_id
from warden.domain.auth.query.user_dto import UserDTO
from warden.domain.auth.service.role_management import RoleManagementService
from warden.domain.shared.authorization.gate import requires
from warden.domain.shared.command import Command, CommandHandler, Result


class ChangeRole(Command):
    """Command to move a user to a new role."""

    user_id: str
    role: str  # Role name from the caller, any case


class RoleChanged(Result):
    user: UserDTO


class ChangeRoleHandler(CommandHandler[ChangeRole, RoleChanged]):
    __auth__ = requires(Permission.USERS_EDIT)
    actor: User
    role_management: RoleManagementService

    async def run(self, cmd: ChangeRole) -> RoleChanged:
        with logfire.span("ChangeRole", target=cmd.user_id, role=cmd.role):
            user = await self.role_management.change_role(
                self.actor,
                parse_user_id(cmd.user_id),
                parse_role(cmd.role),
            )
            return RoleChanged(user=UserDTO.from_user(user))
