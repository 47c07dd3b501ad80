"""BulkChangeRole command and handler."""

import logfire

from warden.domain.auth.model.bulk import BulkResult
from warden.domain.auth.model.permission import Permission
from warden.domain.auth.model.role import parse_role
from warden.domain.auth.model.user import User
from warden.domain.auth.model.value import parse_user_id
from warden.domain.auth.service.role_management import RoleManagementService
from warden.domain.shared.authorization.gate import requires
from warden.domain.shared.command import Command, CommandHandler, Result


class BulkChangeRole(Command):
    user_ids: list[str]
    role: str


class BulkRoleChanged(Result):
    result: BulkResult
    message: str


class BulkChangeRoleHandler(CommandHandler[BulkChangeRole, BulkRoleChanged]):
    __auth__ = requires(Permission.USERS_EDIT)
    actor: User
    role_management: RoleManagementService

    async def run(self, cmd: BulkChangeRole) -> BulkRoleChanged:
        with logfire.span("BulkChangeRole", targets=len(cmd.user_ids), role=cmd.role):
            result = await self.role_management.bulk_change_role(
                self.actor,
                [parse_user_id(i) for i in cmd.user_ids],
                parse_role(cmd.role),
            )
            return BulkRoleChanged(result=result, message=result.summary())
