"""ListManageableUsers query and handler."""

from warden.domain.auth.model.permission import Permission
from warden.domain.auth.model.role import parse_role
from warden.domain.auth.model.user import User
from warden.domain.auth.port.user_store import UserStore
from warden.domain.auth.query.user_dto import UserDTO
from warden.domain.auth.service.hierarchy import filter_manageable
from warden.domain.shared.authorization.gate import requires
from warden.domain.shared.query import Query, QueryHandler, Result


class ListManageableUsers(Query):
    """Users strictly below the actor's level, optionally of one role."""

    role: str | None = None


class ManageableUsers(Result):
    users: list[UserDTO]


class ListManageableUsersHandler(QueryHandler[ListManageableUsers, ManageableUsers]):
    __auth__ = requires(Permission.USERS_VIEW)
    actor: User
    user_store: UserStore

    async def run(self, query: ListManageableUsers) -> ManageableUsers:
        role = parse_role(query.role) if query.role is not None else None
        users = await self.user_store.list(role=role)
        return ManageableUsers(
            users=[UserDTO.from_user(u) for u in filter_manageable(self.actor, users)]
        )
