"""GetEffectivePermissions query and handler."""

from warden.domain.auth.model.role import Role, default_permissions
from warden.domain.auth.model.user import User
from warden.domain.auth.model.value import parse_user_id
from warden.domain.auth.port.user_store import UserStore
from warden.domain.auth.service.hierarchy import can_manage
from warden.domain.auth.service.permission import effective_permissions
from warden.domain.shared.authorization.gate import at_least
from warden.domain.shared.error import CannotManageTarget, TargetNotFound
from warden.domain.shared.query import Query, QueryHandler, Result


class GetEffectivePermissions(Query):
    """Effective permissions of a user; the actor's own when ``user_id`` is omitted."""

    user_id: str | None = None


class EffectivePermissions(Result):
    user_id: str
    role: str
    role_level: int
    role_defaults: list[str]
    overrides: list[str]
    effective: list[str]


class GetEffectivePermissionsHandler(QueryHandler[GetEffectivePermissions, EffectivePermissions]):
    __auth__ = at_least(Role.VIEWER)
    actor: User
    user_store: UserStore

    async def run(self, query: GetEffectivePermissions) -> EffectivePermissions:
        user = await self._resolve_target(query.user_id)
        return EffectivePermissions(
            user_id=str(user.id),
            role=user.role.name,
            role_level=user.role_level,
            role_defaults=sorted(default_permissions(user.role)),
            overrides=sorted(user.permissions),
            effective=sorted(effective_permissions(user)),
        )

    async def _resolve_target(self, user_id: str | None) -> User:
        if user_id is None:
            return self.actor
        target_id = parse_user_id(user_id)
        if target_id == self.actor.id:
            return self.actor
        target = await self.user_store.get(target_id)
        if target is None:
            raise TargetNotFound(user_id)
        if not can_manage(self.actor, target):
            raise CannotManageTarget(target.id)
        return target
