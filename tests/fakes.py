"""In-memory implementations of the store ports for unit tests."""

from warden.domain.auth.model.audit import AuditLogEntry
from warden.domain.auth.model.role import Role
from warden.domain.auth.model.user import User
from warden.domain.auth.model.value import UserId
from warden.domain.auth.port.user_store import RoleChangeGuard
from warden.domain.shared.error import PersistenceFailure, TargetNotFound


class InMemoryUserStore:
    """UserStore over a dict. Hands out copies so callers never share state."""

    def __init__(self, *users: User) -> None:
        self.users: dict[UserId, User] = {}
        self.failing: set[UserId] = set()
        self.count_calls: list[Role] = []
        self.role_writes: list[tuple[UserId, Role]] = []
        self.add(*users)

    def add(self, *users: User) -> None:
        for u in users:
            self.users[u.id] = u.model_copy(deep=True)

    def role_of(self, user: User) -> Role:
        return self.users[user.id].role

    async def get(self, user_id: UserId) -> User | None:
        user = self.users.get(user_id)
        return user.model_copy(deep=True) if user else None

    async def get_by_email(self, email: str) -> User | None:
        for user in self.users.values():
            if user.email == email:
                return user.model_copy(deep=True)
        return None

    async def get_many(self, user_ids) -> list[User]:
        return [self.users[i].model_copy(deep=True) for i in user_ids if i in self.users]

    async def list(self, role: Role | None = None) -> list[User]:
        users = sorted(self.users.values(), key=lambda u: u.email)
        return [u.model_copy(deep=True) for u in users if role is None or u.role == role]

    async def count_by_role(self, role: Role) -> int:
        self.count_calls.append(role)
        return sum(1 for u in self.users.values() if u.role == role)

    async def save(self, user: User) -> None:
        self.users[user.id] = user.model_copy(deep=True)

    async def apply_role_change(self, user_id: UserId, role: Role, guard: RoleChangeGuard) -> User:
        user = await self.get(user_id)
        if user is None:
            raise TargetNotFound(user_id)
        await guard(user, self.count_by_role)
        if user_id in self.failing:
            raise PersistenceFailure(f"write failed for {user_id}")
        user.change_role(role)
        self.users[user_id] = user.model_copy(deep=True)
        self.role_writes.append((user_id, role))
        return user

    async def set_permissions(self, user_id: UserId, permissions: frozenset[str]) -> User:
        user = await self.get(user_id)
        if user is None:
            raise TargetNotFound(user_id)
        if user_id in self.failing:
            raise PersistenceFailure(f"write failed for {user_id}")
        user.replace_permissions(permissions)
        self.users[user_id] = user.model_copy(deep=True)
        return user


class InMemoryAuditStore:
    def __init__(self) -> None:
        self.entries: list[AuditLogEntry] = []
        self.fail_with: Exception | None = None

    async def append(self, entry: AuditLogEntry) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.entries.append(entry)

    async def list_for_user(self, user_id: UserId, limit: int = 50) -> list[AuditLogEntry]:
        matching = [e for e in self.entries if user_id in (e.actor_id, e.target_id)]
        return sorted(matching, key=lambda e: e.timestamp, reverse=True)[:limit]

    async def list_recent(self, limit: int = 100) -> list[AuditLogEntry]:
        return sorted(self.entries, key=lambda e: e.timestamp, reverse=True)[:limit]
