"""SQL implementation of the UserStore port."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy import func, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from warden.domain.auth.model.role import Role, level_of
from warden.domain.auth.model.user import User
from warden.domain.auth.model.value import UserId
from warden.domain.auth.port.user_store import RoleChangeGuard, UserStore
from warden.domain.shared.error import PersistenceFailure, TargetNotFound
from warden.infrastructure.persistence.mappers.user import row_to_user, user_to_dict
from warden.infrastructure.persistence.tables import users_table

logger = logging.getLogger(__name__)


class SqlUserStore(UserStore):
    """UserStore backed by the ``users`` table.

    Mutations run inside a SAVEPOINT of the unit-of-work session, so a failed
    change rolls back on its own without discarding earlier work in the same
    unit (bulk changes rely on this).
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, user_id: UserId) -> User | None:
        return await self._load(user_id)

    async def _load(self, user_id: UserId, for_update: bool = False) -> User | None:
        stmt = select(users_table).where(users_table.c.id == str(user_id))
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_user(dict(row)) if row else None

    async def get_by_email(self, email: str) -> User | None:
        stmt = select(users_table).where(users_table.c.email == email)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_user(dict(row)) if row else None

    async def get_many(self, user_ids: Iterable[UserId]) -> list[User]:
        ids = [str(i) for i in user_ids]
        if not ids:
            return []
        stmt = select(users_table).where(users_table.c.id.in_(ids))
        result = await self.session.execute(stmt)
        return [row_to_user(dict(row)) for row in result.mappings().all()]

    async def list(self, role: Role | None = None) -> list[User]:
        stmt = select(users_table).order_by(users_table.c.email)
        if role is not None:
            stmt = stmt.where(users_table.c.role == role.name)
        result = await self.session.execute(stmt)
        return [row_to_user(dict(row)) for row in result.mappings().all()]

    async def count_by_role(self, role: Role, for_update: bool = False) -> int:
        """Count holders of ``role``.

        With ``for_update`` the holder rows are locked until the enclosing
        transaction ends, so two concurrent demotions out of the same role
        serialize on the count. SQLite ignores the lock clause; its writes
        are serialized by the database lock instead.
        """
        if for_update:
            stmt = select(users_table.c.id).where(users_table.c.role == role.name).with_for_update()
            result = await self.session.execute(stmt)
            return len(result.all())

        stmt = select(func.count()).select_from(users_table).where(users_table.c.role == role.name)
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def save(self, user: User) -> None:
        user_dict = user_to_dict(user)
        try:
            existing = await self.get(user.id)
            if existing:
                stmt = update(users_table).where(users_table.c.id == str(user.id)).values(**user_dict)
            else:
                stmt = insert(users_table).values(**user_dict)
            await self.session.execute(stmt)
            await self.session.flush()
        except SQLAlchemyError as e:
            raise PersistenceFailure(f"Failed to save user {user.id}: {e}") from e

    async def apply_role_change(
        self,
        user_id: UserId,
        role: Role,
        guard: RoleChangeGuard,
    ) -> User:
        async def count_locked(r: Role) -> int:
            return await self.count_by_role(r, for_update=True)

        try:
            async with self.session.begin_nested():
                user = await self._load(user_id, for_update=True)
                if user is None:
                    raise TargetNotFound(user_id)

                await guard(user, count_locked)

                user.change_role(role)
                await self.session.execute(
                    update(users_table)
                    .where(users_table.c.id == str(user_id))
                    .values(
                        role=role.name,
                        role_level=level_of(role),
                        updated_at=user.updated_at,
                    )
                )
        except SQLAlchemyError as e:
            logger.error("Role change write failed for %s: %s", user_id, e)
            raise PersistenceFailure(f"Failed to update role of user {user_id}: {e}") from e

        return user

    async def set_permissions(self, user_id: UserId, permissions: frozenset[str]) -> User:
        try:
            async with self.session.begin_nested():
                user = await self._load(user_id, for_update=True)
                if user is None:
                    raise TargetNotFound(user_id)

                user.replace_permissions(permissions)
                await self.session.execute(
                    update(users_table)
                    .where(users_table.c.id == str(user_id))
                    .values(
                        permissions=sorted(user.permissions),
                        updated_at=user.updated_at,
                    )
                )
        except SQLAlchemyError as e:
            logger.error("Permission write failed for %s: %s", user_id, e)
            raise PersistenceFailure(f"Failed to update permissions of user {user_id}: {e}") from e

        return user
