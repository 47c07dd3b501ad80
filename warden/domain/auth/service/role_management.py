"""Role management service: validated, audited role and permission changes."""

import logging
from collections.abc import Iterable

from warden.domain.auth.model.audit import AuditAction
from warden.domain.auth.model.bulk import BulkFailure, BulkResult, BulkSkip
from warden.domain.auth.model.permission import Permission, is_known_permission, split_permission
from warden.domain.auth.model.role import PRIVILEGED_ROLES, Role, level_of
from warden.domain.auth.model.user import User
from warden.domain.auth.model.value import UserId
from warden.domain.auth.port.user_store import HolderCounter, UserStore
from warden.domain.auth.service.audit import AuditRecorder
from warden.domain.auth.service.hierarchy import can_manage
from warden.domain.auth.service.permission import has_permission
from warden.domain.auth.service.role_change import RoleChangeValidator
from warden.domain.shared.error import (
    CannotManageTarget,
    DomainError,
    InvalidStateError,
    PermissionDenied,
    PersistenceFailure,
    SelfDemotionDenied,
    TargetNotFound,
    UnknownPermission,
    ValidationError,
)
from warden.domain.shared.service import Service

logger = logging.getLogger(__name__)

SUPER_ADMIN_SKIP_REASON = "Super admin users cannot be modified via bulk operations"


def _role_snapshot(role: Role) -> dict:
    return {"role": role.name, "role_level": level_of(role)}


class RoleManagementService(Service):
    """Applies role and permission changes on behalf of an explicit actor.

    Every accepted mutation is written through the ``UserStore`` and then
    recorded by the ``AuditRecorder``. Audit failures are logged by the
    recorder and never undo the mutation.
    """

    _user_store: UserStore
    _validator: RoleChangeValidator
    _audit: AuditRecorder
    bulk_max_targets: int = 500

    async def change_role(self, actor: User, target_id: UserId, new_role: Role) -> User:
        """Validate and apply a single role change.

        Raises:
            TargetNotFound: If the target does not exist.
            RoleChangeDenied: The specific guard that rejected the change.
            PersistenceFailure: If the write fails.
        """
        target = await self._user_store.get(target_id)
        if target is None:
            raise TargetNotFound(target_id)
        return await self._change(actor, target, new_role)

    async def _change(
        self,
        actor: User,
        target: User,
        new_role: Role,
        metadata: dict | None = None,
    ) -> User:
        if target.role == new_role:
            # Still validated so an unauthorized no-op is reported as such.
            await self._validator.check(actor, target, new_role, self._user_store.count_by_role)
            logger.info("Role unchanged for %s (already %s)", target.id, new_role.name)
            return target

        previous: list[Role] = []

        async def guard(current: User, count_holders: HolderCounter) -> None:
            previous.append(current.role)
            await self._validator.check(actor, current, new_role, count_holders)

        updated = await self._user_store.apply_role_change(target.id, new_role, guard)

        await self._audit.record_change(
            actor,
            updated,
            AuditAction.ROLE_CHANGE,
            old_value=_role_snapshot(previous[-1]),
            new_value=_role_snapshot(new_role),
            metadata=metadata,
        )
        return updated

    async def bulk_change_role(
        self,
        actor: User,
        target_ids: Iterable[UserId],
        new_role: Role,
    ) -> BulkResult:
        """Apply ``new_role`` to many targets, one at a time.

        Super admins are skipped without evaluation. A rejection or write
        failure for one target lands in ``failed`` and processing continues.

        Raises:
            ValidationError: Empty batch, or more than ``bulk_max_targets`` ids.
            SelfDemotionDenied: The actor is in the batch and ``new_role``
                would demote them. Nothing is written.
        """
        ids = list(dict.fromkeys(target_ids))
        if not ids:
            raise ValidationError("user_ids must be a non-empty list", field="user_ids")
        if len(ids) > self.bulk_max_targets:
            raise ValidationError(
                f"Too many users in one bulk change: {len(ids)} (max {self.bulk_max_targets})",
                field="user_ids",
                code="too_many_targets",
            )

        found = {u.id: u for u in await self._user_store.get_many(ids)}
        result = BulkResult(new_role=new_role, requested=len(ids))

        processable: list[User] = []
        for user_id in ids:
            user = found.get(user_id)
            if user is None:
                result.failed.append(
                    BulkFailure(
                        user_id=str(user_id),
                        code="target_not_found",
                        reason="Target user not found",
                    )
                )
            elif user.role == Role.SUPER_ADMIN:
                result.skipped.append(
                    BulkSkip(user_id=str(user.id), email=user.email, reason=SUPER_ADMIN_SKIP_REASON)
                )
            else:
                processable.append(user)

        if any(u.id == actor.id for u in processable) and new_role < actor.role:
            logger.warning(
                "Bulk role change rejected: actor=%s would demote self to %s",
                actor.id,
                new_role.name,
            )
            raise SelfDemotionDenied(
                "Cannot remove your own admin privileges. "
                "Please deselect yourself and try again."
            )

        for target in processable:
            try:
                await self._change(actor, target, new_role, metadata={"bulk": True})
            except (DomainError, PersistenceFailure) as e:
                result.failed.append(
                    BulkFailure(user_id=str(target.id), code=e.code, reason=e.message)
                )
            else:
                result.updated.append(str(target.id))

        level = logging.WARNING if new_role in PRIVILEGED_ROLES else logging.INFO
        logger.log(
            level,
            "Bulk role change by %s (%s) to %s: requested=%d updated=%d failed=%d skipped=%d",
            actor.email,
            actor.role.name,
            new_role.name,
            result.requested,
            result.updated_count,
            result.failed_count,
            result.skipped_count,
        )
        return result

    async def update_permissions(
        self,
        actor: User,
        target_id: UserId,
        permissions: Iterable[str],
    ) -> User:
        """Replace the target's permission overrides.

        Raises:
            PermissionDenied: Actor lacks ``users.edit_permissions``.
            TargetNotFound: If the target does not exist.
            CannotManageTarget: Target is at or above the actor's level.
            InvalidPermissionFormat: A token is not ``resource.action``.
            UnknownPermission: A token is outside the known vocabulary.
        """
        if not has_permission(actor, Permission.USERS_EDIT_PERMISSIONS):
            logger.warning("Permission edit denied: actor=%s lacks users.edit_permissions", actor.id)
            raise PermissionDenied(Permission.USERS_EDIT_PERMISSIONS)

        target = await self._user_store.get(target_id)
        if target is None:
            raise TargetNotFound(target_id)

        if not can_manage(actor, target):
            logger.warning(
                "Permission edit denied: actor=%s (%s) cannot manage %s (%s)",
                actor.id,
                actor.role.name,
                target.id,
                target.role.name,
            )
            raise CannotManageTarget(target.id)

        tokens = list(permissions)
        for token in tokens:
            split_permission(token)
        unknown = sorted({t for t in tokens if not is_known_permission(t)})
        if unknown:
            raise UnknownPermission(unknown)

        new_permissions = frozenset(tokens)
        if new_permissions == target.permissions:
            return target

        old_permissions = target.permissions
        updated = await self._user_store.set_permissions(target.id, new_permissions)
        logger.info(
            "Permissions of %s updated by %s: %d -> %d overrides",
            target.id,
            actor.id,
            len(old_permissions),
            len(new_permissions),
        )

        await self._audit.record_change(
            actor,
            updated,
            AuditAction.PERMISSION_CHANGE,
            old_value={"permissions": sorted(old_permissions)},
            new_value={"permissions": sorted(new_permissions)},
        )
        return updated

    async def reset_permissions(self, actor: User, target_id: UserId) -> User:
        """Clear all overrides so the target holds only its role defaults."""
        return await self.update_permissions(actor, target_id, [])

    async def bootstrap_super_admin(self, user_id: UserId) -> User:
        """Promote the first super admin during initial setup.

        Raises:
            InvalidStateError: A super admin already exists.
            TargetNotFound: If the user does not exist.
        """
        previous: list[Role] = []

        async def guard(current: User, count_holders: HolderCounter) -> None:
            previous.append(current.role)
            if await count_holders(Role.SUPER_ADMIN) > 0:
                raise InvalidStateError(
                    "A super admin already exists; use a role change instead",
                    code="already_bootstrapped",
                )

        updated = await self._user_store.apply_role_change(user_id, Role.SUPER_ADMIN, guard)
        logger.warning("Bootstrapped super admin: %s (%s)", updated.id, updated.email)

        await self._audit.record_change(
            updated,
            updated,
            AuditAction.ROLE_CHANGE,
            old_value=_role_snapshot(previous[-1]),
            new_value=_role_snapshot(Role.SUPER_ADMIN),
            metadata={"bootstrap": True},
        )
        return updated
