"""Role-change validator.

Guards run in a fixed order and the first rejection wins:

1. the target must exist
2. an actor may not lower their own role
3. only a super admin may grant ADMIN or SUPER_ADMIN
4. only a super admin may modify a super admin
5. the actor must be within scope of the target
6. the last holder of ADMIN (or SUPER_ADMIN) may not leave the role

Guards 2-6 are a pure function of a ``RoleTransition``; the validator only
adds the target lookup and, when the target is leaving a protected role, the
holder count.
"""

import logging
from enum import StrEnum

from warden.domain.auth.model.role import PRIVILEGED_ROLES, Role
from warden.domain.auth.model.user import User
from warden.domain.auth.model.value import UserId
from warden.domain.auth.port.user_store import HolderCounter, UserStore
from warden.domain.shared.error import (
    CannotModifySuperior,
    InsufficientAuthorityToPromote,
    LastAdminProtected,
    OutOfScope,
    RoleChangeDenied,
    SelfDemotionDenied,
    TargetNotFound,
)
from warden.domain.shared.model.value import ValueObject
from warden.domain.shared.service import Service

logger = logging.getLogger(__name__)


class RejectionReason(StrEnum):
    SELF_DEMOTION = "self_demotion_denied"
    INSUFFICIENT_AUTHORITY = "insufficient_authority_to_promote"
    CANNOT_MODIFY_SUPERIOR = "cannot_modify_superior"
    OUT_OF_SCOPE = "out_of_scope"
    LAST_ADMIN = "last_admin_protected"


class RoleTransition(ValueObject):
    """A requested role change, reduced to what the guards look at."""

    current: Role
    requested: Role
    actor_role: Role
    actor_is_self: bool
    holders: int | None = None
    """Holders of ``current``. Required only when leaving a protected role."""

    @property
    def leaves_protected_role(self) -> bool:
        return self.current in PRIVILEGED_ROLES and self.requested != self.current


def _out_of_scope(t: RoleTransition) -> bool:
    if t.actor_role == Role.SUPER_ADMIN:
        return False
    if t.actor_role == Role.ADMIN:
        return not t.actor_is_self and t.current != Role.VIEWER
    if t.actor_is_self:
        return t.requested > t.actor_role
    return not (t.actor_role > t.current and t.requested < t.actor_role)


def evaluate_transition(t: RoleTransition) -> RejectionReason | None:
    """Apply guards 2-6 to ``t``. Returns the first rejection, or None if allowed.

    Raises:
        ValueError: If the target leaves a protected role and ``holders`` is unset.
    """
    if t.actor_is_self and t.requested < t.actor_role:
        return RejectionReason.SELF_DEMOTION

    if t.requested in PRIVILEGED_ROLES and t.actor_role != Role.SUPER_ADMIN:
        return RejectionReason.INSUFFICIENT_AUTHORITY

    if t.current == Role.SUPER_ADMIN and t.actor_role != Role.SUPER_ADMIN:
        return RejectionReason.CANNOT_MODIFY_SUPERIOR

    if _out_of_scope(t):
        return RejectionReason.OUT_OF_SCOPE

    if t.leaves_protected_role:
        if t.holders is None:
            raise ValueError(f"Holder count of {t.current.name} required to evaluate transition")
        if t.holders == 1:
            return RejectionReason.LAST_ADMIN

    return None


def rejection_error(reason: RejectionReason, transition: RoleTransition) -> RoleChangeDenied:
    """Build the error raised to callers for ``reason``."""
    match reason:
        case RejectionReason.SELF_DEMOTION:
            return SelfDemotionDenied("Cannot demote yourself. Another admin must change your role.")
        case RejectionReason.INSUFFICIENT_AUTHORITY:
            return InsufficientAuthorityToPromote(
                "Only super admins can create or promote users to admin roles"
            )
        case RejectionReason.CANNOT_MODIFY_SUPERIOR:
            return CannotModifySuperior("Only super admins can modify other super admin users")
        case RejectionReason.OUT_OF_SCOPE:
            if transition.actor_role == Role.ADMIN:
                return OutOfScope("Regular admins can only modify viewer users")
            return OutOfScope(
                f"{transition.actor_role.name} cannot assign {transition.requested.name} "
                f"to a {transition.current.name} user"
            )
        case RejectionReason.LAST_ADMIN:
            label = "super admin" if transition.current == Role.SUPER_ADMIN else "admin"
            return LastAdminProtected(
                f"Cannot remove the last {label}. "
                f"At least one {label} must remain in the system."
            )


class RoleChangeValidator(Service):
    """Decides whether an actor may move a target to a new role. Never writes."""

    _user_store: UserStore

    async def validate_role_change(self, actor: User, target_id: UserId, new_role: Role) -> None:
        """Raise the specific RoleChangeDenied (or TargetNotFound) if not allowed."""
        target = await self._user_store.get(target_id)
        if target is None:
            logger.warning(
                "Role change denied: actor=%s target=%s reason=target_not_found",
                actor.id,
                target_id,
            )
            raise TargetNotFound(target_id)
        await self.check(actor, target, new_role, self._user_store.count_by_role)

    async def check(
        self,
        actor: User,
        target: User,
        new_role: Role,
        count_holders: HolderCounter,
    ) -> None:
        """Run all guards against an already loaded target.

        ``count_holders`` is called at most once, and only when the target
        leaves a protected role. Used as the guard of
        ``UserStore.apply_role_change`` so the count shares the write's
        transaction.
        """
        transition = RoleTransition(
            current=target.role,
            requested=new_role,
            actor_role=actor.role,
            actor_is_self=actor.id == target.id,
        )
        if transition.leaves_protected_role:
            holders = await count_holders(target.role)
            transition = transition.model_copy(update={"holders": holders})

        reason = evaluate_transition(transition)
        if reason is not None:
            logger.warning(
                "Role change denied: actor=%s (%s) target=%s %s->%s reason=%s",
                actor.id,
                actor.role.name,
                target.id,
                target.role.name,
                new_role.name,
                reason,
            )
            raise rejection_error(reason, transition)

        logger.info(
            "Role change allowed: actor=%s (%s) target=%s %s->%s",
            actor.id,
            actor.role.name,
            target.id,
            target.role.name,
            new_role.name,
        )
