"""DI provider for auth domain."""

import logging

from dishka import Provider, from_context, provide

from warden.config import Config
from warden.domain.auth.command.bulk_change_role import BulkChangeRoleHandler
from warden.domain.auth.command.change_role import ChangeRoleHandler
from warden.domain.auth.command.reset_permissions import ResetPermissionsHandler
from warden.domain.auth.command.update_permissions import UpdatePermissionsHandler
from warden.domain.auth.model.user import User
from warden.domain.auth.port.user_store import UserStore
from warden.domain.auth.query.get_effective_permissions import GetEffectivePermissionsHandler
from warden.domain.auth.query.list_audit_log import ListAuditLogHandler
from warden.domain.auth.query.list_manageable_users import ListManageableUsersHandler
from warden.domain.auth.service.audit import AuditRecorder
from warden.domain.auth.service.role_change import RoleChangeValidator
from warden.domain.auth.service.role_management import RoleManagementService
from warden.domain.shared.error import AuthorizationError
from warden.domain.shared.model.value import ValueObject
from warden.util.di.scope import Scope

logger = logging.getLogger(__name__)


class ActorRef(ValueObject):
    """Who is acting in this unit of work, as given by the caller."""

    email: str


class AuthProvider(Provider):
    """DI provider for auth domain services and handlers."""

    actor_ref = from_context(provides=ActorRef, scope=Scope.UOW)

    # Command Handlers
    change_role_handler = provide(ChangeRoleHandler, scope=Scope.UOW)
    bulk_change_role_handler = provide(BulkChangeRoleHandler, scope=Scope.UOW)
    update_permissions_handler = provide(UpdatePermissionsHandler, scope=Scope.UOW)
    reset_permissions_handler = provide(ResetPermissionsHandler, scope=Scope.UOW)

    # Query Handlers
    get_effective_permissions_handler = provide(GetEffectivePermissionsHandler, scope=Scope.UOW)
    list_manageable_users_handler = provide(ListManageableUsersHandler, scope=Scope.UOW)
    list_audit_log_handler = provide(ListAuditLogHandler, scope=Scope.UOW)

    # Services
    role_change_validator = provide(RoleChangeValidator, scope=Scope.UOW)
    audit_recorder = provide(AuditRecorder, scope=Scope.UOW)

    @provide(scope=Scope.UOW)
    def get_role_management_service(
        self,
        config: Config,
        user_store: UserStore,
        validator: RoleChangeValidator,
        audit: AuditRecorder,
    ) -> RoleManagementService:
        return RoleManagementService(
            _user_store=user_store,
            _validator=validator,
            _audit=audit,
            bulk_max_targets=config.authz.bulk_max_targets,
        )

    @provide(scope=Scope.UOW)
    async def get_actor(self, ref: ActorRef, user_store: UserStore) -> User:
        """Load the acting user. Unknown actors are never treated as anonymous."""
        actor = await user_store.get_by_email(ref.email)
        if actor is None:
            raise AuthorizationError(f"Unknown actor: {ref.email}", code="unknown_actor")
        logger.debug("Actor resolved: %s (%s)", actor.id, actor.role.name)
        return actor
