"""Error hierarchy for Warden.

Error layers:
- WardenError: Base class for all Warden errors
- DomainError: Business rule violations, validation failures (never retried)
- InfrastructureError: System-level failures like storage issues

Every error carries a stable snake_case ``code`` so callers can surface the
specific reason instead of a generic "forbidden".
"""


class WardenError(Exception):
    """Base class for all Warden errors."""

    retryable: bool = False

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(message)


# =============================================================================
# Domain Errors (business logic violations)
# =============================================================================


class DomainError(WardenError):
    """Base class for domain/business errors."""


class NotFoundError(DomainError):
    """Resource not found."""


class ValidationError(DomainError):
    """Input validation failed."""

    def __init__(self, message: str, field: str | None = None, code: str | None = None) -> None:
        super().__init__(message, code=code or "validation_error")
        self.field = field


class InvalidStateError(DomainError):
    """Operation not allowed in current state."""


class ConflictError(DomainError):
    """Resource already exists or version conflict."""


class AuthorizationError(DomainError):
    """User not authorized for this operation."""


# =============================================================================
# RBAC errors
# =============================================================================


class TargetNotFound(NotFoundError):
    """The user a change is aimed at does not exist."""

    def __init__(self, target_id: object) -> None:
        super().__init__(f"Target user not found: {target_id}", code="target_not_found")
        self.target_id = str(target_id)


class RoleChangeDenied(AuthorizationError):
    """A role-change guard rejected the transition."""

    default_code = "role_change_denied"

    def __init__(self, message: str) -> None:
        super().__init__(message, code=self.default_code)


class SelfDemotionDenied(RoleChangeDenied):
    default_code = "self_demotion_denied"


class InsufficientAuthorityToPromote(RoleChangeDenied):
    default_code = "insufficient_authority_to_promote"


class CannotModifySuperior(RoleChangeDenied):
    default_code = "cannot_modify_superior"


class OutOfScope(RoleChangeDenied):
    default_code = "out_of_scope"


class LastAdminProtected(RoleChangeDenied):
    default_code = "last_admin_protected"


class PermissionDenied(AuthorizationError):
    """The actor lacks a capability required by the operation."""

    def __init__(self, permission: str) -> None:
        super().__init__(f"Missing required permission: {permission}", code="permission_denied")
        self.permission = permission


class CannotManageTarget(AuthorizationError):
    """The actor's role level does not exceed the target's."""

    def __init__(self, target_id: object) -> None:
        super().__init__(
            f"Cannot manage users at same or higher role level: {target_id}",
            code="cannot_manage_target",
        )
        self.target_id = str(target_id)


class InvalidPermissionFormat(ValidationError):
    """Permission token is not of the form ``resource.action``."""

    def __init__(self, value: str) -> None:
        super().__init__(
            f"Invalid permission format: {value!r} (expected 'resource.action')",
            field="permission",
            code="invalid_permission_format",
        )
        self.value = value


class UnknownPermission(ValidationError):
    """Permission tokens outside the known vocabulary."""

    def __init__(self, values: list[str]) -> None:
        super().__init__(
            f"Unknown permissions: {', '.join(values)}",
            field="permissions",
            code="unknown_permission",
        )
        self.values = values


class InvalidRoleValue(ValidationError):
    """Role name does not match any registered role."""

    def __init__(self, value: object) -> None:
        super().__init__(f"Invalid role: {value!r}", field="role", code="invalid_role_value")
        self.value = value


# =============================================================================
# Infrastructure Errors (system-level failures)
# =============================================================================


class InfrastructureError(WardenError):
    """Base class for infrastructure/system errors."""


class PersistenceFailure(InfrastructureError):
    """A user-store write failed. The only kind eligible for caller retry."""

    retryable = True

    def __init__(self, message: str) -> None:
        super().__init__(message, code="persistence_failure")


class AuditWriteFailure(InfrastructureError):
    """An audit record could not be written. Logged, never raised to callers."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="audit_write_failure")


class ConfigurationError(InfrastructureError):
    """System misconfiguration detected."""
