"""Unit tests for RoleManagementService single-target operations."""

import pytest

from warden.domain.auth.model.audit import AuditAction
from warden.domain.auth.model.role import Role
from warden.domain.auth.model.user import User
from warden.domain.auth.model.value import UserId
from warden.domain.auth.service.audit import AuditRecorder
from warden.domain.auth.service.role_change import RoleChangeValidator
from warden.domain.auth.service.role_management import RoleManagementService
from warden.domain.shared.error import (
    AuditWriteFailure,
    CannotManageTarget,
    InsufficientAuthorityToPromote,
    InvalidPermissionFormat,
    InvalidStateError,
    LastAdminProtected,
    PermissionDenied,
    PersistenceFailure,
    TargetNotFound,
    UnknownPermission,
)
from tests.fakes import InMemoryAuditStore, InMemoryUserStore


def make_user(role: Role, email: str | None = None) -> User:
    return User.create(email=email or f"{role.name.lower()}@example.com", role=role)


def make_service(
    user_store: InMemoryUserStore,
    audit_store: InMemoryAuditStore,
) -> RoleManagementService:
    return RoleManagementService(
        _user_store=user_store,
        _validator=RoleChangeValidator(_user_store=user_store),
        _audit=AuditRecorder(_audit_store=audit_store),
    )


class TestChangeRole:
    @pytest.mark.asyncio
    async def test_applies_and_audits(self, user_store, audit_store):
        root, viewer = make_user(Role.SUPER_ADMIN), make_user(Role.VIEWER)
        user_store.add(root, viewer)
        service = make_service(user_store, audit_store)

        updated = await service.change_role(root, viewer.id, Role.STAFF)

        assert updated.role == Role.STAFF
        assert user_store.role_of(viewer) == Role.STAFF
        [entry] = audit_store.entries
        assert entry.action == AuditAction.ROLE_CHANGE
        assert entry.actor_id == root.id
        assert entry.target_email == viewer.email
        assert entry.old_value == {"role": "VIEWER", "role_level": 10}
        assert entry.new_value == {"role": "STAFF", "role_level": 20}
        assert entry.metadata is None

    @pytest.mark.asyncio
    async def test_rejection_writes_nothing(self, user_store, audit_store):
        admin, viewer = make_user(Role.ADMIN), make_user(Role.VIEWER)
        user_store.add(admin, viewer)
        service = make_service(user_store, audit_store)

        with pytest.raises(InsufficientAuthorityToPromote):
            await service.change_role(admin, viewer.id, Role.ADMIN)

        assert user_store.role_of(viewer) == Role.VIEWER
        assert audit_store.entries == []

    @pytest.mark.asyncio
    async def test_missing_target(self, user_store, audit_store):
        root = make_user(Role.SUPER_ADMIN)
        user_store.add(root)
        service = make_service(user_store, audit_store)

        with pytest.raises(TargetNotFound):
            await service.change_role(root, UserId("ghost"), Role.STAFF)

    @pytest.mark.asyncio
    async def test_no_op_is_not_written_or_audited(self, user_store, audit_store):
        root, staff = make_user(Role.SUPER_ADMIN), make_user(Role.STAFF)
        user_store.add(root, staff)
        service = make_service(user_store, audit_store)

        result = await service.change_role(root, staff.id, Role.STAFF)

        assert result.role == Role.STAFF
        assert user_store.role_writes == []
        assert audit_store.entries == []

    @pytest.mark.asyncio
    async def test_sole_super_admin_no_op(self, user_store, audit_store):
        root = make_user(Role.SUPER_ADMIN)
        user_store.add(root)
        service = make_service(user_store, audit_store)

        result = await service.change_role(root, root.id, Role.SUPER_ADMIN)

        assert result.role == Role.SUPER_ADMIN
        assert user_store.role_writes == []
        assert audit_store.entries == []

    @pytest.mark.asyncio
    async def test_sole_admin_no_op(self, user_store, audit_store):
        root, admin = make_user(Role.SUPER_ADMIN), make_user(Role.ADMIN)
        user_store.add(root, admin)
        service = make_service(user_store, audit_store)

        result = await service.change_role(root, admin.id, Role.ADMIN)

        assert result.role == Role.ADMIN
        assert user_store.role_writes == []
        assert audit_store.entries == []

    @pytest.mark.asyncio
    async def test_last_admin_survives(self, user_store, audit_store):
        root, admin = make_user(Role.SUPER_ADMIN), make_user(Role.ADMIN)
        user_store.add(root, admin)
        service = make_service(user_store, audit_store)

        with pytest.raises(LastAdminProtected):
            await service.change_role(root, admin.id, Role.STAFF)

        assert user_store.role_of(admin) == Role.ADMIN

    @pytest.mark.asyncio
    async def test_second_super_admin_may_be_demoted(self, user_store, audit_store):
        root = make_user(Role.SUPER_ADMIN, "root@example.com")
        other = make_user(Role.SUPER_ADMIN, "other@example.com")
        user_store.add(root, other)
        service = make_service(user_store, audit_store)

        await service.change_role(root, other.id, Role.ADMIN)

        assert user_store.role_of(other) == Role.ADMIN
        assert user_store.count_calls == [Role.SUPER_ADMIN]

    @pytest.mark.asyncio
    async def test_write_failure_propagates(self, user_store, audit_store):
        root, viewer = make_user(Role.SUPER_ADMIN), make_user(Role.VIEWER)
        user_store.add(root, viewer)
        user_store.failing.add(viewer.id)
        service = make_service(user_store, audit_store)

        with pytest.raises(PersistenceFailure) as exc_info:
            await service.change_role(root, viewer.id, Role.STAFF)

        assert exc_info.value.retryable
        assert audit_store.entries == []

    @pytest.mark.asyncio
    async def test_audit_failure_keeps_change(self, user_store, audit_store):
        root, viewer = make_user(Role.SUPER_ADMIN), make_user(Role.VIEWER)
        user_store.add(root, viewer)
        audit_store.fail_with = AuditWriteFailure("disk full")
        service = make_service(user_store, audit_store)

        updated = await service.change_role(root, viewer.id, Role.STAFF)

        assert updated.role == Role.STAFF
        assert user_store.role_of(viewer) == Role.STAFF


class TestUpdatePermissions:
    @pytest.mark.asyncio
    async def test_replaces_overrides_and_audits(self, user_store, audit_store):
        root = make_user(Role.SUPER_ADMIN)
        viewer = make_user(Role.VIEWER)
        viewer.replace_permissions({"media.upload"})
        user_store.add(root, viewer)
        service = make_service(user_store, audit_store)

        updated = await service.update_permissions(
            root, viewer.id, ["products.delete", "pages.*"]
        )

        assert updated.permissions == {"products.delete", "pages.*"}
        [entry] = audit_store.entries
        assert entry.action == AuditAction.PERMISSION_CHANGE
        assert entry.old_value == {"permissions": ["media.upload"]}
        assert entry.new_value == {"permissions": ["pages.*", "products.delete"]}

    @pytest.mark.asyncio
    async def test_requires_edit_permissions(self, user_store, audit_store):
        admin, viewer = make_user(Role.ADMIN), make_user(Role.VIEWER)
        user_store.add(admin, viewer)
        service = make_service(user_store, audit_store)

        with pytest.raises(PermissionDenied) as exc_info:
            await service.update_permissions(admin, viewer.id, ["products.view"])
        assert exc_info.value.permission == "users.edit_permissions"

    @pytest.mark.asyncio
    async def test_override_grants_edit_permissions(self, user_store, audit_store):
        admin = make_user(Role.ADMIN)
        admin.replace_permissions({"users.edit_permissions"})
        viewer = make_user(Role.VIEWER)
        user_store.add(admin, viewer)
        service = make_service(user_store, audit_store)

        updated = await service.update_permissions(admin, viewer.id, ["media.upload"])

        assert updated.permissions == {"media.upload"}

    @pytest.mark.asyncio
    async def test_target_must_be_lower(self, user_store, audit_store):
        root = make_user(Role.SUPER_ADMIN, "root@example.com")
        other = make_user(Role.SUPER_ADMIN, "other@example.com")
        user_store.add(root, other)
        service = make_service(user_store, audit_store)

        with pytest.raises(CannotManageTarget):
            await service.update_permissions(root, other.id, ["products.view"])

    @pytest.mark.asyncio
    async def test_cannot_edit_own_permissions(self, user_store, audit_store):
        root = make_user(Role.SUPER_ADMIN)
        user_store.add(root)
        service = make_service(user_store, audit_store)

        with pytest.raises(CannotManageTarget):
            await service.update_permissions(root, root.id, [])

    @pytest.mark.asyncio
    async def test_missing_target(self, user_store, audit_store):
        root = make_user(Role.SUPER_ADMIN)
        user_store.add(root)
        service = make_service(user_store, audit_store)

        with pytest.raises(TargetNotFound):
            await service.update_permissions(root, UserId("ghost"), [])

    @pytest.mark.asyncio
    async def test_rejects_malformed_token(self, user_store, audit_store):
        root, viewer = make_user(Role.SUPER_ADMIN), make_user(Role.VIEWER)
        user_store.add(root, viewer)
        service = make_service(user_store, audit_store)

        with pytest.raises(InvalidPermissionFormat):
            await service.update_permissions(root, viewer.id, ["products"])
        assert audit_store.entries == []

    @pytest.mark.asyncio
    async def test_rejects_unknown_tokens(self, user_store, audit_store):
        root, viewer = make_user(Role.SUPER_ADMIN), make_user(Role.VIEWER)
        user_store.add(root, viewer)
        service = make_service(user_store, audit_store)

        with pytest.raises(UnknownPermission) as exc_info:
            await service.update_permissions(root, viewer.id, ["rockets.launch", "products.view"])
        assert exc_info.value.values == ["rockets.launch"]

    @pytest.mark.asyncio
    async def test_unchanged_set_is_not_audited(self, user_store, audit_store):
        root = make_user(Role.SUPER_ADMIN)
        viewer = make_user(Role.VIEWER)
        viewer.replace_permissions({"media.upload"})
        user_store.add(root, viewer)
        service = make_service(user_store, audit_store)

        await service.update_permissions(root, viewer.id, ["media.upload"])

        assert audit_store.entries == []

    @pytest.mark.asyncio
    async def test_reset_clears_overrides(self, user_store, audit_store):
        root = make_user(Role.SUPER_ADMIN)
        viewer = make_user(Role.VIEWER)
        viewer.replace_permissions({"media.upload", "pages.*"})
        user_store.add(root, viewer)
        service = make_service(user_store, audit_store)

        updated = await service.reset_permissions(root, viewer.id)

        assert updated.permissions == frozenset()
        assert audit_store.entries[0].new_value == {"permissions": []}


class TestBootstrap:
    @pytest.mark.asyncio
    async def test_promotes_first_super_admin(self, user_store, audit_store):
        first = make_user(Role.VIEWER)
        user_store.add(first)
        service = make_service(user_store, audit_store)

        updated = await service.bootstrap_super_admin(first.id)

        assert updated.role == Role.SUPER_ADMIN
        [entry] = audit_store.entries
        assert entry.actor_id == entry.target_id == first.id
        assert entry.metadata == {"bootstrap": True}

    @pytest.mark.asyncio
    async def test_refuses_when_super_admin_exists(self, user_store, audit_store):
        root, viewer = make_user(Role.SUPER_ADMIN), make_user(Role.VIEWER)
        user_store.add(root, viewer)
        service = make_service(user_store, audit_store)

        with pytest.raises(InvalidStateError) as exc_info:
            await service.bootstrap_super_admin(viewer.id)

        assert exc_info.value.code == "already_bootstrapped"
        assert user_store.role_of(viewer) == Role.VIEWER
