"""Unit tests for handler authorization gates."""

import logging

import pytest

from warden.domain.auth.model.role import Role
from warden.domain.auth.model.user import User
from warden.domain.shared.authorization.gate import (
    AtLeast,
    Public,
    Requires,
    at_least,
    enforce,
    public,
    requires,
)
from warden.domain.shared.error import AuthorizationError, ConfigurationError, PermissionDenied


class _FakeHandler:
    def __init__(self, actor: User | None = None) -> None:
        self.actor = actor


def make_user(role: Role, permissions: set[str] | None = None) -> User:
    user = User.create(email=f"{role.name.lower()}@example.com", role=role)
    if permissions:
        user.replace_permissions(permissions)
    return user


class TestGateFactories:
    def test_public_is_singleton(self):
        assert public() is public()
        assert isinstance(public(), Public)

    def test_at_least(self):
        assert at_least(Role.STAFF) == AtLeast(role=Role.STAFF)

    def test_requires(self):
        assert requires("users.edit") == Requires(permission="users.edit")


class TestEnforce:
    def test_missing_gate(self):
        with pytest.raises(ConfigurationError):
            enforce(_FakeHandler(make_user(Role.SUPER_ADMIN)), None)

    def test_public_needs_no_actor(self):
        enforce(_FakeHandler(), public())

    def test_missing_actor(self):
        with pytest.raises(AuthorizationError) as exc_info:
            enforce(_FakeHandler(), at_least(Role.VIEWER))
        assert exc_info.value.code == "missing_actor"

    @pytest.mark.parametrize("role", [Role.STAFF, Role.ADMIN, Role.SUPER_ADMIN])
    def test_at_least_allows_equal_or_higher(self, role: Role):
        enforce(_FakeHandler(make_user(role)), at_least(Role.STAFF))

    def test_at_least_denies_lower(self, caplog):
        with caplog.at_level(logging.WARNING, logger="warden.authz"):
            with pytest.raises(AuthorizationError) as exc_info:
                enforce(_FakeHandler(make_user(Role.CONTENT_EDITOR)), at_least(Role.STAFF))

        assert exc_info.value.code == "access_denied"
        assert any("Access denied" in r.message for r in caplog.records)

    def test_requires_honours_role_defaults(self):
        enforce(_FakeHandler(make_user(Role.STAFF)), requires("users.edit"))

    def test_requires_honours_wildcard_override(self):
        actor = make_user(Role.VIEWER, {"settings.*"})
        enforce(_FakeHandler(actor), requires("settings.edit"))

    def test_requires_denies(self):
        with pytest.raises(PermissionDenied) as exc_info:
            enforce(_FakeHandler(make_user(Role.VIEWER)), requires("settings.edit"))
        assert exc_info.value.code == "permission_denied"
