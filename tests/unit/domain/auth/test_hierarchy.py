"""Unit tests for the management hierarchy."""

import itertools

import pytest

from warden.domain.auth.model.role import Role, level_of
from warden.domain.auth.model.user import User
from warden.domain.auth.service.hierarchy import can_manage, filter_manageable


def _user(role: Role, email: str | None = None) -> User:
    return User.create(email=email or f"{role.name.lower()}@example.com", role=role)


class TestCanManage:
    @pytest.mark.parametrize("actor_role,target_role", itertools.product(Role, Role))
    def test_strictly_higher_level_required(self, actor_role: Role, target_role: Role):
        expected = level_of(actor_role) > level_of(target_role)
        assert can_manage(_user(actor_role), _user(target_role)) is expected

    @pytest.mark.parametrize("role", list(Role))
    def test_never_manages_self(self, role: Role):
        user = _user(role)
        assert not can_manage(user, user)

    def test_staff_manages_content_editor(self):
        assert can_manage(_user(Role.STAFF), _user(Role.CONTENT_EDITOR))


class TestFilterManageable:
    def test_keeps_only_lower_levels(self):
        admin = _user(Role.ADMIN)
        users = [_user(r, f"{r.name.lower()}-t@example.com") for r in Role]
        kept = filter_manageable(admin, users)
        assert [u.role for u in kept] == [Role.VIEWER, Role.CONTENT_EDITOR, Role.STAFF]
