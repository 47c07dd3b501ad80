import pytest

from warden.cli.commands import catalog


@pytest.fixture(autouse=True)
def wide_console(monkeypatch):
    monkeypatch.setenv("COLUMNS", "200")
    monkeypatch.setattr("warden.cli.console._default", None)


def test_roles_shows_levels_and_defaults(capsys):
    catalog.roles("admin")

    out = capsys.readouterr().out
    assert "ADMIN (level 50)" in out
    assert "products.*" in out
    assert "users.manage_roles" not in out


def test_roles_rejects_unknown_role(capsys):
    with pytest.raises(SystemExit):
        catalog.roles("owner")
    assert "invalid_role_value" in capsys.readouterr().err


def test_permissions_filtered_by_resource(capsys):
    catalog.permissions("users")

    out = capsys.readouterr().out
    assert "users.edit_permissions" in out
    assert "Edit individual user permissions" in out
    assert "products.view" not in out


def test_permissions_unknown_resource(capsys):
    catalog.permissions("rockets")
    assert "No permissions for resource 'rockets'" in capsys.readouterr().out
