"""End-to-end tests of the users and audit commands against a SQLite file."""

from pathlib import Path

import pytest

from warden.cli.commands import audit, users


@pytest.fixture(autouse=True)
def database(monkeypatch, tmp_path: Path) -> Path:
    db_path = tmp_path / "warden.db"
    monkeypatch.setenv("WARDEN_DATABASE__URL", f"sqlite+aiosqlite:///{db_path}")
    monkeypatch.delenv("WARDEN_CONFIG_FILE", raising=False)
    # Leave pytest's capture handlers on the root logger in place
    monkeypatch.setattr("warden.cli.runtime.configure_logging", lambda config: None)
    # Fresh console wide enough that table cells are not folded
    monkeypatch.setenv("COLUMNS", "200")
    monkeypatch.setattr("warden.cli.console._default", None)
    return db_path


@pytest.fixture
def seeded(capsys):
    users.add("root@example.com", name="Root")
    users.add("vera@example.com")
    users.add("sam@example.com")
    users.bootstrap("root@example.com")
    capsys.readouterr()


def test_add_and_bootstrap(capsys):
    users.add("root@example.com")
    users.bootstrap("root@example.com")

    out = capsys.readouterr().out
    assert "Added root@example.com as VIEWER" in out
    assert "root@example.com is now SUPER_ADMIN" in out


def test_second_bootstrap_refused(seeded, capsys):
    with pytest.raises(SystemExit) as exc_info:
        users.bootstrap("vera@example.com")

    assert exc_info.value.code == 1
    assert "already_bootstrapped" in capsys.readouterr().err


def test_duplicate_add_refused(seeded, capsys):
    with pytest.raises(SystemExit):
        users.add("vera@example.com")
    assert "user_exists" in capsys.readouterr().err


def test_set_role_and_check(seeded, capsys):
    users.set_role("vera@example.com", "staff", actor="root@example.com")
    assert "vera@example.com is now STAFF" in capsys.readouterr().out

    users.check("vera@example.com", "users.edit")
    assert "has users.edit" in capsys.readouterr().out

    with pytest.raises(SystemExit) as exc_info:
        users.check("vera@example.com", "settings.edit")
    assert exc_info.value.code == 1


def test_check_rejects_malformed_permission(seeded, capsys):
    with pytest.raises(SystemExit):
        users.check("vera@example.com", "messages")
    assert "invalid_permission_format" in capsys.readouterr().err


def test_denied_role_change_reports_reason(seeded, capsys):
    users.set_role("vera@example.com", "ADMIN", actor="root@example.com")
    capsys.readouterr()

    with pytest.raises(SystemExit):
        users.set_role("sam@example.com", "SUPER_ADMIN", actor="vera@example.com")
    assert "insufficient_authority_to_promote" in capsys.readouterr().err


def test_unknown_actor(seeded, capsys):
    with pytest.raises(SystemExit):
        users.set_role("vera@example.com", "STAFF", actor="nobody@example.com")
    assert "unknown_actor" in capsys.readouterr().err


def test_bulk_set_role_skips_super_admin(seeded, capsys):
    users.bulk_set_role(
        "STAFF",
        "vera@example.com",
        "sam@example.com",
        "root@example.com",
        actor="root@example.com",
    )

    out = capsys.readouterr().out
    assert "Successfully updated 2 of 3 users" in out
    assert "Skipped" in out


def test_permissions_round_trip(seeded, capsys):
    users.set_permissions("vera@example.com", "media.upload", "pages.*", actor="root@example.com")
    assert "media.upload, pages.*" in capsys.readouterr().out

    users.check("vera@example.com", "pages.delete")
    capsys.readouterr()

    users.reset_permissions("vera@example.com", actor="root@example.com")
    with pytest.raises(SystemExit):
        users.check("vera@example.com", "pages.delete")


def test_audit_log_requires_manage_roles(seeded, capsys):
    users.set_role("vera@example.com", "ADMIN", actor="root@example.com")
    capsys.readouterr()

    audit.log(actor="root@example.com")
    assert "ROLE_CHANGE" in capsys.readouterr().out

    with pytest.raises(SystemExit):
        audit.log(actor="vera@example.com")
    assert "permission_denied" in capsys.readouterr().err


def test_blank_user_id_reports_reason(seeded, capsys):
    with pytest.raises(SystemExit) as exc_info:
        users.set_role("   ", "STAFF", actor="root@example.com")

    assert exc_info.value.code == 1
    assert "invalid_user_id" in capsys.readouterr().err
