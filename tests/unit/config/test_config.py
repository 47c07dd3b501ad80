import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from warden.config import (
    DEFAULT_DATABASE_URL,
    Config,
    DatabaseConfig,
    LoggingConfig,
    configure_logging,
)


class TestConfigSources:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("WARDEN_CONFIG_FILE", raising=False)
        config = Config()

        assert config.database.url == DEFAULT_DATABASE_URL
        assert config.authz.bulk_max_targets == 500
        assert config.authz.audit_history_limit == 50

    def test_nested_env_override(self, monkeypatch):
        monkeypatch.setenv("WARDEN_DATABASE__URL", "postgresql+asyncpg://db/warden")
        monkeypatch.setenv("WARDEN_AUTHZ__BULK_MAX_TARGETS", "25")

        config = Config()

        assert config.database.url == "postgresql+asyncpg://db/warden"
        assert config.authz.bulk_max_targets == 25

    def test_yaml_file(self, monkeypatch, tmp_path: Path):
        config_file = tmp_path / "warden.yaml"
        config_file.write_text("authz:\n  bulk_max_targets: 10\nlogging:\n  level: DEBUG\n")
        monkeypatch.setenv("WARDEN_CONFIG_FILE", str(config_file))

        config = Config()

        assert config.authz.bulk_max_targets == 10
        assert config.logging.level == "DEBUG"

    def test_env_beats_yaml(self, monkeypatch, tmp_path: Path):
        config_file = tmp_path / "warden.yaml"
        config_file.write_text("authz:\n  bulk_max_targets: 10\n")
        monkeypatch.setenv("WARDEN_CONFIG_FILE", str(config_file))
        monkeypatch.setenv("WARDEN_AUTHZ__BULK_MAX_TARGETS", "7")

        assert Config().authz.bulk_max_targets == 7

    def test_missing_yaml_file_is_ignored(self, monkeypatch, tmp_path: Path):
        monkeypatch.setenv("WARDEN_CONFIG_FILE", str(tmp_path / "absent.yaml"))
        assert Config().authz.bulk_max_targets == 500

    def test_bulk_limit_must_be_positive(self, monkeypatch):
        monkeypatch.setenv("WARDEN_AUTHZ__BULK_MAX_TARGETS", "0")
        with pytest.raises(ValidationError):
            Config()


class TestConfigureLogging:
    @pytest.fixture(autouse=True)
    def restore_root_logger(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_stderr_handler_by_default(self, monkeypatch):
        monkeypatch.delenv("WARDEN_LOG_FILE", raising=False)
        configure_logging(LoggingConfig(level="WARNING"))

        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], logging.StreamHandler)

    def test_log_file(self, monkeypatch, tmp_path: Path):
        log_file = tmp_path / "logs" / "warden.log"
        monkeypatch.setenv("WARDEN_LOG_FILE", str(log_file))

        configure_logging(LoggingConfig(level="INFO"))
        logging.getLogger("warden.audit").info("hello")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "hello" in log_file.read_text()
        logging.getLogger().handlers[0].close()


class TestDatabaseUrl:
    @pytest.mark.parametrize(
        "url,expected",
        [
            ("sqlite:////srv/warden.db", "sqlite+aiosqlite:////srv/warden.db"),
            ("postgresql://u@db/warden", "postgresql+asyncpg://u@db/warden"),
            ("postgres://u@db/warden", "postgresql+asyncpg://u@db/warden"),
            ("postgresql+asyncpg://u@db/warden", "postgresql+asyncpg://u@db/warden"),
        ],
    )
    def test_sync_urls_use_async_driver(self, url: str, expected: str):
        assert DatabaseConfig(url=url).url == expected
