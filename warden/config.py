import logging
import os
import sys
from functools import cached_property
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///~/.local/share/warden/warden.db"

# Sync driver prefixes accepted in config, mapped to the async drivers we run on
_ASYNC_DRIVERS = {
    "sqlite://": "sqlite+aiosqlite://",
    "postgresql://": "postgresql+asyncpg://",
    "postgres://": "postgresql+asyncpg://",
}

# Third-party loggers that are chatty at INFO
_QUIET_LOGGERS = ("asyncio", "aiosqlite", "sqlalchemy.engine", "alembic")


class YamlConfigSettingsSource(PydanticBaseSettingsSource):
    """Settings from the YAML file named by WARDEN_CONFIG_FILE.

    A missing file contributes nothing; a file whose top level is not a
    mapping is rejected.
    """

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, False

    def __call__(self) -> dict[str, Any]:
        return self._data

    @cached_property
    def _data(self) -> dict[str, Any]:
        config_file = os.environ.get("WARDEN_CONFIG_FILE")
        if not config_file:
            return {}
        path = Path(config_file).expanduser()
        if not path.exists():
            return {}
        data = yaml.safe_load(path.read_text()) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a mapping at the top level")
        return data


class DatabaseConfig(BaseModel):
    """Database configuration (nested in Config, uses env_nested_delimiter)."""

    url: str = DEFAULT_DATABASE_URL
    echo: bool = False
    auto_migrate: bool = True  # SQLite only; PostgreSQL is migrated with `warden db migrate`
    pool_size: int = Field(default=5, ge=1)  # PostgreSQL only
    max_overflow: int = Field(default=10, ge=0)

    @field_validator("url")
    @classmethod
    def use_async_driver(cls, v: str) -> str:
        for sync_prefix, async_prefix in _ASYNC_DRIVERS.items():
            if v.startswith(sync_prefix):
                return async_prefix + v[len(sync_prefix) :]
        return v


class LoggingConfig(BaseModel):
    """Logging configuration (nested in Config, uses env_nested_delimiter)."""

    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"

    @property
    def file(self) -> str | None:
        """Log file path from WARDEN_LOG_FILE; stderr when unset."""
        return os.environ.get("WARDEN_LOG_FILE")


class AuthzConfig(BaseModel):
    """Authorization engine limits."""

    bulk_max_targets: int = Field(default=500, ge=1)  # Ids accepted by one bulk role change
    audit_history_limit: int = Field(default=50, ge=1)  # Default page size of `audit log`


class Config(BaseSettings):
    database: DatabaseConfig = DatabaseConfig()
    logging: LoggingConfig = LoggingConfig()
    authz: AuthzConfig = AuthzConfig()

    model_config = {
        "env_prefix": "WARDEN_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_nested_delimiter": "__",  # WARDEN_AUTHZ__BULK_MAX_TARGETS=100
    }

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Explicit values, then environment, then .env, then the YAML file."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


def _log_handler(config: LoggingConfig) -> logging.Handler:
    if not config.file:
        return logging.StreamHandler(sys.stderr)
    log_path = Path(config.file).expanduser()
    log_path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(log_path)


def configure_logging(config: LoggingConfig) -> None:
    """Install a single root handler for every `warden.*` logger.

    Replaces any handlers already on the root logger, so calling it twice
    does not duplicate output.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(config.level)
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)

    handler = _log_handler(config)
    handler.setLevel(config.level)
    handler.setFormatter(logging.Formatter(config.format, datefmt=config.date_format))
    root_logger.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.debug("Logging configured: level=%s, file=%s", config.level, config.file)
