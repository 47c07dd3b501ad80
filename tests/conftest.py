"""Global test fixtures."""

import os

import pytest

from tests.fakes import InMemoryAuditStore, InMemoryUserStore

# Keep tests independent of a developer's local config file
os.environ.pop("WARDEN_CONFIG_FILE", None)


@pytest.fixture
def user_store() -> InMemoryUserStore:
    return InMemoryUserStore()


@pytest.fixture
def audit_store() -> InMemoryAuditStore:
    return InMemoryAuditStore()
