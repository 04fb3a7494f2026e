"""Tests for environment-driven configuration."""

from __future__ import annotations

import pytest

from ledgerview.config import BaseConfig, TestConfig
from ledgerview.context import create_app_context
from ledgerview.infra.http_store import RestTransactionStore
from ledgerview.infra.local_store import SQLModelTransactionStore

_ENV_VARS = (
    "LEDGERVIEW_API_URL",
    "LEDGERVIEW_STORE",
    "LEDGERVIEW_DATA_DIR",
    "LEDGERVIEW_DATABASE_URL",
    "LEDGERVIEW_DEV_MODE",
    "LEDGERVIEW_REQUEST_TIMEOUT",
)


@pytest.fixture
def env(monkeypatch, tmp_path):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("LEDGERVIEW_DATA_DIR", str(tmp_path / "data"))
    return monkeypatch


def test_defaults(env, tmp_path):
    config = BaseConfig()

    assert config.API_BASE_URL == "http://localhost:8080"
    assert config.STORE_BACKEND == "http"
    assert config.REQUEST_TIMEOUT is None
    assert config.DEV_MODE is True
    assert config.DATA_DIR == (tmp_path / "data").resolve()
    assert config.DATA_DIR.is_dir()
    assert config.token_path == config.DATA_DIR / "session.json"
    assert config.DATABASE_URL.endswith("ledgerview.db")


def test_environment_overrides(env):
    env.setenv("LEDGERVIEW_API_URL", "https://api.example.com/")
    env.setenv("LEDGERVIEW_STORE", "Local")
    env.setenv("LEDGERVIEW_DEV_MODE", "off")
    env.setenv("LEDGERVIEW_REQUEST_TIMEOUT", "7.5")

    config = BaseConfig()

    assert config.API_BASE_URL == "https://api.example.com"
    assert config.STORE_BACKEND == "local"
    assert config.DEV_MODE is False
    assert config.REQUEST_TIMEOUT == 7.5


def test_unknown_backend_rejected(env):
    env.setenv("LEDGERVIEW_STORE", "ftp")

    with pytest.raises(ValueError):
        BaseConfig()


@pytest.mark.parametrize("raw", ["0", "-1"])
def test_non_positive_timeout_rejected(env, raw):
    env.setenv("LEDGERVIEW_REQUEST_TIMEOUT", raw)

    with pytest.raises(ValueError):
        BaseConfig()


def test_memory_database_uses_static_pool(test_config):
    options = test_config.sqlalchemy_engine_options()

    assert options["connect_args"] == {"check_same_thread": False}
    assert options["poolclass"].__name__ == "StaticPool"


def test_test_config_uses_local_store(tmp_path):
    config = TestConfig(data_dir=tmp_path / "x")

    assert config.STORE_BACKEND == "local"
    assert config.DATABASE_URL == "sqlite://"
    assert config.DATA_DIR.is_dir()


def test_context_picks_backend(env, test_config):
    local = create_app_context(test_config)
    remote = create_app_context(BaseConfig())

    assert isinstance(local.store, SQLModelTransactionStore)
    assert not local.requires_login
    assert isinstance(remote.store, RestTransactionStore)
    assert remote.requires_login
    assert not remote.session.is_authenticated
