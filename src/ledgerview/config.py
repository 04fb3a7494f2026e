"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

load_dotenv()

STORE_BACKENDS = {"http", "local"}


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_seconds(name: str) -> Optional[float]:
    """Return a positive number of seconds, or None when unset/blank."""

    raw = (os.getenv(name) or "").strip()
    if not raw:
        return None
    seconds = float(raw)
    if seconds <= 0:
        raise ValueError(f"{name} must be a positive number of seconds.")
    return seconds


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "LedgerView"
    DB_FILENAME = "ledgerview.db"
    TOKEN_FILENAME = "session.json"
    DEFAULT_API_URL = "http://localhost:8080"

    def __init__(self) -> None:
        self.DEV_MODE = _env_bool("LEDGERVIEW_DEV_MODE", default=True)
        self.DATA_DIR = self._resolve_data_dir()
        self.API_BASE_URL = os.getenv("LEDGERVIEW_API_URL", self.DEFAULT_API_URL).rstrip("/")
        self.STORE_BACKEND = os.getenv("LEDGERVIEW_STORE", "http").strip().lower()
        # No timeout by default: a hung call stays pending until it resolves.
        self.REQUEST_TIMEOUT = _env_seconds("LEDGERVIEW_REQUEST_TIMEOUT")
        self.DATABASE_URL = os.getenv("LEDGERVIEW_DATABASE_URL", self._build_sqlite_url())
        if self.STORE_BACKEND not in STORE_BACKENDS:
            raise ValueError(
                f"LEDGERVIEW_STORE must be one of {sorted(STORE_BACKENDS)}, "
                f"got {self.STORE_BACKEND!r}."
            )

    def _resolve_data_dir(self) -> Path:
        """Return the directory holding the session token, logs and local database."""

        data_root = os.getenv("LEDGERVIEW_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        return f"sqlite:///{self.DATA_DIR / self.DB_FILENAME}"

    @property
    def token_path(self) -> Path:
        """Where the bearer token is persisted between runs."""

        return Path(self.DATA_DIR) / self.TOKEN_FILENAME

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        connect_args: dict[str, Any] = {"check_same_thread": False}
        engine_options: dict[str, Any] = {"connect_args": connect_args}
        if self.DATABASE_URL in {"sqlite://", "sqlite:///:memory:"}:
            from sqlalchemy.pool import StaticPool

            engine_options["poolclass"] = StaticPool
        return engine_options


class DevConfig(BaseConfig):
    """Development configuration against a locally running API."""

    DEBUG = True
    TESTING = False


class TestConfig(BaseConfig):
    """Configuration used by the test-suite: local in-memory store."""

    __test__ = False
    DEBUG = False
    TESTING = True

    def __init__(self, data_dir: Optional[Path] = None) -> None:
        super().__init__()
        if data_dir is not None:
            self.DATA_DIR = Path(data_dir)
            self.DATA_DIR.mkdir(parents=True, exist_ok=True)
        self.STORE_BACKEND = "local"
        self.DATABASE_URL = "sqlite://"
