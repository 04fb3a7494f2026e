"""SQLite engine and sessions for the local store backend."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, ContextManager, Iterator, Tuple

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from ..config import BaseConfig
from ..logging_config import get_logger

logger = get_logger(__name__)

SessionFactory = Callable[[], ContextManager[Session]]


def _enable_sqlite_foreign_keys(dbapi_connection, _record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(config: BaseConfig) -> Engine:
    engine = create_engine(config.DATABASE_URL, **config.sqlalchemy_engine_options())
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def init_database(engine: Engine) -> None:
    """Create the ``category`` and ``transaction`` tables if missing."""

    from . import tables  # noqa: F401  registers the tables on the metadata

    SQLModel.metadata.create_all(engine)


def create_session_factory(engine: Engine) -> SessionFactory:
    """Return a factory of unit-of-work sessions.

    Each ``with factory() as session`` block commits on a clean exit and rolls
    back when the block raises. Loaded rows stay usable after the commit.
    """

    @contextmanager
    def unit_of_work() -> Iterator[Session]:
        session = Session(engine, expire_on_commit=False)
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return unit_of_work


def bootstrap_database(config: BaseConfig) -> Tuple[Engine, SessionFactory]:
    engine = create_db_engine(config)
    init_database(engine)
    logger.debug("Local database ready", extra={"url": config.DATABASE_URL})
    return engine, create_session_factory(engine)
