"""Database engine and session helpers."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager

from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from common.config import get_config
from rds_postgres.models import Base

logger = logging.getLogger(__name__)

_ENGINE: Engine | None = None
_SESSION_FACTORY: sessionmaker | None = None


def get_database_url() -> str:
    """Read the database URL from the environment variable named in config."""
    load_dotenv()
    env_var = get_config().database.url_env
    url = os.environ.get(env_var)
    if not url:
        raise RuntimeError(f"{env_var} is not set")
    return url


def get_engine() -> Engine:
    """Return a lazily initialized engine."""
    global _ENGINE, _SESSION_FACTORY
    if _ENGINE is None:
        _ENGINE = create_engine(
            get_database_url(),
            echo=get_config().database.echo,
            pool_pre_ping=True,
        )
        _SESSION_FACTORY = sessionmaker(bind=_ENGINE)
        logger.info("Created database engine for %s", _ENGINE.url.render_as_string(hide_password=True))
    return _ENGINE


@contextmanager
def get_session() -> Iterator[Session]:
    """Yield a session; uncommitted work is rolled back when the block exits."""
    get_engine()
    session = _SESSION_FACTORY()
    try:
        yield session
    finally:
        session.close()


def create_tables(engine: Engine | None = None) -> None:
    """Create the engine tables if they do not exist."""
    Base.metadata.create_all(engine or get_engine())


def reset_engine() -> None:
    """Dispose the cached engine (used by tests and forked workers)."""
    global _ENGINE, _SESSION_FACTORY
    if _ENGINE is not None:
        _ENGINE.dispose()
    _ENGINE = None
    _SESSION_FACTORY = None
