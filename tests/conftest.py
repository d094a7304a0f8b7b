"""Shared fixtures: engine config and an in-memory SQLite database."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from common.config import EngineConfig, reset_config, set_config
from rds_postgres.models import Base


@pytest.fixture(autouse=True)
def default_config():
    set_config(EngineConfig())
    yield
    reset_config()


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session
