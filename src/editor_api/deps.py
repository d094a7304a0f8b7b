"""FastAPI dependencies."""

from collections.abc import Iterator
from datetime import date

from sqlalchemy.orm import Session

from common.datetime import parse_window_date, yesterday_utc
from rds_postgres.connection import get_session


def get_db_session() -> Iterator[Session]:
    """Dependency yielding a database session for one request."""
    with get_session() as session:
        yield session


def resolve_window_date(value: str | None) -> date:
    """Validate a window date from a request, defaulting to yesterday (UTC)."""
    if value is None or not value.strip():
        return yesterday_utc()
    return parse_window_date(value)
