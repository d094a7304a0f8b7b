"""Datetime utilities for UTC day windows."""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta, timezone

from common.errors import InvalidWindowDateError

WINDOW_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_window_date(value: str | date) -> date:
    """Parse a YYYY-MM-DD window date.

    Raises:
        InvalidWindowDateError: If the value is not a real calendar date in
            YYYY-MM-DD form.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise InvalidWindowDateError(f"window date must be a string, got {type(value).__name__}")

    value = value.strip()
    if not WINDOW_DATE_PATTERN.match(value):
        raise InvalidWindowDateError("window date must be in YYYY-MM-DD format.")
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise InvalidWindowDateError(f"window date {value!r} is not a calendar date.") from exc


def date_to_range(d: date) -> tuple[datetime, datetime]:
    """Convert a date to a naive UTC datetime range covering the full day.

    Returns:
        Tuple of (start, end) where start is midnight and end is midnight the next day.
    """
    start = datetime.combine(d, datetime.min.time())
    end = start + timedelta(days=1)
    return start, end


def to_naive_utc(value: datetime | str | None) -> datetime | None:
    """Normalize a timestamp to naive UTC, the form stored in the articles table."""
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def yesterday_utc(now: datetime | None = None) -> date:
    """Return yesterday's date in UTC, the default window for daily runs."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return now.date() - timedelta(days=1)
