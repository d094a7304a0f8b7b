"""Error taxonomy for clustering, ranking and candidate operations."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError


class EngineError(Exception):
    """Base class for story engine errors."""


class InvalidWindowDateError(EngineError, ValueError):
    """Window date is not a YYYY-MM-DD calendar date."""


class ReorderRejectedError(EngineError, ValueError):
    """Manual reorder does not match the stored candidates for the window."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class CandidatesNotFoundError(EngineError, LookupError):
    """No ranked candidates exist for the window."""


class ClusterNotFoundError(EngineError, LookupError):
    """Story cluster id does not exist."""


class StorageError(EngineError, RuntimeError):
    """A storage read or write failed and the current run was aborted."""


@contextmanager
def storage_step(description: str) -> Iterator[None]:
    """Re-raise SQLAlchemy failures as StorageError naming the failed step.

    Example:
        >>> with storage_step("load clusters"):
        ...     session.execute(stmt)
    """
    try:
        yield
    except SQLAlchemyError as exc:
        raise StorageError(f"Failed to {description}: {exc}") from exc
