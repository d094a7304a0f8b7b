"""Serialization utilities."""

from dataclasses import asdict
from datetime import date, datetime


def _convert(value):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _convert(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_convert(v) for v in value]
    return value


def serialize_dataclass(obj) -> dict:
    """Serialize a dataclass to dict, converting dates and datetimes to ISO strings."""
    return _convert(asdict(obj))
