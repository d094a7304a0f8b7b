"""Tests for common.serialization module."""

from dataclasses import dataclass, field
from datetime import date, datetime

from common.serialization import serialize_dataclass


@dataclass
class Inner:
    published_at: datetime | None


@dataclass
class Outer:
    window_date: date
    items: list[Inner] = field(default_factory=list)


class TestSerializeDataclass:
    def test_date_to_iso_string(self) -> None:
        result = serialize_dataclass(Outer(window_date=date(2024, 3, 10)))
        assert result == {"window_date": "2024-03-10", "items": []}

    def test_nested_datetimes_converted(self) -> None:
        obj = Outer(window_date=date(2024, 3, 10), items=[Inner(datetime(2024, 3, 10, 8, 30)), Inner(None)])
        result = serialize_dataclass(obj)
        assert result["items"] == [{"published_at": "2024-03-10T08:30:00"}, {"published_at": None}]
