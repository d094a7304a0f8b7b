"""Common utility functions."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any


def get_value(obj: Any, key: str) -> Any:
    """Get value from dict or object attribute."""
    if isinstance(obj, dict):
        return obj.get(key)
    return getattr(obj, key, None)


def sort_by_recency(articles: Iterable[Any]) -> list[Any]:
    """Newest published_at first, missing timestamps last; ties keep input order."""
    articles = list(articles)
    dated = [article for article in articles if get_value(article, "published_at") is not None]
    undated = [article for article in articles if get_value(article, "published_at") is None]
    dated.sort(key=lambda article: get_value(article, "published_at"), reverse=True)
    return dated + undated
