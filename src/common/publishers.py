"""Publisher name resolution shared by ranking, candidates and representatives."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping
from typing import Any

from common.utils import get_value

UNKNOWN_PUBLISHER = "Unknown Publisher"


def resolve_publisher(article: Any, source_names: Mapping[str, str]) -> str:
    """Return the display publisher for an article.

    Falls back from the article's own publisher to its feed source's name and
    finally to "Unknown Publisher". Blank values count as missing.
    """
    publisher = (get_value(article, "publisher") or "").strip()
    if publisher:
        return publisher

    source_id = get_value(article, "source_id")
    if source_id:
        source_name = (source_names.get(source_id) or "").strip()
        if source_name:
            return source_name

    return UNKNOWN_PUBLISHER


def count_publishers(
    articles: Iterable[Any],
    source_names: Mapping[str, str],
) -> Counter[str]:
    """Count articles per resolved publisher, keeping first-seen order."""
    counts: Counter[str] = Counter()
    for article in articles:
        counts[resolve_publisher(article, source_names)] += 1
    return counts


def top_publishers(counts: Counter[str], n: int) -> list[tuple[str, int]]:
    """Return up to n (publisher, count) pairs, most frequent first.

    Ties keep the order in which publishers were first counted.
    """
    return sorted(counts.items(), key=lambda item: item[1], reverse=True)[:n]
