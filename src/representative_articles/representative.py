"""Pick a small, publisher-diverse, newest-first article set for a cluster."""

from __future__ import annotations

import logging
import math
import numbers
from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy.orm import Session

from common.config import EngineConfig, RepresentativeConfig, get_config
from common.publishers import resolve_publisher
from common.utils import get_value, sort_by_recency
from rds_postgres.queries import load_articles, load_memberships, load_source_names
from representative_articles.models import RepresentativeArticle

logger = logging.getLogger(__name__)

MIN_DRAFT_ARTICLES = 3


def clamp_max(value: Any, representative: RepresentativeConfig | None = None) -> int:
    """Clamp a requested count to [min_articles, max_articles].

    Anything that is not a finite number selects max_articles (6 by default).
    """
    representative = representative or RepresentativeConfig()
    upper = representative.max_articles
    lower = min(representative.min_articles, upper)
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return upper
    if not math.isfinite(value):
        return upper
    return min(upper, max(lower, math.floor(value)))


def select_representatives(
    articles: Sequence[Any],
    source_names: Mapping[str, str],
    limit: int,
) -> list[RepresentativeArticle]:
    """Select up to limit articles, one per publisher first, then by recency.

    The first pass walks articles newest first and takes the first article of
    each publisher. The second pass fills remaining slots with any article not
    yet taken, again newest first.
    """
    ordered = sort_by_recency(articles)

    selected = []
    taken: set[int] = set()
    publishers: set[str] = set()

    for index, article in enumerate(ordered):
        if len(selected) >= limit:
            break
        publisher = resolve_publisher(article, source_names)
        if publisher in publishers:
            continue
        selected.append((article, publisher))
        taken.add(index)
        publishers.add(publisher)

    for index, article in enumerate(ordered):
        if len(selected) >= limit:
            break
        if index in taken:
            continue
        selected.append((article, resolve_publisher(article, source_names)))
        taken.add(index)

    return [
        RepresentativeArticle(
            title=get_value(article, "title"),
            publisher=publisher,
            snippet=get_value(article, "snippet"),
            url=get_value(article, "url"),
            published_at=get_value(article, "published_at"),
        )
        for article, publisher in selected
    ]


def get_representative_articles(
    session: Session,
    cluster_id: str,
    max_articles: Any = None,
    config: EngineConfig | None = None,
) -> list[RepresentativeArticle]:
    """Load a cluster's members and select its representative articles.

    max_articles is clamped to the configured range; None selects the
    configured maximum. An unknown cluster or a cluster without members
    yields an empty list.
    """
    config = config or get_config()
    limit = clamp_max(max_articles, config.representative)

    memberships = load_memberships(session, [cluster_id])
    if not memberships:
        logger.info("Cluster %s has no members", cluster_id)
        return []

    articles = list(load_articles(session, (article_id for _, article_id in memberships)).values())
    source_names = load_source_names(session, (article.source_id for article in articles))

    selected = select_representatives(articles, source_names, limit)
    logger.info(
        "Selected %d of %d articles (%d publishers) for cluster %s",
        len(selected),
        len(articles),
        len({item.publisher for item in selected}),
        cluster_id,
    )
    return selected


def has_enough_for_draft(articles: Sequence[Any], minimum: int = MIN_DRAFT_ARTICLES) -> bool:
    """Whether a representative set is large enough for drafting a story."""
    return len(articles) >= minimum
