"""Score a window's clusters and snapshot the top candidates."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from datetime import date, datetime, timedelta
from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from common.config import EngineConfig, RankingConfig, get_config
from common.datetime import date_to_range, parse_window_date, to_naive_utc
from common.errors import storage_step
from common.publishers import count_publishers, top_publishers
from common.utils import get_value
from rank_clusters.models import PublisherCount, RankedCandidateSummary, RankedCluster, RankResult
from rds_postgres.models import Article, ClusterCandidate, StoryCluster
from rds_postgres.queries import load_memberships, load_source_names

logger = logging.getLogger(__name__)

UNLABELED_CLUSTER = "Unlabeled cluster"


def compute_score(breadth: int, volume: int, recency: int, ranking: RankingConfig) -> float:
    """Weighted composite of breadth, volume and recency, rounded to 4 places."""
    score = (
        breadth * ranking.breadth_weight
        + volume * ranking.volume_weight
        + recency * ranking.recency_weight
    )
    return round(score, 4)


def score_clusters(
    clusters: Sequence[Any],
    memberships: Iterable[tuple[str, str]],
    articles_by_id: Mapping[str, Any],
    source_names: Mapping[str, str],
    window_end: datetime,
    ranking: RankingConfig | None = None,
) -> list[RankedCluster]:
    """Score clusters and sort them by score, then volume, both descending.

    Args:
        clusters: Rows or dicts with id and label.
        memberships: (cluster_id, article_id) pairs.
        articles_by_id: Articles already restricted to the window; members
            missing from it are not counted.
        source_names: Feed source id -> name, for publisher fallback.
        window_end: Exclusive end of the window (naive UTC).
        ranking: Weights and limits.

    Returns:
        RankedCluster list, best first.
    """
    ranking = ranking or RankingConfig()
    recency_start = window_end - timedelta(hours=ranking.recency_hours)

    members_by_cluster: dict[str, list[str]] = {}
    for cluster_id, article_id in memberships:
        members_by_cluster.setdefault(cluster_id, []).append(article_id)

    ranked = []
    for cluster in clusters:
        cluster_id = get_value(cluster, "id")
        articles = [
            articles_by_id[article_id]
            for article_id in members_by_cluster.get(cluster_id, [])
            if article_id in articles_by_id
        ]

        publisher_counts = count_publishers(articles, source_names)
        recency = 0
        for article in articles:
            published_at = to_naive_utc(get_value(article, "published_at"))
            if published_at is not None and recency_start <= published_at < window_end:
                recency += 1

        volume = len(articles)
        breadth = len(publisher_counts)
        fallback_label = get_value(articles[0], "title") if articles else None
        label = (get_value(cluster, "label") or "").strip() or fallback_label or UNLABELED_CLUSTER

        ranked.append(
            RankedCluster(
                cluster_id=cluster_id,
                label=label,
                score=compute_score(breadth, volume, recency, ranking),
                volume=volume,
                breadth=breadth,
                recency=recency,
                top_publishers=[
                    PublisherCount(name=name, count=count)
                    for name, count in top_publishers(publisher_counts, ranking.top_publishers)
                ],
            )
        )

    ranked.sort(key=lambda item: (item.score, item.volume), reverse=True)
    return ranked


def rank_window(
    session: Session,
    window_date: str | date,
    config: EngineConfig | None = None,
) -> RankResult:
    """Rank a window's clusters, write scores back and replace its candidates.

    Order: read clusters, memberships, articles and sources; score; write all
    scores; delete the window's candidates; insert the top N with ranks 1..N.
    A window with no clusters only clears its candidates.
    """
    window = parse_window_date(window_date)
    config = config or get_config()
    ranking = config.ranking
    start, end = date_to_range(window)

    with storage_step("load clusters"):
        clusters = session.execute(
            select(StoryCluster.id, StoryCluster.label)
            .where(StoryCluster.window_date == window)
            .order_by(StoryCluster.created_at, StoryCluster.id)
        ).all()

    if not clusters:
        _replace_candidates(session, window, [])
        session.commit()
        logger.warning("No clusters to rank for %s", window.isoformat())
        return RankResult(window_date=window, clusters_considered=0, candidates_saved=0, top=[])

    memberships = load_memberships(session, [row.id for row in clusters])
    articles_by_id = _load_window_members(session, {article_id for _, article_id in memberships}, start, end)
    source_names = load_source_names(session, (a.source_id for a in articles_by_id.values()))

    logger.info(
        "Ranking %d clusters (%d memberships, %d in-window articles) for %s",
        len(clusters),
        len(memberships),
        len(articles_by_id),
        window.isoformat(),
    )
    ranked = score_clusters(clusters, memberships, articles_by_id, source_names, end, ranking)

    with storage_step("update cluster scores"):
        session.execute(
            update(StoryCluster),
            [{"id": item.cluster_id, "score": item.score} for item in ranked],
        )

    top = ranked[: ranking.top_limit]
    _replace_candidates(session, window, [item.cluster_id for item in top])
    session.commit()

    logger.info("Saved %d ranked candidates for %s", len(top), window.isoformat())
    return RankResult(
        window_date=window,
        clusters_considered=len(ranked),
        candidates_saved=len(top),
        top=[
            RankedCandidateSummary(
                rank=index,
                cluster_id=item.cluster_id,
                label=item.label,
                score=item.score,
                volume=item.volume,
                breadth=item.breadth,
                recency=item.recency,
                top_publishers=item.top_publishers,
            )
            for index, item in enumerate(top, start=1)
        ],
    )


def _load_window_members(
    session: Session,
    article_ids: set[str],
    start: datetime,
    end: datetime,
) -> dict[str, Article]:
    if not article_ids:
        return {}
    with storage_step("load cluster articles"):
        rows = (
            session.execute(
                select(Article).where(
                    Article.id.in_(article_ids),
                    Article.published_at >= start,
                    Article.published_at < end,
                )
            )
            .scalars()
            .all()
        )
    return {row.id: row for row in rows}


def _replace_candidates(session: Session, window: date, cluster_ids: list[str]) -> None:
    with storage_step("clear prior candidates"):
        result = session.execute(delete(ClusterCandidate).where(ClusterCandidate.window_date == window))
    logger.info("Deleted %d prior candidates for %s", result.rowcount or 0, window.isoformat())

    if not cluster_ids:
        return
    with storage_step("save ranked candidates"):
        session.add_all(
            ClusterCandidate(window_date=window, cluster_id=cluster_id, rank=rank)
            for rank, cluster_id in enumerate(cluster_ids, start=1)
        )
        session.flush()
