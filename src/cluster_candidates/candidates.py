"""Read and manually reorder a window's ranked candidates."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from cluster_candidates.models import (
    CandidateSummary,
    ClusterDetail,
    ClusterMember,
    ReorderResult,
    TopSource,
)
from common.config import EngineConfig, get_config
from common.datetime import parse_window_date
from common.errors import (
    CandidatesNotFoundError,
    ClusterNotFoundError,
    ReorderRejectedError,
    storage_step,
)
from common.publishers import count_publishers, resolve_publisher
from common.utils import sort_by_recency
from rds_postgres.models import ClusterCandidate, StoryCluster
from rds_postgres.queries import load_articles, load_memberships, load_source_names

logger = logging.getLogger(__name__)

UNLABELED_CLUSTER = "Unlabeled cluster"
TOP_SOURCES_LIMIT = 3


def list_candidates(
    session: Session,
    window_date: str | date,
    limit: int | None = None,
) -> list[CandidateSummary]:
    """Return the window's candidates in rank order with volume and breadth.

    Volume and breadth are recomputed from the clusters' current memberships,
    so they may differ from the values used when the window was ranked.
    """
    window = parse_window_date(window_date)
    if limit is None:
        limit = get_config().ranking.top_limit

    with storage_step("load candidates"):
        candidates = session.execute(
            select(ClusterCandidate.cluster_id, ClusterCandidate.rank)
            .where(ClusterCandidate.window_date == window)
            .order_by(ClusterCandidate.rank, ClusterCandidate.id)
            .limit(limit)
        ).all()
    if not candidates:
        return []

    cluster_ids = list(dict.fromkeys(row.cluster_id for row in candidates))
    with storage_step("load clusters"):
        clusters = {
            row.id: row
            for row in session.execute(
                select(StoryCluster.id, StoryCluster.label, StoryCluster.score).where(
                    StoryCluster.id.in_(cluster_ids)
                )
            ).all()
        }

    memberships = load_memberships(session, cluster_ids)
    articles = load_articles(session, {article_id for _, article_id in memberships})
    source_names = load_source_names(session, (a.source_id for a in articles.values()))

    members_by_cluster: dict[str, list[str]] = {}
    for cluster_id, article_id in memberships:
        members_by_cluster.setdefault(cluster_id, []).append(article_id)

    summaries = []
    for row in candidates:
        cluster = clusters.get(row.cluster_id)
        member_ids = members_by_cluster.get(row.cluster_id, [])
        publishers = count_publishers(
            (articles[article_id] for article_id in member_ids if article_id in articles),
            source_names,
        )
        summaries.append(
            CandidateSummary(
                cluster_id=row.cluster_id,
                rank=row.rank,
                label=_display_label(cluster.label if cluster else None),
                score=cluster.score if cluster and cluster.score is not None else 0.0,
                volume=len(member_ids),
                breadth=len(publishers),
            )
        )

    logger.info("Loaded %d candidates for %s", len(summaries), window.isoformat())
    return summaries


def get_cluster_detail(session: Session, cluster_id: str) -> ClusterDetail:
    """Return a cluster with its members and top sources.

    Raises:
        ClusterNotFoundError: If no cluster has this id.
    """
    if not isinstance(cluster_id, str) or not cluster_id.strip():
        raise ClusterNotFoundError("cluster id is required.")

    with storage_step("load cluster"):
        cluster = session.get(StoryCluster, cluster_id)
    if cluster is None:
        raise ClusterNotFoundError(f"Cluster {cluster_id} not found.")

    memberships = load_memberships(session, [cluster.id])
    articles = list(load_articles(session, (article_id for _, article_id in memberships)).values())
    source_names = load_source_names(session, (a.source_id for a in articles))

    members = [
        ClusterMember(
            id=article.id,
            title=article.title,
            url=article.url,
            publisher=resolve_publisher(article, source_names),
            published_at=article.published_at,
        )
        for article in sort_by_recency(articles)
    ]

    return ClusterDetail(
        id=cluster.id,
        window_date=cluster.window_date,
        label=_display_label(cluster.label),
        score=cluster.score,
        members=members,
        top_sources=top_sources(members),
    )


def reorder_candidates(
    session: Session,
    window_date: str | date,
    ordered_cluster_ids: Sequence[Any],
    config: EngineConfig | None = None,
) -> ReorderResult:
    """Assign ranks 1..N to the window's candidates in the submitted order.

    The submitted ids must be exactly the stored candidate set. Only the rank
    column changes; no candidate is inserted or deleted.

    Raises:
        InvalidWindowDateError: If window_date is malformed.
        ReorderRejectedError: If the id list is invalid or does not match.
        CandidatesNotFoundError: If the window has no candidates.
    """
    window = parse_window_date(window_date)
    config = config or get_config()
    max_reorder = config.ranking.top_limit
    ids = validate_reorder_ids(ordered_cluster_ids, max_reorder)

    with storage_step("load candidates"):
        rows = session.execute(
            select(ClusterCandidate.id, ClusterCandidate.cluster_id)
            .where(ClusterCandidate.window_date == window)
            .order_by(ClusterCandidate.rank, ClusterCandidate.id)
            .limit(max_reorder)
        ).all()

    if not rows:
        raise CandidatesNotFoundError(f"No candidates found for {window.isoformat()}.")
    if len(rows) != len(ids):
        raise ReorderRejectedError(f"Expected {len(rows)} cluster ids.")

    candidate_id_by_cluster = {row.cluster_id: row.id for row in rows}
    if set(candidate_id_by_cluster) != set(ids):
        raise ReorderRejectedError("ordered_cluster_ids must match the current top candidates exactly.")

    with storage_step("update candidate ranks"):
        for position, cluster_id in enumerate(ids, start=1):
            session.execute(
                update(ClusterCandidate)
                .where(ClusterCandidate.id == candidate_id_by_cluster[cluster_id])
                .values(rank=position)
            )
    session.commit()

    logger.info("Reordered %d candidates for %s", len(ids), window.isoformat())
    return ReorderResult(window_date=window, reordered=True, ordered_cluster_ids=ids)


def validate_reorder_ids(ordered_cluster_ids: Sequence[Any], max_reorder: int) -> list[str]:
    """Check the submitted ids before anything is read.

    Raises:
        ReorderRejectedError: On an empty, oversized, blank or duplicated list.
    """
    if isinstance(ordered_cluster_ids, str) or not ordered_cluster_ids:
        raise ReorderRejectedError("ordered_cluster_ids is required.")
    ids = list(ordered_cluster_ids)
    if len(ids) > max_reorder:
        raise ReorderRejectedError(f"Cannot reorder more than {max_reorder} clusters.")
    if any(not isinstance(cluster_id, str) or not cluster_id.strip() for cluster_id in ids):
        raise ReorderRejectedError("ordered_cluster_ids must be non-empty strings.")
    if len(set(ids)) != len(ids):
        raise ReorderRejectedError("ordered_cluster_ids must be unique.")
    return ids


def top_sources(members: Sequence[ClusterMember], limit: int = TOP_SOURCES_LIMIT) -> list[TopSource]:
    """Most frequent publishers, each linked to its first (newest) member URL."""
    first_url: dict[str, str] = {}
    counts: dict[str, int] = {}
    for member in members:
        first_url.setdefault(member.publisher, member.url)
        counts[member.publisher] = counts.get(member.publisher, 0) + 1

    ordered = sorted(counts, key=lambda publisher: counts[publisher], reverse=True)
    return [TopSource(label=publisher, url=first_url[publisher]) for publisher in ordered[:limit]]


def _display_label(label: str | None) -> str:
    return (label or "").strip() or UNLABELED_CLUSTER
