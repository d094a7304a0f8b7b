"""Cluster a window's articles into stories with incremental lexical similarity."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import date
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from cluster_articles.models import ClusterResult, ClusterSize, VectorizedArticle, WorkingCluster
from cluster_articles.text_vectors import DEFAULT_MIN_TOKEN_LENGTH, cosine_similarity, vectorize
from common.config import EngineConfig, get_config
from common.datetime import date_to_range, parse_window_date, to_naive_utc
from common.errors import storage_step
from common.utils import get_value
from rds_postgres.models import Article, ClusterArticle, ClusterCandidate, StoryCluster

logger = logging.getLogger(__name__)

DEFAULT_SIMILARITY_THRESHOLD = 0.32
UNTITLED_CLUSTER = "Untitled cluster"
LARGEST_CLUSTERS_REPORTED = 5


def prepare_articles(
    articles: Iterable[Any],
    min_token_length: int = DEFAULT_MIN_TOKEN_LENGTH,
) -> list[VectorizedArticle]:
    """Vectorize article rows or dicts (id, title, snippet, published_at)."""
    prepared = []
    for article in articles:
        title = get_value(article, "title") or ""
        snippet = get_value(article, "snippet")
        prepared.append(
            VectorizedArticle(
                id=str(get_value(article, "id")),
                title=title,
                snippet=snippet,
                published_at=to_naive_utc(get_value(article, "published_at")),
                vector=vectorize(title, snippet, min_token_length),
            )
        )
    return prepared


def order_for_clustering(articles: Iterable[VectorizedArticle]) -> list[VectorizedArticle]:
    """Most recent first, missing timestamps last, ties by ascending id."""
    by_id = sorted(articles, key=lambda article: article.id)
    dated = [article for article in by_id if article.published_at is not None]
    undated = [article for article in by_id if article.published_at is None]
    dated.sort(key=lambda article: article.published_at, reverse=True)
    return dated + undated


def find_best_cluster(
    article: VectorizedArticle,
    clusters: Sequence[WorkingCluster],
) -> tuple[int, float]:
    """Return (index, similarity) of the most similar cluster, or (-1, 0.0).

    Strict comparison keeps the lowest index on ties.
    """
    best_index = -1
    best_similarity = 0.0
    for index, cluster in enumerate(clusters):
        similarity = cosine_similarity(article.vector, cluster.vector_sum)
        if similarity > best_similarity:
            best_similarity = similarity
            best_index = index
    return best_index, best_similarity


def build_working_clusters(
    articles: Iterable[VectorizedArticle],
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
) -> list[WorkingCluster]:
    """Greedy single pass: join the best cluster at or above threshold, else start one."""
    clusters: list[WorkingCluster] = []
    for article in articles:
        index, similarity = find_best_cluster(article, clusters)
        if index >= 0 and similarity >= threshold:
            clusters[index].add(article)
        else:
            clusters.append(WorkingCluster(article))
    return clusters


def choose_cluster_label(cluster: WorkingCluster) -> str:
    """Title of the member closest to the cluster's summed vector."""
    members = cluster.members
    if not members:
        return UNTITLED_CLUSTER

    vector_sum = cluster.vector_sum
    best_title = members[0].title
    best_score = -1.0
    for member in members:
        score = cosine_similarity(member.vector, vector_sum)
        if score > best_score:
            best_score = score
            best_title = member.title
    return best_title


def summarize_clusters(
    window_date: date,
    replace: bool,
    replaced_clusters: int,
    articles_considered: int,
    labelled: list[tuple[str, WorkingCluster]],
) -> ClusterResult:
    """Build the run summary from labelled clusters."""
    if not labelled:
        return ClusterResult(
            window_date=window_date,
            replace=replace,
            replaced_clusters=replaced_clusters,
            articles_considered=articles_considered,
            clusters_created=0,
            avg_cluster_size=0.0,
            largest_clusters=[],
        )

    sizes = [ClusterSize(label=label, size=len(cluster)) for label, cluster in labelled]
    sizes.sort(key=lambda item: item.size, reverse=True)
    return ClusterResult(
        window_date=window_date,
        replace=replace,
        replaced_clusters=replaced_clusters,
        articles_considered=articles_considered,
        clusters_created=len(labelled),
        avg_cluster_size=round(articles_considered / len(labelled), 2),
        largest_clusters=sizes[:LARGEST_CLUSTERS_REPORTED],
    )


def cluster_window(
    session: Session,
    window_date: str | date,
    replace: bool = True,
    config: EngineConfig | None = None,
) -> ClusterResult:
    """Cluster all articles published on window_date (UTC) and persist the clusters.

    With replace=True every existing cluster of the window is deleted first,
    together with its memberships and ranked candidates.

    Args:
        session: SQLAlchemy session; committed on success.
        window_date: UTC day to cluster (YYYY-MM-DD or date).
        replace: Delete the window's previous clusters before inserting.
        config: Engine configuration (defaults to the loaded config).

    Returns:
        ClusterResult summary of the run.
    """
    window = parse_window_date(window_date)
    config = config or get_config()
    threshold = config.clustering.similarity_threshold

    replaced = 0
    if replace:
        replaced = _delete_window_clusters(session, window)

    rows = _load_window_articles(session, window)
    articles = order_for_clustering(prepare_articles(rows, config.clustering.min_token_length))
    if not articles:
        session.commit()
        logger.warning("No articles to cluster for %s", window.isoformat())
        return summarize_clusters(window, replace, replaced, 0, [])

    logger.info(
        "Clustering %d articles for %s (threshold=%.2f)",
        len(articles),
        window.isoformat(),
        threshold,
    )
    working = build_working_clusters(articles, threshold)
    labelled = [(choose_cluster_label(cluster), cluster) for cluster in working]

    _insert_clusters(session, window, labelled)
    session.commit()

    result = summarize_clusters(window, replace, replaced, len(articles), labelled)
    logger.info(
        "Saved %d clusters for %s (avg size %.2f, %d replaced)",
        result.clusters_created,
        window.isoformat(),
        result.avg_cluster_size,
        replaced,
    )
    return result


def _delete_window_clusters(session: Session, window: date) -> int:
    """Delete a window's clusters, deleting child rows first."""
    with storage_step("load previous clusters"):
        cluster_ids = list(
            session.execute(
                select(StoryCluster.id).where(StoryCluster.window_date == window)
            ).scalars()
        )

    with storage_step("clear previous clusters"):
        if cluster_ids:
            session.execute(
                delete(ClusterCandidate).where(ClusterCandidate.cluster_id.in_(cluster_ids))
            )
            session.execute(
                delete(ClusterArticle).where(ClusterArticle.cluster_id.in_(cluster_ids))
            )
        session.execute(delete(StoryCluster).where(StoryCluster.window_date == window))

    logger.info("Deleted %d existing clusters for %s", len(cluster_ids), window.isoformat())
    return len(cluster_ids)


def _load_window_articles(session: Session, window: date) -> list[Article]:
    """Articles published in [window start, window end), newest first."""
    start, end = date_to_range(window)
    logger.info("Loading articles published from %s to %s", start.isoformat(), end.isoformat())
    with storage_step("load articles for clustering"):
        rows = (
            session.execute(
                select(Article)
                .where(Article.published_at >= start, Article.published_at < end)
                .order_by(Article.published_at.desc(), Article.id)
            )
            .scalars()
            .all()
        )
    logger.info("Loaded %d articles", len(rows))
    return list(rows)


def _insert_clusters(
    session: Session,
    window: date,
    labelled: list[tuple[str, WorkingCluster]],
) -> list[str]:
    """Insert clusters (initial score = size) and their memberships."""
    clusters = [
        StoryCluster(
            window_date=window,
            label=label,
            category=None,
            score=float(len(cluster)),
        )
        for label, cluster in labelled
    ]
    with storage_step("insert clusters"):
        session.add_all(clusters)
        session.flush()

    memberships = [
        ClusterArticle(cluster_id=row.id, article_id=member.id)
        for row, (_, cluster) in zip(clusters, labelled, strict=True)
        for member in cluster.members
    ]
    with storage_step("insert cluster memberships"):
        session.add_all(memberships)
        session.flush()

    return [row.id for row in clusters]
