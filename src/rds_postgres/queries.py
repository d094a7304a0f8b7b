"""Read helpers shared by the ranking, candidate and representative operations."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from common.errors import storage_step
from rds_postgres.models import Article, ClusterArticle, FeedSource


def load_memberships(session: Session, cluster_ids: Iterable[str]) -> list[tuple[str, str]]:
    """Return (cluster_id, article_id) pairs for the given clusters."""
    ids = list(dict.fromkeys(cluster_ids))
    if not ids:
        return []
    with storage_step("load cluster memberships"):
        rows = session.execute(
            select(ClusterArticle.cluster_id, ClusterArticle.article_id)
            .where(ClusterArticle.cluster_id.in_(ids))
            .order_by(ClusterArticle.cluster_id, ClusterArticle.article_id)
        ).all()
    return [(row.cluster_id, row.article_id) for row in rows]


def load_articles(session: Session, article_ids: Iterable[str]) -> dict[str, Article]:
    """Map article id -> Article for the ids that exist, in id order."""
    ids = set(article_ids)
    if not ids:
        return {}
    with storage_step("load cluster articles"):
        rows = session.execute(
            select(Article).where(Article.id.in_(ids)).order_by(Article.id)
        ).scalars().all()
    return {row.id: row for row in rows}


def load_source_names(session: Session, source_ids: Iterable[str | None]) -> dict[str, str]:
    """Map feed source id -> name for the given ids."""
    ids = {source_id for source_id in source_ids if source_id}
    if not ids:
        return {}
    with storage_step("load feed sources"):
        rows = session.execute(select(FeedSource.id, FeedSource.name).where(FeedSource.id.in_(ids))).all()
    return {row.id: row.name for row in rows}
