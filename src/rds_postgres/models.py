"""SQLAlchemy models for the story engine tables."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


def _new_id() -> str:
    return uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class FeedSource(Base):
    """RSS source an article was fetched from. Only the name is read here."""

    __tablename__ = "feed_sources"

    id = Column(String(32), primary_key=True, default=_new_id)
    name = Column(Text, nullable=False)
    url = Column(Text, nullable=False, unique=True)
    is_enabled = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=_utcnow)


class Article(Base):
    """Ingested article. Written by ingestion, read-only for this engine."""

    __tablename__ = "articles"

    id = Column(String(32), primary_key=True, default=_new_id)
    source_id = Column(String(32), ForeignKey("feed_sources.id", ondelete="SET NULL"), nullable=True)
    url = Column(Text, nullable=False, unique=True)
    title = Column(Text, nullable=False)
    publisher = Column(Text, nullable=True)
    published_at = Column(DateTime, nullable=True)  # naive UTC
    snippet = Column(Text, nullable=True)
    fetched_at = Column(DateTime, nullable=False, default=_utcnow)

    __table_args__ = (
        Index("articles_published_at_idx", "published_at"),
        Index("articles_source_id_idx", "source_id"),
    )


class StoryCluster(Base):
    """Persisted cluster for one window date."""

    __tablename__ = "story_clusters"

    id = Column(String(32), primary_key=True, default=_new_id)
    window_date = Column(Date, nullable=False)
    label = Column(Text, nullable=True)
    category = Column(Text, nullable=True)
    score = Column(Float, nullable=False, default=0.0)
    created_at = Column(DateTime, nullable=False, default=_utcnow)

    memberships = relationship(
        "ClusterArticle",
        back_populates="cluster",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("story_clusters_window_date_score_idx", "window_date", "score"),
    )


class ClusterArticle(Base):
    """Membership of an article in a story cluster."""

    __tablename__ = "cluster_articles"

    cluster_id = Column(
        String(32),
        ForeignKey("story_clusters.id", ondelete="CASCADE"),
        primary_key=True,
    )
    article_id = Column(
        String(32),
        ForeignKey("articles.id", ondelete="CASCADE"),
        primary_key=True,
    )

    cluster = relationship("StoryCluster", back_populates="memberships")

    __table_args__ = (
        Index("cluster_articles_article_id_idx", "article_id"),
    )


class ClusterCandidate(Base):
    """Ranked, manually re-orderable reference to a top cluster of a window."""

    __tablename__ = "cluster_candidates"

    id = Column(String(32), primary_key=True, default=_new_id)
    window_date = Column(Date, nullable=False)
    cluster_id = Column(
        String(32),
        ForeignKey("story_clusters.id", ondelete="CASCADE"),
        nullable=False,
    )
    rank = Column(Integer, nullable=False)
    created_at = Column(DateTime, nullable=False, default=_utcnow)

    __table_args__ = (
        Index("cluster_candidates_window_date_rank_idx", "window_date", "rank"),
    )
