"""Data models for cluster_articles pipeline stage."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from types import MappingProxyType

from cluster_articles.text_vectors import TokenVector


@dataclass(frozen=True)
class VectorizedArticle:
    """Article prepared for clustering, with its term-frequency vector."""

    id: str
    title: str
    snippet: str | None
    published_at: datetime | None
    vector: TokenVector


class WorkingCluster:
    """Run-scoped group of articles and the running sum of their vectors.

    Members are only added through add(), which keeps vector_sum equal to the
    element-wise sum of the members' vectors. vector_sum is a read-only view.
    """

    def __init__(self, first: VectorizedArticle):
        self._members: list[VectorizedArticle] = []
        self._vector_sum: TokenVector = {}
        self.add(first)

    def add(self, article: VectorizedArticle) -> None:
        self._members.append(article)
        for token, value in article.vector.items():
            self._vector_sum[token] = self._vector_sum.get(token, 0) + value

    @property
    def members(self) -> tuple[VectorizedArticle, ...]:
        return tuple(self._members)

    @property
    def vector_sum(self) -> Mapping[str, int]:
        return MappingProxyType(self._vector_sum)

    def __len__(self) -> int:
        return len(self._members)


@dataclass
class ClusterSize:
    label: str
    size: int


@dataclass
class ClusterResult:
    """Summary of one clustering run for a window date."""

    window_date: date
    replace: bool
    replaced_clusters: int
    articles_considered: int
    clusters_created: int
    avg_cluster_size: float
    largest_clusters: list[ClusterSize] = field(default_factory=list)
