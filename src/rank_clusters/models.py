"""Data models for rank_clusters pipeline stage."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date


@dataclass
class PublisherCount:
    name: str
    count: int


@dataclass
class RankedCluster:
    """Newsworthiness signals and composite score of one cluster."""

    cluster_id: str
    label: str
    score: float
    volume: int
    breadth: int
    recency: int
    top_publishers: list[PublisherCount] = field(default_factory=list)


@dataclass
class RankedCandidateSummary:
    rank: int
    cluster_id: str
    label: str
    score: float
    volume: int
    breadth: int
    recency: int
    top_publishers: list[PublisherCount] = field(default_factory=list)


@dataclass
class RankResult:
    """Summary of one ranking run for a window date."""

    window_date: date
    clusters_considered: int
    candidates_saved: int
    top: list[RankedCandidateSummary] = field(default_factory=list)
