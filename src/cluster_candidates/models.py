"""Data models for cluster_candidates."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime


@dataclass
class CandidateSummary:
    """Ranked candidate joined with its cluster's current signals."""

    cluster_id: str
    rank: int
    label: str
    score: float
    volume: int
    breadth: int


@dataclass
class ClusterMember:
    id: str
    title: str
    url: str
    publisher: str
    published_at: datetime | None


@dataclass
class TopSource:
    label: str
    url: str


@dataclass
class ClusterDetail:
    """Cluster with its members (newest first) and up to three top sources."""

    id: str
    window_date: date
    label: str
    score: float
    members: list[ClusterMember] = field(default_factory=list)
    top_sources: list[TopSource] = field(default_factory=list)


@dataclass
class ReorderResult:
    window_date: date
    reordered: bool
    ordered_cluster_ids: list[str] = field(default_factory=list)
