"""Ranking and candidate Pydantic models."""

from datetime import date

from pydantic import BaseModel, Field


class RankRequest(BaseModel):
    """Body of a ranking run request."""

    window_date: str | None = Field(default=None, description="UTC day (YYYY-MM-DD), default yesterday")


class PublisherCountResponse(BaseModel):
    name: str
    count: int


class RankedCandidateResponse(BaseModel):
    rank: int
    cluster_id: str
    label: str
    score: float
    volume: int
    breadth: int
    recency: int
    top_publishers: list[PublisherCountResponse] = Field(default_factory=list)


class RankResponse(BaseModel):
    """Summary of a ranking run."""

    window_date: date
    clusters_considered: int
    candidates_saved: int
    top: list[RankedCandidateResponse]


class CandidateResponse(BaseModel):
    cluster_id: str
    rank: int
    label: str
    score: float
    volume: int
    breadth: int


class CandidateListResponse(BaseModel):
    """A window's candidates in rank order."""

    window_date: date
    candidates: list[CandidateResponse]


class ReorderRequest(BaseModel):
    """Body of a manual reorder request."""

    window_date: str | None = None
    ordered_cluster_ids: list = Field(default_factory=list)


class ReorderResponse(BaseModel):
    window_date: date
    reordered: bool
    ordered_cluster_ids: list[str]
