"""Cluster Pydantic models."""

from datetime import date, datetime

from pydantic import BaseModel, Field


class ClusterRunRequest(BaseModel):
    """Body of a clustering run request."""

    window_date: str | None = Field(default=None, description="UTC day (YYYY-MM-DD), default yesterday")
    replace: bool = True


class ClusterSizeResponse(BaseModel):
    label: str
    size: int


class ClusterRunResponse(BaseModel):
    """Summary of a clustering run."""

    window_date: date
    replace: bool
    replaced_clusters: int
    articles_considered: int
    clusters_created: int
    avg_cluster_size: float
    largest_clusters: list[ClusterSizeResponse] = Field(default_factory=list)


class ClusterMemberResponse(BaseModel):
    id: str
    title: str
    url: str
    publisher: str
    published_at: datetime | None = None


class TopSourceResponse(BaseModel):
    label: str
    url: str


class ClusterDetailResponse(BaseModel):
    """Cluster with members (newest first) and top sources."""

    id: str
    window_date: date
    label: str
    score: float
    members: list[ClusterMemberResponse]
    top_sources: list[TopSourceResponse]


class RepresentativeArticleResponse(BaseModel):
    title: str
    publisher: str
    snippet: str | None = None
    url: str
    published_at: datetime | None = None


class RepresentativeListResponse(BaseModel):
    """Representative articles selected for a cluster."""

    cluster_id: str
    articles: list[RepresentativeArticleResponse]
