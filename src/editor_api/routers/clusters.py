"""Cluster endpoints: clustering runs, detail and representatives."""

from dataclasses import asdict
from typing import Annotated

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from cluster_articles.cluster_articles import cluster_window
from cluster_candidates.candidates import get_cluster_detail
from editor_api.deps import get_db_session, resolve_window_date
from editor_api.models.cluster import (
    ClusterDetailResponse,
    ClusterRunRequest,
    ClusterRunResponse,
    RepresentativeArticleResponse,
    RepresentativeListResponse,
)
from representative_articles.representative import get_representative_articles

router = APIRouter(prefix="/clusters", tags=["clusters"])


@router.post("/run", response_model=ClusterRunResponse)
def run_clustering(
    session: Annotated[Session, Depends(get_db_session)],
    body: Annotated[ClusterRunRequest | None, Body()] = None,
):
    """Cluster a window's articles, replacing its clusters unless replace is false."""
    body = body or ClusterRunRequest()
    window = resolve_window_date(body.window_date)
    result = cluster_window(session, window, replace=body.replace)
    return ClusterRunResponse(**asdict(result))


@router.get("/{cluster_id}", response_model=ClusterDetailResponse)
def get_cluster(
    cluster_id: str,
    session: Annotated[Session, Depends(get_db_session)],
):
    """Get a cluster with its members and top sources."""
    return ClusterDetailResponse(**asdict(get_cluster_detail(session, cluster_id)))


@router.get("/{cluster_id}/representatives", response_model=RepresentativeListResponse)
def get_representatives(
    cluster_id: str,
    session: Annotated[Session, Depends(get_db_session)],
    max_articles: Annotated[str | None, Query(alias="max", description="Articles to select (3-6 by default)")] = None,
):
    """Select up to max publisher-diverse, newest-first articles of a cluster.

    Out-of-range values are clamped to the configured range (3..6 by
    default); a missing or non-numeric value selects the configured maximum.
    """
    articles = get_representative_articles(session, cluster_id, _requested_max(max_articles))
    return RepresentativeListResponse(
        cluster_id=cluster_id,
        articles=[RepresentativeArticleResponse(**asdict(article)) for article in articles],
    )


def _requested_max(value: str | None) -> float | str | None:
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return value
