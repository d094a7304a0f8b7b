"""Candidate endpoints: list and manual reorder."""

from dataclasses import asdict
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from cluster_candidates.candidates import list_candidates, reorder_candidates
from common.datetime import parse_window_date
from editor_api.deps import get_db_session, resolve_window_date
from editor_api.models.candidate import (
    CandidateListResponse,
    CandidateResponse,
    ReorderRequest,
    ReorderResponse,
)

router = APIRouter(prefix="/candidates", tags=["candidates"])


@router.get("", response_model=CandidateListResponse)
def get_candidates(
    session: Annotated[Session, Depends(get_db_session)],
    window_date: Annotated[str | None, Query(description="UTC day (YYYY-MM-DD), default yesterday")] = None,
):
    """List a window's ranked candidates with current volume and breadth."""
    window = resolve_window_date(window_date)
    candidates = list_candidates(session, window)
    return CandidateListResponse(
        window_date=window,
        candidates=[CandidateResponse(**asdict(item)) for item in candidates],
    )


@router.post("/reorder", response_model=ReorderResponse)
def reorder(
    body: ReorderRequest,
    session: Annotated[Session, Depends(get_db_session)],
):
    """Replace the ranks of a window's candidates with the submitted order."""
    window = parse_window_date(body.window_date or "")
    result = reorder_candidates(session, window, body.ordered_cluster_ids)
    return ReorderResponse(**asdict(result))
