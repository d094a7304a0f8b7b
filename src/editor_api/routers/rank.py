"""Ranking endpoint."""

from dataclasses import asdict
from typing import Annotated

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from editor_api.deps import get_db_session, resolve_window_date
from editor_api.models.candidate import RankRequest, RankResponse
from rank_clusters.rank_clusters import rank_window

router = APIRouter(prefix="/rank", tags=["rank"])


@router.post("", response_model=RankResponse)
def run_ranking(
    session: Annotated[Session, Depends(get_db_session)],
    body: Annotated[RankRequest | None, Body()] = None,
):
    """Score a window's clusters and replace its top candidates."""
    window = resolve_window_date(body.window_date if body else None)
    return RankResponse(**asdict(rank_window(session, window)))
