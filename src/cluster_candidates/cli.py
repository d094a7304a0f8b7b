"""CLI for listing, reordering and inspecting ranked candidates."""

from __future__ import annotations

import logging
import sys

from dotenv import load_dotenv

from cluster_candidates.candidates import get_cluster_detail, list_candidates, reorder_candidates
from cluster_candidates.helpers import parse_cluster_candidates_args
from common.cli_helpers import setup_logging
from common.config import load_config, set_config
from common.errors import EngineError
from rds_postgres.connection import get_session

setup_logging()
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    args = parse_cluster_candidates_args(argv)
    load_dotenv()
    set_config(load_config(args.config))

    try:
        with get_session() as session:
            if args.command == "list":
                _list(session, args.window_date)
            elif args.command == "reorder":
                result = reorder_candidates(session, args.window_date, args.cluster_ids)
                logger.info(
                    "Reordered %d candidates for %s",
                    len(result.ordered_cluster_ids),
                    result.window_date.isoformat(),
                )
            else:
                _detail(session, args.cluster_id)
    except EngineError as exc:
        logger.error("%s", exc)
        sys.exit(1)


def _list(session, window_date) -> None:
    candidates = list_candidates(session, window_date)
    if not candidates:
        logger.info("No candidates for %s", window_date.isoformat())
        return
    for item in candidates:
        logger.info(
            "#%d %s %.4f (%d articles, %d publishers) %s",
            item.rank,
            item.cluster_id,
            item.score,
            item.volume,
            item.breadth,
            item.label,
        )


def _detail(session, cluster_id: str) -> None:
    detail = get_cluster_detail(session, cluster_id)
    logger.info("%s [%s] score=%.4f %s", detail.id, detail.window_date.isoformat(), detail.score, detail.label)
    for member in detail.members:
        published = member.published_at.isoformat() if member.published_at else "-"
        logger.info("  %s | %s | %s", published, member.publisher, member.title)
    for source in detail.top_sources:
        logger.info("  top source: %s %s", source.label, source.url)


if __name__ == "__main__":
    main()
