"""CLI for ranking a window's clusters."""

from __future__ import annotations

import logging

from dotenv import load_dotenv

from common.cli_helpers import setup_logging
from common.config import load_config, set_config
from common.outputs import export_run_records
from rank_clusters.helpers import apply_top_limit_override, parse_rank_clusters_args
from rank_clusters.rank_clusters import rank_window
from rds_postgres.connection import get_session

setup_logging()
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    args = parse_rank_clusters_args(argv)
    load_dotenv()

    config = apply_top_limit_override(load_config(args.config), args.top_limit)
    set_config(config)

    with get_session() as session:
        result = rank_window(session, args.window_date, config=config)

    logger.info(
        "Ranked %d clusters, saved %d candidates for %s",
        result.clusters_considered,
        result.candidates_saved,
        result.window_date.isoformat(),
    )
    for item in result.top:
        logger.info(
            "  #%d %.4f (%d articles, %d publishers) %s",
            item.rank,
            item.score,
            item.volume,
            item.breadth,
            item.label,
        )

    export_run_records([result], "rank_runs", args)


if __name__ == "__main__":
    main()
