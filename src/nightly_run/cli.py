"""CLI for the nightly run: cluster a window, then rank it."""

from __future__ import annotations

import argparse
import logging

from dotenv import load_dotenv

from cluster_articles.cluster_articles import cluster_window
from common.cli_helpers import add_output_args, parse_date, setup_logging
from common.config import load_config, set_config
from common.datetime import yesterday_utc
from common.outputs import export_run_records
from rank_clusters.rank_clusters import rank_window
from rds_postgres.connection import get_session

setup_logging()
logger = logging.getLogger(__name__)


def parse_nightly_run_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for nightly_run."""
    parser = argparse.ArgumentParser(description="Cluster and rank one day's articles.")
    parser.add_argument(
        "--window-date",
        type=lambda v: parse_date(v, "window-date"),
        default=yesterday_utc(),
        help="Window date (UTC, YYYY-MM-DD, default: yesterday)",
    )
    parser.add_argument("--config", default=None, help="Config name under configs/ (default: prod)")
    add_output_args(parser)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_nightly_run_args(argv)
    load_dotenv()

    config = load_config(args.config)
    set_config(config)

    logger.info("Nightly run for %s", args.window_date.isoformat())
    with get_session() as session:
        cluster_result = cluster_window(session, args.window_date, replace=True, config=config)
        rank_result = rank_window(session, args.window_date, config=config)

    logger.info(
        "Nightly run complete: %d articles, %d clusters, %d candidates",
        cluster_result.articles_considered,
        cluster_result.clusters_created,
        rank_result.candidates_saved,
    )
    if rank_result.top:
        lead = rank_result.top[0]
        logger.info("Top story: %s (score %.4f)", lead.label, lead.score)

    export_run_records([cluster_result], "cluster_runs", args)
    export_run_records([rank_result], "rank_runs", args)


if __name__ == "__main__":
    main()
