"""CLI for clustering a window's articles."""

from __future__ import annotations

import logging

from dotenv import load_dotenv

from cluster_articles.cluster_articles import cluster_window
from cluster_articles.helpers import apply_threshold_override, parse_cluster_articles_args
from common.cli_helpers import setup_logging
from common.config import load_config, set_config
from common.outputs import export_run_records
from rds_postgres.connection import get_session

setup_logging()
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    args = parse_cluster_articles_args(argv)
    load_dotenv()

    config = apply_threshold_override(load_config(args.config), args.threshold)
    set_config(config)

    with get_session() as session:
        result = cluster_window(session, args.window_date, replace=args.replace, config=config)

    logger.info(
        "Clustered %d articles into %d clusters for %s",
        result.articles_considered,
        result.clusters_created,
        result.window_date.isoformat(),
    )
    for item in result.largest_clusters:
        logger.info("  [%d] %s", item.size, item.label)

    export_run_records([result], "cluster_runs", args)


if __name__ == "__main__":
    main()
