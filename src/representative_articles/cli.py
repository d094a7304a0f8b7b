"""CLI for selecting a cluster's representative articles."""

from __future__ import annotations

import logging

from dotenv import load_dotenv

from common.cli_helpers import setup_logging
from common.config import load_config, set_config
from common.outputs import export_run_records
from rds_postgres.connection import get_session
from representative_articles.helpers import parse_representative_articles_args
from representative_articles.representative import get_representative_articles, has_enough_for_draft

setup_logging()
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    args = parse_representative_articles_args(argv)
    load_dotenv()

    config = load_config(args.config)
    set_config(config)

    with get_session() as session:
        articles = get_representative_articles(session, args.cluster_id, args.max_articles, config)

    for article in articles:
        published = article.published_at.isoformat() if article.published_at else "-"
        logger.info("  %s | %s | %s", published, article.publisher, article.title)

    if not has_enough_for_draft(articles, config.representative.min_articles):
        logger.warning(
            "Cluster %s has %d representative articles, fewer than the %d needed for a draft",
            args.cluster_id,
            len(articles),
            config.representative.min_articles,
        )

    export_run_records(articles, "representative_articles", args)


if __name__ == "__main__":
    main()
