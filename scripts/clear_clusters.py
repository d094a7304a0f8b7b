"""Delete a window's clusters, memberships and candidates (or every window's)."""

from __future__ import annotations

import argparse
import logging

from dotenv import load_dotenv


def main() -> None:
    parser = argparse.ArgumentParser(description="Clear story clusters.")
    parser.add_argument("--window-date", default=None, help="Only clear this date (YYYY-MM-DD)")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    logger = logging.getLogger(__name__)

    load_dotenv()

    from sqlalchemy import delete, select

    from common.datetime import parse_window_date
    from rds_postgres.connection import get_session
    from rds_postgres.models import ClusterArticle, ClusterCandidate, StoryCluster

    with get_session() as session:
        cluster_ids = select(StoryCluster.id)
        if args.window_date:
            cluster_ids = cluster_ids.where(StoryCluster.window_date == parse_window_date(args.window_date))
        ids = list(session.execute(cluster_ids).scalars())

        candidate_result = session.execute(delete(ClusterCandidate).where(ClusterCandidate.cluster_id.in_(ids)))
        rel_result = session.execute(delete(ClusterArticle).where(ClusterArticle.cluster_id.in_(ids)))
        cluster_result = session.execute(delete(StoryCluster).where(StoryCluster.id.in_(ids)))
        session.commit()

    logger.info(
        "Deleted %d candidates, %d memberships and %d clusters",
        candidate_result.rowcount or 0,
        rel_result.rowcount or 0,
        cluster_result.rowcount or 0,
    )


if __name__ == "__main__":
    main()
