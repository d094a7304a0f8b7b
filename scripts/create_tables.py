"""Create the story engine tables in the configured database."""

from __future__ import annotations

import logging

from dotenv import load_dotenv


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    logger = logging.getLogger(__name__)

    load_dotenv()

    from rds_postgres.connection import create_tables
    from rds_postgres.models import Base

    create_tables()
    logger.info("Ensured tables: %s", ", ".join(sorted(Base.metadata.tables)))


if __name__ == "__main__":
    main()
