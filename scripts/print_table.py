"""Print rows from one of the story engine tables."""

from __future__ import annotations

import argparse
import logging

from dotenv import load_dotenv


def _format_value(value: object, max_len: int = 100) -> str:
    if isinstance(value, str) and len(value) > max_len:
        return f"{value[:max_len]}..."
    return str(value) if value is not None else "None"


def main() -> None:
    from rds_postgres.models import Base

    parser = argparse.ArgumentParser(description="Print rows from a table.")
    parser.add_argument("--table", required=True, choices=sorted(Base.metadata.tables), help="Table to print")
    parser.add_argument("--limit", type=int, default=50, help="Max rows to print")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    logger = logging.getLogger(__name__)

    load_dotenv()

    from sqlalchemy import select

    from rds_postgres.connection import get_session

    table = Base.metadata.tables[args.table]
    with get_session() as session:
        rows = session.execute(select(table).limit(args.limit)).mappings().all()

    logger.info("Fetched %d rows from %s", len(rows), table.name)
    for row in rows:
        for key, value in sorted(dict(row).items()):
            print(f"{key}: {_format_value(value)}")
        print("-" * 40)


if __name__ == "__main__":
    main()
