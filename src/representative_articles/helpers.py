"""Helper functions for representative_articles CLI."""

from __future__ import annotations

import argparse

from common.cli_helpers import add_output_args


def parse_representative_articles_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for representative_articles."""

    parser = argparse.ArgumentParser(description="Select representative articles for a cluster.")

    # Input options
    parser.add_argument("--cluster-id", required=True, help="Story cluster id")

    # Selection options
    parser.add_argument(
        "--max",
        dest="max_articles",
        type=float,
        default=None,
        help="Articles to select, clamped to 3..6 (default: from config, 6)",
    )
    parser.add_argument("--config", default=None, help="Config name under configs/ (default: prod)")

    # Output options
    add_output_args(parser)

    return parser.parse_args(argv)
