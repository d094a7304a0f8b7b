"""Helper functions for rank_clusters CLI."""

from __future__ import annotations

import argparse
from dataclasses import replace

from common.cli_helpers import add_output_args, parse_date
from common.config import EngineConfig
from common.datetime import yesterday_utc


def parse_rank_clusters_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for rank_clusters."""

    parser = argparse.ArgumentParser(description="Rank a day's clusters and save the top candidates.")

    # Input options
    parser.add_argument(
        "--window-date",
        type=lambda v: parse_date(v, "window-date"),
        default=yesterday_utc(),
        help="Rank clusters of this date (UTC, YYYY-MM-DD, default: yesterday)",
    )

    # Ranking options
    parser.add_argument(
        "--top-limit",
        type=int,
        default=None,
        help="Number of candidates to save (default: from config, 30)",
    )
    parser.add_argument("--config", default=None, help="Config name under configs/ (default: prod)")

    # Output options
    add_output_args(parser)

    return parser.parse_args(argv)


def apply_top_limit_override(config: EngineConfig, top_limit: int | None) -> EngineConfig:
    """Return config with the CLI top limit applied, if one was given."""
    if top_limit is None:
        return config
    if top_limit < 1:
        raise ValueError("top-limit must be at least 1")
    return replace(config, ranking=replace(config.ranking, top_limit=top_limit))
