"""Helper functions for cluster_articles CLI."""

from __future__ import annotations

import argparse
from dataclasses import replace

from common.cli_helpers import add_output_args, parse_date
from common.config import EngineConfig
from common.datetime import yesterday_utc


def parse_cluster_articles_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for cluster_articles."""

    parser = argparse.ArgumentParser(description="Cluster a day's articles into stories.")

    # Input options
    parser.add_argument(
        "--window-date",
        type=lambda v: parse_date(v, "window-date"),
        default=yesterday_utc(),
        help="Cluster articles published on this date (UTC, YYYY-MM-DD, default: yesterday)",
    )
    parser.add_argument(
        "--replace",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Replace existing clusters for the window date (default: True)",
    )

    # Clustering options
    parser.add_argument(
        "--threshold",
        type=float,
        default=None,
        help="Cosine similarity needed to join a cluster (default: from config, 0.32)",
    )
    parser.add_argument("--config", default=None, help="Config name under configs/ (default: prod)")

    # Output options
    add_output_args(parser)

    return parser.parse_args(argv)


def apply_threshold_override(config: EngineConfig, threshold: float | None) -> EngineConfig:
    """Return config with the CLI threshold applied, if one was given."""
    if threshold is None:
        return config
    if not 0.0 < threshold <= 1.0:
        raise ValueError("threshold must be in (0, 1]")
    return replace(config, clustering=replace(config.clustering, similarity_threshold=threshold))
