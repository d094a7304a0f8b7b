"""Helper functions for cluster_candidates CLI."""

from __future__ import annotations

import argparse

from common.cli_helpers import parse_date
from common.datetime import yesterday_utc


def parse_cluster_candidates_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for cluster_candidates."""

    parser = argparse.ArgumentParser(description="Inspect and reorder ranked cluster candidates.")
    parser.add_argument("--config", default=None, help="Config name under configs/ (default: prod)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List a window's candidates in rank order")
    _add_window_date_arg(list_parser)

    reorder_parser = subparsers.add_parser("reorder", help="Set a new candidate order for a window")
    _add_window_date_arg(reorder_parser)
    reorder_parser.add_argument(
        "cluster_ids",
        nargs="+",
        help="Every current candidate cluster id, in the new order",
    )

    detail_parser = subparsers.add_parser("detail", help="Show a cluster's members and top sources")
    detail_parser.add_argument("cluster_id", help="Story cluster id")

    return parser.parse_args(argv)


def _add_window_date_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--window-date",
        type=lambda v: parse_date(v, "window-date"),
        default=yesterday_utc(),
        help="Window date (UTC, YYYY-MM-DD, default: yesterday)",
    )
