"""Local file I/O utilities."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from common.cli_helpers import save_jsonl_local
from common.serialization import serialize_dataclass

logger = logging.getLogger(__name__)


def save_jsonl_records_local(
    records: list[Any],
    prefix: str,
    output_dir: str = "output",
) -> Path:
    """
    Save a list of dataclass records to a local JSONL file.

    Args:
        records: List of dataclass objects to save
        prefix: Filename prefix (e.g., "cluster_runs", "rank_runs")
        output_dir: Directory to save to (default: "output")
    """
    now = datetime.now(timezone.utc)
    serialized = [serialize_dataclass(record) for record in records]
    filepath = save_jsonl_local(serialized, prefix, now, output_dir)
    logger.info("Saved %d records to %s", len(records), filepath)
    return filepath
