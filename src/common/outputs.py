"""Run summary export shared by the stage CLIs."""

from __future__ import annotations

import argparse
from typing import Any

from common.aws import upload_jsonl_records_to_s3
from common.local_io import save_jsonl_records_local
from common.utils import get_value


def export_run_records(records: list[Any], prefix: str, args: argparse.Namespace) -> None:
    """Write dataclass run summaries to S3 and/or local JSONL per --load-* flags.

    S3 objects are partitioned by the window date of the first record, when
    the records carry one.
    """
    if not records:
        return
    if getattr(args, "load_s3", False):
        upload_jsonl_records_to_s3(records, prefix, partition=get_value(records[0], "window_date"))
    if getattr(args, "load_local", False):
        save_jsonl_records_local(records, prefix)
