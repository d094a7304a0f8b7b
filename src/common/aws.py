"""S3 export of run summaries."""

import json
import logging
import os
from datetime import date, datetime, timezone
from typing import Any

import boto3

from common.serialization import serialize_dataclass

logger = logging.getLogger(__name__)

S3_BUCKET_ENV_VAR = "S3_BUCKET_NAME"


def get_s3_client():
    """Create S3 client."""
    return boto3.client("s3")


def build_s3_key(prefix: str, partition: date, filename: str) -> str:
    """Build a year/month/day partitioned key under prefix."""
    return f"{prefix}/year={partition.year:04d}/month={partition.month:02d}/day={partition.day:02d}/{filename}"


def encode_jsonl(records: list[dict[str, Any]]) -> bytes:
    """One JSON object per line, UTF-8, trailing newline."""
    lines = [json.dumps(record, default=str, ensure_ascii=False) for record in records]
    return ("\n".join(lines) + "\n").encode("utf-8")


def upload_jsonl_records_to_s3(
    records: list[Any],
    prefix: str,
    partition: date | None = None,
) -> str:
    """Upload dataclass records to S3 as one JSONL object.

    Args:
        records: Dataclass run summaries.
        prefix: Key prefix (e.g., "cluster_runs", "rank_runs").
        partition: Date used for the year/month/day partition, normally the
            window date of the run. Defaults to today (UTC).

    Returns:
        The S3 key written.
    """
    bucket = os.environ[S3_BUCKET_ENV_VAR]
    now = datetime.now(timezone.utc)
    filename = f"{prefix}_{now.strftime('%Y_%m_%d_%H_%M')}.jsonl"
    key = build_s3_key(prefix, partition or now.date(), filename)

    get_s3_client().put_object(
        Bucket=bucket,
        Key=key,
        Body=encode_jsonl([serialize_dataclass(record) for record in records]),
        ContentType="application/jsonl",
    )

    logger.info("Uploaded %d records to s3://%s/%s", len(records), bucket, key)
    return key
