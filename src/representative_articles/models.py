"""Data models for representative_articles."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class RepresentativeArticle:
    """Article chosen to represent a cluster, with its resolved publisher."""

    title: str
    publisher: str
    snippet: str | None
    url: str
    published_at: datetime | None
