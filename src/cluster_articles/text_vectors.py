"""Normalize article text into stemmed term-frequency vectors and compare them.

The stemmer is a small suffix-stripping heuristic. The clustering threshold
was tuned against exactly this token reduction, so swapping in a library
stemmer changes clustering outcomes.
"""

from __future__ import annotations

import math
import re
from collections import Counter
from collections.abc import Mapping

TokenVector = dict[str, int]

DEFAULT_MIN_TOKEN_LENGTH = 2

STOP_WORDS = frozenset(
    {
        "a",
        "an",
        "and",
        "are",
        "as",
        "at",
        "be",
        "by",
        "for",
        "from",
        "has",
        "he",
        "in",
        "is",
        "it",
        "its",
        "of",
        "on",
        "that",
        "the",
        "to",
        "was",
        "were",
        "will",
        "with",
    }
)

_URL_RE = re.compile(r"https?://\S+")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9\s]")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_text(title: str, snippet: str | None) -> str:
    """Lowercase title + snippet, strip URLs and punctuation, collapse whitespace."""
    text = f"{title} {snippet or ''}".lower()
    text = _URL_RE.sub(" ", text)
    text = _NON_ALNUM_RE.sub(" ", text)
    text = _WHITESPACE_RE.sub(" ", text)
    return text.strip()


def stem_token(token: str) -> str:
    """Strip one common English suffix; the first matching rule wins."""
    if token.endswith("'s"):
        return token[:-2]
    if len(token) > 6 and token.endswith("ing"):
        return token[:-3]
    if len(token) > 5 and token.endswith("ed"):
        return token[:-2]
    if len(token) > 5 and token.endswith("es"):
        return token[:-2]
    if len(token) > 4 and token.endswith("s"):
        return token[:-1]
    return token


def to_vector(text: str, min_token_length: int = DEFAULT_MIN_TOKEN_LENGTH) -> TokenVector:
    """Count stemmed, stop-word filtered tokens of normalized text."""
    tokens = (stem_token(token.strip()) for token in text.split(" "))
    counts = Counter(
        token
        for token in tokens
        if len(token) >= min_token_length and token not in STOP_WORDS
    )
    return dict(counts)


def vectorize(
    title: str,
    snippet: str | None,
    min_token_length: int = DEFAULT_MIN_TOKEN_LENGTH,
) -> TokenVector:
    """Build the term-frequency vector for an article's title and snippet."""
    return to_vector(normalize_text(title, snippet), min_token_length)


def add_vectors(a: Mapping[str, int], b: Mapping[str, int]) -> TokenVector:
    """Element-wise sum of two vectors as a new vector."""
    total = dict(a)
    for token, value in b.items():
        total[token] = total.get(token, 0) + value
    return total


def cosine_similarity(a: Mapping[str, int], b: Mapping[str, int]) -> float:
    """Cosine similarity between two sparse vectors.

    Returns 0.0 when either vector is empty or has zero norm.
    """
    if not a or not b:
        return 0.0

    a_norm = sum(value * value for value in a.values())
    b_norm = sum(value * value for value in b.values())
    if a_norm == 0 or b_norm == 0:
        return 0.0

    if len(b) < len(a):
        a, b = b, a
    dot = sum(value * b.get(token, 0) for token, value in a.items())
    return dot / math.sqrt(a_norm * b_norm)
