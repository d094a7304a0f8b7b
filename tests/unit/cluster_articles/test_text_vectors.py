"""Tests for cluster_articles.text_vectors module."""

import math

import pytest

from cluster_articles.text_vectors import (
    STOP_WORDS,
    add_vectors,
    cosine_similarity,
    normalize_text,
    stem_token,
    to_vector,
    vectorize,
)


class TestNormalizeText:
    def test_lowercases_and_strips_punctuation(self) -> None:
        assert normalize_text("Fed Raises Rates!", "Markets react.") == "fed raises rates markets react"

    def test_removes_urls(self) -> None:
        assert normalize_text("Read more", "at https://example.com/a?b=1 today") == "read more at today"

    def test_missing_snippet(self) -> None:
        assert normalize_text("  Title  ", None) == "title"


class TestStemToken:
    @pytest.mark.parametrize(
        "token, expected",
        [
            ("running", "runn"),
            ("sing", "sing"),
            ("jumped", "jump"),
            ("raises", "rais"),
            ("rates", "rate"),
            ("wins", "wins"),
            ("bus", "bus"),
            ("reserve", "reserve"),
        ],
    )
    def test_rules(self, token, expected) -> None:
        assert stem_token(token) == expected

    def test_possessive_first(self) -> None:
        assert stem_token("nation's") == "nation"

    def test_only_one_rule_applies(self) -> None:
        # "es" is stripped, the remaining "s" is left alone
        assert stem_token("classes") == "class"


class TestToVector:
    def test_counts_and_filters(self) -> None:
        vector = to_vector("the fed and the fed x of rates")
        assert vector == {"fed": 2, "rate": 1}

    def test_stop_word_set(self) -> None:
        assert len(STOP_WORDS) == 25
        assert to_vector(" ".join(sorted(STOP_WORDS))) == {}

    def test_vectorize_composes(self) -> None:
        assert vectorize("Fed raises rates", None) == {"fed": 1, "rais": 1, "rate": 1}


class TestCosineSimilarity:
    def test_self_similarity_is_one(self) -> None:
        vector = {"fed": 2, "rate": 1}
        assert math.isclose(cosine_similarity(vector, vector), 1.0)

    def test_symmetric(self) -> None:
        a = {"fed": 1, "rais": 1, "rate": 1}
        b = {"federal": 1, "reserve": 1, "rais": 1, "interest": 1, "rate": 1}
        assert cosine_similarity(a, b) == cosine_similarity(b, a)
        assert math.isclose(cosine_similarity(a, b), 2 / math.sqrt(15))

    def test_empty_vector(self) -> None:
        assert cosine_similarity({}, {"fed": 1}) == 0.0
        assert cosine_similarity({"fed": 1}, {}) == 0.0

    def test_zero_norm(self) -> None:
        assert cosine_similarity({"fed": 0}, {"fed": 1}) == 0.0

    def test_disjoint(self) -> None:
        assert cosine_similarity({"fed": 1}, {"bakery": 1}) == 0.0


class TestAddVectors:
    def test_returns_new_sum(self) -> None:
        a = {"fed": 1}
        total = add_vectors(a, {"fed": 2, "rate": 1})
        assert total == {"fed": 3, "rate": 1}
        assert a == {"fed": 1}
