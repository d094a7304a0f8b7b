"""Tests for representative_articles.representative module."""

from datetime import datetime
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import SQLAlchemyError

from common.config import EngineConfig, RepresentativeConfig, set_config
from common.errors import StorageError
from factories import make_article, make_cluster, make_source
from representative_articles.representative import (
    MIN_DRAFT_ARTICLES,
    clamp_max,
    get_representative_articles,
    has_enough_for_draft,
    select_representatives,
)


def _article(article_id, hour, publisher=None, source_id=None):
    return {
        "id": article_id,
        "title": f"Title {article_id}",
        "publisher": publisher,
        "source_id": source_id,
        "snippet": None,
        "url": f"https://news.example.com/{article_id}",
        "published_at": datetime(2024, 3, 10, hour) if hour is not None else None,
    }


class TestClampMax:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (10, 6),
            (1, 3),
            (4, 4),
            (4.9, 4),
            (6, 6),
            (-5, 3),
            (float("nan"), 6),
            (float("inf"), 6),
            (float("-inf"), 6),
            ("4", 6),
            (None, 6),
            (True, 6),
        ],
    )
    def test_clamp(self, value, expected) -> None:
        assert clamp_max(value) == expected

    def test_configured_bounds(self) -> None:
        representative = RepresentativeConfig(min_articles=2, max_articles=4)
        assert clamp_max(None, representative) == 4
        assert clamp_max(10, representative) == 4
        assert clamp_max(1, representative) == 2
        assert clamp_max(3, representative) == 3


class TestSelectRepresentatives:
    def test_diversity_first_then_fill(self) -> None:
        articles = [
            _article("r1", 12, "Reuters"),
            _article("r2", 11, "Reuters"),
            _article("r3", 10, "Reuters"),
            _article("ap1", 9, "AP"),
            _article("bbc1", 8, "BBC"),
        ]
        selected = select_representatives(articles, {}, 4)
        assert [a.url.rsplit("/", 1)[1] for a in selected] == ["r1", "ap1", "bbc1", "r2"]

    def test_distinct_publishers_fill_limit_without_repeats(self) -> None:
        articles = [_article(f"x{i}", 20 - i, f"P{i}") for i in range(5)] + [_article("dup", 23, "P0")]
        selected = select_representatives(articles, {}, 3)
        assert [a.publisher for a in selected] == ["P0", "P1", "P2"]
        assert selected[0].title == "Title dup"

    def test_source_name_fallback_and_unknown(self) -> None:
        articles = [_article("a", 10, None, "s1"), _article("b", 9, None, None)]
        selected = select_representatives(articles, {"s1": "BBC News"}, 6)
        assert [a.publisher for a in selected] == ["BBC News", "Unknown Publisher"]

    def test_undated_last(self) -> None:
        articles = [_article("old", None, "A"), _article("new", 10, "B")]
        selected = select_representatives(articles, {}, 6)
        assert [a.title for a in selected] == ["Title new", "Title old"]

    def test_fewer_articles_than_limit(self) -> None:
        assert len(select_representatives([_article("a", 1, "A")], {}, 6)) == 1


class TestGetRepresentativeArticles:
    def test_loads_cluster_members(self, session) -> None:
        make_source(session, "s1", "BBC News")
        make_article(session, "a1", "Fed raises rates", datetime(2024, 3, 10, 12), "Reuters", "Rates up.")
        make_article(session, "a2", "Fed decision", datetime(2024, 3, 10, 11), "Reuters")
        make_article(session, "a3", "Rates rise", datetime(2024, 3, 10, 10), None, source_id="s1")
        make_cluster(session, "fed", ["a1", "a2", "a3"])
        session.commit()

        selected = get_representative_articles(session, "fed", 10)

        assert [(a.title, a.publisher) for a in selected] == [
            ("Fed raises rates", "Reuters"),
            ("Rates rise", "BBC News"),
            ("Fed decision", "Reuters"),
        ]
        assert selected[0].snippet == "Rates up."
        assert selected[0].published_at == datetime(2024, 3, 10, 12)

    def _seed_single_publisher(self, session, count) -> None:
        for i in range(count):
            make_article(session, f"r{i}", f"Story {i}", datetime(2024, 3, 10, 20 - i), "Reuters")
        make_cluster(session, "c1", [f"r{i}" for i in range(count)])
        session.commit()

    def test_default_uses_configured_max(self, session) -> None:
        set_config(EngineConfig(representative=RepresentativeConfig(max_articles=4)))
        self._seed_single_publisher(session, 8)

        assert len(get_representative_articles(session, "c1")) == 4
        assert len(get_representative_articles(session, "c1", 10)) == 4

    def test_explicit_config(self, session) -> None:
        self._seed_single_publisher(session, 8)
        config = EngineConfig(representative=RepresentativeConfig(max_articles=5))

        selected = get_representative_articles(session, "c1", config=config)

        assert [a.title for a in selected] == [f"Story {i}" for i in range(5)]
        assert len(get_representative_articles(session, "c1")) == 6

    def test_unknown_cluster_is_empty(self, session) -> None:
        assert get_representative_articles(session, "missing") == []

    def test_storage_failure(self) -> None:
        session = MagicMock()
        session.execute.side_effect = SQLAlchemyError("down")
        with pytest.raises(StorageError, match="Failed to load cluster memberships"):
            get_representative_articles(session, "fed")


class TestHasEnoughForDraft:
    def test_threshold(self) -> None:
        assert MIN_DRAFT_ARTICLES == 3
        assert has_enough_for_draft([1, 2, 3]) is True
        assert has_enough_for_draft([1, 2]) is False
