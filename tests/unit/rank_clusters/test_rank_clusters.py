"""Tests for rank_clusters.rank_clusters module."""

from datetime import date, datetime
from unittest.mock import MagicMock

import pytest
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from common.config import EngineConfig, RankingConfig
from common.errors import InvalidWindowDateError, StorageError
from factories import WINDOW, make_article, make_candidates, make_cluster, make_source
from rank_clusters.rank_clusters import UNLABELED_CLUSTER, compute_score, rank_window, score_clusters
from rds_postgres.models import ClusterCandidate, StoryCluster

WINDOW_END = datetime(2024, 3, 11)


class TestComputeScore:
    def test_default_weights(self) -> None:
        assert compute_score(breadth=2, volume=3, recency=1, ranking=RankingConfig()) == 9.5

    def test_rounded_to_four_places(self) -> None:
        ranking = RankingConfig(breadth_weight=1 / 3, volume_weight=0.0, recency_weight=0.0)
        assert compute_score(1, 0, 0, ranking) == 0.3333


class TestScoreClusters:
    def _article(self, article_id, hour, publisher, title="T"):
        return {
            "id": article_id,
            "title": title,
            "publisher": publisher,
            "source_id": None,
            "published_at": datetime(2024, 3, 10, hour),
        }

    def test_signals_and_ordering(self) -> None:
        articles = {
            "a1": self._article("a1", 20, "Reuters"),
            "a2": self._article("a2", 19, "AP"),
            "a3": self._article("a3", 3, "AP"),
            "b1": self._article("b1", 2, "BBC"),
            "b2": self._article("b2", 1, "BBC"),
        }
        clusters = [{"id": "b", "label": "B story"}, {"id": "a", "label": " A story "}]
        memberships = [("a", "a1"), ("a", "a2"), ("a", "a3"), ("b", "b1"), ("b", "b2")]

        ranked = score_clusters(clusters, memberships, articles, {}, WINDOW_END)

        assert [r.cluster_id for r in ranked] == ["a", "b"]
        a = ranked[0]
        assert (a.label, a.volume, a.breadth, a.recency) == ("A story", 3, 2, 2)
        assert a.score == 2 * 3 + 3 + 2 * 0.5
        assert [(p.name, p.count) for p in a.top_publishers] == [("AP", 2), ("Reuters", 1)]

    def test_members_outside_window_not_counted(self) -> None:
        ranked = score_clusters(
            [{"id": "a", "label": "A"}],
            [("a", "a1"), ("a", "missing")],
            {"a1": self._article("a1", 10, "AP")},
            {},
            WINDOW_END,
        )
        assert ranked[0].volume == 1

    def test_recency_window_is_half_open(self) -> None:
        articles = {
            "start": self._article("start", 18, "AP"),
            "before": {**self._article("before", 17, "AP"), "published_at": datetime(2024, 3, 10, 17, 59, 59)},
        }
        ranked = score_clusters(
            [{"id": "a", "label": "A"}],
            [("a", "start"), ("a", "before")],
            articles,
            {},
            WINDOW_END,
        )
        assert (ranked[0].volume, ranked[0].recency) == (2, 1)

    def test_label_fallbacks(self) -> None:
        articles = {"a1": self._article("a1", 10, "AP", title="First title")}
        ranked = score_clusters(
            [{"id": "a", "label": "   "}, {"id": "b", "label": None}],
            [("a", "a1")],
            articles,
            {},
            WINDOW_END,
        )
        labels = {r.cluster_id: r.label for r in ranked}
        assert labels == {"a": "First title", "b": UNLABELED_CLUSTER}

    def test_ties_broken_by_volume(self) -> None:
        ranking = RankingConfig(breadth_weight=0.0, volume_weight=0.0, recency_weight=0.0)
        articles = {f"x{i}": self._article(f"x{i}", 1, "AP") for i in range(3)}
        ranked = score_clusters(
            [{"id": "small", "label": "S"}, {"id": "big", "label": "B"}],
            [("small", "x0"), ("big", "x1"), ("big", "x2")],
            articles,
            {},
            WINDOW_END,
            ranking,
        )
        assert [r.cluster_id for r in ranked] == ["big", "small"]

    def test_deterministic(self) -> None:
        articles = {f"x{i}": self._article(f"x{i}", i, f"P{i % 3}") for i in range(9)}
        clusters = [{"id": f"c{i}", "label": f"C{i}"} for i in range(3)]
        memberships = [(f"c{i % 3}", f"x{i}") for i in range(9)]
        first = score_clusters(clusters, memberships, articles, {}, WINDOW_END)
        second = score_clusters(clusters, memberships, articles, {}, WINDOW_END)
        assert first == second


class TestRankWindow:
    def _seed(self, session) -> None:
        make_source(session, "src-bbc", "BBC News")
        make_article(session, "a1", "Fed raises rates", datetime(2024, 3, 10, 22), "Reuters")
        make_article(session, "a2", "Federal Reserve raises rates", datetime(2024, 3, 10, 21), "AP")
        make_article(session, "a3", "Fed decision", datetime(2024, 3, 10, 5), None, source_id="src-bbc")
        make_article(session, "b1", "Bakery award", datetime(2024, 3, 10, 8), "Gazette")
        make_article(session, "c1", "Storm hits coast", datetime(2024, 3, 10, 23), "AP")
        make_article(session, "c2", "Storm damage", datetime(2024, 3, 11, 1), "AP")
        make_cluster(session, "fed", ["a1", "a2", "a3"], label="Fed raises rates", score=3.0)
        make_cluster(session, "bakery", ["b1"], label="Bakery award", score=1.0)
        make_cluster(session, "storm", ["c1", "c2"], label="Storm hits coast", score=2.0)
        session.commit()

    def test_scores_written_and_candidates_saved(self, session) -> None:
        self._seed(session)

        result = rank_window(session, "2024-03-10", config=EngineConfig())

        assert result.clusters_considered == 3
        assert result.candidates_saved == 3
        assert [(c.rank, c.cluster_id) for c in result.top] == [(1, "fed"), (2, "storm"), (3, "bakery")]
        fed = result.top[0]
        assert (fed.volume, fed.breadth, fed.recency, fed.score) == (3, 3, 2, 13.0)
        assert [p.name for p in fed.top_publishers] == ["Reuters", "AP", "BBC News"]
        storm = result.top[1]
        assert (storm.volume, storm.breadth, storm.recency, storm.score) == (1, 1, 1, 4.5)

        scores = dict(session.execute(select(StoryCluster.id, StoryCluster.score)).all())
        assert scores == {"fed": 13.0, "storm": 4.5, "bakery": 4.0}
        candidates = session.execute(
            select(ClusterCandidate.rank, ClusterCandidate.cluster_id).order_by(ClusterCandidate.rank)
        ).all()
        assert [tuple(row) for row in candidates] == [(1, "fed"), (2, "storm"), (3, "bakery")]

    def test_top_limit(self, session) -> None:
        self._seed(session)
        config = EngineConfig()
        config.ranking.top_limit = 2

        result = rank_window(session, WINDOW, config=config)

        assert result.clusters_considered == 3
        assert result.candidates_saved == 2
        assert len(session.execute(select(ClusterCandidate)).scalars().all()) == 2
        # every cluster still gets its score
        assert session.get(StoryCluster, "bakery").score == 4.0

    def test_window_edges(self, session) -> None:
        make_article(session, "e1", "Edge start", datetime(2024, 3, 10, 18), "AP")
        make_article(session, "e2", "Next day", datetime(2024, 3, 11), "Reuters")
        make_article(session, "e3", "Just before recency", datetime(2024, 3, 10, 17, 59, 59), "AP")
        make_cluster(session, "edge", ["e1", "e2", "e3"], label="Edge")
        session.commit()

        result = rank_window(session, WINDOW, config=EngineConfig())

        edge = result.top[0]
        assert (edge.volume, edge.breadth, edge.recency, edge.score) == (2, 1, 1, 5.5)

    def test_rerank_replaces_previous_candidates(self, session) -> None:
        self._seed(session)
        rank_window(session, WINDOW, config=EngineConfig())
        rank_window(session, WINDOW, config=EngineConfig())
        ranks = session.execute(select(ClusterCandidate.rank).order_by(ClusterCandidate.rank)).scalars().all()
        assert ranks == [1, 2, 3]

    def test_empty_window_clears_stale_candidates(self, session) -> None:
        self._seed(session)
        stale_day = date(2024, 3, 9)
        make_candidates(session, ["fed", "storm"], window_date=stale_day)
        session.commit()

        result = rank_window(session, stale_day, config=EngineConfig())

        assert result.clusters_considered == 0
        assert result.candidates_saved == 0
        assert result.top == []
        assert session.execute(
            select(ClusterCandidate).where(ClusterCandidate.window_date == stale_day)
        ).scalars().all() == []

    def test_other_windows_untouched(self, session) -> None:
        self._seed(session)
        make_cluster(session, "other", ["b1"], window_date=date(2024, 3, 9))
        make_candidates(session, ["other"], window_date=date(2024, 3, 9))
        session.commit()

        rank_window(session, WINDOW, config=EngineConfig())

        other = session.execute(
            select(ClusterCandidate.cluster_id).where(ClusterCandidate.window_date == date(2024, 3, 9))
        ).scalars().all()
        assert other == ["other"]

    def test_invalid_date(self) -> None:
        session = MagicMock()
        with pytest.raises(InvalidWindowDateError):
            rank_window(session, "2024-02-30", config=EngineConfig())
        session.execute.assert_not_called()

    def test_storage_failure(self) -> None:
        session = MagicMock()
        session.execute.side_effect = SQLAlchemyError("timeout")
        with pytest.raises(StorageError, match="Failed to load clusters"):
            rank_window(session, WINDOW, config=EngineConfig())
