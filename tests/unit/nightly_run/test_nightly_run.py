"""Tests for nightly_run.cli module."""

from contextlib import contextmanager
from datetime import date, datetime
from unittest.mock import MagicMock, patch

from factories import make_article
from nightly_run.cli import main, parse_nightly_run_args
from rank_clusters.models import RankResult
from rank_clusters.rank_clusters import rank_window


class TestParseNightlyRunArgs:
    def test_window_date(self) -> None:
        args = parse_nightly_run_args(["--window-date", "2024-03-10"])
        assert args.window_date == date(2024, 3, 10)
        assert args.load_local is False


class TestMain:
    def test_clusters_then_ranks_same_window(self, session) -> None:
        make_article(session, "a1", "Fed raises rates", datetime(2024, 3, 10, 22), "Reuters")
        make_article(session, "a2", "Federal Reserve raises interest rates", datetime(2024, 3, 10, 21), "AP")
        session.commit()

        @contextmanager
        def fake_session():
            yield session

        rank_spy = MagicMock(wraps=rank_window)
        with patch("nightly_run.cli.get_session", fake_session), patch(
            "nightly_run.cli.rank_window", rank_spy
        ), patch("nightly_run.cli.export_run_records") as export:
            main(["--window-date", "2024-03-10"])

        assert rank_spy.call_args.args[1] == date(2024, 3, 10)
        result = export.call_args_list[1].args[0][0]
        assert isinstance(result, RankResult)
        assert result.candidates_saved == 1
        assert result.top[0].label == "Federal Reserve raises interest rates"
