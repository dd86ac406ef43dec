"""Unit tests for the feed refresh pipeline and its command line."""

import logging
import os
from unittest.mock import Mock, patch

import pytest

from informes_rss.config import Config
from informes_rss.errors import FetchError, MalformedFeedError
from informes_rss.feed_store import FeedStore
from informes_rss.models import Item
from informes_rss.pipeline import USAGE, main, run

LINK = "https://example.gov.br/informe"


def scraper_returning(*pairs):
    scraper = Mock()
    scraper.fetch.return_value = [
        Item(title=title, description=description, link=LINK)
        for title, description in pairs
    ]
    return scraper


@pytest.fixture
def config(tmp_path):
    env = {
        "INFORMES_RUN_LOG": str(tmp_path / "rss.upd"),
        "INFORMES_MAX_ITEMS": "3",
    }
    with patch.dict(os.environ, env, clear=True):
        yield Config()


class TestRun:
    """Unit tests for run()."""

    def test_first_run_bootstraps_feed(self, tmp_path, config):
        feed_path = tmp_path / "feed.xml"

        metrics = run(str(feed_path), config, scraper_returning(("A", "x"), ("B", "y")))

        items = FeedStore(feed_path).load()
        assert [(i.title, i.description) for i in items] == [("A", "x"), ("B", "y")]
        assert all(item.identifier for item in items)
        assert metrics["bootstrap"] is True
        assert metrics["items_persisted"] == 2
        log_lines = (tmp_path / "rss.upd").read_text(encoding="utf-8").splitlines()
        assert log_lines == [f"A {items[0].identifier}", f"B {items[1].identifier}"]

    def test_second_run_updates_changed_items_only(self, tmp_path, config):
        feed_path = str(tmp_path / "feed.xml")
        run(feed_path, config, scraper_returning(("A", "x"), ("B", "y")))
        before = FeedStore(feed_path).load()

        metrics = run(feed_path, config, scraper_returning(("A", "x"), ("B", "y2")))

        after = FeedStore(feed_path).load()
        assert after[0] == before[0]
        assert after[1].description == "y2"
        assert after[1].identifier != before[1].identifier
        assert metrics["items_changed"] == 1
        log = (tmp_path / "rss.upd").read_text(encoding="utf-8")
        assert log == f"B {after[1].identifier}\n"

    def test_unchanged_run_empties_log(self, tmp_path, config):
        feed_path = str(tmp_path / "feed.xml")
        run(feed_path, config, scraper_returning(("A", "x")))

        metrics = run(feed_path, config, scraper_returning(("A", "x")))

        assert metrics["items_changed"] == 0
        assert (tmp_path / "rss.upd").read_text() == ""

    def test_bound_rejects_new_titles(self, tmp_path, config):
        feed_path = str(tmp_path / "feed.xml")
        run(feed_path, config, scraper_returning(("A", "1"), ("B", "2"), ("C", "3")))

        metrics = run(feed_path, config, scraper_returning(("D", "4")))

        assert [i.title for i in FeedStore(feed_path).load()] == ["A", "B", "C"]
        assert metrics["items_rejected"] == 1
        assert (tmp_path / "rss.upd").read_text() == "D -\n"

    def test_channel_has_last_build_date(self, tmp_path, config):
        feed_path = tmp_path / "feed.xml"

        run(str(feed_path), config, scraper_returning(("A", "x")))

        assert "<lastBuildDate>" in feed_path.read_text(encoding="utf-8")

    def test_fetch_error_leaves_feed_untouched(self, tmp_path, config):
        feed_path = tmp_path / "feed.xml"
        run(str(feed_path), config, scraper_returning(("A", "x")))
        before = feed_path.read_bytes()
        scraper = Mock()
        scraper.fetch.side_effect = FetchError("unreachable")

        with pytest.raises(FetchError):
            run(str(feed_path), config, scraper)

        assert feed_path.read_bytes() == before

    def test_failed_run_logs_execution_end(self, tmp_path, config, caplog):
        scraper = Mock()
        scraper.fetch.side_effect = FetchError("unreachable")

        with caplog.at_level(logging.INFO, logger="informes_rss"):
            with pytest.raises(FetchError):
                run(str(tmp_path / "feed.xml"), config, scraper, execution_id="exec_9")

        end = caplog.records[-1]
        assert end.getMessage() == "Completed main execution"
        assert end.levelno == logging.ERROR
        assert end.execution_success is False
        assert end.execution_id == "exec_9"
        assert end.error == "unreachable"

    def test_successful_run_logs_execution_end(self, tmp_path, config, caplog):
        with caplog.at_level(logging.INFO, logger="informes_rss"):
            run(str(tmp_path / "feed.xml"), config, scraper_returning(("A", "x")))

        end = caplog.records[-1]
        assert end.getMessage() == "Completed main execution"
        assert end.execution_success is True

    def test_corrupt_feed_is_fatal_and_kept(self, tmp_path, config):
        feed_path = tmp_path / "feed.xml"
        feed_path.write_text("<rss><channel>", encoding="utf-8")

        with pytest.raises(MalformedFeedError):
            run(str(feed_path), config, scraper_returning(("A", "x")))

        assert feed_path.read_text(encoding="utf-8") == "<rss><channel>"
        assert not (tmp_path / "rss.upd").exists()

    def test_builds_scraper_from_config(self, tmp_path, config):
        with patch("informes_rss.pipeline.InformeScraper") as mock_scraper_class:
            mock_scraper_class.return_value = scraper_returning(("A", "x"))

            run(str(tmp_path / "feed.xml"), config)

        kwargs = mock_scraper_class.call_args.kwargs
        assert kwargs["source_url"] == config.source_url
        assert kwargs["timeout"] == config.timeout


class TestMain:
    """Unit tests for the command-line entry point."""

    @pytest.mark.parametrize("argv", [[], ["a.xml", "b.xml"]])
    def test_wrong_arguments_print_usage_and_succeed(self, argv, capsys):
        with patch("informes_rss.pipeline.run") as mock_run:
            exit_code = main(argv)

        assert exit_code == 0
        assert USAGE in capsys.readouterr().out
        mock_run.assert_not_called()

    def test_success_returns_zero(self, tmp_path):
        with (
            patch("informes_rss.pipeline.setup_structured_logging"),
            patch("informes_rss.pipeline.run") as mock_run,
        ):
            exit_code = main([str(tmp_path / "feed.xml")])

        assert exit_code == 0
        assert mock_run.call_args.args[0] == str(tmp_path / "feed.xml")

    def test_processing_error_returns_one(self, tmp_path, caplog):
        with (
            patch("informes_rss.pipeline.setup_structured_logging"),
            patch("informes_rss.pipeline.run", side_effect=FetchError("unreachable")),
        ):
            exit_code = main([str(tmp_path / "feed.xml")])

        assert exit_code == 1
        assert any(
            record.levelname == "CRITICAL" and "unreachable" in record.getMessage()
            for record in caplog.records
        )

    def test_invalid_configuration_returns_one(self, tmp_path):
        with patch.dict(os.environ, {"INFORMES_MAX_ITEMS": "zero"}, clear=True):
            exit_code = main([str(tmp_path / "feed.xml")])

        assert exit_code == 1
