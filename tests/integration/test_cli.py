"""
Integration tests for the quotie command line.
"""

import json
import logging

import pytest

from Quotie import cli
from Quotie.logging_setup import LOGGER_NAMES


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    for name in LOGGER_NAMES:
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()


def _stored_quotes(quotie_env):
    data = json.loads((quotie_env / "group" / "quotes.json").read_text())
    return data["quotes"]


@pytest.mark.integration
class TestCli:
    """Run cli.main() against a temp environment."""

    def test_add_and_list(self, quotie_env, capsys):
        assert cli.main(["add", "Feelings are data.", "--author", "Esther Perel", "--color", "sky"]) == 0
        assert cli.main(["list", "--recent", "1"]) == 0
        out = capsys.readouterr().out
        assert "Feelings are data." in out

        stored = _stored_quotes(quotie_env)
        assert stored[-1]["author"] == "Esther Perel"
        assert stored[-1]["colorStyle"] == "sky"

    def test_add_parsed_line(self, quotie_env):
        assert cli.main(["add", "--parse", "Be here now. By Ram Dass. Book"]) == 0
        stored = _stored_quotes(quotie_env)[-1]
        assert (stored["text"], stored["author"], stored["source"]) == ("Be here now", "Ram Dass", "Book")

    def test_blank_add_fails(self, quotie_env):
        assert cli.main(["add", "   "]) == 1

    def test_favorite_by_prefix(self, quotie_env):
        cli.main(["add", "Fav me."])
        quote_id = _stored_quotes(quotie_env)[-1]["id"]
        assert cli.main(["favorite", quote_id[:12]]) == 0
        assert _stored_quotes(quotie_env)[-1]["isFavorite"] is True

    def test_unknown_id(self, quotie_env):
        assert cli.main(["delete", "no-such-id"]) == 1

    def test_status_and_widget(self, quotie_env, capsys):
        assert cli.main(["status"]) == 0
        assert cli.main(["widget", "--disable"]) == 0
        out = capsys.readouterr().out
        assert "Quotie Status" in out
        assert "No quote yet" in out

    def test_bad_config(self, quotie_env, monkeypatch):
        monkeypatch.setenv("QUOTIE_NOTIFICATIONS", "maybe")
        assert cli.main(["today"]) == 2

    def test_log_file_written(self, quotie_env):
        cli.main(["add", "Logged."])
        assert (quotie_env / "logs" / "quotie.log").exists()

    def test_nudge_status(self, quotie_env, capsys):
        assert cli.main(["nudge"]) == 0
        out = capsys.readouterr().out
        assert "Nudge: pending" in out
        assert "memmi.hungry.nudge" in out

    def test_debug_nudge_is_scheduled(self, quotie_env, capsys):
        assert cli.main(["nudge", "--test", "--seconds", "1"]) == 0
        pending = json.loads((quotie_env / "state" / "pending_notifications.json").read_text())
        assert "memmi.debug.test" in [r["identifier"] for r in pending["pending"]]

    def test_debug_nudge_denied(self, quotie_env, monkeypatch, capsys):
        monkeypatch.setenv("QUOTIE_NOTIFICATIONS", "denied")
        assert cli.main(["nudge", "--test"]) == 1
        assert "not permitted" in capsys.readouterr().out
