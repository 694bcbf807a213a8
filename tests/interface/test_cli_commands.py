"""Tests for CLI commands: review, queue, stats, readiness, streak, mastery, config."""

import json
import re
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from retain.interface.cli import app

runner = CliRunner()

NOW = "2026-03-15T12:00:00+00:00"


def strip_ansi(text):
    ansi_escape = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")
    return ansi_escape.sub("", text)


@pytest.fixture(autouse=True)
def isolated_config(mock_home, monkeypatch):
    for key in ("RETAIN_DECK_PATH", "RETAIN_MAX_NEW", "RETAIN_MAX_REVIEW", "RETAIN_SEED"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def deck(tmp_path):
    path = tmp_path / "deck.json"
    path.write_text(
        json.dumps(
            {
                "cards": [
                    {
                        "id": "overdue",
                        "question": "Explain CAP",
                        "srsData": {
                            "easinessFactor": 2.5,
                            "repetitionCount": 3,
                            "interval": 10,
                            "nextReviewDate": "2026-03-13T12:00:00Z",
                            "lastReviewDate": "2026-03-14T08:00:00Z",
                            "reviewHistory": [
                                {"date": "2026-03-13T08:00:00Z", "rating": 4, "intervalAtReview": 6},
                                {"date": "2026-03-14T08:00:00Z", "rating": 5, "intervalAtReview": 6},
                            ],
                        },
                    },
                    {
                        "id": "mastered",
                        "srsData": {
                            "easinessFactor": 2.7,
                            "repetitionCount": 5,
                            "interval": 40,
                            "nextReviewDate": "2026-04-20T12:00:00Z",
                            "lastReviewDate": None,
                            "reviewHistory": [],
                        },
                    },
                    {"id": "new"},
                ]
            }
        )
    )
    return path


# --- Help ---


def test_cli_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    output = strip_ansi(result.stdout)
    assert "SM-2 spaced-repetition scheduler" in output
    for command in ("review", "queue", "stats", "readiness", "streak", "mastery", "config"):
        assert command in output


# --- Review ---


def test_review_new_card(deck):
    result = runner.invoke(app, ["review", "new", "5", str(deck), "--now", NOW])

    assert result.exit_code == 0, result.output
    assert "new: next review in 1 day" in result.stdout
    stored = json.loads(deck.read_text())["cards"][2]["srsData"]
    assert stored["repetitionCount"] == 1
    assert stored["nextReviewDate"].startswith("2026-03-16T12:00:00")


def test_review_keeps_other_fields(deck):
    result = runner.invoke(app, ["review", "overdue", "2", str(deck), "--now", NOW])

    assert result.exit_code == 0, result.output
    first = json.loads(deck.read_text())["cards"][0]
    assert first["question"] == "Explain CAP"
    assert first["srsData"]["interval"] == 1
    assert len(first["srsData"]["reviewHistory"]) == 3


def test_review_invalid_rating(deck):
    before = deck.read_text()

    result = runner.invoke(app, ["review", "new", "9", str(deck), "--now", NOW])

    assert result.exit_code == 2
    assert "Rejected" in result.output
    assert deck.read_text() == before


def test_review_unknown_card(deck):
    result = runner.invoke(app, ["review", "missing", "4", str(deck), "--now", NOW])

    assert result.exit_code == 1
    assert "Card not found: missing" in result.output


def test_review_bad_timestamp(deck):
    result = runner.invoke(app, ["review", "new", "4", str(deck), "--now", "yesterday"])
    assert result.exit_code == 2


def test_missing_deck_path():
    result = runner.invoke(app, ["stats"])

    assert result.exit_code == 2
    assert "No deck given" in result.output


def test_corrupt_deck(tmp_path):
    path = tmp_path / "deck.json"
    path.write_text("[")

    result = runner.invoke(app, ["stats", str(path)])

    assert result.exit_code == 1


# --- Queue ---


def test_queue_json(deck):
    result = runner.invoke(app, ["queue", str(deck), "--now", NOW, "--seed", "1", "--json"])

    assert result.exit_code == 0, result.output
    queue = json.loads(result.stdout)
    assert [item["id"] for item in queue] == ["overdue", "new"]
    assert queue[0]["daysUntilReview"] == -2
    assert queue[0]["mastery"] == "reviewing"
    assert queue[1]["new"] is True


def test_queue_text(deck):
    result = runner.invoke(app, ["queue", str(deck), "--now", NOW, "--max-new", "0"])

    assert result.exit_code == 0, result.output
    output = strip_ansi(result.stdout)
    assert "1. overdue  [reviewing] overdue 2d" in output
    assert "[new]" not in output


def test_queue_uses_config_deck(deck, mock_home):
    cfg = mock_home / ".config/retain/config.toml"
    cfg.parent.mkdir(parents=True)
    cfg.write_text(f'deck_path = "{deck}"\nmax_new = 0\n')

    result = runner.invoke(app, ["queue", "--now", NOW, "--json"])

    assert result.exit_code == 0, result.output
    assert [item["id"] for item in json.loads(result.stdout)] == ["overdue"]


def test_queue_empty(tmp_path):
    path = tmp_path / "deck.json"
    path.write_text(json.dumps({"cards": []}))

    result = runner.invoke(app, ["queue", str(path), "--now", NOW])

    assert result.exit_code == 0
    assert "Nothing to study." in result.stdout


# --- Stats / readiness / streak / mastery ---


def test_stats_json(deck):
    result = runner.invoke(app, ["stats", str(deck), "--now", NOW, "--json"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == {
        "total": 3,
        "new": 1,
        "learning": 0,
        "reviewing": 1,
        "mastered": 1,
        "due_today": 2,
        "overdue": 1,
    }


def test_stats_text(deck):
    result = runner.invoke(app, ["stats", str(deck), "--now", NOW])

    assert result.exit_code == 0
    output = strip_ansi(result.stdout)
    assert "Total: 3" in output
    assert "Overdue: 1" in output


def test_readiness(deck):
    result = runner.invoke(app, ["readiness", str(deck), "--now", NOW])

    assert result.exit_code == 0, result.output
    # (60 + 100 + 10) / 3 = 56.67
    assert "Readiness: 57/100" in result.stdout


def test_streak_json(deck):
    result = runner.invoke(app, ["streak", str(deck), "--now", NOW, "--json"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == {"current": 2, "longest": 2}


def test_mastery_level_filter(deck):
    result = runner.invoke(app, ["mastery", str(deck), "--level", "mastered"])

    assert result.exit_code == 0, result.output
    output = strip_ansi(result.stdout)
    assert "mastered (1)" in output
    assert "mastered  interval 1 month" in output
    assert "reviewing" not in output


# --- Config ---


@patch("retain.interface._common.resolve_config")
def test_config_show_command(mock_resolve_config):
    """Test config show command displays JSON."""
    mock_config = MagicMock()
    mock_config.model_dump.return_value = {
        "deck_path": Path("/tmp/deck.json"),
        "max_new": 10,
    }
    mock_resolve_config.return_value = mock_config

    result = runner.invoke(app, ["config", "show"])

    assert result.exit_code == 0
    output_data = json.loads(result.stdout)
    assert output_data["deck_path"] == str(Path("/tmp/deck.json"))
    assert output_data["max_new"] == 10


def test_invalid_env_config(deck, monkeypatch):
    monkeypatch.setenv("RETAIN_MAX_NEW", "abc")

    result = runner.invoke(app, ["queue", str(deck), "--now", NOW])

    assert result.exit_code == 2
    assert "Invalid configuration" in result.output


def test_invalid_toml_config(deck, mock_home):
    cfg = mock_home / ".config/retain/config.toml"
    cfg.parent.mkdir(parents=True)
    cfg.write_text("max_new = [\n")

    result = runner.invoke(app, ["stats", str(deck)])

    assert result.exit_code == 2
    assert "Invalid configuration" in result.output


# --- Study sessions ---


def test_study_session_is_recorded(deck):
    result = runner.invoke(
        app, ["study", str(deck), "--now", NOW, "--seed", "1"], input="4\n5\n"
    )

    assert result.exit_code == 0, result.output
    assert "daily session: 2 cards" in result.output
    assert "Reviewed 2/2, average rating 4.50" in result.output
    # Reviews on 3/13 and 3/14 are in the card history, not in sessions
    assert "Current streak: 1  Longest: 1" in result.output

    cards = {c["id"]: c for c in json.loads(deck.read_text())["cards"]}
    assert cards["overdue"]["srsData"]["repetitionCount"] == 4
    assert cards["new"]["srsData"]["repetitionCount"] == 1

    stored = json.loads((deck.parent / "deck.sessions.json").read_text())
    assert stored["sessions"][0]["cardsReviewed"] == 2
    assert stored["sessions"][0]["ratings"]["4"] == 1
    assert stored["progress"]["default"]["sessionsCompleted"] == 1


def test_study_stop_early(deck):
    result = runner.invoke(app, ["study", str(deck), "--now", NOW], input="x\n3\nq\n")

    assert result.exit_code == 0, result.output
    assert "Enter a rating from 0 to 5" in result.output
    assert "Reviewed 1/2" in result.output
    assert "srsData" not in json.loads(deck.read_text())["cards"][2]


def test_study_application_mode_needs_id(deck):
    result = runner.invoke(app, ["study", str(deck), "--mode", "application", "--now", NOW])

    assert result.exit_code == 2
    assert "application id" in result.output


def test_progress_and_sessions(deck):
    runner.invoke(app, ["study", str(deck), "--now", NOW], input="5\n5\n")
    next_day = "2026-03-16T13:00:00+00:00"
    runner.invoke(app, ["study", str(deck), "--mode", "all-due", "--now", next_day], input="3\n")

    result = runner.invoke(app, ["progress", str(deck), "--json"])
    assert result.exit_code == 0, result.output
    summary = json.loads(result.stdout)
    assert summary["sessionsCompleted"] == 2
    assert summary["totalReviews"] == 3
    assert summary["currentStreak"] == 2

    result = runner.invoke(app, ["sessions", str(deck)])
    assert result.exit_code == 0, result.output
    lines = strip_ansi(result.stdout).splitlines()
    assert lines[0].startswith("2026-03-16 13:00  all-due")
    assert "2/2 reviewed" in lines[1]


def test_sessions_empty(deck):
    result = runner.invoke(app, ["sessions", str(deck)])

    assert result.exit_code == 0
    assert "No sessions recorded." in result.stdout
