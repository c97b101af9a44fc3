"""Tests for CLI commands: help, review, stats, extend, settings, reset and config."""

import json
import re
from datetime import date, timedelta

import pytest
from typer.testing import CliRunner

from vocabdeck.application.deck_service import create_empty_deck
from vocabdeck.domain.models import Card, LearningMode, SessionStatus
from vocabdeck.infrastructure.json_store import JsonDeckRepository
from vocabdeck.interface.cli import app

runner = CliRunner()

EXAMPLE = "Spanish Basics (Example)"


def strip_ansi(text):
    ansi_escape = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")
    return ansi_escape.sub("", text)


@pytest.fixture
def repo(data_dir):
    repo = JsonDeckRepository(data_dir)
    repo.ensure_initialized()
    return repo


@pytest.fixture
def small_deck(repo):
    deck = create_empty_deck("Small", daily_limit=2)
    deck.cards = [Card(word=f"w{i}", translation=f"t{i}") for i in range(3)]
    repo.save(deck)
    repo.set_current("Small")
    return deck


# --- Help ---


def test_cli_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    output = strip_ansi(result.stdout)
    assert "vocabdeck: daily word/translation review" in output
    assert "review" in output
    assert "decks" in output
    assert "cards" in output


# --- Stats ---


def test_stats_first_launch_uses_example_deck(data_dir):
    result = runner.invoke(app, ["stats", "--json"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data == {"deck": EXAMPLE, "mode": "simple", "total": 12, "finished": 0, "to_review": 12}


def test_stats_spaced_deck(repo):
    deck = create_empty_deck("Spaced", learning_mode=LearningMode.SPACED)
    deck.cards = [
        Card(word="a", translation="1"),
        Card(word="b", translation="2", due_date=date.today() + timedelta(days=3)),
    ]
    repo.save(deck)

    result = runner.invoke(app, ["stats", "--deck", "Spaced"])

    assert result.exit_code == 0
    assert "Due: 1  Upcoming: 1  Total: 2" in result.stdout


def test_stats_missing_deck(repo):
    result = runner.invoke(app, ["stats", "--deck", "Nope"])
    assert result.exit_code == 1
    assert "Deck 'Nope' not found." in result.stdout


# --- Review ---


def test_review_end_to_end(repo, small_deck):
    # reveal, rate 'remembered' twice
    result = runner.invoke(app, ["review", "--seed", "3"], input="\n2\n\nr\n")

    assert result.exit_code == 0, result.stdout
    assert "Session complete!" in result.stdout
    assert "To review: 1  Finished: 2  Total: 3" in result.stdout

    deck = repo.load("Small")
    assert deck.cards_reviewed_today == 2
    assert deck.last_session_date == date.today()
    assert sum(c.session_status == SessionStatus.FINISHED for c in deck.cards) == 2


def test_review_undo(repo, small_deck):
    # rate, undo, rate forgot, quit
    result = runner.invoke(app, ["review"], input="\n2\n\nu\n\n1\n\nq\n")

    assert result.exit_code == 0, result.stdout
    assert "Last rating undone." in result.stdout
    assert "Progress saved." in result.stdout

    deck = repo.load("Small")
    assert deck.cards_reviewed_today == 1
    assert all(c.session_status == SessionStatus.TO_REVIEW for c in deck.cards)


def test_review_nothing_to_undo_and_bad_choice(repo, small_deck):
    result = runner.invoke(app, ["review"], input="\nu\nzzz\nq\n")
    assert result.exit_code == 0
    assert "Nothing to undo." in result.stdout
    assert "Unknown choice 'zzz'." in result.stdout


def test_review_spaced_deck(repo):
    deck = create_empty_deck("Spaced", learning_mode="spaced")
    deck.cards = [Card(word="a", translation="1")]
    repo.save(deck)

    result = runner.invoke(app, ["review", "-d", "Spaced"], input="\ngood\n")

    assert result.exit_code == 0, result.stdout
    card = repo.load("Spaced").cards[0]
    assert card.interval == 3
    assert card.due_date == date.today() + timedelta(days=3)


def test_review_when_limit_reached(repo, small_deck):
    small_deck.cards_reviewed_today = 2
    small_deck.last_session_date = date.today()
    repo.save(small_deck)

    result = runner.invoke(app, ["review"])

    assert result.exit_code == 0
    assert "Nothing to review right now." in result.stdout


# --- Extend ---


def test_extend(repo, small_deck):
    small_deck.cards_reviewed_today = 2
    small_deck.last_session_date = date.today()
    repo.save(small_deck)

    result = runner.invoke(app, ["extend", "1"])

    assert result.exit_code == 0
    assert "Session extended by 1 card(s)." in result.stdout
    assert "1 card(s) available now." in result.stdout
    deck = repo.load("Small")
    assert deck.session_extension == 1
    assert deck.daily_limit == 2


def test_extend_floors_amount(repo, small_deck):
    result = runner.invoke(app, ["extend", "0"])
    assert result.exit_code == 0
    assert repo.load("Small").session_extension == 1


# --- Settings / reset ---


def test_settings_update(repo, small_deck):
    result = runner.invoke(app, ["settings", "--mode", "spaced", "--limit", "900"])

    assert result.exit_code == 0
    assert "Settings saved." in result.stdout
    deck = repo.load("Small")
    assert deck.learning_mode == LearningMode.SPACED
    assert deck.daily_limit == 500


def test_settings_show_only(repo, small_deck):
    result = runner.invoke(app, ["settings"])
    assert result.exit_code == 0
    assert "Settings saved." not in result.stdout
    assert "Daily limit: 2" in result.stdout


def test_reset(repo, small_deck):
    small_deck.cards[0].session_status = SessionStatus.FINISHED
    repo.save(small_deck)

    result = runner.invoke(app, ["reset", "--force"])

    assert result.exit_code == 0
    assert all(c.session_status == SessionStatus.TO_REVIEW for c in repo.load("Small").cards)


def test_reset_declined(repo, small_deck):
    small_deck.cards[0].session_status = SessionStatus.FINISHED
    repo.save(small_deck)

    result = runner.invoke(app, ["reset"], input="n\n")

    assert result.exit_code == 1
    assert repo.load("Small").cards[0].session_status == SessionStatus.FINISHED


# --- Config ---


def test_config_show(data_dir):
    result = runner.invoke(app, ["config", "show"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["data_dir"] == str(data_dir.resolve())
    assert data["default_daily_limit"] == 5


def test_data_dir_option(tmp_path):
    target = tmp_path / "elsewhere"
    result = runner.invoke(app, ["--data-dir", str(target), "decks", "list"])
    assert result.exit_code == 0
    assert EXAMPLE in result.stdout
    assert (target / "state.json").exists()
