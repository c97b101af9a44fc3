import random
from datetime import date

import pytest

from vocabdeck.domain.models import Card, Deck, LearningMode, SessionStatus

TODAY = date(2024, 3, 15)


@pytest.fixture(autouse=True)
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Isolate config, logs and deck storage
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("VOCABDECK_DATA_DIR", raising=False)
    monkeypatch.delenv("VOCABDECK_SEED", raising=False)
    return home


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    d = tmp_path / "data"
    monkeypatch.setenv("VOCABDECK_DATA_DIR", str(d))
    return d


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def rng():
    return random.Random(1234)


def make_deck(
    n: int = 3,
    mode: LearningMode = LearningMode.SIMPLE,
    daily_limit: int = 5,
    last_session_date: date | None = TODAY,
    status: SessionStatus = SessionStatus.TO_REVIEW,
) -> Deck:
    return Deck(
        name="Test",
        cards=[Card(word=f"w{i}", translation=f"t{i}", session_status=status) for i in range(n)],
        learning_mode=mode,
        daily_limit=daily_limit,
        last_session_date=last_session_date,
    )


@pytest.fixture
def deck_factory():
    return make_deck
