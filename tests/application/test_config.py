from pathlib import Path

import pytest
from pydantic import ValidationError

from vocabdeck.application.config import resolve_config


def test_defaults(mock_home):
    config = resolve_config()
    assert config.data_dir == mock_home / ".local/share/vocabdeck"
    assert config.default_daily_limit == 5
    assert config.default_learning_mode == "simple"
    assert config.default_extend_amount == 5
    assert config.seed is None


def test_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("VOCABDECK_DATA_DIR", str(tmp_path / "decks"))
    monkeypatch.setenv("VOCABDECK_DEFAULT_DAILY_LIMIT", "12")
    config = resolve_config()
    assert config.data_dir == (tmp_path / "decks").resolve()
    assert config.default_daily_limit == 12


def test_toml_file(mock_home):
    cfg = mock_home / ".config/vocabdeck/config.toml"
    cfg.parent.mkdir(parents=True)
    cfg.write_text('default_learning_mode = "spaced"\nseed = 7\n')

    config = resolve_config()

    assert config.default_learning_mode == "spaced"
    assert config.seed == 7


def test_env_beats_toml(mock_home, monkeypatch):
    cfg = mock_home / ".vocabdeck.toml"
    cfg.write_text("default_extend_amount = 3\n")
    monkeypatch.setenv("VOCABDECK_DEFAULT_EXTEND_AMOUNT", "9")

    assert resolve_config().default_extend_amount == 9


def test_cli_overrides_win_and_none_is_ignored(monkeypatch, tmp_path):
    monkeypatch.setenv("VOCABDECK_SEED", "1")
    config = resolve_config({"seed": 99, "data_dir": None, "verbose": 2})
    assert config.seed == 99
    assert config.verbose == 2
    assert isinstance(config.data_dir, Path)


def test_invalid_limit_rejected():
    with pytest.raises(ValidationError):
        resolve_config({"default_daily_limit": 0})
