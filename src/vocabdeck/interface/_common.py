"""Helpers shared by the CLI command modules."""

import logging
import random
from pathlib import Path
from typing import Any

import typer

from vocabdeck.application.config import AppConfig, resolve_config
from vocabdeck.application.factory import get_deck_repository
from vocabdeck.domain.models import Deck
from vocabdeck.domain.ports import DeckRepository

logger = logging.getLogger(__name__)


def _resolve_with_overrides(ctx: typer.Context | None = None, **overrides: Any) -> AppConfig:
    """Resolve config, layering global options from the root callback under ``overrides``."""
    merged: dict[str, Any] = {}
    if ctx is not None and ctx.obj:
        merged.update(ctx.obj.get("overrides", {}))
    merged.update(overrides)

    config = resolve_config(merged)
    level = logging.DEBUG if config.verbose >= 2 else logging.INFO
    logging.getLogger("vocabdeck").setLevel(level if config.verbose else logging.WARNING)
    return config


def _open_repository(ctx: typer.Context) -> tuple[AppConfig, DeckRepository]:
    config = _resolve_with_overrides(ctx)
    return config, get_deck_repository(config)


def _require_deck(repo: DeckRepository, name: str | None) -> Deck:
    """Load the named deck, or the current one. Exits with code 1 if missing."""
    name = name or repo.get_current()
    if not name:
        typer.secho("No deck selected. Use 'vocabdeck decks use NAME'.", fg="red")
        raise typer.Exit(1)

    deck = repo.load(name)
    if deck is None:
        typer.secho(f"Deck '{name}' not found.", fg="red")
        raise typer.Exit(1)
    return deck


def _make_rng(config: AppConfig) -> random.Random:
    return random.Random(config.seed) if config.seed is not None else random.Random()


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        typer.secho(f"Could not read {path}: {e}", fg="red")
        raise typer.Exit(1)
