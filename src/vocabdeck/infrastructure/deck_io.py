"""
Deck file import/export.

Supported formats, picked by file suffix:
- .json: camelCase deck document
- .yaml/.yml: same document as YAML
- .txt: one tab-separated 'word<TAB>translation' line per card (export only;
  text import goes through deck_service.deck_from_text)
"""

import json
import logging
from pathlib import Path
from typing import Any, Literal

import yaml  # type: ignore

from vocabdeck.application.utils.text import format_card_line
from vocabdeck.domain.errors import DeckFormatError
from vocabdeck.domain.models import Deck

from .schema import deck_from_document, deck_to_document

logger = logging.getLogger(__name__)

ExportFormat = Literal["json", "yaml", "txt"]

_SUFFIX_FORMATS: dict[str, ExportFormat] = {
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".txt": "txt",
}


def detect_format(path: Path) -> ExportFormat:
    fmt = _SUFFIX_FORMATS.get(path.suffix.lower())
    if fmt is None:
        raise DeckFormatError(f"Unsupported deck file type: '{path.suffix}'")
    return fmt


def parse_deck_text(text: str, fmt: ExportFormat) -> Deck:
    """Parse a JSON or YAML deck document."""
    try:
        if fmt == "json":
            data: Any = json.loads(text)
        elif fmt == "yaml":
            data = yaml.safe_load(text)
        else:
            raise DeckFormatError("Plain text files hold cards, not decks.")
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise DeckFormatError(f"Failed to parse deck file: {e}") from e
    return deck_from_document(data)


def read_deck_file(path: Path) -> Deck:
    return parse_deck_text(path.read_text(encoding="utf-8"), detect_format(path))


def render_deck(deck: Deck, fmt: ExportFormat) -> str:
    if fmt == "json":
        return json.dumps(deck_to_document(deck), indent=2, ensure_ascii=False) + "\n"
    if fmt == "yaml":
        return yaml.safe_dump(
            deck_to_document(deck), sort_keys=False, allow_unicode=True
        )
    return "".join(format_card_line(c.word, c.translation) + "\n" for c in deck.cards)


def write_deck_file(deck: Deck, path: Path, fmt: ExportFormat | None = None) -> Path:
    fmt = fmt or detect_format(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_deck(deck, fmt), encoding="utf-8")
    logger.info(f"Exported '{deck.name}' ({len(deck.cards)} cards) to {path}")
    return path
