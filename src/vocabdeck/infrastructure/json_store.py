"""
JSON deck repository, the infrastructure adapter for a local data directory.

Layout:
    <data_dir>/state.json        deck names (in creation order) + current deck
    <data_dir>/decks/<file>.json one deck document per deck
"""

import hashlib
import json
import logging
from pathlib import Path
from typing import Any

from vocabdeck.application.deck_service import create_example_deck
from vocabdeck.application.id_service import assign_card_ids
from vocabdeck.application.utils.text import safe_filename
from vocabdeck.domain.errors import DeckFormatError
from vocabdeck.domain.models import Deck
from vocabdeck.domain.ports import DeckRepository

from .schema import deck_from_document, deck_to_document

logger = logging.getLogger(__name__)


class JsonDeckRepository(DeckRepository):
    """
    Stores decks as JSON files.

    Unreadable state or deck files are logged and treated as absent.
    """

    def __init__(self, data_dir: Path):
        self.data_dir = data_dir
        self.decks_dir = data_dir / "decks"
        self.state_path = data_dir / "state.json"
        self._state = self._load_state()

    # ---------- State ----------

    def _load_state(self) -> dict[str, Any]:
        state: dict[str, Any] = {"deckNames": [], "currentDeckName": None}
        if not self.state_path.exists():
            return state
        try:
            parsed = json.loads(self.state_path.read_text(encoding="utf-8"))
            if isinstance(parsed, dict):
                state.update(parsed)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to parse {self.state_path}, using defaults: {e}")
        if not isinstance(state.get("deckNames"), list):
            state["deckNames"] = []
        return state

    def _save_state(self) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.state_path.write_text(json.dumps(self._state, indent=2), encoding="utf-8")

    def ensure_initialized(self) -> None:
        """On first launch, create the example deck and open it."""
        if self._state["deckNames"]:
            return
        example = create_example_deck()
        self.save(example)
        self.set_current(example.name)
        logger.info(f"Created example deck '{example.name}'")

    # ---------- DeckRepository ----------

    def deck_path(self, name: str) -> Path:
        # Hash suffix keeps names that sanitize alike ("a b", "a_b") apart
        digest = hashlib.sha1(name.encode("utf-8")).hexdigest()[:8]
        return self.decks_dir / f"{safe_filename(name)}-{digest}.json"

    def list_names(self) -> list[str]:
        return list(self._state["deckNames"])

    def load(self, name: str) -> Deck | None:
        path = self.deck_path(name)
        if not path.exists():
            return None
        try:
            deck = deck_from_document(json.loads(path.read_text(encoding="utf-8")))
        except (OSError, json.JSONDecodeError, DeckFormatError) as e:
            logger.warning(f"Failed to parse deck '{name}': {e}")
            return None
        if assign_card_ids(deck):
            self.save(deck)
        return deck

    def save(self, deck: Deck) -> None:
        self.decks_dir.mkdir(parents=True, exist_ok=True)
        self.deck_path(deck.name).write_text(
            json.dumps(deck_to_document(deck), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        if deck.name not in self._state["deckNames"]:
            self._state["deckNames"].append(deck.name)
            self._save_state()
        logger.debug(f"Saved deck '{deck.name}' ({len(deck.cards)} cards)")

    def delete(self, name: str) -> bool:
        if name not in self._state["deckNames"]:
            return False
        self.deck_path(name).unlink(missing_ok=True)
        self._state["deckNames"] = [n for n in self._state["deckNames"] if n != name]
        if self._state.get("currentDeckName") == name:
            self._state["currentDeckName"] = None
        self._save_state()
        logger.info(f"Deleted deck '{name}'")
        return True

    def get_current(self) -> str | None:
        return self._state.get("currentDeckName")

    def set_current(self, name: str | None) -> None:
        self._state["currentDeckName"] = name
        self._save_state()
