"""Deck and card management: creation, editing, text import and settings."""

import logging
from pathlib import Path

from vocabdeck.application.utils.text import parse_card_lines
from vocabdeck.domain.constants import (
    DEFAULT_DAILY_LIMIT,
    DEFAULT_EASE_FACTOR,
    DEFAULT_IMPORTED_DECK_NAME,
    DEFAULT_INTERVAL,
    DEFAULT_LEARNING_MODE,
    EXAMPLE_DECK_NAME,
    IMPORTED_SUFFIX,
    MAX_DAILY_LIMIT,
)
from vocabdeck.domain.errors import CardValidationError
from vocabdeck.domain.models import Card, Deck, LearningMode, SessionStatus

logger = logging.getLogger(__name__)

_EXAMPLE_CARDS = [
    ("Hola", "Hello"),
    ("Adiós", "Goodbye"),
    ("Gracias", "Thank you"),
    ("Por favor", "Please"),
    ("Sí", "Yes"),
    ("Lo siento", "I am sorry"),
    ("Gato", "Cat"),
    ("Perro", "Dog"),
    ("Agua", "Water"),
    ("Pan", "Bread"),
    ("Casa", "House"),
    ("Libro", "Book"),
]


def create_empty_deck(
    name: str,
    daily_limit: int = DEFAULT_DAILY_LIMIT,
    learning_mode: LearningMode | str = DEFAULT_LEARNING_MODE,
) -> Deck:
    name = name.strip()
    if not name:
        raise ValueError("Deck name must not be empty.")
    return Deck(name=name, daily_limit=daily_limit, learning_mode=LearningMode(learning_mode))


def create_example_deck() -> Deck:
    """The starter deck created on first launch."""
    deck = create_empty_deck(EXAMPLE_DECK_NAME)
    deck.cards = [Card(word=w, translation=t) for w, t in _EXAMPLE_CARDS]
    return deck


def unique_deck_name(name: str, existing: list[str]) -> str:
    """Append ' (imported)' until the name no longer collides."""
    while name in existing:
        name = name + IMPORTED_SUFFIX
    return name


# ---------- Cards ----------


def _clean_pair(word: str, translation: str) -> tuple[str, str]:
    word, translation = word.strip(), translation.strip()
    if not word or not translation:
        raise CardValidationError("Please enter both a word and a translation.")
    return word, translation


def find_card(deck: Deck, card_id: str) -> Card | None:
    return next((c for c in deck.cards if c.id == card_id), None)


def add_card(deck: Deck, word: str, translation: str) -> Card:
    word, translation = _clean_pair(word, translation)
    card = Card(word=word, translation=translation)
    deck.cards.append(card)
    return card


def edit_card(deck: Deck, card_id: str, word: str, translation: str) -> Card | None:
    """Change a card's text. Scheduling fields are left alone."""
    word, translation = _clean_pair(word, translation)
    card = find_card(deck, card_id)
    if card is None:
        return None
    card.word = word
    card.translation = translation
    return card


def delete_card(deck: Deck, card_id: str) -> bool:
    card = find_card(deck, card_id)
    if card is None:
        return False
    deck.cards.remove(card)
    return True


def import_cards_from_text(deck: Deck, text: str) -> tuple[int, int]:
    """
    Append cards parsed from 'Word - Translation' or tab-separated lines.

    Returns:
        (added, skipped) line counts.
    """
    parsed = parse_card_lines(text)
    for word, translation in parsed.pairs:
        deck.cards.append(Card(word=word, translation=translation))

    if parsed.skipped:
        logger.debug(f"Skipped {len(parsed.skipped)} unparseable line(s) for '{deck.name}'")
    return len(parsed.pairs), len(parsed.skipped)


def deck_from_text(path: Path, text: str, existing: list[str]) -> tuple[Deck, int]:
    """
    Build a new deck from a text file. The file stem names the deck.

    Returns:
        (deck, skipped) where deck may have no cards.
    """
    name = path.stem.strip() or DEFAULT_IMPORTED_DECK_NAME
    deck = create_empty_deck(unique_deck_name(name, existing))
    _, skipped = import_cards_from_text(deck, text)
    return deck, skipped


# ---------- Settings ----------


def clamp_daily_limit(limit: int | None) -> int:
    if limit is None:
        return DEFAULT_DAILY_LIMIT
    return max(1, min(MAX_DAILY_LIMIT, limit))


def update_settings(
    deck: Deck,
    learning_mode: LearningMode | str | None = None,
    daily_limit: int | None = None,
) -> Deck:
    """
    Change the deck's mode and/or base daily limit.

    Card scheduling fields are never touched, so switching modes back and
    forth keeps spaced intervals intact. Callers must rebuild the queue.
    """
    if learning_mode is not None:
        deck.learning_mode = LearningMode(learning_mode)
    if daily_limit is not None:
        deck.daily_limit = clamp_daily_limit(daily_limit)
    return deck


def reset_progress(deck: Deck) -> None:
    """Send every card back to 'To Review' and clear all scheduling data."""
    for card in deck.cards:
        card.session_status = SessionStatus.TO_REVIEW
        card.due_date = None
        card.interval = DEFAULT_INTERVAL
        card.ease_factor = DEFAULT_EASE_FACTOR
    deck.cards_reviewed_today = 0
    deck.session_extension = 0
    deck.last_session_date = None
    logger.info(f"Reset {len(deck.cards)} card(s) in '{deck.name}'")
