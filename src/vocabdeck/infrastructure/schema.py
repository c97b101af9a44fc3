"""
On-disk deck schema.

Deck documents are written with camelCase keys. Reading accepts camelCase
or snake_case keys, and fills in anything an older file leaves out.
"""

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from vocabdeck.domain.constants import (
    DEFAULT_DAILY_LIMIT,
    DEFAULT_EASE_FACTOR,
    DEFAULT_INTERVAL,
    MIN_EASE_FACTOR,
)
from vocabdeck.domain.errors import DeckFormatError
from vocabdeck.domain.models import Card, Deck, LearningMode, SessionStatus


class _Record(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class CardRecord(_Record):
    id: str | None = None
    word: str = ""
    translation: str = ""
    session_status: SessionStatus = SessionStatus.TO_REVIEW
    due_date: date | None = None
    interval: int = DEFAULT_INTERVAL
    ease_factor: float = DEFAULT_EASE_FACTOR

    @field_validator("word", "translation", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str:
        return "" if v is None else str(v).strip()

    @field_validator("session_status", mode="before")
    @classmethod
    def _status(cls, v: Any) -> Any:
        return v or SessionStatus.TO_REVIEW

    @field_validator("due_date", mode="before")
    @classmethod
    def _due(cls, v: Any) -> Any:
        return v or None

    @field_validator("interval", mode="before")
    @classmethod
    def _interval(cls, v: Any) -> Any:
        return DEFAULT_INTERVAL if v is None else v

    @field_validator("interval")
    @classmethod
    def _interval_positive(cls, v: int) -> int:
        return max(1, v)

    @field_validator("ease_factor", mode="before")
    @classmethod
    def _ease(cls, v: Any) -> Any:
        return v or DEFAULT_EASE_FACTOR

    @field_validator("ease_factor")
    @classmethod
    def _ease_floor(cls, v: float) -> float:
        return max(MIN_EASE_FACTOR, v)

    @classmethod
    def from_card(cls, card: Card) -> "CardRecord":
        return cls(
            id=card.id,
            word=card.word,
            translation=card.translation,
            session_status=card.session_status,
            due_date=card.due_date,
            interval=card.interval,
            ease_factor=card.ease_factor,
        )

    def to_card(self) -> Card:
        card = Card(
            word=self.word,
            translation=self.translation,
            session_status=self.session_status,
            due_date=self.due_date,
            interval=self.interval,
            ease_factor=self.ease_factor,
        )
        if self.id:
            card.id = self.id
        return card


class DeckRecord(_Record):
    name: str
    cards: list[CardRecord]
    daily_limit: int = DEFAULT_DAILY_LIMIT
    learning_mode: LearningMode = LearningMode.SIMPLE
    last_session_date: date | None = None
    cards_reviewed_today: int = 0
    session_extension: int = 0

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("cards")
    @classmethod
    def _drop_blank_cards(cls, v: list[CardRecord]) -> list[CardRecord]:
        return [c for c in v if c.word or c.translation]

    @field_validator("daily_limit", mode="before")
    @classmethod
    def _limit(cls, v: Any) -> Any:
        return v or DEFAULT_DAILY_LIMIT

    @field_validator("learning_mode", mode="before")
    @classmethod
    def _mode(cls, v: Any) -> Any:
        return v or LearningMode.SIMPLE

    @field_validator("last_session_date", mode="before")
    @classmethod
    def _last(cls, v: Any) -> Any:
        return v or None

    @field_validator("cards_reviewed_today", "session_extension", mode="before")
    @classmethod
    def _counter(cls, v: Any) -> Any:
        return v or 0

    @classmethod
    def from_deck(cls, deck: Deck) -> "DeckRecord":
        return cls(
            name=deck.name,
            cards=[CardRecord.from_card(c) for c in deck.cards],
            daily_limit=deck.daily_limit,
            learning_mode=deck.learning_mode,
            last_session_date=deck.last_session_date,
            cards_reviewed_today=deck.cards_reviewed_today,
            session_extension=deck.session_extension,
        )

    def to_deck(self) -> Deck:
        return Deck(
            name=self.name,
            cards=[c.to_card() for c in self.cards],
            learning_mode=self.learning_mode,
            daily_limit=self.daily_limit,
            session_extension=self.session_extension,
            cards_reviewed_today=self.cards_reviewed_today,
            last_session_date=self.last_session_date,
        )


def deck_to_document(deck: Deck) -> dict[str, Any]:
    """Serialize a deck to a JSON-compatible dict with camelCase keys."""
    return DeckRecord.from_deck(deck).model_dump(mode="json", by_alias=True)


def deck_from_document(data: Any) -> Deck:
    """
    Validate and normalize a deck document.

    Raises:
        DeckFormatError: if the document is not a deck.
    """
    if not isinstance(data, dict):
        raise DeckFormatError("Invalid deck format.")
    if not isinstance(data.get("name"), str) or not data["name"].strip():
        raise DeckFormatError("Deck is missing a name.")
    if not isinstance(data.get("cards"), list):
        raise DeckFormatError("Deck is missing a cards array.")

    try:
        record = DeckRecord.model_validate(data)
    except ValidationError as e:
        raise DeckFormatError(f"Invalid deck format: {e.error_count()} error(s)\n{e}") from e
    return record.to_deck()
