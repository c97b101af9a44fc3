"""
Domain models for decks, cards and review sessions.

These are plain data structures; scheduling behaviour lives in the
application layer.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from ulid import ULID

from .constants import DEFAULT_DAILY_LIMIT, DEFAULT_EASE_FACTOR, DEFAULT_INTERVAL


class SessionStatus(str, Enum):
    TO_REVIEW = "TO_REVIEW"
    FINISHED = "FINISHED"
    SPACED = "SPACED"


class LearningMode(str, Enum):
    SIMPLE = "simple"
    SPACED = "spaced"


def new_card_id() -> str:
    """Generate a stable card ID using ULID."""
    return f"card_{ULID()}"


@dataclass
class Card:
    """
    One reviewable word/translation pair.

    Attributes:
        word: Front side.
        translation: Back side.
        session_status: Progress marker for the simple model, SPACED once
            rated under the spaced model.
        due_date: Earliest day the card is eligible again in spaced mode.
            None means never scheduled (always eligible).
        interval: Days until the next review once scheduled.
        ease_factor: Interval growth multiplier, never below 1.3.
        id: Stable identifier used to match queue entries to deck cards.
    """

    word: str
    translation: str
    session_status: SessionStatus = SessionStatus.TO_REVIEW
    due_date: date | None = None
    interval: int = DEFAULT_INTERVAL
    ease_factor: float = DEFAULT_EASE_FACTOR
    id: str = field(default_factory=new_card_id)

    def is_due(self, today: date) -> bool:
        return self.due_date is None or self.due_date <= today


@dataclass
class Deck:
    """
    A named, ordered collection of cards plus its scheduling configuration.

    ``session_extension`` and ``cards_reviewed_today`` are only valid for
    ``last_session_date``; the queue builder zeroes them on a new day.
    """

    name: str
    cards: list[Card] = field(default_factory=list)
    learning_mode: LearningMode = LearningMode.SIMPLE
    daily_limit: int = DEFAULT_DAILY_LIMIT
    session_extension: int = 0
    cards_reviewed_today: int = 0
    last_session_date: date | None = None


@dataclass(frozen=True)
class DeckStats:
    """
    Read-only deck summary.

    Spaced decks fill ``due``/``upcoming``; simple decks fill
    ``finished``/``to_review``.
    """

    mode: LearningMode
    total: int
    due: int | None = None
    upcoming: int | None = None
    finished: int | None = None
    to_review: int | None = None


@dataclass(frozen=True)
class SessionProgress:
    current: int
    total: int


@dataclass(frozen=True)
class UndoRecord:
    """State captured right before the most recent rating."""

    card: Card  # authoritative deck card
    snapshot: Card  # copy of its fields before rating
    cursor: int
    cards_reviewed_today: int
