"""
Review session: the queue cursor, rating and single-step undo.

A ReviewSession is owned by its caller, one per active study sitting.
It is not thread-safe; hosts that share a session across threads must
serialize access to the session and its deck together.
"""

import dataclasses
import logging
import random
from collections.abc import Callable
from datetime import date

from vocabdeck.application.queue_builder import QueueBuildResult, build_queue, extend_session
from vocabdeck.application.rating import RatingStrategy, strategy_for
from vocabdeck.domain.models import Card, Deck, SessionProgress, UndoRecord

logger = logging.getLogger(__name__)


class ReviewSession:
    """
    Walks a deck's daily queue.

    States are derived from the cursor: in progress while
    ``cursor < len(queue)``, complete otherwise.
    """

    def __init__(
        self,
        deck: Deck,
        today: Callable[[], date] = date.today,
        rng: random.Random | None = None,
    ):
        """
        Args:
            deck: The deck being studied. Rated cards are mutated in place.
            today: Provider for the current calendar day.
            rng: Shuffle source; a fresh ``random.Random`` if not provided.
        """
        self.deck = deck
        self._today = today
        self._rng = rng or random.Random()
        self.queue: list[Card] = []
        self.cursor = 0
        self.undo: UndoRecord | None = None
        self.last_build: QueueBuildResult | None = None

    @property
    def strategy(self) -> RatingStrategy:
        return strategy_for(self.deck.learning_mode)

    # ---------- Building ----------

    def build(self) -> QueueBuildResult:
        """(Re)build the queue. Call on open, settings change or card edits."""
        return self._start(build_queue(self.deck, self._today(), self._rng))

    def extend(self, amount: int) -> QueueBuildResult:
        """Raise today's cap by ``amount`` (at least 1) and rebuild."""
        return self._start(extend_session(self.deck, amount, self._today(), self._rng))

    def _start(self, result: QueueBuildResult) -> QueueBuildResult:
        self.queue = result.queue
        self.cursor = 0
        self.undo = None
        self.last_build = result
        return result

    # ---------- Queries ----------

    def current_card(self) -> Card | None:
        if self.cursor >= len(self.queue):
            return None
        return self.queue[self.cursor]

    def is_complete(self) -> bool:
        return self.cursor >= len(self.queue)

    def progress(self) -> SessionProgress:
        return SessionProgress(current=self.cursor, total=len(self.queue))

    def can_rewind(self) -> bool:
        return self.undo is not None

    # ---------- Mutations ----------

    def rate_card(self, rating: str) -> None:
        """
        Rate the current card and advance.

        Simple mode:  rating = 'forgot' | 'remembered'
        Spaced mode:  rating = 'again' | 'hard' | 'good' | 'easy'

        Does nothing once the session is complete. Raises InvalidRatingError
        (before touching any state) for a rating the mode does not accept.
        """
        entry = self.current_card()
        if entry is None:
            return

        strategy = self.strategy
        strategy.validate(rating)

        card = self._find_deck_card(entry)
        if card is None:
            logger.warning(
                f"[session] Skipping '{entry.word}' ({entry.id}): no longer in '{self.deck.name}'"
            )
            self.cursor += 1
            return

        self.undo = UndoRecord(
            card=card,
            snapshot=dataclasses.replace(card),
            cursor=self.cursor,
            cards_reviewed_today=self.deck.cards_reviewed_today or 0,
        )

        strategy.apply(card, rating, self._today())
        self.deck.cards_reviewed_today = (self.deck.cards_reviewed_today or 0) + 1
        self.cursor += 1
        logger.debug(f"[session] Rated '{card.word}' as {rating} ({self.cursor}/{len(self.queue)})")

    def rewind(self) -> bool:
        """
        Undo the most recent rating. Returns True on success.

        Only one level of undo exists: rating a second card discards the
        ability to undo the first.
        """
        if self.undo is None:
            return False

        record = self.undo
        for f in dataclasses.fields(Card):
            setattr(record.card, f.name, getattr(record.snapshot, f.name))

        self.queue[record.cursor] = record.card
        self.cursor = record.cursor
        self.deck.cards_reviewed_today = record.cards_reviewed_today
        self.undo = None
        logger.debug(f"[session] Rewound '{record.card.word}'")
        return True

    def _find_deck_card(self, entry: Card) -> Card | None:
        """
        Locate the authoritative deck card for a queue entry.

        Matches by identity first, then by stable card id (entries may be
        copies when the deck was reloaded).
        """
        for card in self.deck.cards:
            if card is entry:
                return card
        for card in self.deck.cards:
            if card.id == entry.id:
                return card
        return None
