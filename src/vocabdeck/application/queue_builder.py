"""
Queue builder for daily review sessions.

Builds a bounded study queue by:
1. Resetting the deck's daily counters on a new calendar day
2. Selecting eligible cards for the deck's learning mode
3. Shuffling them uniformly and capping at today's remaining allowance
"""

import logging
import random
from dataclasses import dataclass
from datetime import date

from vocabdeck.domain.models import Card, Deck, LearningMode, SessionStatus

logger = logging.getLogger(__name__)


@dataclass
class QueueBuildResult:
    """Result of queue building operation."""

    queue: list[Card]  # Cards to review, in presentation order
    candidates: int  # Eligible cards before capping
    remaining: int  # Allowance left for today when the queue was built


def check_day_reset(deck: Deck, today: date) -> None:
    """
    If the deck was last used on a previous day, reset daily counters.

    Idempotent within the same day.
    """
    if deck.last_session_date != today:
        logger.debug(f"[queue] New day for '{deck.name}' (last={deck.last_session_date})")
        deck.last_session_date = today
        deck.cards_reviewed_today = 0
        deck.session_extension = 0


def remaining_allowance(deck: Deck) -> int:
    """Cards still reviewable today: limit plus extension minus reviews done."""
    effective_limit = deck.daily_limit + (deck.session_extension or 0)
    return max(0, effective_limit - (deck.cards_reviewed_today or 0))


def select_candidates(deck: Deck, today: date) -> list[Card]:
    """
    Select the cards eligible for review today.

    Spaced mode takes unscheduled or due cards. Simple mode takes anything
    not finished, including cards left in SPACED status by a mode switch.
    """
    if LearningMode(deck.learning_mode) == LearningMode.SPACED:
        return [c for c in deck.cards if c.is_due(today)]
    return [c for c in deck.cards if c.session_status != SessionStatus.FINISHED]


def build_queue(
    deck: Deck,
    today: date,
    rng: random.Random | None = None,
) -> QueueBuildResult:
    """
    Build today's review queue for a deck.

    Args:
        deck: The deck to draw from. Its daily counters may be reset.
        today: The current calendar day.
        rng: Source of randomness; defaults to the module-level generator.

    Returns:
        QueueBuildResult whose queue holds references into ``deck.cards``.
    """
    check_day_reset(deck, today)

    remaining = remaining_allowance(deck)
    candidates = select_candidates(deck, today)

    # Fisher-Yates; every permutation equally likely
    (rng or random).shuffle(candidates)

    queue = candidates[:remaining]
    logger.info(
        f"[queue] Built queue for '{deck.name}': {len(queue)} of "
        f"{len(candidates)} eligible (remaining={remaining})"
    )
    return QueueBuildResult(queue=queue, candidates=len(candidates), remaining=remaining)


def extend_session(
    deck: Deck,
    amount: int,
    today: date,
    rng: random.Random | None = None,
) -> QueueBuildResult:
    """
    Grant extra reviews for today only and rebuild the queue.

    ``amount`` is floored to 1. The extension is cleared by the next day
    reset; ``daily_limit`` is never touched.
    """
    # Counters must belong to today before the extension is added
    check_day_reset(deck, today)
    deck.session_extension = (deck.session_extension or 0) + max(1, amount)
    logger.info(f"[queue] Extended '{deck.name}' by {max(1, amount)} card(s)")
    return build_queue(deck, today, rng)
