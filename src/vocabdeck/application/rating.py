"""
Rating strategies: how a self-reported rating changes a card's schedule.

Two strategies exist, one per learning mode:
1. SimpleRating: binary finished/unfinished progression
2. SpacedRating: SM-2-derived interval and ease adjustment
"""

import math
from abc import ABC, abstractmethod
from datetime import date, timedelta

from vocabdeck.domain.constants import (
    AGAIN_EASE_PENALTY,
    DEFAULT_EASE_FACTOR,
    DEFAULT_INTERVAL,
    EASE_PRECISION,
    EASY_EASE_BONUS,
    EASY_INTERVAL_BONUS,
    HARD_EASE_PENALTY,
    HARD_INTERVAL_MULTIPLIER,
    MIN_EASE_FACTOR,
)
from vocabdeck.domain.errors import InvalidRatingError
from vocabdeck.domain.models import Card, LearningMode, SessionStatus


def round_half_up(value: float, ndigits: int = 0) -> float:
    """
    Round with ties going up (2.5 -> 3, 3.25 -> 3).

    Python's built-in round() uses banker's rounding, which would make
    interval growth depend on the parity of the previous interval.
    """
    factor = 10**ndigits
    return math.floor(value * factor + 0.5) / factor


class RatingStrategy(ABC):
    """Applies a rating to a single card in place."""

    mode: LearningMode
    ratings: tuple[str, ...] = ()

    def validate(self, rating: str) -> None:
        if rating not in self.ratings:
            raise InvalidRatingError(rating, self.ratings)

    @abstractmethod
    def apply(self, card: Card, rating: str, today: date) -> None:
        pass


class SimpleRating(RatingStrategy):
    mode = LearningMode.SIMPLE
    ratings = ("forgot", "remembered")

    def apply(self, card: Card, rating: str, today: date) -> None:
        self.validate(rating)
        if rating == "remembered":
            card.session_status = SessionStatus.FINISHED
        # 'forgot' keeps the card eligible


class SpacedRating(RatingStrategy):
    """
    SM-2-derived scheduling.

    | Rating | New interval                      | New ease             |
    |--------|-----------------------------------|----------------------|
    | again  | 1                                 | max(1.3, ease - 0.2) |
    | hard   | max(1, round(interval * 1.2))     | max(1.3, ease - 0.15)|
    | good   | max(1, round(interval * ease))    | unchanged            |
    | easy   | max(1, round(interval*ease*1.3))  | ease + 0.15          |

    'again' is due today; everything else is due today + new interval.
    """

    mode = LearningMode.SPACED
    ratings = ("again", "hard", "good", "easy")

    def apply(self, card: Card, rating: str, today: date) -> None:
        self.validate(rating)
        interval, ease = self.next_state(card.interval, card.ease_factor, rating)

        card.interval = interval
        card.ease_factor = ease
        card.due_date = today if rating == "again" else today + timedelta(days=interval)
        card.session_status = SessionStatus.SPACED

    def next_state(
        self, interval: int | None, ease: float | None, rating: str
    ) -> tuple[int, float]:
        """Compute (interval, ease) after a rating. Missing values are defaulted."""
        interval = interval or DEFAULT_INTERVAL
        ease = ease or DEFAULT_EASE_FACTOR

        if rating == "again":
            interval = 1
            ease = max(MIN_EASE_FACTOR, ease - AGAIN_EASE_PENALTY)
        elif rating == "hard":
            interval = _grow(interval * HARD_INTERVAL_MULTIPLIER)
            ease = max(MIN_EASE_FACTOR, ease - HARD_EASE_PENALTY)
        elif rating == "good":
            interval = _grow(interval * ease)
        elif rating == "easy":
            interval = _grow(interval * ease * EASY_INTERVAL_BONUS)
            ease = ease + EASY_EASE_BONUS

        return interval, round_half_up(ease, EASE_PRECISION)


def _grow(raw_interval: float) -> int:
    return max(1, int(round_half_up(raw_interval)))


_STRATEGIES: dict[LearningMode, RatingStrategy] = {
    LearningMode.SIMPLE: SimpleRating(),
    LearningMode.SPACED: SpacedRating(),
}


def strategy_for(mode: LearningMode | str) -> RatingStrategy:
    """Return the rating strategy for a learning mode."""
    return _STRATEGIES[LearningMode(mode)]
