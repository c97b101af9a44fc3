# Application Package
from .queue_builder import QueueBuildResult, build_queue, check_day_reset, extend_session
from .rating import RatingStrategy, SimpleRating, SpacedRating, strategy_for
from .session import ReviewSession
from .stats import get_deck_stats

__all__ = [
    "QueueBuildResult",
    "build_queue",
    "check_day_reset",
    "extend_session",
    "RatingStrategy",
    "SimpleRating",
    "SpacedRating",
    "strategy_for",
    "ReviewSession",
    "get_deck_stats",
]
