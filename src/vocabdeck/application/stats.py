"""
Deck statistics for display.

This is a pure computation module with no I/O.
"""

from datetime import date

from vocabdeck.domain.models import Deck, DeckStats, LearningMode, SessionStatus


def get_deck_stats(deck: Deck, today: date) -> DeckStats:
    """
    Summarize a deck.

    Spaced mode counts due (unscheduled or due by today) against upcoming
    cards. Simple mode counts finished against everything else.
    """
    total = len(deck.cards)
    mode = LearningMode(deck.learning_mode)

    if mode == LearningMode.SPACED:
        due = sum(1 for c in deck.cards if c.is_due(today))
        return DeckStats(mode=mode, total=total, due=due, upcoming=total - due)

    finished = sum(1 for c in deck.cards if c.session_status == SessionStatus.FINISHED)
    return DeckStats(mode=mode, total=total, finished=finished, to_review=total - finished)
