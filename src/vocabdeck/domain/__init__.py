# Domain Package
from .models import (
    Card,
    Deck,
    DeckStats,
    LearningMode,
    SessionProgress,
    SessionStatus,
    UndoRecord,
)
from .ports import DeckRepository

__all__ = [
    "Card",
    "Deck",
    "DeckStats",
    "LearningMode",
    "SessionProgress",
    "SessionStatus",
    "UndoRecord",
    "DeckRepository",
]
