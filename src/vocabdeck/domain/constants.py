"""Centralized constants for vocabdeck.

All magic numbers and scheduling defaults live here so every layer
imports from a single source of truth.
"""

# ---------- Deck defaults ----------
DEFAULT_DAILY_LIMIT = 5
MAX_DAILY_LIMIT = 500
DEFAULT_LEARNING_MODE = "simple"
DEFAULT_EXTEND_AMOUNT = 5

# ---------- SM-2 ----------
DEFAULT_INTERVAL = 1
DEFAULT_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3
EASE_PRECISION = 3  # decimal places stored
AGAIN_EASE_PENALTY = 0.2
HARD_EASE_PENALTY = 0.15
EASY_EASE_BONUS = 0.15
HARD_INTERVAL_MULTIPLIER = 1.2
EASY_INTERVAL_BONUS = 1.3

# ---------- Import / naming ----------
IMPORTED_SUFFIX = " (imported)"
DEFAULT_IMPORTED_DECK_NAME = "Imported Deck"
EXAMPLE_DECK_NAME = "Spanish Basics (Example)"
