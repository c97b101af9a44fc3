"""Exceptions raised by vocabdeck.

Every failure here is a caller-input problem; none of them is fatal.
"""


class VocabdeckError(Exception):
    """Base class for all vocabdeck errors."""


class InvalidRatingError(VocabdeckError, ValueError):
    """A rating that the deck's learning mode does not understand."""

    def __init__(self, rating: str, allowed: tuple[str, ...]):
        self.rating = rating
        self.allowed = allowed
        super().__init__(f"Unknown rating '{rating}'. Expected one of: {', '.join(allowed)}")


class CardValidationError(VocabdeckError, ValueError):
    """A card is missing its word or translation."""


class DeckFormatError(VocabdeckError, ValueError):
    """An imported deck document cannot be understood."""

