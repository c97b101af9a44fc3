"""vocabdeck: spaced-repetition vocabulary trainer."""

from vocabdeck.consts import VERSION

__version__ = VERSION
