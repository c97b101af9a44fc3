"""
Deck Repository Factory
Centralizes the logic for selecting the deck storage backend.
"""

from vocabdeck.application.config import AppConfig
from vocabdeck.domain.ports import DeckRepository
from vocabdeck.infrastructure.json_store import JsonDeckRepository


def get_deck_repository(config: AppConfig) -> DeckRepository:
    """
    Returns the deck repository for the configured data directory.
    The example deck is created on first use.
    """
    repo = JsonDeckRepository(config.data_dir)
    repo.ensure_initialized()
    return repo
