"""Service for managing stable card IDs."""

import logging

from vocabdeck.domain.models import Deck, new_card_id

logger = logging.getLogger(__name__)


def assign_card_ids(deck: Deck) -> int:
    """
    Ensure every card in the deck has a unique stable ID.

    Cards from older files have no ID; cards copied between decks may
    share one. Both get a fresh ID. Returns the number of IDs assigned.
    """
    ids_assigned = 0
    seen: set[str] = set()

    for card in deck.cards:
        if not card.id or card.id in seen:
            card.id = new_card_id()
            ids_assigned += 1
        seen.add(card.id)

    if ids_assigned:
        logger.info(f"Assigned {ids_assigned} card ID(s) in '{deck.name}'")

    return ids_assigned
