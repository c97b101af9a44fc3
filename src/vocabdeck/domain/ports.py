"""
Ports (interfaces) for deck persistence.

These define the contract that infrastructure adapters must implement.
Application code and the interfaces depend on this abstraction, not on a
concrete storage backend.
"""

from abc import ABC, abstractmethod

from .models import Deck


class DeckRepository(ABC):
    """
    Port for loading and saving decks by name.

    Implementations:
        - JsonDeckRepository: One JSON document per deck in a data directory.
    """

    @abstractmethod
    def list_names(self) -> list[str]:
        """Return the names of all known decks, in creation order."""
        pass

    @abstractmethod
    def load(self, name: str) -> Deck | None:
        """
        Load a deck by name.

        Returns:
            The deck, or None if it does not exist or cannot be read.
        """
        pass

    @abstractmethod
    def save(self, deck: Deck) -> None:
        pass

    @abstractmethod
    def delete(self, name: str) -> bool:
        """Remove a deck. Returns False if it did not exist."""
        pass

    @abstractmethod
    def get_current(self) -> str | None:
        """Name of the deck the user last opened."""
        pass

    @abstractmethod
    def set_current(self, name: str | None) -> None:
        pass
