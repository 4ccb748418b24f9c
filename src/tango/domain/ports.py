"""
Ports (interfaces) for storage, card data and deck loading.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod

from .models import CardItem, CardRecord, CardStats


class KeyValueStorage(ABC):
    """
    Port for a durable string-to-string table.

    Implementations may raise StorageError from any method.

    Implementations:
        - InMemoryStorage: dict-backed, optional quota.
        - JsonFileStorage: one JSON object in a file.
    """

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        pass


class CardDataRepository(ABC):
    """
    Port for persistent per-card statistics and difficulty flags.

    Every method fails soft: storage problems degrade to an all-zero,
    not-difficult world and never raise to the caller.
    """

    @abstractmethod
    def increment_success(self, card_id: str) -> None:
        pass

    @abstractmethod
    def increment_failure(self, card_id: str) -> None:
        pass

    @abstractmethod
    def decrement_success(self, card_id: str) -> None:
        pass

    @abstractmethod
    def decrement_failure(self, card_id: str) -> None:
        pass

    @abstractmethod
    def get_counts(self, card_id: str) -> CardStats:
        pass

    @abstractmethod
    def get_all_records(self) -> dict[str, CardRecord]:
        """
        Snapshot of the whole table as stored at call time.

        Take one snapshot per sort/filter pass instead of reading per card.
        """
        pass

    @abstractmethod
    def is_difficult(self, card_id: str) -> bool:
        pass

    @abstractmethod
    def toggle_difficult(self, card_id: str) -> bool:
        """Flip the difficult flag and return the new state."""
        pass

    @abstractmethod
    def get_difficult(self) -> set[str]:
        pass


class DeckSource(ABC):
    """Port for enumerating and loading decks."""

    @abstractmethod
    def list_decks(self) -> list[str]:
        pass

    @abstractmethod
    def load_deck(self, key: str) -> list[CardItem]:
        """
        Load one deck.

        Raises:
            DeckNotFoundError: No deck under this key.
            DeckLoadError: The deck is unreadable or not a JSON array.
        """
        pass
