"""Error taxonomy for tango."""

from enum import Enum


class TangoError(Exception):
    """Base class for all tango errors."""


class DeckValidationReason(str, Enum):
    MISSING_ID = "missing_id"
    DUPLICATE_ID = "duplicate_id"


class DeckValidationError(TangoError):
    """
    A loaded deck violates card identity rules.

    Fatal to the load that triggered it; the deck must not be studied.
    """

    def __init__(self, reason: DeckValidationReason, index: int, card_id: str | None = None):
        self.reason = reason
        self.index = index
        self.card_id = card_id
        if reason is DeckValidationReason.MISSING_ID:
            message = (
                f"Deck validation error: each card must have a non-empty string id "
                f"(card at index {index})"
            )
        else:
            message = f"Deck validation error: duplicate id detected: {card_id}"
        super().__init__(message)


class DeckLoadError(TangoError):
    """A deck resource could not be read or is not a JSON array of cards."""


class DeckNotFoundError(DeckLoadError):
    """No deck exists under the requested key."""


class StorageError(TangoError):
    """A key/value storage backend failed (I/O, corrupt backing data, quota)."""
