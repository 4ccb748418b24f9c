# Domain Package
from .errors import (
    DeckLoadError,
    DeckNotFoundError,
    DeckValidationError,
    DeckValidationReason,
    StorageError,
    TangoError,
)
from .models import CardItem, CardRecord, CardStats, DeckOption
from .ports import CardDataRepository, DeckSource, KeyValueStorage

__all__ = [
    "CardItem",
    "CardRecord",
    "CardStats",
    "DeckOption",
    "CardDataRepository",
    "DeckSource",
    "KeyValueStorage",
    "TangoError",
    "DeckValidationError",
    "DeckValidationReason",
    "DeckLoadError",
    "DeckNotFoundError",
    "StorageError",
]
