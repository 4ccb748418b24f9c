"""
Adapter factory.
Centralizes construction of the storage-backed collaborators from config.
"""

from tango.application.config import AppConfig
from tango.domain.ports import CardDataRepository
from tango.infrastructure.card_data import KeyValueCardDataRepository
from tango.infrastructure.deck_source import DirectoryDeckSource
from tango.infrastructure.storage import JsonFileStorage


def get_card_data(config: AppConfig) -> CardDataRepository:
    """Card data persisted in the configured data file."""
    return KeyValueCardDataRepository(JsonFileStorage(config.data_file))


def get_deck_source(config: AppConfig) -> DirectoryDeckSource:
    return DirectoryDeckSource(config.decks_dir)
