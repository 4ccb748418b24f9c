"""
Directory-backed deck source.

A deck is a ``*.json`` file holding an array of card objects. Keys are bare
file names including the suffix (``n5_verbs.json``).
"""

import json
import logging
from pathlib import Path
from typing import Any

from tango.domain.constants import DECK_FILE_SUFFIX
from tango.domain.errors import DeckLoadError, DeckNotFoundError
from tango.domain.models import CardItem
from tango.domain.ports import DeckSource

logger = logging.getLogger(__name__)


class DirectoryDeckSource(DeckSource):
    def __init__(self, decks_dir: Path):
        self.decks_dir = Path(decks_dir)

    def _path(self, key: str, must_exist: bool = True) -> Path:
        # Keys are plain file names; anything that could escape decks_dir is unknown.
        if not key.endswith(DECK_FILE_SUFFIX) or key != Path(key).name:
            raise DeckNotFoundError(f"No deck named {key!r}")
        path = self.decks_dir / key
        if must_exist and not path.is_file():
            raise DeckNotFoundError(f"No deck named {key!r} in {self.decks_dir}")
        return path

    def list_decks(self) -> list[str]:
        if not self.decks_dir.is_dir():
            logger.warning(f"Decks directory not found: {self.decks_dir}")
            return []
        return sorted(
            p.name
            for p in self.decks_dir.iterdir()
            if p.is_file() and p.name.endswith(DECK_FILE_SUFFIX)
        )

    def read_raw(self, key: str) -> list[Any]:
        """
        Read a deck file as parsed JSON.

        Raises:
            DeckNotFoundError: Unknown key.
            DeckLoadError: Unreadable file, invalid JSON or not an array.
        """
        path = self._path(key)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise DeckLoadError(f"Failed to parse deck {key}: {e}") from e
        if not isinstance(data, list):
            raise DeckLoadError(f"Deck {key} is not a JSON array")
        return data

    def load_deck(self, key: str) -> list[CardItem]:
        # Non-object entries become id-less cards so validation rejects the deck.
        cards = [
            CardItem.from_dict(entry if isinstance(entry, dict) else {})
            for entry in self.read_raw(key)
        ]
        logger.debug(f"Loaded {len(cards)} cards from {key}")
        return cards

    def _write_raw(self, key: str, content: list[Any]) -> None:
        path = self._path(key, must_exist=False)
        try:
            path.write_text(json.dumps(content, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as e:
            raise DeckLoadError(f"Failed to write deck {key}: {e}") from e

    def delete_card(self, key: str, index: int) -> list[Any]:
        """
        Remove the card at ``index`` from a deck file and return the new content.

        Raises:
            IndexError: index is out of bounds.
        """
        content = self.read_raw(key)
        if index < 0 or index >= len(content):
            raise IndexError(f"index {index} out of bounds for deck {key} ({len(content)} cards)")
        del content[index]
        self._write_raw(key, content)
        logger.info(f"Deleted card {index} from {key}")
        return content

    def replace_deck(self, key: str, content: list[Any]) -> None:
        """Write a deck file wholesale, e.g. to undo earlier deletions."""
        self._write_raw(key, content)
        logger.info(f"Replaced {key} with {len(content)} cards")
