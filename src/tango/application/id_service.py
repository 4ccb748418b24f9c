"""Service for assigning stable card ids inside deck files."""

import json
import logging
from pathlib import Path
from typing import Any

from tango.domain.constants import DECK_FILE_SUFFIX, ID_PAD_WIDTH, ID_SUFFIX_PAD_WIDTH
from tango.domain.errors import DeckLoadError

logger = logging.getLogger(__name__)


def generate_card_id(stem: str, position: int) -> str:
    """Generate the id for the card at 1-based ``position`` of deck ``stem``."""
    return f"{stem}-{position:0{ID_PAD_WIDTH}d}"


def assign_ids_in_deck(cards: list[Any], stem: str) -> tuple[list[Any], int]:
    """
    Give every card a non-empty id that is unique within the deck.

    Blank or missing ids become ``<stem>-NNNN``; an id that repeats an
    earlier one gets the smallest free ``-NN`` suffix.

    Returns:
        The updated card list and the number of ids that changed.
    """
    seen: set[str] = set()
    updated: list[Any] = []
    changed = 0

    for idx, card in enumerate(cards):
        if not isinstance(card, dict):
            updated.append(card)
            continue

        card = dict(card)
        original = card.get("id")
        card_id = original
        if not isinstance(card_id, str) or not card_id.strip():
            card_id = generate_card_id(stem, idx + 1)

        if card_id in seen:
            suffix = 1
            candidate = f"{card_id}-{suffix:0{ID_SUFFIX_PAD_WIDTH}d}"
            while candidate in seen:
                suffix += 1
                candidate = f"{card_id}-{suffix:0{ID_SUFFIX_PAD_WIDTH}d}"
            card_id = candidate

        if card_id != original:
            card["id"] = card_id
            changed += 1
        seen.add(card_id)
        updated.append(card)

    return updated, changed


def assign_card_ids(decks_dir: Path, dry_run: bool = False) -> int:
    """
    Scans the decks directory and ensures every card has a stable, unique id.
    Returns the number of ids assigned.

    Raises:
        DeckLoadError: A deck file is not valid JSON.
    """
    ids_assigned = 0

    for file_path in sorted(Path(decks_dir).glob(f"*{DECK_FILE_SUFFIX}")):
        try:
            data = json.loads(file_path.read_text(encoding="utf-8"))
        except ValueError as e:
            logger.error(f"Failed to parse JSON: {file_path}")
            raise DeckLoadError(f"Failed to parse deck {file_path.name}: {e}") from e

        if not isinstance(data, list):
            logger.error(f"Not an array: {file_path}")
            continue

        updated, changed = assign_ids_in_deck(data, file_path.stem)
        if not changed:
            continue

        ids_assigned += changed
        if not dry_run:
            file_path.write_text(
                json.dumps(updated, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
            )
            logger.info(f"Updated ids in: {file_path.name} ({len(updated)} items)")
        else:
            logger.info(f"[DRY RUN] Would update {changed} ids in {file_path.name}")

    return ids_assigned
