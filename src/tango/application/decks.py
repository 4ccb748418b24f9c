"""
Card identity rules and deck aggregation.

Dedupe and id validation are pure; load_all_cards only talks to a DeckSource.
"""

import logging
import re
from collections.abc import Sequence
from pathlib import PurePosixPath

from tango.domain.errors import DeckLoadError, DeckValidationError, DeckValidationReason
from tango.domain.models import CardItem, DeckOption
from tango.domain.ports import DeckSource

logger = logging.getLogger(__name__)


def dedupe(cards: Sequence[CardItem]) -> list[CardItem]:
    """
    Drop cards that repeat an earlier card's japanese, hiragana or english text.

    Each field is compared only against earlier values of the same field,
    after trimming. Empty values are never remembered, so blank fields do not
    make two cards duplicates. First occurrence wins and order is preserved.
    """
    seen_japanese: set[str] = set()
    seen_hiragana: set[str] = set()
    seen_english: set[str] = set()
    kept: list[CardItem] = []

    for card in cards:
        japanese = (card.japanese or "").strip()
        hiragana = (card.hiragana or "").strip()
        english = (card.english or "").strip()

        if japanese in seen_japanese or hiragana in seen_hiragana or english in seen_english:
            continue

        kept.append(card)
        if japanese:
            seen_japanese.add(japanese)
        if hiragana:
            seen_hiragana.add(hiragana)
        if english:
            seen_english.add(english)

    return kept


def validate_ids(cards: Sequence[CardItem]) -> None:
    """
    Ensure every card has a non-empty id and no id repeats.

    Raises:
        DeckValidationError: On the first offending card, missing id checked
            before duplicate id.
    """
    seen: set[str] = set()
    for index, card in enumerate(cards):
        card_id = card.id
        if not isinstance(card_id, str) or not card_id.strip():
            raise DeckValidationError(DeckValidationReason.MISSING_ID, index)
        if card_id in seen:
            raise DeckValidationError(DeckValidationReason.DUPLICATE_ID, index, card_id)
        seen.add(card_id)


def load_all_cards(source: DeckSource) -> list[CardItem]:
    """
    Concatenate every deck in listing order and dedupe the result.

    Decks that fail to load are skipped.
    """
    all_cards: list[CardItem] = []
    for key in source.list_decks():
        try:
            all_cards.extend(source.load_deck(key))
        except DeckLoadError as e:
            logger.warning(f"Skipping deck {key}: {e}")
    return dedupe(all_cards)


def deck_display_name(key: str) -> str:
    """'n5_verbs.json' -> 'n5 verbs'"""
    stem = PurePosixPath(key).stem
    return re.sub(r"[_\-]+", " ", stem).strip() or key


def build_deck_options(source: DeckSource) -> list[DeckOption]:
    return [DeckOption(key=key, name=deck_display_name(key)) for key in source.list_decks()]
