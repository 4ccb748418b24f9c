"""
Key/value-backed card data repository (the Stats Store).

Implements CardDataRepository on top of a KeyValueStorage port. Every
operation is a read-modify-write round trip against storage; there is no
cache, so a snapshot always reflects what is stored at call time.
"""

import logging
from collections.abc import Callable
from dataclasses import replace

from tango.application.card_table import dump_table, parse_table
from tango.application.migration import has_migrated, migrate_legacy
from tango.domain.constants import (
    LEGACY_DIFFICULT_PREFIX,
    LEGACY_STATS_PREFIX,
    MIGRATED_KEY,
    MIGRATED_MARKER,
    TABLE_KEY,
)
from tango.domain.errors import StorageError
from tango.domain.models import CardRecord, CardStats
from tango.domain.ports import CardDataRepository, KeyValueStorage

logger = logging.getLogger(__name__)

# Failures from the storage port or the JSON codec. All are absorbed here.
_SOFT_ERRORS = (StorageError, OSError, ValueError, TypeError, RecursionError)


class KeyValueCardDataRepository(CardDataRepository):
    """
    Persistent per-card success/failure counts and global difficult flags.

    Legacy per-card stats and per-deck difficult sets are migrated into the
    table on construction, once per storage (guarded by a marker key).

    Storage failures are logged and swallowed: reads fall back to an empty
    table and writes become no-ops.
    """

    def __init__(self, storage: KeyValueStorage):
        self._storage = storage
        self.migrate_if_needed()

    # ------------------------------------------------------------------
    # Storage round trips
    # ------------------------------------------------------------------

    def _read(self) -> dict[str, CardRecord]:
        try:
            return parse_table(self._storage.get_item(TABLE_KEY))
        except _SOFT_ERRORS as e:
            logger.warning(f"Card data unreadable, using empty table: {e}")
            return {}

    def _write(self, table: dict[str, CardRecord]) -> None:
        try:
            self._storage.set_item(TABLE_KEY, dump_table(table))
        except _SOFT_ERRORS as e:
            logger.warning(f"Card data not saved: {e}")

    def _update(self, card_id: str, change: Callable[[CardRecord], CardRecord]) -> CardRecord:
        table = self._read()
        record = change(table.get(card_id, CardRecord()))
        table[card_id] = record
        self._write(table)
        return record

    def _ensure(self, card_id: str) -> CardRecord:
        return self._update(card_id, lambda rec: rec)

    # ------------------------------------------------------------------
    # Migration
    # ------------------------------------------------------------------

    def migrate_if_needed(self) -> bool:
        """
        Fold legacy entries into the table unless the marker is already set.

        Returns:
            True if a migration ran.
        """
        try:
            if has_migrated(self._storage.get_item(MIGRATED_KEY)):
                return False

            legacy_stats: dict[str, str | None] = {}
            legacy_difficult: list[str | None] = []
            for key in self._storage.keys():
                if key.startswith(LEGACY_STATS_PREFIX):
                    legacy_stats[key[len(LEGACY_STATS_PREFIX) :]] = self._storage.get_item(key)
                elif key.startswith(LEGACY_DIFFICULT_PREFIX):
                    legacy_difficult.append(self._storage.get_item(key))

            table = migrate_legacy(self._read(), legacy_stats, legacy_difficult)
            self._storage.set_item(TABLE_KEY, dump_table(table))
            self._storage.set_item(MIGRATED_KEY, MIGRATED_MARKER)
        except _SOFT_ERRORS as e:
            logger.warning(f"Legacy card data migration skipped: {e}")
            return False

        logger.info(
            f"Migrated card data: {len(legacy_stats)} legacy stats entries, "
            f"{len(legacy_difficult)} legacy difficult sets"
        )
        return True

    # ------------------------------------------------------------------
    # Counts
    # ------------------------------------------------------------------

    def increment_success(self, card_id: str) -> None:
        self._update(card_id, lambda rec: replace(rec, success=rec.success + 1))

    def increment_failure(self, card_id: str) -> None:
        self._update(card_id, lambda rec: replace(rec, failure=rec.failure + 1))

    def decrement_success(self, card_id: str) -> None:
        self._update(card_id, lambda rec: replace(rec, success=max(0, rec.success - 1)))

    def decrement_failure(self, card_id: str) -> None:
        self._update(card_id, lambda rec: replace(rec, failure=max(0, rec.failure - 1)))

    def get_counts(self, card_id: str) -> CardStats:
        return self._ensure(card_id).counts

    def get_all_records(self) -> dict[str, CardRecord]:
        return self._read()

    # ------------------------------------------------------------------
    # Difficult flags
    # ------------------------------------------------------------------

    def is_difficult(self, card_id: str) -> bool:
        return self._ensure(card_id).difficult

    def toggle_difficult(self, card_id: str) -> bool:
        return self._update(card_id, lambda rec: replace(rec, difficult=not rec.difficult)).difficult

    def get_difficult(self) -> set[str]:
        return {card_id for card_id, record in self._read().items() if record.difficult}
