"""
Legacy card data migration.

Two older layouts are folded into the current table:

- per-card stats entries ``{"success": n, "failure": n}``
- per-deck arrays of difficult card ids

Migration never lowers a count already present and turns per-deck
difficulty into a single global flag. The store runs it once, gated on a
persisted marker (see has_migrated).
"""

import json
from collections.abc import Iterable, Mapping
from dataclasses import replace

from tango.domain.constants import MIGRATED_MARKER
from tango.domain.models import CardRecord

from .card_table import coerce_count


def has_migrated(marker_raw: str | None) -> bool:
    return marker_raw == MIGRATED_MARKER


def parse_legacy_difficult(raw: str | None) -> set[str]:
    """Ids in one legacy per-deck entry; unparseable or non-array data yields nothing."""
    if not raw:
        return set()
    try:
        data = json.loads(raw)
    except (ValueError, RecursionError):
        return set()
    if not isinstance(data, list):
        return set()
    return {card_id for card_id in data if isinstance(card_id, str)}


def migrate_legacy(
    current: Mapping[str, CardRecord],
    legacy_stats: Mapping[str, str | None],
    legacy_difficult: Iterable[str | None],
) -> dict[str, CardRecord]:
    """
    Merge legacy entries into a copy of the current table.

    Args:
        current: Existing current-schema table (may be empty).
        legacy_stats: card id -> raw JSON of a legacy stats entry.
        legacy_difficult: Raw JSON of each legacy per-deck difficult array.

    Returns:
        The merged table. ``current`` is not modified.
    """
    table = dict(current)

    for card_id, raw in legacy_stats.items():
        try:
            data = json.loads(raw) if raw else None
        except (ValueError, RecursionError):
            continue
        if not isinstance(data, dict):
            data = {}
        existing = table.get(card_id, CardRecord())
        table[card_id] = replace(
            existing,
            success=max(existing.success, coerce_count(data.get("success"))),
            failure=max(existing.failure, coerce_count(data.get("failure"))),
        )

    flagged: set[str] = set()
    for raw in legacy_difficult:
        flagged |= parse_legacy_difficult(raw)

    for card_id in sorted(flagged):
        table[card_id] = replace(table.get(card_id, CardRecord()), difficult=True)

    return table
