"""
Parsing and serialization of the persisted card table.

Stored data is never trusted: every field is coerced individually and
anything malformed falls back to zero / not difficult.
"""

import json
import math
from collections.abc import Mapping
from typing import Any

from tango.domain.models import CardRecord


def coerce_count(value: Any) -> int:
    """
    Coerce a stored counter to a non-negative int.

    Finite non-negative numbers are kept (fractions truncated); booleans,
    negatives, NaN/inf and non-numbers become 0.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    if value < 0:
        return 0
    return int(value)


def parse_record(value: Any) -> CardRecord:
    if not isinstance(value, dict):
        return CardRecord()
    difficult = value.get("difficult")
    return CardRecord(
        success=coerce_count(value.get("success")),
        failure=coerce_count(value.get("failure")),
        difficult=difficult if isinstance(difficult, bool) else False,
    )


def parse_table(raw: str | None) -> dict[str, CardRecord]:
    """
    Parse the stored JSON table.

    Missing, unparseable or non-object data yields an empty table.
    """
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except (ValueError, RecursionError):
        return {}
    if not isinstance(data, dict):
        return {}
    return {str(card_id): parse_record(value) for card_id, value in data.items()}


def dump_table(table: Mapping[str, CardRecord]) -> str:
    return json.dumps({card_id: record.to_dict() for card_id, record in table.items()})
