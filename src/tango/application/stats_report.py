"""
Per-card performance report.

Pure computation over one snapshot of the card table.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from tango.domain.models import CardItem, CardRecord

from .sampling.priority import failure_ratio


@dataclass(frozen=True)
class StatsRow:
    card: CardItem
    success: int
    failure: int
    difficult: bool
    failure_ratio: float

    @property
    def attempts(self) -> int:
        return self.success + self.failure


@dataclass(frozen=True)
class StatsSummary:
    cards: int
    attempted: int
    difficult: int
    success: int
    failure: int
    failure_ratio: float


def build_stats_report(
    cards: Sequence[CardItem],
    records: Mapping[str, CardRecord],
    *,
    difficult_only: bool = False,
    limit: int | None = None,
) -> list[StatsRow]:
    """
    Rank cards from weakest to strongest.

    Sorted by failure ratio, then attempt count, both descending; ties keep
    the order of ``cards``.
    """
    rows = []
    for card in cards:
        record = records.get(card.id, CardRecord())
        if difficult_only and not record.difficult:
            continue
        rows.append(
            StatsRow(
                card=card,
                success=record.success,
                failure=record.failure,
                difficult=record.difficult,
                failure_ratio=failure_ratio(record.success, record.failure),
            )
        )

    rows.sort(key=lambda row: (row.failure_ratio, row.attempts), reverse=True)
    if limit is not None:
        rows = rows[: max(0, limit)]
    return rows


def summarize(rows: Sequence[StatsRow]) -> StatsSummary:
    success = sum(row.success for row in rows)
    failure = sum(row.failure for row in rows)
    return StatsSummary(
        cards=len(rows),
        attempted=sum(1 for row in rows if row.attempts > 0),
        difficult=sum(1 for row in rows if row.difficult),
        success=success,
        failure=failure,
        failure_ratio=failure_ratio(success, failure),
    )
