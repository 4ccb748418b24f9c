"""
Priority model: failure ratio from attempt counts.

Untouched cards get priority 0, so they rank with well-known cards rather
than ahead of known-weak ones.
"""

from collections.abc import Callable, Mapping

from tango.domain.models import CardItem, CardRecord


def failure_ratio(success: int, failure: int) -> float:
    """failure / (success + failure), or 0.0 when there were no attempts."""
    total = success + failure
    if total <= 0:
        return 0.0
    return failure / total


def priority_from_records(records: Mapping[str, CardRecord]) -> Callable[[CardItem], float]:
    """
    Build a priority function over one snapshot of the card table.

    Cards absent from the snapshot score 0.
    """

    def priority_of(card: CardItem) -> float:
        record = records.get(card.id)
        if record is None:
            return 0.0
        return failure_ratio(record.success, record.failure)

    return priority_of
