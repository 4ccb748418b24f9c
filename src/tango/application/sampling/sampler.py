"""
Adaptive sampler for random study runs.

Two strategies:
1. Mixed: half the run drawn uniformly (exploration), the rest filled with
   the highest-priority remaining cards (exploitation).
2. Flag-first: difficult-flagged cards by priority, topped up with a mixed
   sample of the unflagged cards.

Both are pure and reproducible for a fixed pool order, random sequence and
priority function.
"""

from collections.abc import Callable, Collection, Mapping, Sequence

from tango.domain.models import CardItem, CardRecord

from .primitives import RandomSource, sample_n
from .priority import priority_from_records

PriorityFn = Callable[[CardItem], float]


def _by_priority(cards: Sequence[CardItem], priority_of: PriorityFn) -> list[CardItem]:
    # sorted() is stable with reverse=True: ties keep pool order
    return sorted(cards, key=priority_of, reverse=True)


def sample_mixed_by_priority(
    pool: Sequence[CardItem],
    n: int,
    priority_of: PriorityFn,
    rng: RandomSource | None = None,
) -> list[CardItem]:
    """
    Sample up to n cards: floor(n/2) at random, the rest by descending priority.

    Args:
        pool: Candidate cards.
        n: Requested run size.
        priority_of: Scalar priority per card, higher is studied first.
        rng: Random source for the exploration half.

    Returns:
        Exploration cards followed by exploitation cards, no id repeated.
    """
    if n <= 0 or not pool:
        return []

    explore = sample_n(pool, min(n // 2, len(pool)), rng)
    chosen_ids = {card.id for card in explore}
    remaining = [card for card in pool if card.id not in chosen_ids]

    need = min(n - len(explore), len(remaining))
    exploit = _by_priority(remaining, priority_of)[:need]

    return explore + exploit


def sample_flag_first(
    pool: Sequence[CardItem],
    flagged_ids: Collection[str],
    n: int,
    priority_of: PriorityFn,
    rng: RandomSource | None = None,
) -> list[CardItem]:
    """
    Sample up to n cards, taking difficult-flagged cards before anything else.

    If at least n cards are flagged, only the top n flagged cards (by
    priority) are returned. Otherwise all flagged cards come first and the
    remaining slots are filled by sample_mixed_by_priority over the
    unflagged cards.
    """
    if n <= 0 or not pool:
        return []

    flagged = _by_priority([card for card in pool if card.id in flagged_ids], priority_of)
    if len(flagged) >= n:
        return flagged[:n]

    unflagged = [card for card in pool if card.id not in flagged_ids]
    fill = sample_mixed_by_priority(unflagged, n - len(flagged), priority_of, rng)
    return flagged + fill


def draw_random_run(
    pool: Sequence[CardItem],
    records: Mapping[str, CardRecord],
    n: int,
    prioritize_difficult: bool = False,
    rng: RandomSource | None = None,
) -> list[CardItem]:
    """
    Sample a random run using one snapshot of the card table.

    Flag-first when ``prioritize_difficult`` is set, mixed otherwise.
    """
    priority_of = priority_from_records(records)
    if prioritize_difficult:
        flagged = {card_id for card_id, record in records.items() if record.difficult}
        return sample_flag_first(pool, flagged, n, priority_of, rng)
    return sample_mixed_by_priority(pool, n, priority_of, rng)
