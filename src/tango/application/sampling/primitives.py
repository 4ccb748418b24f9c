"""
Shuffle and sample helpers.

Randomness is injectable: pass any object with a ``random()`` method returning
a float in [0, 1). The ``random`` module is used when none is given.
"""

import random
from collections.abc import Sequence
from typing import Protocol, TypeVar

T = TypeVar("T")


class RandomSource(Protocol):
    def random(self) -> float: ...


def shuffle(items: Sequence[T], rng: RandomSource | None = None) -> list[T]:
    """
    Return a Fisher-Yates permutation of ``items`` without mutating it.

    Walks i from len-1 down to 1 and swaps item i with item
    j = int(rng.random() * (i + 1)), one draw per step.
    """
    source = rng if rng is not None else random
    out = list(items)
    for i in range(len(out) - 1, 0, -1):
        j = int(source.random() * (i + 1))
        out[i], out[j] = out[j], out[i]
    return out


def sample_n(items: Sequence[T], n: int, rng: RandomSource | None = None) -> list[T]:
    """Return min(n, len(items)) distinct positions of ``items``; empty when n <= 0."""
    if n <= 0:
        return []
    shuffled = shuffle(items, rng)
    return shuffled[: min(n, len(shuffled))]
