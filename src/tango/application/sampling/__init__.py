# Sampling Package
from .primitives import RandomSource, sample_n, shuffle
from .priority import failure_ratio, priority_from_records
from .sampler import draw_random_run, sample_flag_first, sample_mixed_by_priority

__all__ = [
    "RandomSource",
    "shuffle",
    "sample_n",
    "failure_ratio",
    "priority_from_records",
    "sample_mixed_by_priority",
    "sample_flag_first",
    "draw_random_run",
]
