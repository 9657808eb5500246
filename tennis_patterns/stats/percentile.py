"""
Rank a raw score against a reference population.

The reference population is the distribution minus one occurrence of the
value itself, so a player scored against a snapshot that includes them is
not compared with their own entry. With no peers left (or an empty
distribution) the neutral percentile is returned.

On [10, 20, 30, 40, 50]: 30 ranks 50, 10 ranks 0 and 50 ranks 100. The
plain count-below-plus-half-ties formula over all five entries would put
50 at 90, because the value's own entry counts as half a tie.
"""

from __future__ import annotations

import math
from typing import Iterable, Optional

import numpy as np

NEUTRAL_PERCENTILE = 50


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def _clean(distribution: Iterable[Optional[float]]) -> np.ndarray:
    arr = np.asarray([v for v in distribution if v is not None], dtype=float)
    return np.sort(arr[~np.isnan(arr)])


def percentile_rank(
    value: Optional[float],
    distribution: Iterable[Optional[float]],
    invert: bool = False,
) -> Optional[int]:
    """0-100 percentile of ``value``, ties split in half.

    None value → None. Empty distribution → 50 regardless of ``invert``.
    """
    if value is None:
        return None
    ref = _clean(distribution)
    if ref.size == 0:
        return NEUTRAL_PERCENTILE

    below = int(np.count_nonzero(ref < value))
    ties = int(np.count_nonzero(ref == value))
    if ties:
        peers = ref.size - 1
        rank = below + (ties - 1) / 2.0
    else:
        peers = ref.size
        rank = float(below)
    if peers == 0:
        return NEUTRAL_PERCENTILE

    pct = min(100, max(0, round_half_up(100.0 * rank / peers)))
    return 100 - pct if invert else pct
