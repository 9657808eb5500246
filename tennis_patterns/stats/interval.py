"""
Wilson score interval for a binomial proportion.

Values are returned unrounded. Rounding belongs to the export layer.
"""

import math

from tennis_patterns.core.schema import Interval

DEFAULT_Z = 1.96

EMPTY_INTERVAL = Interval(lower=0.0, upper=0.0, center=0.0)


def wilson_interval(wins: int, total: int, z: float = DEFAULT_Z) -> Interval:
    """Wilson score interval for ``wins`` successes out of ``total``.

    total=0 returns (0, 0, 0). Bounds are clamped to [0, 1].
    """
    if total < 0 or wins < 0:
        raise ValueError(f"wins and total must be >= 0, got wins={wins}, total={total}")
    if wins > total:
        raise ValueError(f"wins ({wins}) cannot exceed total ({total})")
    if total == 0:
        return EMPTY_INTERVAL

    n = float(total)
    p = wins / n
    z2 = z * z
    denom = 1.0 + z2 / n
    center = (p + z2 / (2.0 * n)) / denom
    margin = z * math.sqrt(p * (1.0 - p) / n + z2 / (4.0 * n * n)) / denom

    return Interval(
        lower=max(0.0, center - margin),
        upper=min(1.0, center + margin),
        center=center,
    )
