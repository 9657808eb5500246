"""Sample-size reliability labels."""

from tennis_patterns.core.schema import ConfidenceTier

DEFAULT_MIN_N = 15
HIGH_CONFIDENCE_N = 30


def confidence_tier(
    total: int, min_n: int = DEFAULT_MIN_N, high_n: int = HIGH_CONFIDENCE_N,
) -> ConfidenceTier:
    """high if total >= high_n, low if min_n <= total < high_n, else insufficient."""
    if total >= high_n:
        return ConfidenceTier.HIGH
    if total >= min_n:
        return ConfidenceTier.LOW
    return ConfidenceTier.INSUFFICIENT
