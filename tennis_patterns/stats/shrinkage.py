"""
Sample-size shrinkage and weighted composites.

Items are (effectiveness, n) pairs. An item with either value missing is
left out of both numerator and denominator.
"""

from __future__ import annotations

from typing import Iterable, Optional

import numpy as np

SHRINKAGE_K = 50

Item = tuple[Optional[float], Optional[float]]


def shrink(eff: Optional[float], n: Optional[float], k: float = SHRINKAGE_K) -> float:
    """eff * n / (n + k). Missing inputs or n=0 shrink to 0."""
    if eff is None or n is None or n + k <= 0:
        return 0.0
    return eff * n / (n + k)


_shrink_all = np.vectorize(shrink, otypes=[float])


def _present(items: Iterable[Item]) -> tuple[np.ndarray, np.ndarray]:
    pairs = [(e, n) for e, n in items if e is not None and n is not None]
    if not pairs:
        return np.empty(0), np.empty(0)
    eff, n = zip(*pairs)
    return np.asarray(eff, dtype=float), np.asarray(n, dtype=float)


def weighted_composite(
    items: Iterable[Item], min_total: float, k: float = SHRINKAGE_K,
) -> Optional[float]:
    """Σ(shrink(eff, n) · n) / Σn, or None when Σn < min_total."""
    eff, n = _present(items)
    total = float(n.sum())
    if total <= 0 or total < min_total:
        return None
    shrunk = _shrink_all(eff, n, k)
    return float((shrunk * n).sum() / total)


def weighted_mean(items: Iterable[Item], min_total: float) -> Optional[float]:
    """Plain n-weighted mean, or None when Σn < min_total."""
    eff, n = _present(items)
    total = float(n.sum())
    if total <= 0 or total < min_total:
        return None
    return float((eff * n).sum() / total)


def weighted_std(
    items: Iterable[Item], min_total: float, min_items: int = 2,
) -> Optional[float]:
    """n-weighted population standard deviation of eff.

    None when Σn < min_total or fewer than ``min_items`` items are present.
    """
    eff, n = _present(items)
    total = float(n.sum())
    if eff.size < min_items or total <= 0 or total < min_total:
        return None
    mean = np.average(eff, weights=n)
    return float(np.sqrt(np.average((eff - mean) ** 2, weights=n)))
