"""
Baseline point-win rates.

Adjusted effectiveness is measured against these. They are computed once
per query and the same value is passed to every finalization in that query.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from tennis_patterns.patterns.attribution import PlayerPoint


def baseline_win_rate(points: Sequence[PlayerPoint]) -> float:
    """won / total over already-filtered points, 0 when there are none."""
    if not points:
        return 0.0
    return sum(1 for pp in points if pp.won) / len(points)


def serve_baseline_win_rate(points: Sequence[PlayerPoint]) -> float:
    """Same as baseline_win_rate, restricted to points the player served."""
    return baseline_win_rate([pp for pp in points if pp.serving])


@dataclass(frozen=True)
class Baselines:
    overall: float
    serve: float
    n_points: int
    n_serve_points: int


def compute_baselines(points: Sequence[PlayerPoint]) -> Baselines:
    return Baselines(
        overall=baseline_win_rate(points),
        serve=serve_baseline_win_rate(points),
        n_points=len(points),
        n_serve_points=sum(1 for pp in points if pp.serving),
    )
