"""
Scouting insights.

Two generators:
  * divergence: how a shot's descriptive effectiveness moves between won
    and lost matches.
  * baseline: the shot types whose win rate strays furthest from the
    player's baseline.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from tennis_patterns.core.buckets import PatternBucket, PatternKey, PatternStatistic

DEFAULT_INSIGHT_THRESHOLDS = {
    "min_total": 30,
    "strong_delta": 0.10,
    "mild_delta": 0.05,
    "limit": 3,
}


@dataclass(frozen=True)
class Insight:
    kind: str        # "strength" or "weakness"
    severity: str    # "major" or "minor"
    label: str
    title: str
    detail: str
    delta: float
    total: int


def pretty_label(label: str) -> str:
    """FOREHAND_VOLLEY → Forehand Volley."""
    return " ".join(w.capitalize() for w in label.replace("_", " ").lower().split())


def _descriptive_eff(bucket: PatternBucket | None) -> tuple[float, int]:
    if bucket is None or bucket.total == 0:
        return 0.0, 0
    return (bucket.winners - bucket.errors) / bucket.total, bucket.total


def divergence_insights(
    win_buckets: dict[PatternKey, PatternBucket],
    loss_buckets: dict[PatternKey, PatternBucket],
    thresholds: dict | None = None,
) -> list[Insight]:
    """Shots whose effectiveness differs between wins and losses, largest |Δ| first.

    A shot is considered when either side reaches ``min_total``.
    """
    t = {**DEFAULT_INSIGHT_THRESHOLDS, **(thresholds or {})}
    insights = []
    keys = sorted(set(win_buckets) | set(loss_buckets), key=lambda k: k.label)

    for key in keys:
        w_eff, w_n = _descriptive_eff(win_buckets.get(key))
        l_eff, l_n = _descriptive_eff(loss_buckets.get(key))
        if w_n < t["min_total"] and l_n < t["min_total"]:
            continue
        delta = w_eff - l_eff
        if abs(delta) <= t["mild_delta"]:
            continue

        name = pretty_label(key.label)
        evidence = f"(Δ {delta * 100:.1f}pp). N={w_n}W/{l_n}L."
        if delta > t["strong_delta"]:
            kind, severity, title = "strength", "major", f"{name} is a key weapon in wins"
            detail = f"Effectiveness jumps from {l_eff * 100:.1f}% in losses to {w_eff * 100:.1f}% in wins {evidence}"
        elif delta > 0:
            kind, severity, title = "strength", "minor", f"{name} improves in wins"
            detail = f"Effectiveness: {w_eff * 100:.1f}% in wins vs {l_eff * 100:.1f}% in losses {evidence}"
        elif delta < -t["strong_delta"]:
            kind, severity, title = "weakness", "major", f"{name} collapses in losses"
            detail = f"Effectiveness drops from {w_eff * 100:.1f}% in wins to {l_eff * 100:.1f}% in losses {evidence}"
        else:
            kind, severity, title = "weakness", "minor", f"{name} degrades in losses"
            detail = f"Effectiveness: {w_eff * 100:.1f}% in wins to {l_eff * 100:.1f}% in losses {evidence}"

        insights.append(Insight(
            kind=kind, severity=severity, label=key.label, title=title,
            detail=detail, delta=delta, total=w_n + l_n,
        ))

    insights.sort(key=lambda i: (-abs(i.delta), i.label))
    return insights


def baseline_insights(stats: Iterable[PatternStatistic], limit: int = 3) -> list[Insight]:
    """The ``limit`` adjusted statistics with the largest |uplift|."""
    ranked = sorted(stats, key=lambda s: (-abs(s.effectiveness), s.label))
    insights = []
    for s in ranked[:limit]:
        uplift = s.effectiveness
        strength = uplift > 0
        kind = "strength" if strength else "weakness"
        sign = "+" if strength else ""
        insights.append(Insight(
            kind=kind,
            severity="major",
            label=s.label,
            title=f"{kind.capitalize()}: {pretty_label(s.label)}",
            detail=(
                f"When using this shot, point win rate is {sign}{uplift * 100:.1f}% "
                f"vs baseline. Evidence: N={s.total}"
            ),
            delta=uplift,
            total=s.total,
        ))
    return insights
