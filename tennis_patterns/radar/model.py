"""
Radar profile model.

Raw axis scores are shrinkage-weighted composites over a player's adjusted
pattern statistics, selected by the taxonomy rules. Each raw score is then
percentile-ranked against the tour distribution for that axis.

Axis          raw source
serve         n-weighted win rate over serve directions
serve_plus_1  composite over serve → response patterns
forehand      composite over FOREHAND shots, not defensive or finishing
backhand      composite over BACKHAND shots, not defensive or finishing
defense       composite over defensive shots
volley_net    composite over finishing shots
touch         composite over touch shots
balance       weighted std of core-shot effectiveness (inverted)
consistency   1 / max(0.01, that std)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from tennis_patterns.core.buckets import PatternStatistic
from tennis_patterns.radar.distributions import TourDistributions
from tennis_patterns.radar.taxonomy import (
    direction_tag, is_backhand_drive, is_core_shot, is_defensive,
    is_finishing, is_forehand_drive, is_touch,
)
from tennis_patterns.stats.percentile import percentile_rank
from tennis_patterns.stats.shrinkage import (
    SHRINKAGE_K, weighted_composite, weighted_mean, weighted_std,
)

AXES = (
    "serve", "serve_plus_1", "forehand", "backhand", "defense",
    "volley_net", "touch", "balance", "consistency",
)

# axis → (distribution key, lower raw is better)
AXIS_SOURCES = {
    "balance": ("balance_raw", True),
    "consistency": ("consistency_raw", False),
}

RAW_KEYS = tuple(AXIS_SOURCES.get(a, (a, False))[0] for a in AXES)

CONSISTENCY_FLOOR = 0.01


@dataclass(frozen=True)
class RadarSettings:
    min_total: int = 300
    serve_min_total: int = 100
    core_shot_min: int = 10
    exploitability_min_total: int = 50
    min_valid_axes: int = 4
    shrinkage_k: float = SHRINKAGE_K
    axes: tuple[str, ...] = AXES

    def __post_init__(self):
        unknown = [a for a in self.axes if a not in AXES]
        if unknown:
            raise ValueError(f"Unknown radar axes: {unknown}")


@dataclass(frozen=True)
class AxisScore:
    raw: Optional[float]
    percentile: Optional[int]


@dataclass
class PlayerRadarProfile:
    axes: dict[str, AxisScore] = field(default_factory=dict)
    valid: bool = False
    archetype: Optional[str] = None

    @property
    def n_scored(self) -> int:
        return sum(1 for s in self.axes.values() if s.percentile is not None)

    def percentiles(self) -> dict[str, Optional[int]]:
        return {a: s.percentile for a, s in self.axes.items()}


def _items(stats: Iterable[PatternStatistic], keep: Callable[[str], bool] = lambda _: True):
    return [(s.effectiveness, s.total) for s in stats if keep(s.label)]


def exploitability(shot_types: Iterable[PatternStatistic], settings: RadarSettings) -> Optional[float]:
    core = [
        (s.effectiveness, s.total) for s in shot_types
        if is_core_shot(s.label) and s.total >= settings.core_shot_min
    ]
    return weighted_std(core, min_total=settings.exploitability_min_total, min_items=2)


def compute_raw_scores(
    shot_types: list[PatternStatistic],
    serve: list[PatternStatistic],
    serve_plus_one: list[PatternStatistic],
    settings: RadarSettings = RadarSettings(),
) -> dict[str, Optional[float]]:
    """Raw score per distribution key. None means not enough evidence."""
    def composite(items):
        return weighted_composite(items, settings.min_total, settings.shrinkage_k)

    expl = exploitability(shot_types, settings)
    return {
        "serve": weighted_mean(
            [(s.winner_rate, s.total) for s in serve if s.total > 0],
            settings.serve_min_total,
        ),
        "serve_plus_1": composite(_items(serve_plus_one)),
        "forehand": composite(_items(shot_types, is_forehand_drive)),
        "backhand": composite(_items(shot_types, is_backhand_drive)),
        "defense": composite(_items(shot_types, is_defensive)),
        "volley_net": composite(_items(shot_types, is_finishing)),
        "touch": composite(_items(shot_types, is_touch)),
        "balance_raw": expl,
        "consistency_raw": 1.0 / max(CONSISTENCY_FLOOR, expl) if expl is not None else None,
    }


def build_profile(
    raw_scores: dict[str, Optional[float]],
    distributions: TourDistributions,
    settings: RadarSettings = RadarSettings(),
) -> PlayerRadarProfile:
    """Percentile every configured axis. An axis with no reference population stays null."""
    axes = {}
    for axis in settings.axes:
        key, invert = AXIS_SOURCES.get(axis, (axis, False))
        raw = raw_scores.get(key)
        ref = distributions.get(key)
        pct = percentile_rank(raw, ref, invert=invert) if ref else None
        axes[axis] = AxisScore(raw=raw, percentile=pct)

    profile = PlayerRadarProfile(axes=axes)
    profile.valid = profile.n_scored >= settings.min_valid_axes
    profile.archetype = determine_archetype(profile.percentiles()) if profile.valid else None
    return profile


def determine_archetype(p: dict[str, Optional[int]]) -> str:
    srv = p.get("serve") or 0
    srv1 = p.get("serve_plus_1") or 0
    dfn = p.get("defense") or 0
    con = p.get("consistency") or 0
    fh = p.get("forehand") or 0
    bh = p.get("backhand") or 0
    vol = p.get("volley_net") or 0

    if srv >= 80 and srv1 >= 65:
        return "Big Server"
    if dfn >= 80 and con >= 70 and srv < 60:
        return "Counterpuncher"
    if srv >= 60 and fh >= 60 and bh >= 60 and vol >= 60:
        return "All-Court"
    if (fh >= 75 or bh >= 75) and vol < 60:
        return "Aggressive Baseliner"
    return "All-Round"


# ── Directional splits ─────────────────────────────────────────────────

@dataclass(frozen=True)
class DirectionalSplit:
    left: Optional[float]
    center: Optional[float]
    right: Optional[float]
    left_n: int
    right_n: int
    asymmetry: Optional[float]


def directional_splits(
    direction_stats: Iterable[PatternStatistic], settings: RadarSettings = RadarSettings(),
) -> DirectionalSplit:
    """Composite effectiveness per direction and |LEFT - RIGHT|.

    Asymmetry needs both sides charted and LEFT + RIGHT volume >= min_total.
    """
    by_tag: dict[str, list[tuple[float, int]]] = {"LEFT": [], "CENTER": [], "RIGHT": []}
    for s in direction_stats:
        tag = direction_tag(s.label)
        if tag is not None:
            by_tag[tag].append((s.effectiveness, s.total))

    k = settings.shrinkage_k
    left = weighted_composite(by_tag["LEFT"], 0, k)
    right = weighted_composite(by_tag["RIGHT"], 0, k)
    left_n = sum(n for _, n in by_tag["LEFT"])
    right_n = sum(n for _, n in by_tag["RIGHT"])

    asymmetry = None
    if left is not None and right is not None and left_n + right_n >= settings.min_total:
        asymmetry = abs(left - right)

    return DirectionalSplit(
        left=left,
        center=weighted_composite(by_tag["CENTER"], 0, k),
        right=right,
        left_n=left_n,
        right_n=right_n,
        asymmetry=asymmetry,
    )
