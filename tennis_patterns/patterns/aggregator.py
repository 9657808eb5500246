"""
Pattern aggregation.

Groups an annotated shot stream into PatternBuckets under a key function,
then finalizes each bucket into a PatternStatistic under one of two outcome
models:

  DESCRIPTIVE: winnerRate = winners / total,
               effectiveness = (winners - errors) / total
  ADJUSTED:    winnerRate = points_won / total,
               effectiveness = winnerRate - baseline

Buckets below the minimum sample are dropped. Output ordering is total
descending, then key label, so identical input always yields identical output.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional

from tennis_patterns.core.buckets import (
    PatternBucket, PatternKey, PatternStatistic,
    ServeDirectionKey, ServeResponseKey, ShotDirectionKey, ShotTypeKey,
)
from tennis_patterns.core.schema import (
    Direction, OutcomeModel, ServeDirection, ShotType,
)
from tennis_patterns.patterns.attribution import AnnotatedShot, PlayerPoint, own_shot_stream, split_by_match_result
from tennis_patterns.stats.confidence import DEFAULT_MIN_N, HIGH_CONFIDENCE_N, confidence_tier
from tennis_patterns.stats.interval import DEFAULT_Z, wilson_interval

log = logging.getLogger(__name__)

KeyFn = Callable[[AnnotatedShot], Optional[PatternKey]]


# ── Key functions ──────────────────────────────────────────────────────

def by_shot_type(a: AnnotatedShot) -> Optional[PatternKey]:
    if a.shot.is_serve or a.shot.shot_type is ShotType.UNKNOWN_SHOT_TYPE:
        return None
    return ShotTypeKey(a.shot.shot_type)


def by_shot_direction(a: AnnotatedShot) -> Optional[PatternKey]:
    if a.shot.is_serve:
        return None
    if a.shot.shot_type is ShotType.UNKNOWN_SHOT_TYPE or a.shot.direction is Direction.UNKNOWN_DIRECTION:
        return None
    return ShotDirectionKey(a.shot.shot_type, a.shot.direction)


def by_serve_direction(a: AnnotatedShot) -> Optional[PatternKey]:
    if not a.shot.is_serve or a.shot.serve_direction is ServeDirection.UNKNOWN_SERVE_DIRECTION:
        return None
    return ServeDirectionKey(a.shot.serve_direction)


def by_serve_response(a: AnnotatedShot) -> Optional[PatternKey]:
    key = by_serve_direction(a)
    if key is None or a.response is None:
        return None
    if a.response.shot_type is ShotType.UNKNOWN_SHOT_TYPE:
        return None
    return ServeResponseKey(a.shot.serve_direction, a.response.shot_type)


# ── Aggregation ────────────────────────────────────────────────────────

def aggregate(shots: Iterable[AnnotatedShot], key_fn: KeyFn) -> dict[PatternKey, PatternBucket]:
    """One bucket per distinct key. Shots with no recorded outcome are skipped."""
    buckets: dict[PatternKey, PatternBucket] = {}
    skipped = 0
    for a in shots:
        key = key_fn(a)
        if key is None:
            continue
        if a.shot.outcome is None:
            skipped += 1
            continue
        bucket = buckets.get(key)
        if bucket is None:
            bucket = buckets[key] = PatternBucket(key=key)
        bucket.add(a.shot.outcome, a.won)
    if skipped:
        log.debug(f"Skipped {skipped} shots with no outcome")
    return buckets


def summarize(
    bucket: PatternBucket,
    model: OutcomeModel,
    baseline: float = 0.0,
    min_n: int = DEFAULT_MIN_N,
    high_n: int = HIGH_CONFIDENCE_N,
    z: float = DEFAULT_Z,
) -> PatternStatistic:
    n = bucket.total
    errors = bucket.errors
    if model is OutcomeModel.DESCRIPTIVE:
        hits = bucket.winners
        effectiveness = (bucket.winners - errors) / n if n else 0.0
    else:
        hits = bucket.points_won
        effectiveness = hits / n - baseline if n else 0.0

    return PatternStatistic(
        key=bucket.key,
        model=model,
        total=n,
        winners=bucket.winners,
        unforced_errors=bucket.unforced_errors,
        forced_errors=bucket.forced_errors,
        points_won=bucket.points_won,
        winner_rate=hits / n if n else 0.0,
        error_rate=errors / n if n else 0.0,
        effectiveness=effectiveness,
        winner_ci=wilson_interval(hits, n, z),
        error_ci=wilson_interval(errors, n, z),
        confidence=confidence_tier(n, min_n, high_n),
    )


def finalize(
    buckets: dict[PatternKey, PatternBucket],
    model: OutcomeModel,
    baseline: float = 0.0,
    min_n: int = DEFAULT_MIN_N,
    high_n: int = HIGH_CONFIDENCE_N,
    z: float = DEFAULT_Z,
) -> list[PatternStatistic]:
    """Drop buckets below ``min_n`` and finalize the rest."""
    kept = [b for b in buckets.values() if b.total >= min_n]
    kept.sort(key=lambda b: (-b.total, b.key.label))
    return [summarize(b, model, baseline, min_n, high_n, z) for b in kept]


def compare_buckets(
    points: Iterable[PlayerPoint], key_fn: KeyFn = by_shot_type,
) -> tuple[dict[PatternKey, PatternBucket], dict[PatternKey, PatternBucket]]:
    """Raw buckets from won matches and from lost matches."""
    wins, losses = split_by_match_result(points)
    return aggregate(own_shot_stream(wins), key_fn), aggregate(own_shot_stream(losses), key_fn)


def compare_wins_losses(
    points: Iterable[PlayerPoint],
    key_fn: KeyFn = by_shot_type,
    model: OutcomeModel = OutcomeModel.DESCRIPTIVE,
    baseline: float = 0.0,
    min_n: int = DEFAULT_MIN_N,
    high_n: int = HIGH_CONFIDENCE_N,
    z: float = DEFAULT_Z,
    buckets: Optional[tuple[dict[PatternKey, PatternBucket], dict[PatternKey, PatternBucket]]] = None,
) -> dict[str, list[PatternStatistic]]:
    """Finalize won-match and lost-match buckets, each side against ``min_n`` on its own.

    ``buckets`` takes the (wins, losses) pair from compare_buckets when the
    caller already has it; ``points`` is then not read.
    """
    win_buckets, loss_buckets = buckets if buckets is not None else compare_buckets(points, key_fn)
    return {
        "wins": finalize(win_buckets, model, baseline, min_n, high_n, z),
        "losses": finalize(loss_buckets, model, baseline, min_n, high_n, z),
    }
