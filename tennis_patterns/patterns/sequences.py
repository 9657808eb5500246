"""
Shot-sequence n-gram mining.

Each point becomes a token list: the serve direction, then one composite
token per later shot (SHOTTYPE_DIRECTION, plus _DEPTH when charted and
_OUTCOME for point-ending strokes). Tokens mentioning UNKNOWN are dropped.
Every contiguous window of length 2-4 is counted, overlapping windows
included, and identical windows across points share one key.

    rankScore = (winRate - baseline) * ln(total)
"""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterable, Iterator

from tennis_patterns.core.schema import PointOutcome, SequenceNGram, ShotEvent, ShotOutcome
from tennis_patterns.patterns.attribution import PlayerPoint

log = logging.getLogger(__name__)

QUALIFYING_OUTCOMES = (ShotOutcome.WINNER, ShotOutcome.UNFORCED_ERROR, ShotOutcome.FORCED_ERROR)
UNKNOWN_MARKER = "UNKNOWN"
TOP_K = 15


def shot_token(shot: ShotEvent) -> str:
    if shot.is_serve:
        return shot.serve_direction.value
    parts = [shot.shot_type.value, shot.direction.value]
    if shot.has_known_depth:
        parts.append(shot.depth.value)
    if shot.outcome in QUALIFYING_OUTCOMES:
        parts.append(shot.outcome.value)
    return "_".join(parts)


def point_tokens(point: PointOutcome) -> list[str]:
    tokens = (shot_token(s) for s in point.shots)
    return [t for t in tokens if t and UNKNOWN_MARKER not in t]


def extract_ngrams(tokens: list[str], min_n: int = 2, max_n: int = 4) -> Iterator[tuple[str, ...]]:
    """Every contiguous window of each length in [min_n, max_n]."""
    for n in range(min_n, max_n + 1):
        for i in range(len(tokens) - n + 1):
            yield tuple(tokens[i:i + n])


@dataclass
class SequenceReport:
    winning: list[SequenceNGram] = field(default_factory=list)
    losing: list[SequenceNGram] = field(default_factory=list)
    n_points: int = 0
    n_candidates: int = 0


def count_ngrams(
    points: Iterable[PlayerPoint], min_n: int = 2, max_n: int = 4,
) -> tuple[dict[tuple[str, ...], list[int]], int]:
    """{sequence: [total, wins]} plus the number of points read."""
    counts: dict[tuple[str, ...], list[int]] = defaultdict(lambda: [0, 0])
    n_points = 0
    for pp in points:
        n_points += 1
        won = 1 if pp.won else 0
        for gram in extract_ngrams(point_tokens(pp.point), min_n, max_n):
            c = counts[gram]
            c[0] += 1
            c[1] += won
    return dict(counts), n_points


def score_ngram(sequence: tuple[str, ...], total: int, wins: int, baseline: float) -> SequenceNGram:
    win_rate = wins / total if total else 0.0
    uplift = win_rate - baseline
    return SequenceNGram(
        sequence=sequence,
        total=total,
        wins=wins,
        win_rate=win_rate,
        uplift=uplift,
        rank_score=uplift * math.log(total) if total else 0.0,
    )


def mine_sequences(
    points: Iterable[PlayerPoint],
    baseline: float,
    min_total: int = 15,
    top_k: int = TOP_K,
    min_n: int = 2,
    max_n: int = 4,
) -> SequenceReport:
    """Top winning and losing n-grams against ``baseline``.

    winning: uplift > 0, rankScore descending.
    losing:  uplift < 0, rankScore ascending (most negative first).
    """
    counts, n_points = count_ngrams(points, min_n, max_n)
    scored = [
        score_ngram(seq, total, wins, baseline)
        for seq, (total, wins) in counts.items()
        if total >= min_total
    ]
    winning = sorted((g for g in scored if g.uplift > 0), key=lambda g: (-g.rank_score, g.sequence))
    losing = sorted((g for g in scored if g.uplift < 0), key=lambda g: (g.rank_score, g.sequence))
    log.debug(f"Mined {len(counts)} n-grams from {n_points} points, {len(scored)} above min_total")
    return SequenceReport(
        winning=winning[:top_k],
        losing=losing[:top_k],
        n_points=n_points,
        n_candidates=len(scored),
    )
