"""
Context filters: surface, date range and court side.

Every active clause must hold (logical AND). An empty filter keeps every
point. Court side is decided by a configurable SideRule because the charted
data has carried two conventions: explicit score lists (which overlap on
40-15, 30-40 and friends) and point-count parity.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from tennis_patterns.core.schema import MatchContext, PointOutcome, Surface

DEUCE_SCORES = frozenset({
    "0-0", "15-15", "30-30", "40-40", "15-30", "30-15", "0-15",
    "15-0", "0-30", "30-0", "40-15", "15-40", "30-40", "40-30",
})

AD_SCORES = frozenset({
    "40-0", "0-40", "40-15", "15-40", "30-40", "40-30", "40-AD", "AD-40",
})

GAME_POINTS = {"0": 0, "15": 1, "30": 2, "40": 3, "AD": 4}


class CourtSide(Enum):
    DEUCE = "Deuce"
    AD = "Ad"


def points_played(game_score: str) -> Optional[int]:
    """Number of points played in the game so far, or None if unparseable.

    Tennis scores ("30-15") use the 0/15/30/40/AD ladder; anything else
    numeric is read as a tiebreak count.
    """
    parts = game_score.strip().upper().split("-")
    if len(parts) != 2:
        return None
    played = 0
    for part in parts:
        if part in GAME_POINTS:
            played += GAME_POINTS[part]
        elif part.isdigit():
            played += int(part)
        else:
            return None
    return played


@dataclass(frozen=True)
class SideRule:
    """Decides whether a game score was played on a given court side.

    mode "score_sets" checks membership in the configured score lists.
    mode "parity" serves from the deuce court after an even number of points.
    """
    mode: str = "score_sets"
    deuce_scores: frozenset = DEUCE_SCORES
    ad_scores: frozenset = AD_SCORES

    def __post_init__(self):
        if self.mode not in ("score_sets", "parity"):
            raise ValueError(f"Unknown side rule mode: {self.mode}")

    def matches(self, side: CourtSide, game_score: str) -> bool:
        if self.mode == "parity":
            played = points_played(game_score)
            if played is None:
                return False
            return (played % 2 == 0) == (side is CourtSide.DEUCE)
        scores = self.deuce_scores if side is CourtSide.DEUCE else self.ad_scores
        return game_score in scores


@dataclass(frozen=True)
class ContextFilter:
    surface: Optional[Surface] = None
    date_from: Optional[datetime.date] = None
    date_to: Optional[datetime.date] = None
    side: Optional[CourtSide] = None
    side_rule: SideRule = field(default_factory=SideRule)

    def __post_init__(self):
        if self.date_from and self.date_to and self.date_from > self.date_to:
            raise ValueError(f"date_from {self.date_from} is after date_to {self.date_to}")

    @property
    def is_empty(self) -> bool:
        return (
            self.surface is None and self.date_from is None
            and self.date_to is None and self.side is None
        )

    def accepts_match(self, match: MatchContext) -> bool:
        # A missing surface or date never satisfies an active clause.
        if self.surface is not None and match.surface is not self.surface:
            return False
        if self.date_from is not None and (match.date is None or match.date < self.date_from):
            return False
        if self.date_to is not None and (match.date is None or match.date > self.date_to):
            return False
        return True

    def accepts_point(self, point: PointOutcome, match: MatchContext) -> bool:
        if not self.accepts_match(match):
            return False
        if self.side is not None and not self.side_rule.matches(self.side, point.game_score):
            return False
        return True

    def describe(self) -> dict:
        return {
            "surface": self.surface.value if self.surface else None,
            "dateFrom": self.date_from.isoformat() if self.date_from else None,
            "dateTo": self.date_to.isoformat() if self.date_to else None,
            "side": self.side.value if self.side else None,
        }


NO_FILTER = ContextFilter()
