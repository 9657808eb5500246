"""
Typed bucket keys and the aggregates grouped under them.

Each pattern family has its own frozen key type with structural equality,
so two shots land in the same bucket exactly when their key fields match.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from tennis_patterns.core.schema import (
    ConfidenceTier, Direction, Interval, OutcomeModel, ServeDirection,
    ShotOutcome, ShotType,
)


# ── Keys ───────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ShotTypeKey:
    shot_type: ShotType

    @property
    def label(self) -> str:
        return self.shot_type.value

    def fields(self) -> dict:
        return {"shotType": self.shot_type.value}


@dataclass(frozen=True)
class ShotDirectionKey:
    shot_type: ShotType
    direction: Direction

    @property
    def label(self) -> str:
        return f"{self.shot_type.value}_{self.direction.value}"

    def fields(self) -> dict:
        return {"shotType": self.shot_type.value, "direction": self.direction.value}


@dataclass(frozen=True)
class ServeDirectionKey:
    serve_direction: ServeDirection

    @property
    def label(self) -> str:
        return self.serve_direction.value

    def fields(self) -> dict:
        return {"direction": self.serve_direction.value}


@dataclass(frozen=True)
class ServeResponseKey:
    serve_direction: ServeDirection
    response_type: ShotType

    @property
    def label(self) -> str:
        return f"{self.serve_direction.value}->{self.response_type.value}"

    def fields(self) -> dict:
        return {
            "serveDir": self.serve_direction.value,
            "responseType": self.response_type.value,
        }


PatternKey = Union[ShotTypeKey, ShotDirectionKey, ServeDirectionKey, ServeResponseKey]


# ── Aggregates ─────────────────────────────────────────────────────────

@dataclass
class PatternBucket:
    """Running counts for one key. Owned by the aggregation that created it."""
    key: PatternKey
    total: int = 0
    winners: int = 0
    unforced_errors: int = 0
    forced_errors: int = 0
    continues: int = 0
    points_won: int = 0

    def add(self, outcome: ShotOutcome, won: bool) -> None:
        self.total += 1
        if outcome is ShotOutcome.WINNER:
            self.winners += 1
        elif outcome is ShotOutcome.UNFORCED_ERROR:
            self.unforced_errors += 1
        elif outcome is ShotOutcome.FORCED_ERROR:
            self.forced_errors += 1
        else:
            self.continues += 1
        if won:
            self.points_won += 1

    @property
    def errors(self) -> int:
        return self.unforced_errors + self.forced_errors


@dataclass(frozen=True)
class PatternStatistic:
    """A finalized bucket with rates, intervals and a confidence tier.

    ``effectiveness`` holds (winners - errors) / total under the descriptive
    model and win rate minus baseline under the adjusted model.
    """
    key: PatternKey
    model: OutcomeModel
    total: int
    winners: int
    unforced_errors: int
    forced_errors: int
    points_won: int
    winner_rate: float
    error_rate: float
    effectiveness: float
    winner_ci: Interval
    error_ci: Interval
    confidence: ConfidenceTier

    def __post_init__(self):
        if self.total < 0:
            raise ValueError(f"total must be >= 0, got {self.total}")
        for name in ("winner_rate", "error_rate"):
            v = getattr(self, name)
            if not 0.0 <= v <= 1.0:
                raise ValueError(f"{name} must be in [0, 1], got {v}")
        if not -1.0 <= self.effectiveness <= 1.0:
            raise ValueError(f"effectiveness must be in [-1, 1], got {self.effectiveness}")

    @property
    def label(self) -> str:
        return self.key.label
