"""
Tennis Patterns domain objects.

Row sets from every source normalize into these types. Every module in the
project depends on this file; this file depends on nothing else in the package.

Validation rules are enforced at construction time via __post_init__.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import datetime
from enum import Enum
from typing import Optional


# ── Enums ──────────────────────────────────────────────────────────────

class Surface(Enum):
    HARD = "Hard"
    CLAY = "Clay"
    GRASS = "Grass"
    CARPET = "Carpet"


class ShotType(Enum):
    FOREHAND = "FOREHAND"
    BACKHAND = "BACKHAND"
    FOREHAND_SLICE = "FOREHAND_SLICE"
    BACKHAND_SLICE = "BACKHAND_SLICE"
    FOREHAND_VOLLEY = "FOREHAND_VOLLEY"
    BACKHAND_VOLLEY = "BACKHAND_VOLLEY"
    HALF_VOLLEY = "HALF_VOLLEY"
    SWINGING_VOLLEY = "SWINGING_VOLLEY"
    OVERHEAD = "OVERHEAD"
    SMASH = "SMASH"
    DROP_SHOT = "DROP_SHOT"
    LOB = "LOB"
    TRICK_SHOT = "TRICK_SHOT"
    UNKNOWN_SHOT_TYPE = "UNKNOWN_SHOT_TYPE"


class Direction(Enum):
    LEFT = "LEFT"
    CENTER = "CENTER"
    RIGHT = "RIGHT"
    UNKNOWN_DIRECTION = "UNKNOWN_DIRECTION"


class ServeDirection(Enum):
    WIDE = "WIDE"
    BODY = "BODY"
    T = "T"
    UNKNOWN_SERVE_DIRECTION = "UNKNOWN_SERVE_DIRECTION"


class Depth(Enum):
    SHALLOW = "SHALLOW"
    DEEP = "DEEP"
    VERY_DEEP = "VERY_DEEP"
    UNKNOWN_DEPTH = "UNKNOWN_DEPTH"


class ShotOutcome(Enum):
    WINNER = "WINNER"
    UNFORCED_ERROR = "UNFORCED_ERROR"
    FORCED_ERROR = "FORCED_ERROR"
    CONTINUE = "CONTINUE"


class ConfidenceTier(str, Enum):
    HIGH = "high"
    LOW = "low"
    INSUFFICIENT = "insufficient"


class OutcomeModel(Enum):
    """How a bucket's outcome is scored.

    DESCRIPTIVE counts shot outcomes directly: (winners - errors) / total.
    ADJUSTED counts points won by the player and subtracts a baseline rate.
    """
    DESCRIPTIVE = "descriptive"
    ADJUSTED = "adjusted"


ERROR_OUTCOMES = frozenset({ShotOutcome.UNFORCED_ERROR, ShotOutcome.FORCED_ERROR})


# ── Domain Objects ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class ShotEvent:
    """A single charted shot. Index 0 is the serve."""
    index: int
    shot_type: ShotType = ShotType.UNKNOWN_SHOT_TYPE
    direction: Direction = Direction.UNKNOWN_DIRECTION
    serve_direction: ServeDirection = ServeDirection.UNKNOWN_SERVE_DIRECTION
    depth: Optional[Depth] = None
    outcome: Optional[ShotOutcome] = ShotOutcome.CONTINUE

    def __post_init__(self):
        if self.index < 0:
            raise ValueError(f"index must be >= 0, got {self.index}")

    @property
    def is_serve(self) -> bool:
        return self.index == 0

    @property
    def is_error(self) -> bool:
        return self.outcome in ERROR_OUTCOMES

    @property
    def has_known_depth(self) -> bool:
        return self.depth is not None and self.depth is not Depth.UNKNOWN_DEPTH


@dataclass(frozen=True)
class PointOutcome:
    """One point of a match with its ordered shots.

    ``game_score`` is written from the server's perspective ("30-15").
    When ``server_side`` is not charted, side 1 serves odd-numbered points
    and side 2 serves even-numbered points.
    """
    match_id: str
    number: int
    winner_side: int
    shots: tuple[ShotEvent, ...] = ()
    game_score: str = ""
    server_side: Optional[int] = None

    def __post_init__(self):
        if not self.match_id:
            raise ValueError("match_id cannot be empty")
        if self.number < 1:
            raise ValueError(f"number must be >= 1, got {self.number}")
        if self.winner_side not in (1, 2):
            raise ValueError(f"winner_side must be 1 or 2, got {self.winner_side}")
        if self.server_side is not None and self.server_side not in (1, 2):
            raise ValueError(f"server_side must be 1 or 2, got {self.server_side}")
        indices = [s.index for s in self.shots]
        if len(set(indices)) != len(indices):
            raise ValueError(
                f"{self.match_id}#{self.number}: duplicate shot index in {sorted(indices)}"
            )
        object.__setattr__(self, "shots", tuple(sorted(self.shots, key=lambda s: s.index)))

    @property
    def serving_side(self) -> int:
        if self.server_side is not None:
            return self.server_side
        return 1 if self.number % 2 == 1 else 2

    @property
    def has_shots(self) -> bool:
        return len(self.shots) > 0

    def shot_at(self, index: int) -> Optional[ShotEvent]:
        for s in self.shots:
            if s.index == index:
                return s
        return None


@dataclass(frozen=True)
class MatchContext:
    """Match-level context used only to select and filter points."""
    match_id: str
    player1: str
    player2: str
    surface: Optional[Surface] = None
    date: Optional[datetime.date] = None
    best_of: Optional[int] = None
    winner_side: int = 1  # charting data lists the match winner first

    def __post_init__(self):
        if not self.match_id:
            raise ValueError("match_id cannot be empty")
        if not self.player1 or not self.player2:
            raise ValueError("player names cannot be empty")
        if self.player1 == self.player2:
            raise ValueError(f"{self.match_id}: player1 and player2 are both '{self.player1}'")
        if self.winner_side not in (1, 2):
            raise ValueError(f"winner_side must be 1 or 2, got {self.winner_side}")
        if self.best_of is not None and self.best_of < 1:
            raise ValueError(f"best_of must be >= 1, got {self.best_of}")

    @property
    def year(self) -> Optional[int]:
        return self.date.year if self.date is not None else None

    def involves(self, player: str) -> bool:
        return player in (self.player1, self.player2)


@dataclass
class PlayerRows:
    """Everything the data-access layer hands over for one player."""
    player: str
    matches: dict[str, MatchContext] = field(default_factory=dict)
    points: list[PointOutcome] = field(default_factory=list)

    def __post_init__(self):
        if not self.player:
            raise ValueError("player name cannot be empty")
        for p in self.points:
            if p.match_id not in self.matches:
                raise ValueError(f"point {p.match_id}#{p.number} references unknown match")

    @property
    def n_matches(self) -> int:
        return len(self.matches)

    @property
    def n_points(self) -> int:
        return len(self.points)


# ── Derived Statistics ─────────────────────────────────────────────────

@dataclass(frozen=True)
class Interval:
    """A binomial confidence interval. All three bounds are probabilities."""
    lower: float
    upper: float
    center: float


@dataclass(frozen=True)
class SequenceNGram:
    """A contiguous run of 2-4 shot tokens and how the player fared after it."""
    sequence: tuple[str, ...]
    total: int
    wins: int
    win_rate: float
    uplift: float
    rank_score: float
