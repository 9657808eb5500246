"""
Player perspective over raw points.

A player is side 1 when listed first in the match, side 2 otherwise. Shots
alternate from the serve, so the player's own strokes are the even indices
on points they serve and the odd indices on points they return.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from tennis_patterns.core.errors import UnknownPlayerError
from tennis_patterns.core.schema import MatchContext, PlayerRows, PointOutcome, ShotEvent
from tennis_patterns.patterns.filters import ContextFilter, NO_FILTER


def player_side(match: MatchContext, player: str) -> int:
    if match.player1 == player:
        return 1
    if match.player2 == player:
        return 2
    raise UnknownPlayerError(player, match.match_id)


@dataclass(frozen=True)
class PlayerPoint:
    """A point seen from one player's side of the net."""
    point: PointOutcome
    match: MatchContext
    side: int

    @property
    def won(self) -> bool:
        return self.point.winner_side == self.side

    @property
    def serving(self) -> bool:
        return self.point.serving_side == self.side

    @property
    def match_won(self) -> bool:
        return self.match.winner_side == self.side

    def is_own(self, shot: ShotEvent) -> bool:
        return shot.index % 2 == (0 if self.serving else 1)

    def own_shots(self) -> list[ShotEvent]:
        return [s for s in self.point.shots if self.is_own(s)]


@dataclass(frozen=True)
class AnnotatedShot:
    """A shot with its point's result for the player and the reply that followed."""
    shot: ShotEvent
    won: bool
    serving: bool
    response: Optional[ShotEvent] = None


def player_points(rows: PlayerRows, filters: ContextFilter = NO_FILTER) -> list[PlayerPoint]:
    """Attribute every point in ``rows`` to the player, keeping those the filter accepts.

    Output order follows (match_id, number) so downstream reductions are
    independent of row arrival order.
    """
    out = []
    for p in rows.points:
        match = rows.matches[p.match_id]
        if not filters.accepts_point(p, match):
            continue
        out.append(PlayerPoint(point=p, match=match, side=player_side(match, rows.player)))
    out.sort(key=lambda pp: (pp.point.match_id, pp.point.number))
    return out


def own_shot_stream(points: Iterable[PlayerPoint]) -> Iterator[AnnotatedShot]:
    """Every stroke the player hit, serves included."""
    for pp in points:
        for shot in pp.own_shots():
            yield AnnotatedShot(
                shot=shot, won=pp.won, serving=pp.serving,
                response=pp.point.shot_at(shot.index + 1),
            )


def serve_stream(points: Iterable[PlayerPoint]) -> Iterator[AnnotatedShot]:
    """The player's serves, each paired with the return that followed."""
    for pp in points:
        if not pp.serving:
            continue
        serve = pp.point.shot_at(0)
        if serve is None:
            continue
        yield AnnotatedShot(
            shot=serve, won=pp.won, serving=True,
            response=pp.point.shot_at(1),
        )


def split_by_match_result(
    points: Iterable[PlayerPoint],
) -> tuple[list[PlayerPoint], list[PlayerPoint]]:
    """(points from matches the player won, points from matches they lost)."""
    wins, losses = [], []
    for pp in points:
        (wins if pp.match_won else losses).append(pp)
    return wins, losses
