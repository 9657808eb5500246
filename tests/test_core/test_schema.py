"""Tests for core domain objects."""

import datetime

import pytest

from tennis_patterns.core.schema import (
    Depth, Direction, MatchContext, PlayerRows, PointOutcome,
    ServeDirection, ShotEvent, ShotOutcome, ShotType, Surface,
)


# ── ShotEvent ────────────────────────────────────────────────────────

class TestShotEvent:
    def test_defaults_are_unknown(self):
        s = ShotEvent(index=2)
        assert s.shot_type is ShotType.UNKNOWN_SHOT_TYPE
        assert s.direction is Direction.UNKNOWN_DIRECTION
        assert s.serve_direction is ServeDirection.UNKNOWN_SERVE_DIRECTION
        assert s.outcome is ShotOutcome.CONTINUE
        assert s.depth is None

    def test_serve_index(self):
        assert ShotEvent(index=0).is_serve
        assert not ShotEvent(index=1).is_serve

    def test_negative_index(self):
        with pytest.raises(ValueError, match="index"):
            ShotEvent(index=-1)

    def test_is_error(self):
        assert ShotEvent(index=1, outcome=ShotOutcome.FORCED_ERROR).is_error
        assert ShotEvent(index=1, outcome=ShotOutcome.UNFORCED_ERROR).is_error
        assert not ShotEvent(index=1, outcome=ShotOutcome.WINNER).is_error
        assert not ShotEvent(index=1, outcome=None).is_error

    def test_known_depth(self):
        assert ShotEvent(index=1, depth=Depth.DEEP).has_known_depth
        assert not ShotEvent(index=1, depth=Depth.UNKNOWN_DEPTH).has_known_depth
        assert not ShotEvent(index=1).has_known_depth

    def test_frozen(self):
        s = ShotEvent(index=1)
        with pytest.raises(AttributeError):
            s.index = 3


# ── PointOutcome ─────────────────────────────────────────────────────

class TestPointOutcome:
    def test_shots_sorted_by_index(self):
        p = PointOutcome(
            match_id="m1", number=1, winner_side=1,
            shots=(ShotEvent(index=2), ShotEvent(index=0), ShotEvent(index=1)),
        )
        assert [s.index for s in p.shots] == [0, 1, 2]

    def test_duplicate_index_rejected(self):
        with pytest.raises(ValueError, match="duplicate shot index"):
            PointOutcome(
                match_id="m1", number=1, winner_side=1,
                shots=(ShotEvent(index=1), ShotEvent(index=1)),
            )

    @pytest.mark.parametrize("side", [0, 3, -1])
    def test_winner_side_must_be_one_or_two(self, side):
        with pytest.raises(ValueError, match="winner_side"):
            PointOutcome(match_id="m1", number=1, winner_side=side)

    def test_number_starts_at_one(self):
        with pytest.raises(ValueError, match="number"):
            PointOutcome(match_id="m1", number=0, winner_side=1)

    def test_serving_side_from_parity(self):
        assert PointOutcome(match_id="m1", number=1, winner_side=1).serving_side == 1
        assert PointOutcome(match_id="m1", number=2, winner_side=1).serving_side == 2
        assert PointOutcome(match_id="m1", number=7, winner_side=1).serving_side == 1

    def test_explicit_server_overrides_parity(self):
        p = PointOutcome(match_id="m1", number=1, winner_side=1, server_side=2)
        assert p.serving_side == 2

    def test_invalid_server_side(self):
        with pytest.raises(ValueError, match="server_side"):
            PointOutcome(match_id="m1", number=1, winner_side=1, server_side=3)

    def test_shot_at(self):
        p = PointOutcome(
            match_id="m1", number=1, winner_side=1,
            shots=(ShotEvent(index=0), ShotEvent(index=1, shot_type=ShotType.FOREHAND)),
        )
        assert p.shot_at(1).shot_type is ShotType.FOREHAND
        assert p.shot_at(5) is None


# ── MatchContext ─────────────────────────────────────────────────────

class TestMatchContext:
    def test_basic_creation(self):
        m = MatchContext(
            match_id="m1", player1="A", player2="B",
            surface=Surface.CLAY, date=datetime.date(2021, 6, 1), best_of=5,
        )
        assert m.year == 2021
        assert m.winner_side == 1
        assert m.involves("A") and m.involves("B")
        assert not m.involves("C")

    def test_year_none_without_date(self):
        assert MatchContext(match_id="m1", player1="A", player2="B").year is None

    def test_empty_player(self):
        with pytest.raises(ValueError, match="player names"):
            MatchContext(match_id="m1", player1="", player2="B")

    def test_same_player_twice(self):
        with pytest.raises(ValueError, match="both"):
            MatchContext(match_id="m1", player1="A", player2="A")

    def test_invalid_best_of(self):
        with pytest.raises(ValueError, match="best_of"):
            MatchContext(match_id="m1", player1="A", player2="B", best_of=0)


# ── PlayerRows ───────────────────────────────────────────────────────

class TestPlayerRows:
    def test_counts(self):
        m = MatchContext(match_id="m1", player1="A", player2="B")
        rows = PlayerRows(
            player="A", matches={"m1": m},
            points=[PointOutcome(match_id="m1", number=i, winner_side=1) for i in range(1, 4)],
        )
        assert rows.n_matches == 1
        assert rows.n_points == 3

    def test_point_with_unknown_match(self):
        with pytest.raises(ValueError, match="unknown match"):
            PlayerRows(
                player="A", matches={},
                points=[PointOutcome(match_id="m9", number=1, winner_side=1)],
            )
