"""Tests for typed bucket keys and bucket counting."""

import pytest

from tennis_patterns.core.buckets import (
    PatternBucket, PatternStatistic, ServeDirectionKey, ServeResponseKey,
    ShotDirectionKey, ShotTypeKey,
)
from tennis_patterns.core.schema import (
    ConfidenceTier, Direction, Interval, OutcomeModel, ServeDirection,
    ShotOutcome, ShotType,
)


class TestKeys:
    def test_structural_equality(self):
        assert ShotTypeKey(ShotType.FOREHAND) == ShotTypeKey(ShotType.FOREHAND)
        assert hash(ShotTypeKey(ShotType.FOREHAND)) == hash(ShotTypeKey(ShotType.FOREHAND))
        assert ShotTypeKey(ShotType.FOREHAND) != ShotTypeKey(ShotType.BACKHAND)

    def test_different_families_never_equal(self):
        assert ShotTypeKey(ShotType.FOREHAND) != ShotDirectionKey(ShotType.FOREHAND, Direction.LEFT)

    def test_labels(self):
        assert ShotTypeKey(ShotType.DROP_SHOT).label == "DROP_SHOT"
        assert ShotDirectionKey(ShotType.FOREHAND, Direction.LEFT).label == "FOREHAND_LEFT"
        assert ServeDirectionKey(ServeDirection.T).label == "T"
        assert ServeResponseKey(ServeDirection.WIDE, ShotType.BACKHAND).label == "WIDE->BACKHAND"

    def test_fields(self):
        assert ShotDirectionKey(ShotType.BACKHAND, Direction.RIGHT).fields() == {
            "shotType": "BACKHAND", "direction": "RIGHT",
        }
        assert ServeResponseKey(ServeDirection.BODY, ShotType.FOREHAND).fields() == {
            "serveDir": "BODY", "responseType": "FOREHAND",
        }
        assert ServeDirectionKey(ServeDirection.WIDE).fields() == {"direction": "WIDE"}


class TestPatternBucket:
    def test_add_counts_outcomes(self):
        b = PatternBucket(key=ShotTypeKey(ShotType.FOREHAND))
        b.add(ShotOutcome.WINNER, True)
        b.add(ShotOutcome.UNFORCED_ERROR, False)
        b.add(ShotOutcome.FORCED_ERROR, False)
        b.add(ShotOutcome.CONTINUE, True)
        assert b.total == 4
        assert b.winners == 1
        assert b.unforced_errors == 1
        assert b.forced_errors == 1
        assert b.continues == 1
        assert b.errors == 2
        assert b.points_won == 2


class TestPatternStatistic:
    def _make(self, **overrides):
        ci = Interval(0.1, 0.5, 0.3)
        kw = dict(
            key=ShotTypeKey(ShotType.FOREHAND), model=OutcomeModel.DESCRIPTIVE,
            total=10, winners=3, unforced_errors=1, forced_errors=1, points_won=6,
            winner_rate=0.3, error_rate=0.2, effectiveness=0.1,
            winner_ci=ci, error_ci=ci, confidence=ConfidenceTier.INSUFFICIENT,
        )
        kw.update(overrides)
        return PatternStatistic(**kw)

    def test_valid(self):
        assert self._make().label == "FOREHAND"

    def test_rate_out_of_range(self):
        with pytest.raises(ValueError, match="winner_rate"):
            self._make(winner_rate=1.2)

    def test_effectiveness_out_of_range(self):
        with pytest.raises(ValueError, match="effectiveness"):
            self._make(effectiveness=-1.5)
