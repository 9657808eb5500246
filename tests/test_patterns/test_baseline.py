"""Tests for baseline win rates."""

import pytest

from tennis_patterns.core.schema import MatchContext, PointOutcome
from tennis_patterns.patterns.attribution import PlayerPoint
from tennis_patterns.patterns.baseline import (
    baseline_win_rate, compute_baselines, serve_baseline_win_rate,
)

MATCH = MatchContext(match_id="m1", player1="A", player2="B")


def _pp(number, winner_side):
    return PlayerPoint(PointOutcome(match_id="m1", number=number, winner_side=winner_side), MATCH, 1)


class TestBaseline:
    def test_empty(self):
        assert baseline_win_rate([]) == 0.0
        assert serve_baseline_win_rate([]) == 0.0

    def test_overall(self):
        pts = [_pp(1, 1), _pp(2, 1), _pp(3, 2), _pp(4, 2)]
        assert baseline_win_rate(pts) == pytest.approx(0.5)

    def test_serve_only(self):
        # side 1 serves the odd points: won 1 and 3, lost 5
        pts = [_pp(1, 1), _pp(2, 2), _pp(3, 1), _pp(4, 2), _pp(5, 2)]
        assert serve_baseline_win_rate(pts) == pytest.approx(2 / 3)

    def test_serve_none_served(self):
        assert serve_baseline_win_rate([_pp(2, 1), _pp(4, 1)]) == 0.0

    def test_compute_baselines(self):
        pts = [_pp(1, 1), _pp(2, 2), _pp(3, 1), _pp(4, 1)]
        b = compute_baselines(pts)
        assert b.overall == pytest.approx(0.75)
        assert b.serve == pytest.approx(1.0)
        assert (b.n_points, b.n_serve_points) == (4, 2)

    def test_compute_baselines_agrees_with_helpers(self):
        pts = [_pp(1, 2), _pp(2, 2), _pp(3, 1), _pp(5, 1), _pp(6, 1)]
        b = compute_baselines(pts)
        assert b.overall == baseline_win_rate(pts)
        assert b.serve == serve_baseline_win_rate(pts)
