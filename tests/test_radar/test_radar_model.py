"""Tests for raw radar scores and percentile profiles."""

import numpy as np
import pytest

from tennis_patterns.core.buckets import (
    PatternStatistic, ServeDirectionKey, ServeResponseKey, ShotDirectionKey, ShotTypeKey,
)
from tennis_patterns.core.schema import (
    ConfidenceTier, Direction, OutcomeModel, ServeDirection, ShotType,
)
from tennis_patterns.radar.distributions import EMPTY_DISTRIBUTIONS, TourDistributions
from tennis_patterns.radar.model import (
    RAW_KEYS, RadarSettings, build_profile, compute_raw_scores,
    determine_archetype, directional_splits,
)
from tennis_patterns.stats.interval import EMPTY_INTERVAL


def _stat(key, total, eff=0.0, winner_rate=0.5):
    return PatternStatistic(
        key=key, model=OutcomeModel.ADJUSTED, total=total,
        winners=0, unforced_errors=0, forced_errors=0, points_won=0,
        winner_rate=winner_rate, error_rate=0.0, effectiveness=eff,
        winner_ci=EMPTY_INTERVAL, error_ci=EMPTY_INTERVAL,
        confidence=ConfidenceTier.HIGH,
    )


SHOT_TYPES = [
    _stat(ShotTypeKey(ShotType.FOREHAND), 400, 0.10),
    _stat(ShotTypeKey(ShotType.BACKHAND), 200, -0.05),
    _stat(ShotTypeKey(ShotType.BACKHAND_SLICE), 150, 0.02),
    _stat(ShotTypeKey(ShotType.FOREHAND_VOLLEY), 60, 0.20),
    _stat(ShotTypeKey(ShotType.LOB), 20, -0.10),
    _stat(ShotTypeKey(ShotType.DROP_SHOT), 30, 0.05),
]

SERVE = [
    _stat(ServeDirectionKey(ServeDirection.WIDE), 60, winner_rate=0.7),
    _stat(ServeDirectionKey(ServeDirection.T), 60, winner_rate=0.5),
]

SERVE_PLUS_ONE = [
    _stat(ServeResponseKey(ServeDirection.WIDE, ShotType.BACKHAND), 80, 0.05),
    _stat(ServeResponseKey(ServeDirection.T, ShotType.FOREHAND), 40, -0.02),
]


class TestComputeRawScores:
    def test_keys(self):
        raw = compute_raw_scores(SHOT_TYPES, SERVE, SERVE_PLUS_ONE)
        assert tuple(raw) == RAW_KEYS

    def test_default_volume_gates(self):
        raw = compute_raw_scores(SHOT_TYPES, SERVE, SERVE_PLUS_ONE)
        assert raw["forehand"] == pytest.approx(0.10 * 400 / 450)
        assert raw["backhand"] is None
        assert raw["defense"] is None
        assert raw["serve_plus_1"] is None
        assert raw["serve"] == pytest.approx(0.6)

    def test_relaxed_settings(self):
        raw = compute_raw_scores(SHOT_TYPES, SERVE, SERVE_PLUS_ONE, RadarSettings(min_total=100))
        assert raw["backhand"] == pytest.approx(-0.05 * 200 / 250)
        slice_, lob = 0.02 * 150 / 200, -0.10 * 20 / 70
        assert raw["defense"] == pytest.approx((slice_ * 150 + lob * 20) / 170)
        assert raw["volley_net"] is None
        expected = (0.05 * 80 / 130 * 80 - 0.02 * 40 / 90 * 40) / 120
        assert raw["serve_plus_1"] == pytest.approx(expected)

    def test_serve_below_minimum(self):
        raw = compute_raw_scores(SHOT_TYPES, SERVE[:1], SERVE_PLUS_ONE)
        assert raw["serve"] is None

    def test_balance_and_consistency(self):
        raw = compute_raw_scores(SHOT_TYPES, SERVE, SERVE_PLUS_ONE)
        eff = np.array([0.10, -0.05, 0.20, 0.05])
        n = np.array([400, 200, 60, 30])
        mean = np.average(eff, weights=n)
        expected = np.sqrt(np.average((eff - mean) ** 2, weights=n))
        assert raw["balance_raw"] == pytest.approx(expected)
        assert raw["consistency_raw"] == pytest.approx(1.0 / expected)

    def test_consistency_floor(self):
        flat = [_stat(ShotTypeKey(ShotType.FOREHAND), 200, 0.03), _stat(ShotTypeKey(ShotType.BACKHAND), 200, 0.03)]
        raw = compute_raw_scores(flat, [], [])
        assert raw["balance_raw"] == pytest.approx(0.0)
        assert raw["consistency_raw"] == pytest.approx(100.0)

    def test_balance_below_axis_volume(self):
        # 200 core shots: short of the composite minimum, enough for the spread
        shots = [
            _stat(ShotTypeKey(ShotType.FOREHAND), 120, 0.10),
            _stat(ShotTypeKey(ShotType.BACKHAND), 80, -0.05),
        ]
        raw = compute_raw_scores(shots, [], [])
        assert raw["forehand"] is None
        mean = (0.10 * 120 - 0.05 * 80) / 200
        expected = np.sqrt((120 * (0.10 - mean) ** 2 + 80 * (-0.05 - mean) ** 2) / 200)
        assert raw["balance_raw"] == pytest.approx(expected)
        assert raw["consistency_raw"] == pytest.approx(1.0 / expected)

    def test_balance_volume_configurable(self):
        shots = [
            _stat(ShotTypeKey(ShotType.FOREHAND), 30, 0.10),
            _stat(ShotTypeKey(ShotType.BACKHAND), 15, -0.05),
        ]
        assert compute_raw_scores(shots, [], [])["balance_raw"] is None
        relaxed = RadarSettings(exploitability_min_total=40)
        assert compute_raw_scores(shots, [], [], relaxed)["balance_raw"] is not None

    def test_no_evidence(self):
        raw = compute_raw_scores([], [], [])
        assert all(v is None for v in raw.values())


class TestBuildProfile:
    DISTS = TourDistributions({
        "serve": [0.5, 0.55, 0.6, 0.65, 0.7],
        "forehand": [0.0, 0.02, 0.04, 0.06, 0.08],
        "defense": [-0.02, 0.0, 0.02],
        "balance_raw": [0.01, 0.02, 0.03],
    })

    def test_percentiles(self):
        raw = {"serve": 0.6, "forehand": 0.1, "defense": -0.05, "balance_raw": 0.01}
        profile = build_profile(raw, self.DISTS)
        p = profile.percentiles()
        assert p["serve"] == 50
        assert p["forehand"] == 100
        assert p["defense"] == 0
        assert p["balance"] == 100
        assert profile.valid
        assert profile.archetype is not None

    def test_three_axes_invalid(self):
        raw = {"serve": 0.6, "forehand": 0.1, "defense": -0.05}
        profile = build_profile(raw, self.DISTS)
        assert profile.n_scored == 3
        assert not profile.valid
        assert profile.archetype is None

    def test_axis_without_distribution_is_null(self):
        raw = {"serve": 0.6, "touch": 0.05}
        profile = build_profile(raw, self.DISTS)
        assert profile.axes["touch"].raw == 0.05
        assert profile.axes["touch"].percentile is None

    def test_empty_distributions(self):
        profile = build_profile({"serve": 0.6}, EMPTY_DISTRIBUTIONS)
        assert profile.n_scored == 0
        assert not profile.valid

    def test_axes_subset(self):
        settings = RadarSettings(axes=("serve", "forehand"), min_valid_axes=2)
        profile = build_profile({"serve": 0.6, "forehand": 0.1}, self.DISTS, settings)
        assert set(profile.axes) == {"serve", "forehand"}
        assert profile.valid

    def test_unknown_axis_rejected(self):
        with pytest.raises(ValueError, match="Unknown radar axes"):
            RadarSettings(axes=("serve", "speed"))


class TestArchetype:
    @pytest.mark.parametrize("percentiles, expected", [
        ({"serve": 85, "serve_plus_1": 70}, "Big Server"),
        ({"serve": 40, "defense": 85, "consistency": 75}, "Counterpuncher"),
        ({"serve": 65, "forehand": 62, "backhand": 61, "volley_net": 60}, "All-Court"),
        ({"forehand": 80, "volley_net": 30}, "Aggressive Baseliner"),
        ({"serve": 50, "forehand": 50}, "All-Round"),
        ({"serve": None, "defense": None}, "All-Round"),
    ])
    def test_rules(self, percentiles, expected):
        assert determine_archetype(percentiles) == expected


class TestDirectionalSplits:
    def _stats(self, scale=1):
        return [
            _stat(ShotDirectionKey(ShotType.FOREHAND, Direction.LEFT), 200 * scale, 0.10),
            _stat(ShotDirectionKey(ShotType.BACKHAND, Direction.LEFT), 100 * scale, 0.0),
            _stat(ShotDirectionKey(ShotType.FOREHAND, Direction.RIGHT), 150 * scale, -0.05),
            _stat(ShotDirectionKey(ShotType.FOREHAND, Direction.CENTER), 40 * scale, 0.0),
        ]

    def test_splits(self):
        split = directional_splits(self._stats())
        left = (0.10 * 200 / 250 * 200) / 300
        right = -0.05 * 150 / 200
        assert split.left == pytest.approx(left)
        assert split.right == pytest.approx(right)
        assert split.center == pytest.approx(0.0)
        assert (split.left_n, split.right_n) == (300, 150)
        assert split.asymmetry == pytest.approx(abs(left - right))

    def test_asymmetry_needs_volume(self):
        split = directional_splits([s for s in self._stats() if s.total < 200])
        assert split.left is not None and split.right is not None
        assert split.asymmetry is None

    def test_one_side_missing(self):
        split = directional_splits(self._stats()[:2])
        assert split.right is None
        assert split.asymmetry is None
