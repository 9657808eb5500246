"""Tests for confidence tiers."""

from tennis_patterns.core.schema import ConfidenceTier
from tennis_patterns.stats.confidence import confidence_tier

ORDER = [ConfidenceTier.INSUFFICIENT, ConfidenceTier.LOW, ConfidenceTier.HIGH]


class TestConfidenceTier:
    def test_examples(self):
        assert confidence_tier(9, 10) is ConfidenceTier.INSUFFICIENT
        assert confidence_tier(15, 10) is ConfidenceTier.LOW
        assert confidence_tier(30, 10) is ConfidenceTier.HIGH

    def test_default_min(self):
        assert confidence_tier(14) is ConfidenceTier.INSUFFICIENT
        assert confidence_tier(15) is ConfidenceTier.LOW
        assert confidence_tier(29) is ConfidenceTier.LOW

    def test_monotonic_in_total(self):
        for min_n in (1, 10, 15, 30):
            tiers = [ORDER.index(confidence_tier(n, min_n)) for n in range(0, 60)]
            assert tiers == sorted(tiers)

    def test_min_above_high_cutoff(self):
        assert confidence_tier(35, 40) is ConfidenceTier.HIGH

    def test_serializes_as_string(self):
        assert ConfidenceTier.HIGH == "high"
