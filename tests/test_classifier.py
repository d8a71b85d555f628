"""Tests for severity classification."""

import pytest

from forgebench.analysis import classify, is_better
from forgebench.config import MetricThresholds, SeverityTier

HIGHER = MetricThresholds(good=90, warning=50, lower_is_better=False)
LOWER = MetricThresholds(good=20, warning=500, lower_is_better=True)


class TestClassifyHigherIsBetter:
    @pytest.mark.parametrize(
        "value, tier",
        [
            (100, SeverityTier.GOOD),
            (90, SeverityTier.GOOD),
            (89, SeverityTier.WARNING),
            (50, SeverityTier.WARNING),
            (49, SeverityTier.BAD),
            (0, SeverityTier.BAD),
        ],
    )
    def test_tiers(self, value, tier):
        assert classify(value, HIGHER) is tier


class TestClassifyLowerIsBetter:
    @pytest.mark.parametrize(
        "value, tier",
        [
            (0, SeverityTier.GOOD),
            (20, SeverityTier.GOOD),
            (21, SeverityTier.WARNING),
            (500, SeverityTier.WARNING),
            (501, SeverityTier.BAD),
        ],
    )
    def test_tiers(self, value, tier):
        assert classify(value, LOWER) is tier


class TestClassifyEdges:
    def test_equal_cutoffs(self):
        t = MetricThresholds(good=10, warning=10)
        assert classify(10, t) is SeverityTier.GOOD
        assert classify(9.99, t) is SeverityTier.BAD

    def test_fractional_boundary(self):
        t = MetricThresholds(good=99.5, warning=90)
        assert classify(99.5, t) is SeverityTier.GOOD
        assert classify(99.49, t) is SeverityTier.WARNING

    def test_direction_matters(self):
        # Same cutoffs, opposite direction -> opposite verdict for a high value
        high = MetricThresholds(good=100, warning=100)
        low = MetricThresholds(good=100, warning=100, lower_is_better=True)
        assert classify(1000, high) is SeverityTier.GOOD
        assert classify(1000, low) is SeverityTier.BAD


class TestIsBetter:
    def test_higher_is_better(self):
        assert is_better(2, 1, HIGHER)
        assert not is_better(1, 1, HIGHER)

    def test_lower_is_better(self):
        assert is_better(1, 2, LOWER)
        assert not is_better(2, 2, LOWER)
