"""Severity classification of metric values."""

from __future__ import annotations

from forgebench.config.schema import MetricThresholds, SeverityTier


def classify(value: float, thresholds: MetricThresholds) -> SeverityTier:
    """Classify *value* against *thresholds*.

    Boundaries are inclusive toward the better tier: a value equal to
    ``good`` is GOOD, a value equal to ``warning`` is WARNING.

    Examples:
        >>> classify(90, MetricThresholds(good=90, warning=50))
        <SeverityTier.GOOD: 'good'>
        >>> classify(21, MetricThresholds(good=20, warning=500, lower_is_better=True))
        <SeverityTier.WARNING: 'warning'>
    """
    if thresholds.lower_is_better:
        if value <= thresholds.good:
            return SeverityTier.GOOD
        if value <= thresholds.warning:
            return SeverityTier.WARNING
        return SeverityTier.BAD

    if value >= thresholds.good:
        return SeverityTier.GOOD
    if value >= thresholds.warning:
        return SeverityTier.WARNING
    return SeverityTier.BAD


def is_better(a: float, b: float, thresholds: MetricThresholds) -> bool:
    """Return True if *a* is strictly better than *b* for this metric's direction."""
    return a < b if thresholds.lower_is_better else a > b
