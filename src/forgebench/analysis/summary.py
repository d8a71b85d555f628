"""Headline statistics derived from a benchmark matrix.

All functions are pure reads over the matrix; nothing is cached because the
inputs never change after loading.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any

from forgebench.config.schema import HeadlineConfig
from forgebench.matrix import (
    BenchmarkMatrix,
    MetricName,
    PercentileDistribution,
    StrategyId,
    parse_strategy,
)

from .tooltip import format_grouped

logger = logging.getLogger(__name__)


class DivisionUndefinedError(ArithmeticError):
    """Raised when a relative figure would divide by a zero measurement."""

    pass


@dataclass(frozen=True)
class PeakValue:
    """Maximum of one strategy's sub-series and where it occurs."""

    metric: MetricName
    strategy: StrategyId
    value: float
    concurrency_level: int


@dataclass(frozen=True)
class SummaryCard:
    """One headline figure, ready for display."""

    title: str
    value: float
    text: str
    unit: str
    subtitle: str
    note: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _relative_change(new: float, base: float, what: str) -> float:
    if base == 0:
        raise DivisionUndefinedError(f"{what}: reference value is zero")
    return (new - base) / base * 100


def peak_value(
    matrix: BenchmarkMatrix, metric: MetricName | str, strategy: StrategyId | str
) -> PeakValue:
    """Return the maximum value of *strategy* in *metric* and its level.

    Ties go to the lowest concurrency level.
    """
    series = matrix.get_series(metric)
    strategy = parse_strategy(strategy)
    best_level, best_value = series.strategy_values(strategy)[0]
    for level, value in series.strategy_values(strategy)[1:]:
        if value > best_value:
            best_level, best_value = level, value
    return PeakValue(
        metric=series.metric,
        strategy=strategy,
        value=best_value,
        concurrency_level=best_level,
    )


def relative_gain(
    matrix: BenchmarkMatrix,
    metric: MetricName | str,
    strategy: StrategyId | str,
    baseline: StrategyId | str,
    level: int,
) -> float:
    """Signed percentage by which *strategy* exceeds *baseline* at *level*.

    Raises:
        DivisionUndefinedError: If the baseline value is zero
    """
    point = matrix.point_at(matrix.get_series(metric), level)
    return _relative_change(
        point.value(strategy),
        point.value(baseline),
        f"gain of {parse_strategy(strategy).value} over {parse_strategy(baseline).value}",
    )


def relative_degradation(
    matrix: BenchmarkMatrix,
    metric: MetricName | str,
    strategy: StrategyId | str,
    from_level: int,
    to_level: int,
) -> float:
    """Signed percentage change of *strategy* from *from_level* to *to_level*.

    Same formula as :func:`relative_gain`; a negative result is a
    degradation.

    Raises:
        ValueError: If *from_level* is not below *to_level*
        DivisionUndefinedError: If the value at *from_level* is zero
    """
    if from_level >= to_level:
        raise ValueError(
            f"degradation needs an earlier and a later level (got {from_level} -> {to_level})"
        )
    series = matrix.get_series(metric)
    return _relative_change(
        series.value_at(to_level, strategy),
        series.value_at(from_level, strategy),
        f"{parse_strategy(strategy).value} {series.metric.value} at c={from_level}",
    )


def reliability_delta(
    matrix: BenchmarkMatrix,
    strategy: StrategyId | str,
    baseline: StrategyId | str,
    level: int,
) -> float:
    """Success-rate difference in percentage points (strategy - baseline)."""
    point = matrix.point_at(matrix.get_series(MetricName.SUCCESS_RATE), level)
    return point.value(strategy) - point.value(baseline)


def tail_ratio(distribution: PercentileDistribution, bucket: str | int) -> float:
    """Highest over lowest listed percentile of one bucket (e.g. p99/p50).

    Raises:
        DivisionUndefinedError: If the lowest percentile is zero
    """
    column = distribution.column(bucket)
    (low_label, low), (_, high) = column[0], column[-1]
    if low == 0:
        raise DivisionUndefinedError(f"{low_label} latency of bucket {bucket} is zero")
    return high / low


def _signed(value: float) -> str:
    return f"{value:+.0f}"


def _lead_or_trail(delta: float) -> str:
    if delta > 0:
        return "leads"
    if delta < 0:
        return "trails"
    return "matches"


def headline_cards(matrix: BenchmarkMatrix, headline: HeadlineConfig) -> list[SummaryCard]:
    """Compute the four headline cards.

    Peak throughput of the featured strategy, its reliability and throughput
    gain over the baselines at the headline level, and the degradation of
    the degrading strategy from its own throughput peak to that level.
    """
    level = headline.level
    featured = headline.featured

    peak = peak_value(matrix, MetricName.THROUGHPUT, featured)

    success = matrix.value(MetricName.SUCCESS_RATE, level, featured)
    baseline_success = matrix.value(MetricName.SUCCESS_RATE, level, headline.reliability_baseline)
    delta = reliability_delta(matrix, featured, headline.reliability_baseline, level)

    gain = relative_gain(matrix, MetricName.THROUGHPUT, featured, headline.gain_baseline, level)
    featured_tp = matrix.value(MetricName.THROUGHPUT, level, featured)
    baseline_tp = matrix.value(MetricName.THROUGHPUT, level, headline.gain_baseline)

    degrading = headline.degradation_strategy
    degrading_peak = peak_value(matrix, MetricName.THROUGHPUT, degrading)
    cards = [
        SummaryCard(
            title="peak throughput",
            value=peak.value,
            text=format_grouped(peak.value, 0),
            unit="req/s",
            subtitle=f"{featured.label} @ c={peak.concurrency_level}",
            note=(
                f"Maximum requests per second reached by {featured.label} "
                f"across all measured concurrency levels."
            ),
        ),
        SummaryCard(
            title="reliability",
            value=success,
            text=format_grouped(success, 1),
            unit="%",
            subtitle=f"vs {format_grouped(baseline_success, 1)}% "
            f"{headline.reliability_baseline.label}",
            note=(
                f"{featured.label} {_lead_or_trail(delta)} {headline.reliability_baseline.label} "
                f"by {format_grouped(abs(delta), 2)} percentage points at c={level}."
            ),
        ),
        SummaryCard(
            title="throughput gain",
            value=gain,
            text=_signed(gain),
            unit="%",
            subtitle=f"vs {headline.gain_baseline.label}",
            note=(
                f"{format_grouped(featured_tp, 0)} vs {format_grouped(baseline_tp, 0)} req/s "
                f"at c={level}."
            ),
        ),
    ]

    # The degradation card needs a peak strictly below the headline level
    if degrading_peak.concurrency_level < level:
        change = relative_degradation(
            matrix,
            MetricName.THROUGHPUT,
            degrading,
            degrading_peak.concurrency_level,
            level,
        )
        cards.append(
            SummaryCard(
                title="thread degradation",
                value=change,
                text=_signed(change),
                unit="%",
                subtitle=f"{degrading.label}: c{degrading_peak.concurrency_level} -> c{level}",
                note=(
                    f"{degrading.label} falls from "
                    f"{format_grouped(degrading_peak.value, 0)} req/s at "
                    f"c={degrading_peak.concurrency_level} to "
                    f"{format_grouped(matrix.value(MetricName.THROUGHPUT, level, degrading), 0)}"
                    f" req/s at c={level}."
                ),
            )
        )
    else:
        logger.info(
            "%s peaks at c=%d, no degradation up to c=%d",
            degrading.value,
            degrading_peak.concurrency_level,
            level,
        )
    return cards
