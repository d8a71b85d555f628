"""Data model for httpforge benchmark matrices.

A matrix is a set of :class:`MetricSeries`, one per :class:`MetricName`.
Each series is an ordered run of :class:`DataPoint` records, one per
concurrency level, carrying a value for every :class:`StrategyId`::

    throughput:
      c=1     single=48.14  thread_per_request=47.78   thread_pool=48.18
      c=10    single=49.17  thread_per_request=477.69  thread_pool=481.97
      ...

Records are validated once, when the series is built.  After that the
objects are immutable and lookups go through a level index instead of
re-scanning the points.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from forgebench._constants import LEVEL_KEY

# =============================================================================
# Exceptions
# =============================================================================


class MatrixError(Exception):
    """Base exception for benchmark matrix errors."""

    pass


class MatrixValidationError(MatrixError, ValueError):
    """Raised when measurement input violates the matrix invariants."""

    pass


class MetricNotFoundError(MatrixError, LookupError):
    """Raised when a metric is not present in the matrix."""

    def __init__(self, metric: object):
        super().__init__(f"Metric not found: {metric}")
        self.metric = metric


class LevelNotFoundError(MatrixError, LookupError):
    """Raised when a concurrency level was never measured."""

    def __init__(self, level: object, where: str = ""):
        suffix = f" in {where}" if where else ""
        super().__init__(f"Concurrency level not found{suffix}: {level}")
        self.level = level


class PercentileNotFoundError(MatrixError, LookupError):
    """Raised when a percentile label is not present in a distribution."""

    def __init__(self, percentile: object):
        super().__init__(f"Percentile not found: {percentile}")
        self.percentile = percentile


# =============================================================================
# Enums
# =============================================================================


class StrategyId(str, Enum):
    """Server concurrency strategies under comparison (closed set)."""

    SINGLE = "single"
    THREAD_PER_REQUEST = "thread_per_request"
    THREAD_POOL = "thread_pool"

    @property
    def label(self) -> str:
        """Display name used in tables and legends."""
        return _STRATEGY_LABELS[self]


_STRATEGY_LABELS = {
    StrategyId.SINGLE: "single-thread",
    StrategyId.THREAD_PER_REQUEST: "thread-per-request",
    StrategyId.THREAD_POOL: "thread-pool",
}


class MetricName(str, Enum):
    """Measured metrics, in canonical display order."""

    THROUGHPUT = "throughput"
    P50_LATENCY = "p50_latency"
    P99_LATENCY = "p99_latency"
    SUCCESS_RATE = "success_rate"
    MEMORY_USAGE = "memory_usage"
    THREAD_COUNT = "thread_count"

    @property
    def unit(self) -> str:
        return _METRIC_UNITS[self]


_METRIC_UNITS = {
    MetricName.THROUGHPUT: "req/s",
    MetricName.P50_LATENCY: "ms",
    MetricName.P99_LATENCY: "ms",
    MetricName.SUCCESS_RATE: "%",
    MetricName.MEMORY_USAGE: "MB",
    MetricName.THREAD_COUNT: "threads",
}


def parse_metric(name: MetricName | str) -> MetricName:
    """Resolve a metric name, raising MetricNotFoundError for unknown names."""
    if isinstance(name, MetricName):
        return name
    try:
        return MetricName(name)
    except ValueError:
        raise MetricNotFoundError(name) from None


def parse_strategy(name: StrategyId | str) -> StrategyId:
    """Resolve a strategy key, raising MatrixValidationError for unknown keys."""
    if isinstance(name, StrategyId):
        return name
    try:
        return StrategyId(name)
    except ValueError:
        valid = ", ".join(s.value for s in StrategyId)
        raise MatrixValidationError(f"Unknown strategy '{name}' (valid: {valid})") from None


def check_measurement(value: Any, where: str) -> float:
    """Validate a single measured value and return it as float.

    Booleans, strings, NaN and infinities are rejected rather than coerced.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MatrixValidationError(f"{where}: expected a number, got {value!r}")
    if not math.isfinite(value):
        raise MatrixValidationError(f"{where}: value must be finite, got {value!r}")
    if value < 0:
        raise MatrixValidationError(f"{where}: value must be non-negative, got {value!r}")
    return float(value)


def check_level(value: Any, where: str) -> int:
    """Validate a concurrency level (positive integer)."""
    if isinstance(value, bool):
        raise MatrixValidationError(f"{where}: concurrency level must be an integer")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int):
        raise MatrixValidationError(f"{where}: concurrency level must be an integer, got {value!r}")
    if value <= 0:
        raise MatrixValidationError(f"{where}: concurrency level must be positive, got {value}")
    return value


# =============================================================================
# Records
# =============================================================================


@dataclass(frozen=True)
class DataPoint:
    """Values of every strategy at one concurrency level.

    ``measurements`` is ordered like :class:`StrategyId`.
    """

    concurrency_level: int
    measurements: tuple[float, ...]

    def __post_init__(self) -> None:
        level = check_level(self.concurrency_level, "data point")
        measurements = tuple(
            check_measurement(v, f"c={level} value {i}") for i, v in enumerate(self.measurements)
        )
        object.__setattr__(self, "concurrency_level", level)
        object.__setattr__(self, "measurements", measurements)

    def value(self, strategy: StrategyId | str) -> float:
        return self.measurements[_STRATEGY_INDEX[parse_strategy(strategy)]]

    @property
    def values(self) -> dict[StrategyId, float]:
        """Strategy -> value mapping (a fresh copy)."""
        return dict(zip(StrategyId, self.measurements))

    def to_dict(self) -> dict[str, Any]:
        """Convert back to the input record shape."""
        d: dict[str, Any] = {LEVEL_KEY: self.concurrency_level}
        for strategy, value in zip(StrategyId, self.measurements):
            d[strategy.value] = value
        return d


_STRATEGY_INDEX = {strategy: i for i, strategy in enumerate(StrategyId)}


@dataclass(frozen=True)
class MetricSeries:
    """Ordered data points of one metric, one point per concurrency level."""

    metric: MetricName
    points: tuple[DataPoint, ...]
    _index: dict[int, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.metric, MetricName):
            object.__setattr__(self, "metric", parse_metric(self.metric))
        previous: int | None = None
        for point in self.points:
            if not isinstance(point, DataPoint):
                raise MatrixValidationError(
                    f"{self.metric.value}: expected DataPoint, got {point!r}"
                )
            level = point.concurrency_level
            if previous is not None and level <= previous:
                kind = "duplicate" if level == previous else "out-of-order"
                raise MatrixValidationError(
                    f"{self.metric.value}: {kind} concurrency level {level} "
                    f"(levels must be strictly ascending)"
                )
            if len(point.measurements) != len(StrategyId):
                raise MatrixValidationError(
                    f"{self.metric.value} c={level}: expected {len(StrategyId)} "
                    f"strategy values, got {len(point.measurements)}"
                )
            if self.metric is MetricName.SUCCESS_RATE:
                for strategy, value in zip(StrategyId, point.measurements):
                    if value > 100:
                        raise MatrixValidationError(
                            f"{self.metric.value} c={level}.{strategy.value}: success rate "
                            f"must be within [0, 100], got {value}"
                        )
            previous = level
        index = {p.concurrency_level: i for i, p in enumerate(self.points)}
        object.__setattr__(self, "_index", index)

    @classmethod
    def from_records(
        cls, metric: MetricName | str, records: Iterable[Mapping[str, Any]]
    ) -> MetricSeries:
        """Build a series from ``{concurrency_level, <strategy>: value}`` records.

        Raises:
            MatrixValidationError: On the first malformed record
        """
        metric = parse_metric(metric)
        points = []
        for i, record in enumerate(records):
            where = f"{metric.value}[{i}]"
            if not isinstance(record, Mapping):
                raise MatrixValidationError(f"{where}: expected a mapping, got {record!r}")
            if LEVEL_KEY not in record:
                raise MatrixValidationError(f"{where}: missing '{LEVEL_KEY}'")
            level = check_level(record[LEVEL_KEY], where)

            keys = {k for k in record if k != LEVEL_KEY}
            for key in keys:
                parse_strategy(key)
            missing = [s.value for s in StrategyId if s.value not in keys]
            if missing:
                raise MatrixValidationError(
                    f"{where} c={level}: missing value for {', '.join(missing)}"
                )

            measurements = []
            for strategy in StrategyId:
                value = check_measurement(record[strategy.value], f"{where}.{strategy.value}")
                if metric is MetricName.SUCCESS_RATE and value > 100:
                    raise MatrixValidationError(
                        f"{where}.{strategy.value}: success rate must be within [0, 100], "
                        f"got {value}"
                    )
                measurements.append(value)
            points.append(DataPoint(concurrency_level=level, measurements=tuple(measurements)))
        return cls(metric=metric, points=tuple(points))

    @property
    def levels(self) -> tuple[int, ...]:
        return tuple(p.concurrency_level for p in self.points)

    def point(self, level: int) -> DataPoint:
        try:
            return self.points[self._index[level]]
        except KeyError:
            raise LevelNotFoundError(level, self.metric.value) from None

    def value_at(self, level: int, strategy: StrategyId | str) -> float:
        return self.point(level).value(strategy)

    def strategy_values(self, strategy: StrategyId | str) -> list[tuple[int, float]]:
        """(level, value) pairs of one strategy in ascending level order."""
        strategy = parse_strategy(strategy)
        return [(p.concurrency_level, p.value(strategy)) for p in self.points]

    def __len__(self) -> int:
        return len(self.points)

    def to_records(self) -> list[dict[str, Any]]:
        return [p.to_dict() for p in self.points]
