"""Read-only store of benchmark series keyed by metric and concurrency level."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import Any

from .model import (
    DataPoint,
    LevelNotFoundError,
    MatrixValidationError,
    MetricName,
    MetricNotFoundError,
    MetricSeries,
    StrategyId,
    parse_metric,
)

logger = logging.getLogger(__name__)


class BenchmarkMatrix:
    """Immutable mapping of metric name to its measured series.

    Every series must cover the same concurrency levels, so that metrics can
    be joined at any level without gaps.
    """

    def __init__(self, series: Mapping[MetricName | str, MetricSeries]):
        """Initialize the matrix.

        Args:
            series: Metric name -> series.  Not every metric must be present.

        Raises:
            MatrixValidationError: If series disagree on concurrency levels
        """
        ordered: dict[MetricName, MetricSeries] = {}
        for name, s in series.items():
            metric = parse_metric(name)
            if not isinstance(s, MetricSeries):
                raise MatrixValidationError(f"{metric.value}: expected MetricSeries, got {s!r}")
            if s.metric is not metric:
                raise MatrixValidationError(
                    f"Series keyed as '{metric.value}' holds '{s.metric.value}' data"
                )
            ordered[metric] = s

        if not ordered:
            raise MatrixValidationError("Matrix contains no series")

        # Canonical metric order regardless of input order
        self._series = {m: ordered[m] for m in MetricName if m in ordered}

        reference_metric, reference = next(iter(self._series.items()))
        if not len(reference):
            raise MatrixValidationError(f"{reference_metric.value}: series has no data points")
        for metric, s in self._series.items():
            if s.levels != reference.levels:
                raise MatrixValidationError(
                    f"{metric.value}: concurrency levels {list(s.levels)} do not match "
                    f"{reference_metric.value} levels {list(reference.levels)}"
                )
        self._levels = reference.levels

        logger.debug(
            "Built matrix with %d series over levels %s",
            len(self._series),
            list(self._levels),
        )

    @classmethod
    def from_records(cls, data: Mapping[str, Any]) -> BenchmarkMatrix:
        """Build a matrix from ``{metric: [record, ...]}`` input.

        Raises:
            MatrixValidationError: On the first invariant violation
        """
        if not isinstance(data, Mapping):
            raise MatrixValidationError(f"Matrix must be a mapping of metric -> records, got {data!r}")
        series = {}
        for name, records in data.items():
            try:
                metric = parse_metric(name)
            except MetricNotFoundError:
                valid = ", ".join(m.value for m in MetricName)
                raise MatrixValidationError(f"Unknown metric '{name}' (valid: {valid})") from None
            if not isinstance(records, list):
                raise MatrixValidationError(f"{metric.value}: expected a list of records")
            series[metric] = MetricSeries.from_records(metric, records)
        return cls(series)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_series(self, metric: MetricName | str) -> MetricSeries:
        """Return the series for *metric*.

        Raises:
            MetricNotFoundError: If the matrix has no such series
        """
        name = parse_metric(metric)
        try:
            return self._series[name]
        except KeyError:
            raise MetricNotFoundError(name.value) from None

    @staticmethod
    def point_at(series: MetricSeries, level: int) -> DataPoint:
        """Return the data point of *series* at *level*.

        There is no interpolation: untested levels are an error.

        Raises:
            LevelNotFoundError: If the level was not measured
        """
        return series.point(level)

    def value(self, metric: MetricName | str, level: int, strategy: StrategyId | str) -> float:
        """Shortcut for ``point_at(get_series(metric), level).value(strategy)``."""
        return self.point_at(self.get_series(metric), level).value(strategy)

    def values_at(self, metric: MetricName | str, level: int) -> dict[StrategyId, float]:
        return self.point_at(self.get_series(metric), level).values

    def require_level(self, level: int) -> None:
        if level not in self._levels:
            raise LevelNotFoundError(level)

    @property
    def levels(self) -> tuple[int, ...]:
        return self._levels

    @property
    def metrics(self) -> tuple[MetricName, ...]:
        return tuple(self._series)

    def has_metric(self, metric: MetricName | str) -> bool:
        try:
            return parse_metric(metric) in self._series
        except MetricNotFoundError:
            return False

    def __iter__(self) -> Iterator[MetricSeries]:
        return iter(self._series.values())

    def __len__(self) -> int:
        return len(self._series)

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        """Convert to the input record shape for JSON serialization."""
        return {m.value: s.to_records() for m, s in self._series.items()}
