"""Metric x strategy comparison grid at a single concurrency level."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from forgebench.config.schema import MetricThresholds, SeverityTier
from forgebench.matrix import BenchmarkMatrix, MetricName, StrategyId

from .classifier import classify, is_better

logger = logging.getLogger(__name__)


class MissingThresholdsError(KeyError):
    """Raised when a metric in the grid has no configured thresholds."""

    def __init__(self, metric: MetricName):
        super().__init__(f"No thresholds configured for metric: {metric.value}")
        self.metric = metric


@dataclass(frozen=True)
class ComparisonCell:
    strategy: StrategyId
    value: float
    tier: SeverityTier


@dataclass(frozen=True)
class ComparisonRow:
    """One metric across every strategy."""

    metric: MetricName
    thresholds: MetricThresholds
    cells: tuple[ComparisonCell, ...]

    def cell(self, strategy: StrategyId | str) -> ComparisonCell:
        strategy = StrategyId(strategy)
        for c in self.cells:
            if c.strategy is strategy:
                return c
        raise KeyError(strategy.value)

    @property
    def best(self) -> StrategyId:
        """Strategy with the best value for this metric (first one on ties)."""
        best = self.cells[0]
        for c in self.cells[1:]:
            if is_better(c.value, best.value, self.thresholds):
                best = c
        return best.strategy


@dataclass(frozen=True)
class ComparisonGrid:
    concurrency_level: int
    rows: tuple[ComparisonRow, ...]

    @property
    def strategies(self) -> tuple[StrategyId, ...]:
        return tuple(StrategyId)

    def row(self, metric: MetricName | str) -> ComparisonRow:
        metric = MetricName(metric)
        for r in self.rows:
            if r.metric is metric:
                return r
        raise KeyError(metric.value)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "concurrency_level": self.concurrency_level,
            "rows": [
                {
                    "metric": r.metric.value,
                    "best": r.best.value,
                    "cells": {
                        c.strategy.value: {"value": c.value, "tier": c.tier.value}
                        for c in r.cells
                    },
                }
                for r in self.rows
            ],
        }


def project_comparison(
    matrix: BenchmarkMatrix,
    thresholds: Mapping[MetricName, MetricThresholds],
    level: int,
) -> ComparisonGrid:
    """Build the comparison grid for *level*.

    Rows follow the canonical metric order, cells the strategy order.  The
    grid is all-or-nothing: one missing point aborts the projection.

    Raises:
        MetricNotFoundError: If the matrix lacks one of the metrics
        LevelNotFoundError: If any series was not measured at *level*
        MissingThresholdsError: If a metric has no thresholds
    """
    rows = []
    for metric in MetricName:
        point = matrix.point_at(matrix.get_series(metric), level)
        try:
            metric_thresholds = thresholds[metric]
        except KeyError:
            raise MissingThresholdsError(metric) from None
        cells = tuple(
            ComparisonCell(
                strategy=strategy,
                value=point.value(strategy),
                tier=classify(point.value(strategy), metric_thresholds),
            )
            for strategy in StrategyId
        )
        rows.append(ComparisonRow(metric=metric, thresholds=metric_thresholds, cells=cells))

    logger.debug("Projected comparison grid at c=%d", level)
    return ComparisonGrid(concurrency_level=level, rows=tuple(rows))
