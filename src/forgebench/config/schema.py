"""Pydantic models for forgebench configuration.

Thresholds and color tokens are policy, not data: they are supplied here and
passed explicitly into classification and formatting.  Swapping them changes
how values are labeled and colored without touching any computation.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from forgebench._constants import HIGH_LOAD_LEVEL
from forgebench.matrix.model import MetricName, StrategyId

_HEX_COLOR_RE = re.compile(r"^#[0-9a-fA-F]{6}$")


def _check_color(value: str) -> str:
    if not _HEX_COLOR_RE.match(value):
        raise ValueError(f"color token must be a #rrggbb hex value, got '{value}'")
    return value.lower()


# =============================================================================
# Enums
# =============================================================================


class SeverityTier(str, Enum):
    """Classification of a metric value against its thresholds."""

    GOOD = "good"
    WARNING = "warning"
    BAD = "bad"


# =============================================================================
# Thresholds
# =============================================================================


class MetricThresholds(BaseModel):
    """Severity cutoffs for one metric.

    For ``lower_is_better`` metrics (latency, memory) a value at or below
    ``good`` is GOOD and at or below ``warning`` is WARNING.  Otherwise the
    comparison is reversed: at or above ``good`` is GOOD.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    good: float
    warning: float
    lower_is_better: bool = False

    @model_validator(mode="after")
    def validate_order(self) -> MetricThresholds:
        """Ensure the GOOD cutoff is not worse than the WARNING cutoff."""
        if self.lower_is_better and self.good > self.warning:
            raise ValueError(
                f"lower-is-better thresholds need good <= warning "
                f"(got good={self.good}, warning={self.warning})"
            )
        if not self.lower_is_better and self.good < self.warning:
            raise ValueError(
                f"higher-is-better thresholds need good >= warning "
                f"(got good={self.good}, warning={self.warning})"
            )
        return self


def _default_thresholds() -> dict[MetricName, MetricThresholds]:
    return {
        MetricName.THROUGHPUT: MetricThresholds(good=2000, warning=500),
        MetricName.P50_LATENCY: MetricThresholds(good=50, warning=500, lower_is_better=True),
        MetricName.P99_LATENCY: MetricThresholds(good=100, warning=2500, lower_is_better=True),
        MetricName.SUCCESS_RATE: MetricThresholds(good=99, warning=90),
        MetricName.MEMORY_USAGE: MetricThresholds(good=256, warning=512, lower_is_better=True),
        MetricName.THREAD_COUNT: MetricThresholds(good=200, warning=500, lower_is_better=True),
    }


# =============================================================================
# Color tokens
# =============================================================================


class StrategyColors(BaseModel):
    """Series color per strategy."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    single: str = "#3b9ab2"
    thread_per_request: str = "#e1af00"
    thread_pool: str = "#f21a00"

    @field_validator("single", "thread_per_request", "thread_pool")
    @classmethod
    def validate_color(cls, v: str) -> str:
        return _check_color(v)

    def color_for(self, strategy: StrategyId) -> str:
        return getattr(self, StrategyId(strategy).value)


class SeverityPalette(BaseModel):
    """Color token per severity tier, plus a neutral token for unclassified cells."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    good: str = "#10b981"
    warning: str = "#f59e0b"
    bad: str = "#ef4444"
    neutral: str = "#6b7280"

    @field_validator("good", "warning", "bad", "neutral")
    @classmethod
    def validate_color(cls, v: str) -> str:
        return _check_color(v)

    def color_for(self, tier: SeverityTier | None) -> str:
        """Look up the token for *tier* (``None`` -> neutral)."""
        if tier is None:
            return self.neutral
        return getattr(self, SeverityTier(tier).value)


def _default_bucket_colors() -> dict[str, str]:
    return {
        "c1": "#9986a5",
        "c10": "#79402e",
        "c50": "#ccba72",
        "c100": "#0f0d0e",
        "c200": "#d9d0d3",
        "c1000": "#8d8680",
    }


# =============================================================================
# Headline cards
# =============================================================================


class HeadlineConfig(BaseModel):
    """Which strategies the summary cards compare, and at what load."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    featured: StrategyId = StrategyId.THREAD_POOL
    gain_baseline: StrategyId = StrategyId.THREAD_PER_REQUEST
    reliability_baseline: StrategyId = StrategyId.SINGLE
    degradation_strategy: StrategyId = StrategyId.THREAD_PER_REQUEST
    level: int = Field(default=HIGH_LOAD_LEVEL, gt=0)

    @model_validator(mode="after")
    def validate_baselines(self) -> HeadlineConfig:
        """A strategy cannot be compared against itself."""
        if self.featured in (self.gain_baseline, self.reliability_baseline):
            raise ValueError("headline baselines must differ from the featured strategy")
        return self


# =============================================================================
# Root Configuration
# =============================================================================


class ForgebenchConfig(BaseModel):
    """Root configuration for forgebench.

    Every section has defaults matching the httpforge dashboard, so an empty
    file (or no file at all) is a valid configuration.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = "httpforge"
    description: str = "performance analysis of blocking i/o http server concurrency strategies"
    version: int = 1  # Config schema version

    comparison_level: int = Field(default=HIGH_LOAD_LEVEL, gt=0)
    thresholds: dict[MetricName, MetricThresholds] = Field(default_factory=_default_thresholds)
    strategy_colors: StrategyColors = Field(default_factory=StrategyColors)
    severity_colors: SeverityPalette = Field(default_factory=SeverityPalette)
    bucket_colors: dict[str, str] = Field(default_factory=_default_bucket_colors)
    headline: HeadlineConfig = Field(default_factory=HeadlineConfig)

    @field_validator("thresholds", mode="before")
    @classmethod
    def merge_default_thresholds(cls, v: Any) -> Any:
        """Metrics left out of the file keep their default thresholds."""
        if not isinstance(v, dict):
            return v
        merged: dict[Any, Any] = {m.value: t for m, t in _default_thresholds().items()}
        for key, value in v.items():
            merged[key.value if isinstance(key, MetricName) else key] = value
        return merged

    @field_validator("bucket_colors")
    @classmethod
    def validate_bucket_colors(cls, v: dict[str, str]) -> dict[str, str]:
        return {bucket: _check_color(color) for bucket, color in v.items()}

    def thresholds_for(self, metric: MetricName) -> MetricThresholds:
        return self.thresholds[MetricName(metric)]
