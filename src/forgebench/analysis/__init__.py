"""Analysis module for forgebench.

Classifies, summarizes and compares the measured series.
"""

from .classifier import classify, is_better
from .comparison import (
    ComparisonCell,
    ComparisonGrid,
    ComparisonRow,
    MissingThresholdsError,
    project_comparison,
)
from .summary import (
    DivisionUndefinedError,
    PeakValue,
    SummaryCard,
    headline_cards,
    peak_value,
    relative_degradation,
    relative_gain,
    reliability_delta,
    tail_ratio,
)
from .tooltip import (
    TooltipContent,
    TooltipEntry,
    TooltipEvent,
    TooltipLine,
    build_event,
    format_grouped,
    format_metric_value,
    format_tooltip,
)

__all__ = [
    # Classification
    "classify",
    "is_better",
    # Summary
    "PeakValue",
    "SummaryCard",
    "peak_value",
    "relative_gain",
    "relative_degradation",
    "reliability_delta",
    "tail_ratio",
    "headline_cards",
    # Comparison
    "ComparisonCell",
    "ComparisonGrid",
    "ComparisonRow",
    "project_comparison",
    # Tooltip
    "TooltipContent",
    "TooltipEntry",
    "TooltipEvent",
    "TooltipLine",
    "build_event",
    "format_grouped",
    "format_metric_value",
    "format_tooltip",
    # Exceptions
    "DivisionUndefinedError",
    "MissingThresholdsError",
]
