"""Benchmark matrix module for forgebench.

Holds the measured httpforge series and the latency distribution table.
"""

from .distribution import PercentileDistribution, bucket_key, bucket_level
from .loader import (
    BenchmarkDataset,
    DataFileNotFoundError,
    DataParseError,
    dataset_from_dict,
    load_dataset,
    save_dataset,
)
from .model import (
    DataPoint,
    LevelNotFoundError,
    MatrixError,
    MatrixValidationError,
    MetricName,
    MetricNotFoundError,
    MetricSeries,
    PercentileNotFoundError,
    StrategyId,
    parse_metric,
    parse_strategy,
)
from .store import BenchmarkMatrix

__all__ = [
    # Model
    "BenchmarkMatrix",
    "DataPoint",
    "MetricSeries",
    "PercentileDistribution",
    "BenchmarkDataset",
    # Enums
    "MetricName",
    "StrategyId",
    # Helpers
    "bucket_key",
    "bucket_level",
    "parse_metric",
    "parse_strategy",
    # Loader functions
    "dataset_from_dict",
    "load_dataset",
    "save_dataset",
    # Exceptions
    "MatrixError",
    "MatrixValidationError",
    "MetricNotFoundError",
    "LevelNotFoundError",
    "PercentileNotFoundError",
    "DataFileNotFoundError",
    "DataParseError",
]
