"""Dataset loader for forgebench.

A dataset file holds the benchmark matrix and, optionally, the thread-pool
latency distribution::

    matrix:
      throughput:
        - {concurrency_level: 1, single: 48.14, thread_per_request: 47.78, thread_pool: 48.18}
        ...
    latency_distribution:
      - {percentile: p50, c10: 20.7, c100: 122.4, c1000: 105.9}
      ...
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from forgebench._resources import get_bundled_dataset

from .distribution import PercentileDistribution
from .model import MatrixError, MatrixValidationError
from .store import BenchmarkMatrix

logger = logging.getLogger(__name__)


class DataFileNotFoundError(MatrixError):
    """Raised when a dataset file is not found."""

    pass


class DataParseError(MatrixError):
    """Raised when a dataset file cannot be parsed."""

    pass


@dataclass(frozen=True)
class BenchmarkDataset:
    """Everything loaded from one dataset file."""

    matrix: BenchmarkMatrix
    distribution: PercentileDistribution | None = None
    source: Path | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"matrix": self.matrix.to_dict()}
        if self.distribution is not None:
            d["latency_distribution"] = self.distribution.to_records()
        return d


def load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML file and return as dictionary.

    Raises:
        DataFileNotFoundError: If file doesn't exist
        DataParseError: If YAML parsing fails or the top level is not a mapping
    """
    if not path.exists():
        raise DataFileNotFoundError(f"Dataset file not found: {path}")

    try:
        with open(path) as f:
            content = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise DataParseError(f"Failed to parse YAML: {e}") from e
    except (UnicodeDecodeError, OSError) as e:
        raise DataParseError(f"Failed to read {path}: {e}") from e

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise DataParseError(f"Dataset must be a mapping at the top level: {path}")
    return content


def dataset_from_dict(data: dict[str, Any], source: Path | None = None) -> BenchmarkDataset:
    """Validate parsed dataset content.

    Raises:
        MatrixValidationError: If the matrix or the distribution is malformed
    """
    if "matrix" not in data:
        raise MatrixValidationError("Dataset has no 'matrix' section")

    matrix = BenchmarkMatrix.from_records(data["matrix"])

    distribution = None
    records = data.get("latency_distribution")
    if records is not None:
        if not isinstance(records, list):
            raise MatrixValidationError("'latency_distribution' must be a list of records")
        distribution = PercentileDistribution.from_records(records)

    return BenchmarkDataset(matrix=matrix, distribution=distribution, source=source)


def load_dataset(path: str | Path | None = None) -> BenchmarkDataset:
    """Load and validate a dataset file.

    Args:
        path: Dataset YAML file (default: the bundled httpforge dataset)

    Raises:
        DataFileNotFoundError: If file doesn't exist
        DataParseError: If YAML parsing fails
        MatrixValidationError: If validation fails
    """
    path = Path(path) if path is not None else get_bundled_dataset()
    dataset = dataset_from_dict(load_yaml(path), source=path)
    logger.info(
        "Loaded dataset %s: %d metrics x %d levels",
        path,
        len(dataset.matrix),
        len(dataset.matrix.levels),
    )
    return dataset


def save_dataset(dataset: BenchmarkDataset, path: str | Path) -> None:
    """Save a dataset to a YAML file in the input record shape."""
    path = Path(path)
    with open(path, "w") as f:
        yaml.safe_dump(dataset.to_dict(), f, default_flow_style=None, sort_keys=False, indent=2)
