"""Shared fixtures for forgebench test suite."""

from __future__ import annotations

from typing import Any

import pytest

from forgebench.config import ForgebenchConfig
from forgebench.matrix import BenchmarkDataset, BenchmarkMatrix, MetricName, load_dataset


def make_records(
    levels: tuple[int, ...] = (1, 10, 100),
    single: float = 10.0,
    thread_per_request: float = 20.0,
    thread_pool: float = 30.0,
) -> list[dict[str, Any]]:
    """Create series records with the same values at every level."""
    return [
        {
            "concurrency_level": level,
            "single": single,
            "thread_per_request": thread_per_request,
            "thread_pool": thread_pool,
        }
        for level in levels
    ]


def make_matrix(levels: tuple[int, ...] = (1, 10, 100), **overrides) -> BenchmarkMatrix:
    """Create a complete BenchmarkMatrix for testing.

    This is the canonical matrix factory for tests.  ``overrides`` replace the
    records of individual metrics by name.
    """
    data: dict[str, Any] = {m.value: make_records(levels) for m in MetricName}
    # Success rates must stay within [0, 100]
    data[MetricName.SUCCESS_RATE.value] = make_records(levels, 100.0, 99.0, 98.0)
    data.update(overrides)
    return BenchmarkMatrix.from_records(data)


@pytest.fixture(scope="session")
def dataset() -> BenchmarkDataset:
    """The httpforge dataset shipped with the package."""
    return load_dataset()


@pytest.fixture
def matrix(dataset) -> BenchmarkMatrix:
    return dataset.matrix


@pytest.fixture
def default_config() -> ForgebenchConfig:
    """A default ForgebenchConfig for tests that don't care about specifics."""
    return ForgebenchConfig()
