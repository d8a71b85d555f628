"""Thread-pool latency distribution table.

The distribution is sampled at a few load buckets only (``c10``, ``c100``,
``c1000``), so it does not share the canonical concurrency levels of the
benchmark matrix.  It is kept as a separate table with its own lookups.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from forgebench._constants import PERCENTILE_KEY

from .model import (
    LevelNotFoundError,
    MatrixValidationError,
    PercentileNotFoundError,
    StrategyId,
    check_measurement,
)

logger = logging.getLogger(__name__)

_BUCKET_RE = re.compile(r"^c([1-9][0-9]*)$")


def bucket_level(bucket: str) -> int:
    """Return the concurrency level encoded in a bucket key (``c100`` -> 100)."""
    match = _BUCKET_RE.match(bucket) if isinstance(bucket, str) else None
    if not match:
        raise MatrixValidationError(f"Invalid concurrency bucket '{bucket}' (expected e.g. 'c100')")
    return int(match.group(1))


def bucket_key(level: int) -> str:
    return f"c{level}"


@dataclass(frozen=True)
class PercentileDistribution:
    """Latency per percentile label and concurrency bucket.

    ``rows`` holds one tuple of latencies per percentile, ordered like
    ``buckets``.
    """

    percentiles: tuple[str, ...]
    buckets: tuple[str, ...]
    rows: tuple[tuple[float, ...], ...]
    strategy: StrategyId = StrategyId.THREAD_POOL
    _percentile_index: dict[str, int] = field(init=False, repr=False, compare=False)
    _bucket_index: dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if len(set(self.percentiles)) != len(self.percentiles):
            raise MatrixValidationError(f"Duplicate percentile labels: {list(self.percentiles)}")
        if len(self.rows) != len(self.percentiles):
            raise MatrixValidationError("Distribution must have one row per percentile")
        for label, row in zip(self.percentiles, self.rows):
            if len(row) != len(self.buckets):
                raise MatrixValidationError(
                    f"{label}: expected {len(self.buckets)} bucket values, got {len(row)}"
                )
        levels = [bucket_level(b) for b in self.buckets]
        if levels != sorted(set(levels)):
            raise MatrixValidationError(
                f"Buckets must be unique and ascending by level: {list(self.buckets)}"
            )
        object.__setattr__(
            self, "_percentile_index", {p: i for i, p in enumerate(self.percentiles)}
        )
        object.__setattr__(self, "_bucket_index", {b: i for i, b in enumerate(self.buckets)})

    @classmethod
    def from_records(
        cls,
        records: Iterable[Mapping[str, Any]],
        strategy: StrategyId = StrategyId.THREAD_POOL,
    ) -> PercentileDistribution:
        """Build from ``{percentile: label, <bucket>: latency, ...}`` records.

        The bucket set is taken from the first record; every later record
        must carry exactly the same buckets.

        Raises:
            MatrixValidationError: On the first malformed record
        """
        percentiles: list[str] = []
        rows: list[tuple[float, ...]] = []
        buckets: list[str] | None = None

        for i, record in enumerate(records):
            where = f"latency_distribution[{i}]"
            if not isinstance(record, Mapping):
                raise MatrixValidationError(f"{where}: expected a mapping, got {record!r}")
            label = record.get(PERCENTILE_KEY)
            if not isinstance(label, str) or not label:
                raise MatrixValidationError(f"{where}: missing '{PERCENTILE_KEY}' label")

            keys = [k for k in record if k != PERCENTILE_KEY]
            if buckets is None:
                buckets = sorted(keys, key=bucket_level)
                if not buckets:
                    raise MatrixValidationError(f"{where}: record has no concurrency buckets")
            elif set(keys) != set(buckets):
                raise MatrixValidationError(
                    f"{where} ({label}): buckets {sorted(map(str, keys))} do not match {buckets}"
                )

            rows.append(
                tuple(check_measurement(record[b], f"{where}.{b}") for b in buckets)
            )
            percentiles.append(label)

        if buckets is None:
            raise MatrixValidationError("Latency distribution contains no records")

        logger.debug("Loaded latency distribution: %s x %s", percentiles, buckets)
        return cls(
            percentiles=tuple(percentiles),
            buckets=tuple(buckets),
            rows=tuple(rows),
            strategy=strategy,
        )

    @property
    def concurrency_levels(self) -> tuple[int, ...]:
        return tuple(bucket_level(b) for b in self.buckets)

    def _bucket(self, bucket: str | int) -> int:
        key = bucket_key(bucket) if isinstance(bucket, int) else bucket
        try:
            return self._bucket_index[key]
        except KeyError:
            raise LevelNotFoundError(bucket, "latency distribution") from None

    def value(self, percentile: str, bucket: str | int) -> float:
        """Latency at *percentile* for *bucket* (``"c100"`` or ``100``).

        Raises:
            PercentileNotFoundError: Unknown percentile label
            LevelNotFoundError: Bucket was not sampled
        """
        column = self._bucket(bucket)
        try:
            row = self._percentile_index[percentile]
        except KeyError:
            raise PercentileNotFoundError(percentile) from None
        return self.rows[row][column]

    def column(self, bucket: str | int) -> list[tuple[str, float]]:
        """(percentile, latency) pairs of one bucket, in percentile order."""
        index = self._bucket(bucket)
        return [(p, row[index]) for p, row in zip(self.percentiles, self.rows)]

    def to_records(self) -> list[dict[str, Any]]:
        records = []
        for label, row in zip(self.percentiles, self.rows):
            record: dict[str, Any] = {PERCENTILE_KEY: label}
            record.update(zip(self.buckets, row))
            records.append(record)
        return records
