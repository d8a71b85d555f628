"""Tests for tooltip and value formatting."""

import pytest

from forgebench.analysis import (
    TooltipEntry,
    TooltipEvent,
    build_event,
    format_grouped,
    format_metric_value,
    format_tooltip,
)
from forgebench.config import StrategyColors
from forgebench.matrix import LevelNotFoundError, MetricName, MetricNotFoundError

ENTRIES = (
    TooltipEntry("single-thread", 54.74, "#3b9ab2"),
    TooltipEntry("thread-per-request", 1266.7, "#e1af00"),
    TooltipEntry("thread-pool", 3181.15, "#f21a00"),
)


class TestFormatGrouped:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (3181.15, "3,181.15"),
            (1266.7, "1,266.7"),
            (100.0, "100"),
            (46.53, "46.53"),
            (0.0, "0"),
            (1234567.0, "1,234,567"),
            (0.0001, "0"),
            (-0.0, "0"),
            (-1500.5, "-1,500.5"),
        ],
    )
    def test_grouping(self, value, expected):
        assert format_grouped(value) == expected

    def test_max_decimals(self):
        assert format_grouped(3181.15, 0) == "3,181"
        assert format_grouped(46.53, 1) == "46.5"


class TestFormatMetricValue:
    def test_small_values_keep_one_decimal(self):
        assert format_metric_value(MetricName.P50_LATENCY, 21.3) == "21.3 ms"

    def test_large_values_rounded_and_grouped(self):
        assert format_metric_value(MetricName.THROUGHPUT, 1266.7) == "1,267 req/s"

    def test_percent_has_no_space(self):
        assert format_metric_value(MetricName.SUCCESS_RATE, 46.53) == "46.5%"
        assert format_metric_value(MetricName.SUCCESS_RATE, 100.0) == "100%"

    def test_unknown_metric(self):
        with pytest.raises(MetricNotFoundError):
            format_metric_value("cpu", 1.0)

    def test_accepts_metric_name_string(self):
        assert format_metric_value("thread_count", 160) == "160 threads"


class TestFormatTooltip:
    def test_inactive_event(self):
        assert format_tooltip(TooltipEvent(active=False, label=100, payload=ENTRIES)) is None

    @pytest.mark.parametrize("label", [None, 100, "1000"])
    def test_empty_payload(self, label):
        assert format_tooltip(TooltipEvent(active=True, label=label, payload=())) is None

    def test_default_event_is_idle(self):
        assert format_tooltip(TooltipEvent()) is None

    def test_lines_follow_payload_order(self):
        content = format_tooltip(TooltipEvent(active=True, label=1000, payload=ENTRIES))
        assert content is not None
        assert content.header == "c=1000"
        assert [line.series_name for line in content.lines] == [
            "single-thread",
            "thread-per-request",
            "thread-pool",
        ]
        assert [line.text for line in content.lines] == ["54.74", "1,266.7", "3,181.15"]

    def test_reversed_payload_keeps_its_order(self):
        content = format_tooltip(
            TooltipEvent(active=True, label=1000, payload=tuple(reversed(ENTRIES)))
        )
        assert content.lines[0].series_name == "thread-pool"

    def test_color_tokens_carried_through(self):
        content = format_tooltip(TooltipEvent(active=True, label=10, payload=ENTRIES))
        assert content.lines[2].color_token == "#f21a00"

    def test_render(self):
        content = format_tooltip(TooltipEvent(active=True, label=1000, payload=ENTRIES[:1]))
        assert content.render() == ["c=1000", "single-thread: 54.74"]


class TestBuildEvent:
    def test_from_matrix(self, matrix):
        event = build_event(matrix, "throughput", 1000, StrategyColors())
        assert event.active
        assert event.label == 1000
        assert [e.value for e in event.payload] == [54.74, 1266.70, 3181.15]
        assert [e.color_token for e in event.payload] == ["#3b9ab2", "#e1af00", "#f21a00"]

    def test_custom_colors(self, matrix):
        colors = StrategyColors(thread_pool="#000000")
        event = build_event(matrix, "throughput", 10, colors)
        assert event.payload[-1].color_token == "#000000"

    def test_unmeasured_level(self, matrix):
        with pytest.raises(LevelNotFoundError):
            build_event(matrix, "throughput", 500, StrategyColors())

    def test_unknown_metric(self, matrix):
        with pytest.raises(MetricNotFoundError):
            build_event(matrix, "cpu", 10, StrategyColors())
