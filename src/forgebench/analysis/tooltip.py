"""Point-in-time value formatting for chart interaction.

When the cursor rests on a concurrency level, the chart hands over an event
with the values of every series at that level.  :func:`format_tooltip` turns
that event into display lines; an inactive event or an empty payload is the
normal "not hovering" state and yields ``None``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from forgebench.config.schema import StrategyColors
from forgebench.matrix import BenchmarkMatrix, MetricName, StrategyId, parse_metric


@dataclass(frozen=True)
class TooltipEntry:
    """Value of one series at the hovered level."""

    series_name: str
    value: float
    color_token: str


@dataclass(frozen=True)
class TooltipEvent:
    """Interaction event as delivered by the chart."""

    active: bool = False
    label: str | int | None = None
    payload: Sequence[TooltipEntry] = field(default_factory=tuple)


@dataclass(frozen=True)
class TooltipLine:
    series_name: str
    text: str
    color_token: str

    def render(self) -> str:
        return f"{self.series_name}: {self.text}"


@dataclass(frozen=True)
class TooltipContent:
    header: str
    lines: tuple[TooltipLine, ...]

    def render(self) -> list[str]:
        return [self.header] + [line.render() for line in self.lines]


def format_grouped(value: float, max_decimals: int = 3) -> str:
    """Render *value* with thousands grouping and trimmed fraction digits.

    Examples:
        >>> format_grouped(3181.15)
        '3,181.15'
        >>> format_grouped(100.0)
        '100'
    """
    text = f"{value:,.{max_decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text == "-0":
        text = "0"
    return text


def format_metric_value(metric: MetricName, value: float) -> str:
    """Render a value with its unit the way comparison cells show it.

    Small values keep one decimal (``21.3 ms``), larger ones are rounded and
    grouped (``1,267 req/s``).
    """
    number = format_grouped(value, 1) if abs(value) < 100 else format_grouped(value, 0)
    unit = parse_metric(metric).unit
    if unit == "%":
        return f"{number}%"
    return f"{number} {unit}"


def format_tooltip(event: TooltipEvent) -> TooltipContent | None:
    """Format the hovered values, one line per payload entry in payload order.

    Returns ``None`` when the event is inactive or carries no values.
    """
    if not event.active or not event.payload:
        return None
    lines = tuple(
        TooltipLine(
            series_name=entry.series_name,
            text=format_grouped(entry.value),
            color_token=entry.color_token,
        )
        for entry in event.payload
    )
    return TooltipContent(header=f"c={event.label}", lines=lines)


def build_event(
    matrix: BenchmarkMatrix,
    metric: MetricName | str,
    level: int,
    colors: StrategyColors,
) -> TooltipEvent:
    """Build the hover event a chart of *metric* would emit at *level*.

    Entries follow strategy declaration order.

    Raises:
        MetricNotFoundError: If the matrix has no such metric
        LevelNotFoundError: If the level was not measured
    """
    point = matrix.point_at(matrix.get_series(metric), level)
    payload = tuple(
        TooltipEntry(
            series_name=strategy.label,
            value=point.value(strategy),
            color_token=colors.color_for(strategy),
        )
        for strategy in StrategyId
    )
    return TooltipEvent(active=True, label=level, payload=payload)
