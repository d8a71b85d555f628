"""forgebench CLI."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from forgebench import __version__
from forgebench._constants import CANONICAL_LEVELS, DEFAULT_CONFIG
from forgebench.analysis import (
    DivisionUndefinedError,
    MissingThresholdsError,
    build_event,
    format_grouped,
    format_metric_value,
    format_tooltip,
    headline_cards,
    peak_value,
    project_comparison,
    tail_ratio,
)
from forgebench.config import (
    ConfigError,
    ConfigValidationError,
    ForgebenchConfig,
    generate_example_config_yaml,
    load_config,
)
from forgebench.matrix import (
    BenchmarkDataset,
    MatrixError,
    MetricName,
    StrategyId,
    load_dataset,
)

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="forgebench",
    help="Compare httpforge concurrency strategies from measured benchmark data",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    epilog="[dim]Workflow: init -> validate -> summary -> compare -> inspect[/dim]",
)

console = Console()

DataOption = Annotated[
    Path | None,
    typer.Option(
        "--data",
        "-d",
        help="Dataset YAML file (default: bundled httpforge results)",
    ),
]
ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help=f"Configuration YAML file (default: ./{DEFAULT_CONFIG} if present)",
    ),
]
FormatOption = Annotated[
    str,
    typer.Option(
        "--format",
        "-f",
        help="Output format: table, json",
    ),
]


# =============================================================================
# Helper Functions
# =============================================================================


def resolve_config_path(config_file: Path | None) -> Path | None:
    """Resolve config file path, using ./forgebench.yaml when present.

    Returns None when no file is given and none is found; the built-in
    defaults apply in that case.
    """
    if config_file is not None:
        return config_file

    default = Path(DEFAULT_CONFIG)
    if default.exists():
        return default
    return None


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]OK[/green] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]ERROR[/red] {escape(message)}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]...[/blue] {message}")


def _check_format(output_format: str) -> None:
    if output_format not in ("table", "json"):
        print_error(f"Unknown format '{output_format}' (use table or json)")
        raise typer.Exit(1)


def _load_config_or_exit(config_file: Path | None) -> ForgebenchConfig:
    try:
        return load_config(resolve_config_path(config_file))
    except ConfigValidationError as e:
        print_error("Config validation failed:")
        for err in e.errors:
            loc = ".".join(str(x) for x in err["loc"])
            console.print(f"  [red]•[/red] {loc}: {err['msg']}")
        raise typer.Exit(1)  # noqa: B904
    except ConfigError as e:
        print_error(f"Config error: {e}")
        raise typer.Exit(1)  # noqa: B904


def _load_dataset_or_exit(data_file: Path | None) -> BenchmarkDataset:
    try:
        return load_dataset(data_file)
    except MatrixError as e:
        print_error(f"Dataset error: {e}")
        raise typer.Exit(1)  # noqa: B904


def _parse_metric_or_exit(name: str) -> MetricName:
    try:
        return MetricName(name)
    except ValueError:
        valid = ", ".join(m.value for m in MetricName)
        print_error(f"Unknown metric '{name}' (valid: {valid})")
        raise typer.Exit(1)  # noqa: B904


def _strategy_header(strategy: StrategyId, cfg: ForgebenchConfig) -> str:
    return f"[{cfg.strategy_colors.color_for(strategy)}]●[/] {strategy.label}"


def _print_json(data: Any) -> None:
    console.print_json(json.dumps(data))


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug logging",
        ),
    ] = False,
) -> None:
    """Configure logging for every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


# =============================================================================
# Commands
# =============================================================================


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"forgebench version {__version__}")


@app.command()
def init(
    output: Annotated[
        Path,
        typer.Option(
            "--output",
            "-o",
            help="Where to write the configuration file",
        ),
    ] = Path(DEFAULT_CONFIG),
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            help="Overwrite an existing file",
        ),
    ] = False,
) -> None:
    """Write a commented example configuration file."""
    if output.exists() and not force:
        print_error(f"{output} already exists (use --force to overwrite)")
        raise typer.Exit(1)
    output.write_text(generate_example_config_yaml())
    print_success(f"Wrote {output}")
    print_info(f"Next: forgebench validate --config {output}")


@app.command()
def validate(
    data_file: DataOption = None,
    config_file: ConfigOption = None,
) -> None:
    """Validate a dataset and configuration.

    This command performs the following checks:
    - YAML syntax is valid
    - Concurrency levels are ascending, unique and shared by every metric
    - Every data point carries a non-negative number for every strategy
    - Thresholds and color tokens are well formed
    - The comparison and headline levels were measured
    """
    console.print(Panel("Validating forgebench inputs", expand=False))

    cfg = _load_config_or_exit(config_file)
    print_success(f"Config valid: {cfg.name}")

    dataset = _load_dataset_or_exit(data_file)
    matrix = dataset.matrix
    print_success(
        f"Dataset valid: {len(matrix)} metrics x {len(matrix.levels)} levels "
        f"({', '.join(str(level) for level in matrix.levels)})"
    )
    if matrix.levels != CANONICAL_LEVELS:
        print_info(
            f"Levels differ from the httpforge run grid "
            f"({', '.join(str(level) for level in CANONICAL_LEVELS)})"
        )
    if dataset.distribution is not None:
        dist = dataset.distribution
        print_success(
            f"Latency distribution: {len(dist.percentiles)} percentiles x "
            f"{len(dist.buckets)} buckets ({', '.join(dist.buckets)})"
        )

    missing = [m.value for m in MetricName if not matrix.has_metric(m)]
    failed = False
    if missing:
        print_error(f"Metrics missing from dataset: {', '.join(missing)}")
        failed = True
    for label, level in (
        ("comparison", cfg.comparison_level),
        ("headline", cfg.headline.level),
    ):
        if level in matrix.levels:
            print_success(f"{label} level c={level} measured")
        else:
            print_error(f"{label} level c={level} not measured")
            failed = True

    if failed:
        raise typer.Exit(1)


@app.command()
def summary(
    data_file: DataOption = None,
    config_file: ConfigOption = None,
    output_format: FormatOption = "table",
) -> None:
    """Show the headline cards (peak, reliability, gain, degradation)."""
    _check_format(output_format)
    cfg = _load_config_or_exit(config_file)
    dataset = _load_dataset_or_exit(data_file)

    try:
        cards = headline_cards(dataset.matrix, cfg.headline)
    except (MatrixError, DivisionUndefinedError) as e:
        print_error(str(e))
        raise typer.Exit(1)  # noqa: B904

    if output_format == "json":
        _print_json([card.to_dict() for card in cards])
        return

    console.print()
    console.print(Panel(f"[bold]{cfg.name}[/bold]\n[dim]{cfg.description}[/dim]", expand=False))
    table = Table(show_header=True, header_style="bold")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_column("Unit")
    table.add_column("Context")
    for card in cards:
        table.add_row(card.title, f"[bold]{card.text}[/bold]", card.unit, card.subtitle)
    console.print(table)
    for card in cards:
        if card.note:
            console.print(f"  [dim]{card.title}: {card.note}[/dim]")
    console.print()


@app.command()
def compare(
    level: Annotated[
        int | None,
        typer.Option(
            "--level",
            "-l",
            help="Concurrency level to compare at (default: comparison_level from config)",
        ),
    ] = None,
    data_file: DataOption = None,
    config_file: ConfigOption = None,
    output_format: FormatOption = "table",
) -> None:
    """Compare every metric across strategies at one concurrency level."""
    _check_format(output_format)
    cfg = _load_config_or_exit(config_file)
    dataset = _load_dataset_or_exit(data_file)
    level = level if level is not None else cfg.comparison_level

    try:
        grid = project_comparison(dataset.matrix, cfg.thresholds, level)
    except (MatrixError, MissingThresholdsError) as e:
        print_error(str(e))
        raise typer.Exit(1)  # noqa: B904

    if output_format == "json":
        _print_json(grid.to_dict())
        return

    console.print()
    table = Table(
        title=f"Architecture Comparison @ c={level}",
        show_header=True,
        header_style="bold",
    )
    table.add_column("metric", style="cyan")
    for strategy in grid.strategies:
        table.add_column(_strategy_header(strategy, cfg), justify="center")

    palette = cfg.severity_colors
    for row in grid.rows:
        best = row.best
        cells = []
        for cell in row.cells:
            style = palette.color_for(cell.tier)
            if cell.strategy is best:
                style = f"bold {style}"
            cells.append(f"[{style}]{format_metric_value(row.metric, cell.value)}[/]")
        table.add_row(row.metric.value, *cells)
    console.print(table)
    console.print()


@app.command()
def series(
    metric: Annotated[
        str,
        typer.Argument(help="Metric name (throughput, p50_latency, p99_latency, ...)"),
    ],
    data_file: DataOption = None,
    config_file: ConfigOption = None,
    output_format: FormatOption = "table",
) -> None:
    """Show one metric across all concurrency levels."""
    _check_format(output_format)
    name = _parse_metric_or_exit(metric)
    cfg = _load_config_or_exit(config_file)
    dataset = _load_dataset_or_exit(data_file)

    try:
        data = dataset.matrix.get_series(name)
    except MatrixError as e:
        print_error(str(e))
        raise typer.Exit(1)  # noqa: B904

    peaks = {s: peak_value(dataset.matrix, name, s) for s in StrategyId}

    if output_format == "json":
        _print_json(
            {
                "metric": name.value,
                "unit": name.unit,
                "points": data.to_records(),
                "peaks": {
                    s.value: {"value": p.value, "concurrency_level": p.concurrency_level}
                    for s, p in peaks.items()
                },
            }
        )
        return

    console.print()
    table = Table(title=f"{name.value} ({name.unit})", show_header=True, header_style="bold")
    table.add_column("c", justify="right", style="cyan")
    for strategy in StrategyId:
        table.add_column(_strategy_header(strategy, cfg), justify="right")
    for point in data.points:
        cells = []
        for strategy in StrategyId:
            text = format_grouped(point.value(strategy))
            if peaks[strategy].concurrency_level == point.concurrency_level:
                text = f"[bold]{text}[/bold]"
            cells.append(text)
        table.add_row(str(point.concurrency_level), *cells)
    console.print(table)
    console.print("  [dim]bold = peak of the strategy[/dim]")
    console.print()


@app.command()
def inspect(
    metric: Annotated[
        str,
        typer.Argument(help="Metric name (throughput, p50_latency, p99_latency, ...)"),
    ],
    level: Annotated[
        int,
        typer.Argument(help="Concurrency level to inspect"),
    ],
    data_file: DataOption = None,
    config_file: ConfigOption = None,
) -> None:
    """Show every strategy's value of one metric at one concurrency level."""
    name = _parse_metric_or_exit(metric)
    cfg = _load_config_or_exit(config_file)
    dataset = _load_dataset_or_exit(data_file)

    try:
        event = build_event(dataset.matrix, name, level, cfg.strategy_colors)
    except MatrixError as e:
        print_error(str(e))
        raise typer.Exit(1)  # noqa: B904

    content = format_tooltip(event)
    if content is None:
        print_info("Nothing to show")
        return
    console.print(f"[dim]{content.header}[/dim]")
    for line in content.lines:
        console.print(f"[{line.color_token}]{line.series_name}[/]: {line.text}")


@app.command()
def distribution(
    data_file: DataOption = None,
    config_file: ConfigOption = None,
    output_format: FormatOption = "table",
) -> None:
    """Show the thread-pool latency distribution per load bucket."""
    _check_format(output_format)
    cfg = _load_config_or_exit(config_file)
    dataset = _load_dataset_or_exit(data_file)

    dist = dataset.distribution
    if dist is None:
        print_error("Dataset has no latency_distribution section")
        raise typer.Exit(1)

    try:
        ratios = {b: tail_ratio(dist, b) for b in dist.buckets}
    except DivisionUndefinedError as e:
        print_error(str(e))
        raise typer.Exit(1)  # noqa: B904

    if output_format == "json":
        _print_json(
            {
                "strategy": dist.strategy.value,
                "records": dist.to_records(),
                "tail_ratio": ratios,
            }
        )
        return

    console.print()
    table = Table(
        title=f"{dist.strategy.label} latency distribution (ms)",
        show_header=True,
        header_style="bold",
    )
    table.add_column("percentile", style="cyan")
    for bucket, level in zip(dist.buckets, dist.concurrency_levels):
        color = cfg.bucket_colors.get(bucket, cfg.severity_colors.neutral)
        table.add_column(f"[{color}]●[/] c={level}", justify="right")
    for label in dist.percentiles:
        table.add_row(label, *(format_grouped(dist.value(label, b)) for b in dist.buckets))
    table.add_row(
        "[dim]tail ratio[/dim]",
        *(f"[dim]{ratios[b]:.1f}x[/dim]" for b in dist.buckets),
    )
    console.print(table)
    console.print()


# =============================================================================
# Entry Point
# =============================================================================


def main() -> None:
    """Main entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
