"""``promdash inspect`` — parse a metrics file and print it as tables."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import typer
from rich.console import Console
from rich.table import Table

from promdash.dashboard.formatting import format_labels, format_number, format_value
from promdash.metrics.parser import parse_metrics
from promdash.metrics.validator import is_valid

if TYPE_CHECKING:
    from promdash.metrics.models import MetricSample, ParsedMetrics

console = Console()
err_console = Console(stderr=True)


def read_metrics_file(path: Path) -> str:
    """Read a metrics file and reject it if it is not exposition text.

    Raises:
        typer.Exit: With code 1 if the file fails the format check.
    """
    text = path.read_text(encoding="utf-8", errors="replace")
    if not is_valid(text):
        err_console.print(f"[red]Not a Prometheus metrics file:[/red] {path}")
        raise typer.Exit(code=1)
    return text


def _sample_table(title: str, samples: dict[str, MetricSample], *, gauges: bool) -> Table:
    table = Table(title=title, show_lines=False)
    table.add_column("Metric", style="cyan", no_wrap=True)
    table.add_column("Value", justify="right")
    table.add_column("Labels", style="dim")
    for name, sample in samples.items():
        value = format_value(name, sample.value) if gauges else format_number(sample.value)
        table.add_row(name, value, format_labels(sample.labels))
    return table


def _histogram_table(metrics: ParsedMetrics) -> Table:
    table = Table(title="Histograms")
    table.add_column("Histogram", style="cyan", no_wrap=True)
    table.add_column("Count", justify="right")
    table.add_column("Avg", justify="right")
    table.add_column("Buckets")
    for name, histogram in metrics.histograms.items():
        buckets = ", ".join(
            f"≤{bucket.le}: {format_number(bucket.count)}" for bucket in histogram.buckets
        )
        table.add_row(
            name,
            format_number(histogram.count or 0),
            f"{histogram.average:.2f}",
            buckets,
        )
    return table


def inspect_cmd(
    metrics_file: Path = typer.Argument(
        ...,
        help="Prometheus exposition text file.",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
) -> None:
    """Parse a metrics file and print gauges, counters and histograms."""
    metrics = parse_metrics(read_metrics_file(metrics_file))

    console.print(_sample_table("Gauges", metrics.gauges, gauges=True))
    console.print(_sample_table("Counters", metrics.counters, gauges=False))
    console.print(_histogram_table(metrics))
    console.print(
        f"{len(metrics.gauges)} gauges, {len(metrics.counters)} counters, "
        f"{len(metrics.histograms)} histograms",
    )
