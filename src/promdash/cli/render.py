"""``promdash render`` — write a dashboard HTML file without a server."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from promdash.cli.inspect_cmd import read_metrics_file
from promdash.dashboard.renderer import render_dashboard
from promdash.metrics.parser import parse_metrics

console = Console(stderr=True)


def render_cmd(
    metrics_file: Path = typer.Argument(
        ...,
        help="Prometheus exposition text file.",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    output: Path = typer.Option(
        Path("dashboard.html"),
        "--output",
        "-o",
        help="Where to write the HTML document.",
    ),
    timestamp: int | None = typer.Option(
        None,
        "--timestamp",
        "-t",
        min=0,
        help="Snapshot time in epoch milliseconds, shown in the heading.",
    ),
) -> None:
    """Render the dashboard for a metrics file to a standalone HTML file."""
    metrics = parse_metrics(read_metrics_file(metrics_file))
    output.write_text(render_dashboard(metrics, timestamp), encoding="utf-8")
    console.print(f"[green]Wrote dashboard:[/green] {output}")
