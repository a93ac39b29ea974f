"""Main Typer application — entry point for the ``promdash`` CLI."""

from __future__ import annotations

import typer

from promdash import __version__
from promdash.cli.inspect_cmd import inspect_cmd
from promdash.cli.render import render_cmd
from promdash.cli.serve import serve_cmd

app = typer.Typer(
    name="promdash",
    help="Upload Prometheus metrics snapshots and browse them as dashboards.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.command("serve", help="Run the dashboard web server.")(serve_cmd)
app.command("inspect", help="Print the parsed contents of a metrics file.")(inspect_cmd)
app.command("render", help="Write the dashboard for a metrics file to HTML.")(render_cmd)


def _version_callback(value: bool) -> None:
    """Print version and exit.

    Args:
        value: True if --version was passed.
    """
    if value:
        typer.echo(f"promdash {__version__}")
        raise typer.Exit


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """PromDash — Prometheus snapshot dashboards."""
