"""``promdash serve`` — run the dashboard web server."""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path

import typer
from rich.console import Console

from promdash._internal.config import load_config
from promdash._internal.errors import PromDashError
from promdash._internal.logging import setup_logging
from promdash.server.app import run_server

console = Console(stderr=True)


def serve_cmd(
    host: str | None = typer.Option(
        None,
        "--host",
        "-H",
        help="Interface to bind (default: PROMDASH_HOST or 127.0.0.1).",
    ),
    port: int | None = typer.Option(
        None,
        "--port",
        "-p",
        min=1,
        max=65535,
        help="Port to listen on (default: PROMDASH_PORT or 8787).",
    ),
    data_dir: Path | None = typer.Option(
        None,
        "--data-dir",
        "-d",
        file_okay=False,
        help="Directory for stored snapshots (default: PROMDASH_DATA_DIR, else in-memory).",
    ),
    max_upload_mb: float | None = typer.Option(
        None,
        "--max-upload-mb",
        min=0.001,
        help="Largest accepted upload in MB (default: PROMDASH_MAX_UPLOAD_MB or 10).",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Emit structured JSON logs.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging.",
    ),
) -> None:
    """Serve the upload form and dashboards over HTTP."""
    setup_logging(logging.DEBUG if verbose else logging.INFO, json_format=json_logs)

    try:
        config = load_config()
    except PromDashError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from None

    overrides: dict[str, object] = {}
    if host is not None:
        overrides["host"] = host
    if port is not None:
        overrides["port"] = port
    if data_dir is not None:
        overrides["data_dir"] = data_dir
    if max_upload_mb is not None:
        overrides["max_upload_mb"] = max_upload_mb
    config = replace(config, **overrides)  # type: ignore[arg-type]

    storage = str(config.data_dir) if config.data_dir else "memory"
    console.print(
        f"[bold]PromDash[/bold] listening on [cyan]http://{config.host}:{config.port}[/cyan]"
        f"  storage: {storage}",
    )
    run_server(config)
