"""Request handling for the upload and retrieval flows."""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING

from aiohttp import web

from promdash._internal.errors import ClientInputError, NotFoundError
from promdash._internal.logging import get_logger
from promdash.dashboard.renderer import render_dashboard, render_upload_form
from promdash.metrics.parser import parse_metrics
from promdash.metrics.validator import is_valid
from promdash.storage.snapshots import MAX_SNAPSHOTS

if TYPE_CHECKING:
    from promdash._internal.types import Clock
    from promdash.storage.snapshots import SnapshotStore

logger = get_logger("server.handler")

FILE_FIELD = "metricsFile"
HTML_CONTENT_TYPE = "text/html;charset=UTF-8"

MISSING_FILE_MESSAGE = "No metrics file uploaded"
INVALID_FORMAT_MESSAGE = (
    "Invalid metrics file format. Please upload a valid Prometheus metrics file."
)
NOT_FOUND_MESSAGE = "Metrics not found"


def _now_ms() -> int:
    """Return the wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def _html(document: str) -> web.Response:
    return web.Response(
        body=document.encode("utf-8"),
        headers={"Content-Type": HTML_CONTENT_TYPE},
    )


class DashboardHandler:
    """Serves the upload form, accepts uploads and replays stored snapshots.

    Attributes:
        store: Snapshot store shared by every request.
    """

    def __init__(self, store: SnapshotStore, clock: Clock | None = None) -> None:
        """Initialize the handler.

        Args:
            store: Snapshot store used for persistence and lookup.
            clock: Returns the current time in epoch milliseconds. Defaults
                to the wall clock.
        """
        self.store = store
        self._clock = clock or _now_ms

    async def upload(self, request: web.Request) -> web.Response:
        """Validate, parse, store and render an uploaded metrics file.

        Raises:
            ClientInputError: If the file field is missing or the text does
                not look like Prometheus exposition format.
            BackendError: If the snapshot cannot be stored.
        """
        form = await request.post()
        field = form.get(FILE_FIELD)
        if field is None:
            raise ClientInputError(MISSING_FILE_MESSAGE)

        if isinstance(field, web.FileField):
            text = field.file.read().decode("utf-8", errors="replace")
        elif isinstance(field, bytes | bytearray):
            text = bytes(field).decode("utf-8", errors="replace")
        else:
            text = str(field)

        if not is_valid(text):
            logger.info("Rejected upload with invalid format (%d chars)", len(text))
            raise ClientInputError(INVALID_FORMAT_MESSAGE)

        timestamp = self._clock()
        metrics = parse_metrics(text)
        await asyncio.to_thread(self.store.save, timestamp, text)
        logger.info(
            "Accepted upload %d: %d gauges, %d counters, %d histograms",
            timestamp,
            len(metrics.gauges),
            len(metrics.counters),
            len(metrics.histograms),
        )
        return _html(render_dashboard(metrics, timestamp))

    async def retrieve(self, request: web.Request) -> web.Response:
        """Render a stored snapshot, or the upload form when none is asked for.

        Raises:
            NotFoundError: If ``?timestamp=`` names no stored snapshot.
            BackendError: If the backend cannot be read.
        """
        timestamp = request.query.get("timestamp")
        if not timestamp:
            recent = await asyncio.to_thread(self.store.recent, MAX_SNAPSHOTS)
            return _html(render_upload_form(recent))

        snapshot = await asyncio.to_thread(self.store.load, timestamp)
        if snapshot is None:
            logger.info("No snapshot for timestamp %r", timestamp[:40])
            raise NotFoundError(NOT_FOUND_MESSAGE)

        return _html(render_dashboard(parse_metrics(snapshot.text), snapshot.timestamp))
