"""aiohttp application wiring for the dashboard server."""

from __future__ import annotations

from typing import TYPE_CHECKING

from aiohttp import web

from promdash._internal.errors import BackendError, ClientInputError, NotFoundError
from promdash._internal.logging import get_logger
from promdash.server.handler import DashboardHandler
from promdash.storage.backend import FileBackend, InMemoryBackend
from promdash.storage.snapshots import SnapshotStore

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from promdash._internal.config import PromDashConfig
    from promdash._internal.types import Clock
    from promdash.storage.backend import KeyValueBackend

logger = get_logger("server.app")


@web.middleware
async def error_middleware(
    request: web.Request,
    handler: Callable[[web.Request], Awaitable[web.StreamResponse]],
) -> web.StreamResponse:
    """Translate PromDash errors into plain-text HTTP responses."""
    try:
        return await handler(request)
    except ClientInputError as exc:
        return web.Response(status=400, text=str(exc))
    except NotFoundError as exc:
        return web.Response(status=404, text=str(exc))
    except BackendError:
        logger.exception("Backend failure on %s %s", request.method, request.path)
        raise web.HTTPInternalServerError from None


def build_backend(config: PromDashConfig) -> KeyValueBackend:
    """Pick the backend named by ``config``: a directory, or memory."""
    if config.data_dir is not None:
        logger.info("Persisting snapshots under %s", config.data_dir)
        return FileBackend(config.data_dir)
    logger.info("No data directory configured; snapshots are kept in memory")
    return InMemoryBackend()


def create_app(
    store: SnapshotStore,
    *,
    client_max_size: int = 10 * 1024 * 1024,
    clock: Clock | None = None,
) -> web.Application:
    """Build the dashboard application.

    Args:
        store: Snapshot store injected into the request handler.
        client_max_size: Largest accepted request body in bytes.
        clock: Epoch-millisecond clock for upload timestamps.

    Returns:
        Application serving ``GET /`` and ``POST /``.
    """
    handler = DashboardHandler(store, clock=clock)
    app = web.Application(middlewares=[error_middleware], client_max_size=client_max_size)
    app.router.add_get("/", handler.retrieve)
    app.router.add_post("/", handler.upload)
    return app


def run_server(config: PromDashConfig) -> None:
    """Serve the dashboard until interrupted.

    Args:
        config: Bind address, port, storage and upload limits.
    """
    store = SnapshotStore(build_backend(config))
    app = create_app(store, client_max_size=config.client_max_size)
    logger.info("Serving dashboard on http://%s:%d", config.host, config.port)
    web.run_app(app, host=config.host, port=config.port, print=None)
