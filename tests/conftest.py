"""Shared test fixtures for the PromDash test suite."""

from __future__ import annotations

import itertools
import socket
from typing import TYPE_CHECKING

import pytest
from aiohttp import web

from promdash.server.app import create_app
from promdash.storage.backend import InMemoryBackend
from promdash.storage.snapshots import SnapshotStore

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterator
    from pathlib import Path


# =============================================================================
# Pytest configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-apply markers based on test directory structure."""
    for item in items:
        test_path = str(item.fspath)
        if "/unit/" in test_path:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
        elif "/e2e/" in test_path:
            item.add_marker(pytest.mark.e2e)


# =============================================================================
# Sample data
# =============================================================================

SAMPLE_METRICS = """\
# HELP cloudflared_tunnel_total_requests Amount of requests proxied through all the tunnels
# TYPE cloudflared_tunnel_total_requests counter
cloudflared_tunnel_total_requests 12345
# HELP cloudflared_tunnel_request_errors Amount of requests errors
# TYPE cloudflared_tunnel_request_errors counter
cloudflared_tunnel_request_errors 7
# TYPE cloudflared_tunnel_ha_connections gauge
cloudflared_tunnel_ha_connections 4
# TYPE cloudflared_tcp_total_sessions counter
cloudflared_tcp_total_sessions 2048
# TYPE go_memstats_alloc_bytes gauge
go_memstats_alloc_bytes 5242880
# TYPE cloudflared_tunnel_server_locations gauge
cloudflared_tunnel_server_locations{connection_id="0",edge_location="ams01"} 1
# TYPE cloudflared_proxy_connect_latency histogram
cloudflared_proxy_connect_latency_bucket{le="1"} 2
cloudflared_proxy_connect_latency_bucket{le="10"} 8
cloudflared_proxy_connect_latency_bucket{le="+Inf"} 10
cloudflared_proxy_connect_latency_sum 55
cloudflared_proxy_connect_latency_count 10
"""


@pytest.fixture
def sample_metrics() -> str:
    """A small cloudflared-style exposition snapshot."""
    return SAMPLE_METRICS


@pytest.fixture
def sample_metrics_file(tmp_path: Path) -> Path:
    """The sample snapshot written to a temporary ``.prom`` file."""
    path = tmp_path / "metrics.prom"
    path.write_text(SAMPLE_METRICS)
    return path


@pytest.fixture
def garbage_file(tmp_path: Path) -> Path:
    """A text file that fails the exposition format check."""
    path = tmp_path / "notes.txt"
    path.write_text("this is not a metrics file\n")
    return path


# =============================================================================
# Storage fixtures
# =============================================================================


@pytest.fixture
def backend() -> InMemoryBackend:
    """Empty in-memory key-value backend."""
    return InMemoryBackend()


@pytest.fixture
def store(backend: InMemoryBackend) -> SnapshotStore:
    """Snapshot store over the in-memory backend."""
    return SnapshotStore(backend)


@pytest.fixture
def clock() -> Iterator[int]:
    """Deterministic epoch-millisecond clock, one second per tick."""
    return itertools.count(1_700_000_000_000, 1000)


# =============================================================================
# Server fixtures
# =============================================================================


def _get_free_port() -> int:
    """Find an available port on localhost."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("", 0))
        s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        return s.getsockname()[1]


@pytest.fixture
async def dashboard_server(store: SnapshotStore, clock: Iterator[int]) -> AsyncIterator[str]:
    """Dashboard app served on a free local port.

    Returns the base URL (e.g., 'http://127.0.0.1:54321').
    """
    app = create_app(store, clock=lambda: next(clock))
    port = _get_free_port()
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", port)
    await site.start()
    yield f"http://127.0.0.1:{port}"
    await runner.cleanup()
