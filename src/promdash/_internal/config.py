"""Configuration loading for PromDash."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from promdash._internal.errors import ConfigError


@dataclass(frozen=True)
class PromDashConfig:
    """Global PromDash configuration.

    Attributes:
        host: Interface the dashboard server binds to.
        port: TCP port the dashboard server listens on.
        data_dir: Directory for persisted snapshots. None keeps snapshots
            in memory for the lifetime of the process.
        max_upload_mb: Largest accepted request body, in megabytes.
    """

    host: str = "127.0.0.1"
    port: int = 8787
    data_dir: Path | None = None
    max_upload_mb: float = 10.0

    @property
    def client_max_size(self) -> int:
        """Maximum request body size in bytes, as aiohttp expects it."""
        return int(self.max_upload_mb * 1024 * 1024)


def load_config() -> PromDashConfig:
    """Load configuration from environment variables with defaults.

    Environment variables:
        PROMDASH_HOST: Bind address (default: 127.0.0.1).
        PROMDASH_PORT: Listen port (default: 8787).
        PROMDASH_DATA_DIR: Snapshot directory (default: unset, in-memory).
        PROMDASH_MAX_UPLOAD_MB: Upload size limit in MB (default: 10).

    Returns:
        Populated PromDashConfig instance.

    Raises:
        ConfigError: If an environment variable has an invalid value.
    """
    port_str = os.environ.get("PROMDASH_PORT", "8787")
    max_upload_str = os.environ.get("PROMDASH_MAX_UPLOAD_MB", "10")
    data_dir_str = os.environ.get("PROMDASH_DATA_DIR", "")

    try:
        port = int(port_str)
    except ValueError:
        msg = f"PROMDASH_PORT must be an integer, got: {port_str!r}"
        raise ConfigError(msg) from None

    if not 1 <= port <= 65535:
        msg = f"PROMDASH_PORT must be between 1 and 65535, got: {port}"
        raise ConfigError(msg)

    try:
        max_upload_mb = float(max_upload_str)
    except ValueError:
        msg = f"PROMDASH_MAX_UPLOAD_MB must be a number, got: {max_upload_str!r}"
        raise ConfigError(msg) from None

    if max_upload_mb <= 0:
        msg = f"PROMDASH_MAX_UPLOAD_MB must be positive, got: {max_upload_mb}"
        raise ConfigError(msg)

    return PromDashConfig(
        host=os.environ.get("PROMDASH_HOST", "127.0.0.1"),
        port=port,
        data_dir=Path(data_dir_str) if data_dir_str else None,
        max_upload_mb=max_upload_mb,
    )
