"""Snapshot persistence with a two-entry retention policy."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from promdash._internal.logging import get_logger
from promdash.metrics.models import RawSnapshot, SnapshotRef

if TYPE_CHECKING:
    from promdash.storage.backend import KeyValueBackend

logger = get_logger("storage.snapshots")

KEY_PREFIX = "metrics_"
MAX_SNAPSHOTS = 2
MAX_TIMESTAMP_DIGITS = 20


def snapshot_key(timestamp: int | str) -> str:
    """Return the backend key for a snapshot timestamp."""
    return f"{KEY_PREFIX}{timestamp}"


class SnapshotStore:
    """Stores raw uploads as JSON envelopes in a key-value backend.

    Each snapshot is written under ``metrics_<epoch-millis>`` as
    ``{"data": <text>, "timestamp": <epoch-millis>}``.

    Retention compares keys as strings, not numbers. Timestamps of equal
    digit length sort correctly, which holds for any realistic clock.

    No locking is done here: two concurrent ``save`` calls can both list
    before either writes, leaving more than ``MAX_SNAPSHOTS`` entries.
    """

    def __init__(self, backend: KeyValueBackend) -> None:
        """Initialize the store.

        Args:
            backend: Key-value backend holding the envelopes.
        """
        self._backend = backend

    def save(self, timestamp: int, text: str) -> str:
        """Store ``text`` under a new key, evicting an older snapshot first.

        When two or more snapshots already exist, the key at index 1 of the
        descending string sort (the second newest) is deleted before the
        write, so at most two snapshots remain afterwards.

        Args:
            timestamp: Upload time in epoch milliseconds.
            text: Raw exposition text.

        Returns:
            The key the snapshot was written under.

        Raises:
            BackendError: If the backend cannot be read or written.
        """
        keys = sorted(self._backend.list(KEY_PREFIX), reverse=True)
        if len(keys) >= MAX_SNAPSHOTS:
            logger.info("Evicting snapshot %s", keys[1])
            self._backend.delete(keys[1])

        key = snapshot_key(timestamp)
        envelope = json.dumps({"data": text, "timestamp": timestamp})
        self._backend.put(key, envelope)
        logger.info("Stored snapshot %s (%d chars)", key, len(text))
        return key

    def load(self, timestamp: int | str) -> RawSnapshot | None:
        """Fetch the snapshot stored for ``timestamp``.

        Args:
            timestamp: Epoch milliseconds, as an int or a decimal string.

        Returns:
            The stored snapshot, or None if no snapshot has that timestamp
            (including any ``timestamp`` that is not a decimal integer
            of at most ``MAX_TIMESTAMP_DIGITS`` digits).

        Raises:
            BackendError: If the backend cannot be read.
        """
        timestamp_str = str(timestamp)
        if not (
            timestamp_str.isascii()
            and timestamp_str.isdecimal()
            and len(timestamp_str) <= MAX_TIMESTAMP_DIGITS
        ):
            logger.debug("Rejected snapshot timestamp %r", timestamp_str[:40])
            return None

        stored = self._backend.get(snapshot_key(timestamp_str))
        if stored is None:
            return None

        envelope = json.loads(stored)
        return RawSnapshot(
            timestamp=int(envelope.get("timestamp", timestamp_str)),
            text=envelope["data"],
        )

    def recent(self, limit: int = MAX_SNAPSHOTS) -> list[SnapshotRef]:
        """Return up to ``limit`` stored snapshots, newest first.

        Unlike retention, ordering here is by numeric envelope timestamp.
        Keys that vanish between listing and reading are skipped.

        Raises:
            BackendError: If the backend cannot be read.
        """
        refs: list[SnapshotRef] = []
        for key in self._backend.list(KEY_PREFIX):
            stored = self._backend.get(key)
            if stored is None:
                continue
            refs.append(SnapshotRef(key=key, timestamp=int(json.loads(stored)["timestamp"])))

        refs.sort(key=lambda ref: ref.timestamp, reverse=True)
        return refs[:limit]
