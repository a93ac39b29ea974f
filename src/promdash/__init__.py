"""PromDash — upload Prometheus metrics snapshots and view them as dashboards."""

from __future__ import annotations

from promdash.dashboard.renderer import render_dashboard, render_upload_form
from promdash.metrics.models import (
    HistogramAccumulator,
    HistogramBucket,
    MetricSample,
    ParsedMetrics,
    RawSnapshot,
    SnapshotRef,
)
from promdash.metrics.parser import parse_labels, parse_metrics
from promdash.metrics.validator import is_valid
from promdash.storage.backend import FileBackend, InMemoryBackend, KeyValueBackend
from promdash.storage.snapshots import SnapshotStore

__version__ = "0.1.0"

__all__ = [
    "FileBackend",
    "HistogramAccumulator",
    "HistogramBucket",
    "InMemoryBackend",
    "KeyValueBackend",
    "MetricSample",
    "ParsedMetrics",
    "RawSnapshot",
    "SnapshotRef",
    "SnapshotStore",
    "is_valid",
    "parse_labels",
    "parse_metrics",
    "render_dashboard",
    "render_upload_form",
]
