"""Data model for parsed Prometheus snapshots."""

from __future__ import annotations

from dataclasses import dataclass, field

from promdash._internal.types import Labels

__all__ = [
    "HistogramAccumulator",
    "HistogramBucket",
    "MetricSample",
    "ParsedMetrics",
    "RawSnapshot",
    "SnapshotRef",
]


@dataclass(frozen=True)
class MetricSample:
    """Value of a single gauge or counter line.

    Attributes:
        value: Parsed numeric value. Non-numeric input yields NaN.
        labels: Label mapping from the line's ``{...}`` block.
    """

    value: float
    labels: Labels = field(default_factory=dict)


@dataclass(frozen=True)
class HistogramBucket:
    """One ``<name>_bucket`` line.

    Attributes:
        le: Upper bound exactly as written (may be ``+Inf``), or None when
            the line carried no ``le`` label.
        count: Cumulative observation count for the bucket.
    """

    le: str | None
    count: float


@dataclass
class HistogramAccumulator:
    """Fields collected for one histogram base name.

    Attributes:
        buckets: Buckets in input line order.
        sum: Value of the ``<name>_sum`` line, if seen.
        count: Value of the ``<name>_count`` line, if seen.
    """

    buckets: list[HistogramBucket] = field(default_factory=list)
    sum: float | None = None
    count: float | None = None

    @property
    def average(self) -> float:
        """Mean observation (``sum / count``), 0.0 when count is 0 or absent."""
        if not self.count:
            return 0.0
        return (self.sum or 0.0) / self.count


@dataclass
class ParsedMetrics:
    """Structured view of one metrics snapshot.

    Attributes:
        gauges: Gauge samples keyed by full metric name.
        counters: Counter samples keyed by full metric name.
        histograms: Histograms keyed by base name (suffix stripped).
    """

    gauges: dict[str, MetricSample] = field(default_factory=dict)
    counters: dict[str, MetricSample] = field(default_factory=dict)
    histograms: dict[str, HistogramAccumulator] = field(default_factory=dict)

    def counter_value(self, name: str) -> float:
        """Return a counter's value, 0.0 when the counter is absent."""
        sample = self.counters.get(name)
        return sample.value if sample is not None else 0.0

    def gauge_value(self, name: str) -> float:
        """Return a gauge's value, 0.0 when the gauge is absent."""
        sample = self.gauges.get(name)
        return sample.value if sample is not None else 0.0


@dataclass(frozen=True)
class RawSnapshot:
    """One stored upload.

    Attributes:
        timestamp: Upload time in epoch milliseconds.
        text: Raw exposition text exactly as uploaded.
    """

    timestamp: int
    text: str


@dataclass(frozen=True)
class SnapshotRef:
    """Listing entry for a stored snapshot.

    Attributes:
        key: Backend key (``metrics_<timestamp>``).
        timestamp: Upload time in epoch milliseconds.
    """

    key: str
    timestamp: int
