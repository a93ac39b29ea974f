"""Tests for the parsed-metrics data model."""

from __future__ import annotations

import dataclasses

import pytest

from promdash.metrics.models import (
    HistogramAccumulator,
    HistogramBucket,
    MetricSample,
    ParsedMetrics,
    RawSnapshot,
)


class TestHistogramAccumulator:
    def test_average(self):
        assert HistogramAccumulator(sum=10.0, count=4.0).average == 2.5

    def test_average_zero_count(self):
        assert HistogramAccumulator(sum=10.0, count=0.0).average == 0.0

    def test_average_missing_count(self):
        assert HistogramAccumulator(sum=10.0).average == 0.0

    def test_average_missing_sum(self):
        assert HistogramAccumulator(count=3.0).average == 0.0

    def test_buckets_default_to_independent_lists(self):
        first, second = HistogramAccumulator(), HistogramAccumulator()
        first.buckets.append(HistogramBucket(le="1", count=1.0))
        assert second.buckets == []


class TestParsedMetrics:
    def test_absent_values_are_zero(self):
        metrics = ParsedMetrics()
        assert metrics.counter_value("missing_total") == 0.0
        assert metrics.gauge_value("missing") == 0.0

    def test_present_values(self):
        metrics = ParsedMetrics(
            gauges={"up": MetricSample(value=1.0)},
            counters={"requests_total": MetricSample(value=7.0)},
        )
        assert metrics.gauge_value("up") == 1.0
        assert metrics.counter_value("requests_total") == 7.0


class TestImmutability:
    def test_metric_sample_frozen(self):
        sample = MetricSample(value=1.0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            sample.value = 2.0  # type: ignore[misc]

    def test_raw_snapshot_frozen(self):
        snapshot = RawSnapshot(timestamp=1, text="up 1")
        with pytest.raises(dataclasses.FrozenInstanceError):
            snapshot.text = "up 0"  # type: ignore[misc]
