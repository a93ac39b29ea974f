"""Tests for dashboard value formatting."""

from __future__ import annotations

import math

import pytest

from promdash.dashboard.formatting import (
    format_label,
    format_labels,
    format_number,
    format_timestamp,
    format_value,
)


class TestFormatNumber:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (0, "0"),
            (12345.0, "12,345"),
            (1234567, "1,234,567"),
            (-2500.0, "-2,500"),
            (0.5, "0.5"),
            (1234.5678, "1,234.568"),
            (2.10, "2.1"),
        ],
    )
    def test_values(self, value: float, expected: str):
        assert format_number(value) == expected

    def test_special_values(self):
        assert format_number(math.nan) == "NaN"
        assert format_number(math.inf) == "∞"
        assert format_number(-math.inf) == "-∞"


class TestFormatValue:
    def test_bytes_render_in_megabytes(self):
        assert format_value("go_memstats_alloc_bytes", 5 * 1024 * 1024) == "5.00 MB"

    def test_latency_gets_ms_suffix(self):
        assert format_value("edge_latency", 12) == "12 ms"
        assert format_value("edge_latency", 12.5) == "12.5 ms"

    def test_bytes_checked_before_latency(self):
        assert format_value("latency_bytes", 1024 * 1024) == "1.00 MB"

    def test_other_values_grouped(self):
        assert format_value("ha_connections", 4000) == "4,000"


class TestLabels:
    def test_format_label(self):
        assert format_label("cloudflared_tunnel_ha_connections") == "Cloudflared Tunnel Ha Connections"

    def test_format_label_keeps_inner_case(self):
        assert format_label("go_GC_duration") == "Go GC Duration"

    def test_format_labels(self):
        assert format_labels({"method": "GET", "code": "200"}) == "method=GET, code=200"

    def test_format_labels_empty(self):
        assert format_labels({}) == ""


def test_format_timestamp_is_utc():
    assert format_timestamp(0) == "1970-01-01 00:00:00 UTC"
    assert format_timestamp(1_700_000_000_000) == "2023-11-14 22:13:20 UTC"
