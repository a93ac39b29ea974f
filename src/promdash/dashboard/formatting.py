"""Display formatting for metric names, values and timestamps."""

from __future__ import annotations

import math
from datetime import UTC, datetime

from promdash._internal.types import Labels

_BYTES_PER_MB = 1024 * 1024


def format_number(value: float) -> str:
    """Format a number with thousands separators.

    Integral values drop the fractional part; other values keep up to
    three decimals with trailing zeros removed.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "∞" if value > 0 else "-∞"
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.3f}".rstrip("0").rstrip(".")


def format_label(name: str) -> str:
    """Turn ``snake_case_name`` into ``Snake Case Name``."""
    return " ".join(word[:1].upper() + word[1:] for word in name.split("_"))


def format_value(name: str, value: float) -> str:
    """Format a gauge value according to its metric name.

    Names containing ``bytes`` render in MB, names containing ``latency``
    get an ``ms`` suffix, everything else is grouped by thousands.
    """
    if "bytes" in name:
        return f"{value / _BYTES_PER_MB:.2f} MB"
    if "latency" in name:
        return f"{_plain_number(value)} ms"
    return format_number(value)


def format_labels(labels: Labels) -> str:
    """Render a label mapping as ``k=v, k=v``."""
    return ", ".join(f"{key}={value}" for key, value in labels.items())


def format_timestamp(timestamp_ms: int) -> str:
    """Render epoch milliseconds as a UTC date-time string."""
    moment = datetime.fromtimestamp(timestamp_ms / 1000, tz=UTC)
    return moment.strftime("%Y-%m-%d %H:%M:%S UTC")


def _plain_number(value: float) -> str:
    if math.isnan(value) or math.isinf(value):
        return format_number(value)
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))
