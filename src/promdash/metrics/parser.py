"""Permissive parser for Prometheus exposition text.

Malformed lines are dropped without error. Only a line carrying both a
``name{labels}`` token and a value token contributes to the result.
"""

from __future__ import annotations

import math
import re

from promdash._internal.types import Labels
from promdash.metrics.models import (
    HistogramAccumulator,
    HistogramBucket,
    MetricSample,
    ParsedMetrics,
)

_WHITESPACE = re.compile(r"\s+")
_NAME_AND_LABELS = re.compile(r"([^{]+)(?:\{([^}]*)\})?")
_COUNTER_MARKERS = ("total", "errors")
_DECIMAL = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
_SPECIAL_VALUES = {
    "+Inf": math.inf,
    "Inf": math.inf,
    "-Inf": -math.inf,
    "Infinity": math.inf,
    "+Infinity": math.inf,
    "-Infinity": -math.inf,
    "NaN": math.nan,
}


def parse_labels(block: str) -> Labels:
    """Tokenize a ``key="value", ...`` label block into a mapping.

    Quotes around values are stripped, ``\\"``, ``\\\\`` and ``\\n``
    escapes inside quoted values are resolved, and commas inside quotes do
    not split pairs. Pairs without ``=`` or with an empty key are skipped.

    Args:
        block: Text between the braces, without the braces.

    Returns:
        Label mapping; later duplicates overwrite earlier ones.
    """
    labels: Labels = {}
    pos = 0
    length = len(block)

    while pos < length:
        eq = block.find("=", pos)
        comma = block.find(",", pos)
        if eq == -1 or (comma != -1 and comma < eq):
            # No '=' before the next separator: skip the fragment.
            if comma == -1:
                break
            pos = comma + 1
            continue

        key = block[pos:eq].strip()
        pos = eq + 1
        while pos < length and block[pos] == " ":
            pos += 1

        chars: list[str] = []
        if pos < length and block[pos] == '"':
            pos += 1
            while pos < length and block[pos] != '"':
                char = block[pos]
                if char == "\\" and pos + 1 < length:
                    pos += 1
                    char = "\n" if block[pos] == "n" else block[pos]
                chars.append(char)
                pos += 1
            pos += 1
            comma = block.find(",", pos)
            pos = length if comma == -1 else comma + 1
        else:
            comma = block.find(",", pos)
            end = length if comma == -1 else comma
            chars.append(block[pos:end].strip().replace('"', ""))
            pos = end + 1

        if key:
            labels[key.replace('"', "")] = "".join(chars)

    return labels


def _to_number(token: str) -> float:
    """Convert a value token, yielding NaN for anything non-numeric.

    Only ASCII decimal or scientific notation is numeric, plus the exact
    special tokens in ``_SPECIAL_VALUES``. Underscores, non-ASCII digits
    and other spellings of infinity are NaN.
    """
    special = _SPECIAL_VALUES.get(token)
    if special is not None:
        return special
    if _DECIMAL.fullmatch(token) is None:
        return math.nan
    return float(token)


def _histogram(metrics: ParsedMetrics, base_name: str) -> HistogramAccumulator:
    entry = metrics.histograms.get(base_name)
    if entry is None:
        entry = HistogramAccumulator()
        metrics.histograms[base_name] = entry
    return entry


def parse_metrics(text: str) -> ParsedMetrics:
    """Parse exposition text into gauges, counters and histograms.

    Dispatch is by metric name:

    - ``<base>_bucket`` appends a bucket to histogram ``<base>``.
    - ``<base>_sum`` / ``<base>_count`` set the histogram's sum / count.
    - Any other name is a counter if it contains ``total`` or ``errors``,
      otherwise a gauge. The last line for a name wins.

    Args:
        text: Raw exposition text.

    Returns:
        A freshly built ParsedMetrics. Never raises on malformed lines.
    """
    metrics = ParsedMetrics()

    for line in text.split("\n"):
        if line.startswith("#"):
            continue

        tokens = _WHITESPACE.split(line)
        if len(tokens) < 2 or not tokens[0] or not tokens[1]:
            continue
        name_labels, value_token = tokens[0], tokens[1]

        match = _NAME_AND_LABELS.match(name_labels)
        if match is None:
            continue
        name, labels_block = match.group(1), match.group(2)
        labels = parse_labels(labels_block) if labels_block else {}
        value = _to_number(value_token)

        if name.endswith("_bucket"):
            _histogram(metrics, name.removesuffix("_bucket")).buckets.append(
                HistogramBucket(le=labels.get("le"), count=value),
            )
        elif name.endswith("_sum"):
            _histogram(metrics, name.removesuffix("_sum")).sum = value
        elif name.endswith("_count"):
            _histogram(metrics, name.removesuffix("_count")).count = value
        else:
            sample = MetricSample(value=value, labels=labels)
            if any(marker in name for marker in _COUNTER_MARKERS):
                metrics.counters[name] = sample
            else:
                metrics.gauges[name] = sample

    return metrics
