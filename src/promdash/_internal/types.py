"""Shared type aliases for PromDash."""

from __future__ import annotations

from collections.abc import Callable

# Metric label mapping, e.g. {"le": "0.5", "method": "GET"}.
Labels = dict[str, str]

# Callable returning the current time in epoch milliseconds.
Clock = Callable[[], int]
