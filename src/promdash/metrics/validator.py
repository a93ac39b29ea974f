"""Cheap sniff for Prometheus exposition text."""

from __future__ import annotations

import re

_SAMPLE_LINE = re.compile(
    r"[a-zA-Z_:][a-zA-Z0-9_:]*(\{.*\})?\s+-?\d+(\.\d+)?([eE][+-]?\d+)?",
    re.ASCII,
)


def is_valid(text: str) -> bool:
    """Return True if ``text`` looks like Prometheus exposition format.

    A single comment line (starting with ``#``) or a single
    ``name{labels} value`` line is enough to accept the whole text. This is
    a permissive sniff, not a grammar check, and it never raises.

    Args:
        text: Raw uploaded text.

    Returns:
        Whether any line matches.
    """
    if not text:
        return False
    return any(
        line.startswith("#") or _SAMPLE_LINE.fullmatch(line.strip()) is not None
        for line in text.strip().split("\n")
    )
