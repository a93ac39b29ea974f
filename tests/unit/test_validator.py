"""Tests for the exposition format sniff."""

from __future__ import annotations

import pytest

from promdash.metrics.validator import is_valid


class TestIsValid:
    def test_empty_text_is_invalid(self):
        assert is_valid("") is False

    def test_whitespace_only_is_invalid(self):
        assert is_valid("   \n\t\n") is False

    def test_comment_and_sample(self):
        assert is_valid("# HELP x\nfoo 1") is True

    def test_garbage_is_invalid(self):
        assert is_valid("garbage\n") is False

    def test_single_comment_line_is_enough(self):
        assert is_valid("# just a comment") is True

    def test_one_matching_line_accepts_whole_text(self):
        text = "hello world\nnot metrics either\nup 1\n"
        assert is_valid(text) is True

    @pytest.mark.parametrize(
        "line",
        [
            "up 1",
            "process_cpu_seconds_total 0.25",
            'http_requests_total{method="post",code="200"} 1027',
            "temperature -3.5",
            "big_number 1.5e+10",
            "small_number 2E-3",
            "ns:metric_name 3",
            "  padded_metric 4  ",
        ],
    )
    def test_sample_lines_accepted(self, line: str):
        assert is_valid(line) is True

    @pytest.mark.parametrize(
        "line",
        [
            "1metric 5",
            "metric_without_value",
            "metric NaN",
            "metric +Inf",
            "metric 1 trailing",
            "foo-bar 1",
        ],
    )
    def test_non_matching_lines_rejected(self, line: str):
        assert is_valid(line) is False

    @pytest.mark.parametrize("line", ["b \u0663", "b 1_000", "b \uff11", "\u00e9t\u00e9 1"])
    def test_non_ascii_digits_and_separators_rejected(self, line: str):
        assert is_valid(line) is False

    def test_indented_comment_after_first_line_is_not_a_comment(self):
        assert is_valid("garbage\n  # indented") is False

    def test_never_raises_on_binary_like_text(self):
        assert is_valid("\x00\x01\x02{}}}{{") is False
