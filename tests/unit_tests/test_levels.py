"""
Severity ordering and fail-open filtering.
"""

from __future__ import annotations

import logging

import pytest

from h1b_logger.levels import Severity, is_enabled, min_stdlib_level, parse_severity, severity_rank


class TestSeverityOrder:
    def test_ranks_follow_fixed_order(self) -> None:
        ranks = [s.rank for s in (Severity.DEBUG, Severity.INFO, Severity.WARN, Severity.ERROR)]
        assert ranks == sorted(ranks)
        assert len(set(ranks)) == 4

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("debug", Severity.DEBUG),
            ("INFO", Severity.INFO),
            (" warn ", Severity.WARN),
            ("warning", Severity.WARN),
            ("Error", Severity.ERROR),
        ],
    )
    def test_parse_is_case_insensitive(self, raw: str, expected: Severity) -> None:
        assert parse_severity(raw) is expected

    @pytest.mark.parametrize("raw", ["verbose", "", "critical", None])
    def test_unknown_levels_have_no_rank(self, raw) -> None:
        assert parse_severity(raw) is None
        assert severity_rank(raw) is None


class TestFiltering:
    def test_warn_minimum_blocks_debug_and_info(self) -> None:
        assert not is_enabled("debug", "warn")
        assert not is_enabled("info", "warn")
        assert is_enabled("warn", "warn")
        assert is_enabled("error", "warn")

    def test_unknown_minimum_fails_open(self) -> None:
        for severity in Severity:
            assert is_enabled(severity, "loud")

    def test_stdlib_threshold(self) -> None:
        assert min_stdlib_level("warn") == logging.WARNING
        assert min_stdlib_level("debug") == logging.DEBUG
        assert min_stdlib_level("nonsense") == logging.NOTSET
