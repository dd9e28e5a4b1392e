"""
Severity levels and filtering.

The order is fixed: debug < info < warn < error. Level strings that cannot be
resolved fail open, i.e. they let every severity through.
"""

from __future__ import annotations

import logging
from enum import Enum


class Severity(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    @property
    def stdlib_level(self) -> int:
        return _STDLIB_LEVELS[self]


_RANKS = {
    Severity.DEBUG: 0,
    Severity.INFO: 1,
    Severity.WARN: 2,
    Severity.ERROR: 3,
}

# structlog's filtering bound logger speaks stdlib level numbers
_STDLIB_LEVELS = {
    Severity.DEBUG: logging.DEBUG,
    Severity.INFO: logging.INFO,
    Severity.WARN: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}

_ALIASES = {
    "warning": Severity.WARN,
}


def parse_severity(level: str | Severity | None) -> Severity | None:
    """Resolve a level string to a Severity, or None when unrecognized."""
    if isinstance(level, Severity):
        return level
    if not isinstance(level, str):
        return None
    name = level.strip().lower()
    try:
        return Severity(name)
    except ValueError:
        return _ALIASES.get(name)


def severity_rank(level: str | Severity | None) -> int | None:
    severity = parse_severity(level)
    return severity.rank if severity is not None else None


def min_stdlib_level(level: str | Severity | None) -> int:
    """Threshold for structlog filtering; NOTSET lets everything through."""
    severity = parse_severity(level)
    if severity is None:
        return logging.NOTSET
    return severity.stdlib_level


def is_enabled(severity: str | Severity, minimum: str | Severity | None) -> bool:
    """Whether an event at `severity` passes a logger configured at `minimum`."""
    floor = severity_rank(minimum)
    if floor is None:
        return True
    rank = severity_rank(severity)
    if rank is None:
        return True
    return rank >= floor
