"""
Record renderers: aligned console lines and JSON lines.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import orjson
from structlog.typing import EventDict


def orjson_dumps(v: Any) -> str:
    """JSON serialization using orjson; unknown types fall back to str()."""
    return orjson.dumps(
        v,
        default=str,
        option=orjson.OPT_UTC_Z | orjson.OPT_NAIVE_UTC | orjson.OPT_NON_STR_KEYS,
    ).decode()


# =============================================================================
# Console Formatter (Aligned Columns)
# =============================================================================

COLORS = {
    "reset": "\033[0m",
    "dim": "\033[2m",
    "timestamp": "\033[90m",
    "service": "\033[35m",
    "key": "\033[34m",
}


def colorize(text: str, color: str) -> str:
    """Apply ANSI color to text."""
    return f"{COLORS.get(color, '')}{text}{COLORS['reset']}"


class ConsoleFormatter:
    """Human-readable console rendering (fixed width, right-aligned columns)."""

    _LEVEL_COLORS = {
        "DEBUG": "\x1b[36m",
        "INFO": "\x1b[32m",
        "WARN": "\x1b[33m",
        "ERROR": "\x1b[31m",
    }

    TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
    TIMESTAMP_WIDTH = 19
    LEVEL_WIDTH = 5
    SERVICE_WIDTH = 24
    SEPARATOR = " | "

    @staticmethod
    def _fit_right(text: str, width: int) -> str:
        if width <= 0:
            return text
        if len(text) > width:
            if width <= 3:
                text = text[-width:]
            else:
                text = "..." + text[-(width - 3) :]
        return f"{text:>{width}}"

    @classmethod
    def _format_timestamp(cls, raw_timestamp: str | None) -> str:
        if raw_timestamp:
            try:
                dt = datetime.fromisoformat(raw_timestamp.replace("Z", "+00:00"))
                if dt.tzinfo is None:
                    dt = dt.replace(tzinfo=timezone.utc)
                return dt.astimezone().strftime(cls.TIMESTAMP_FORMAT)
            except (ValueError, TypeError):
                pass
        return datetime.now().strftime(cls.TIMESTAMP_FORMAT)

    @classmethod
    def _colorize_level(cls, text: str, level_upper: str, use_color: bool) -> str:
        color = cls._LEVEL_COLORS.get(level_upper)
        if not use_color or not color:
            return text
        return f"{color}{text}{COLORS['reset']}"

    @staticmethod
    def _maybe_color(text: str, color: str, use_color: bool) -> str:
        return colorize(text, color) if use_color else text

    @classmethod
    def _format_value(cls, value: Any) -> str:
        if isinstance(value, (dict, list)):
            return orjson_dumps(value)
        return str(value)

    @classmethod
    def format(cls, record: EventDict, *, use_color: bool = False) -> str:
        """Format a record into one aligned line, plus the stack if present."""
        level_upper = str(record.get("level", "info")).upper()
        message_text = str(record.get("message", ""))

        extras = []
        for key, value in (record.get("context") or {}).items():
            key_text = cls._maybe_color(str(key), "key", use_color)
            value_text = cls._maybe_color(cls._format_value(value), "dim", use_color)
            extras.append(f"{key_text}={value_text}")
        if extras:
            message_text = f"{message_text} " + " ".join(extras)

        error = record.get("error")
        stack = None
        if error:
            summary = ": ".join(part for part in (error.get("name"), error.get("message")) if part)
            message_text = f"{message_text} {cls._maybe_color('error', 'key', use_color)}={summary}"
            stack = error.get("stack")

        line = "".join(
            [
                cls._maybe_color(
                    cls._fit_right(cls._format_timestamp(record.get("timestamp")), cls.TIMESTAMP_WIDTH),
                    "timestamp",
                    use_color,
                ),
                cls.SEPARATOR,
                cls._colorize_level(cls._fit_right(level_upper, cls.LEVEL_WIDTH), level_upper, use_color),
                cls.SEPARATOR,
                cls._maybe_color(
                    cls._fit_right(str(record.get("service", "")), cls.SERVICE_WIDTH),
                    "service",
                    use_color,
                ),
                cls.SEPARATOR,
                message_text,
            ]
        )
        if stack:
            line = f"{line}\n{stack}"
        return line
