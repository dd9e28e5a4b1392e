"""
Factories for ready-to-use loggers.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .config import LoggerConfig, LoggingSettings, resolve_config
from .context import JsonValue
from .core import StructuredLogger
from .sinks import build_sinks


def create_logger(
    service: str,
    context: Mapping[str, JsonValue] | None = None,
    config: LoggerConfig | Mapping[str, Any] | None = None,
    *,
    settings: LoggingSettings | None = None,
) -> StructuredLogger:
    """
    Create a logger for ``service``.

    ``service`` always wins over a service field inside ``config``. The
    rotating file sink is attached unless ``config`` sets ``test``.
    """
    resolved = resolve_config(config, settings=settings, service=service)
    return StructuredLogger(context or {}, resolved, build_sinks(resolved))


def create_test_logger(service: str = "test", context: Mapping[str, JsonValue] | None = None) -> StructuredLogger:
    """Create a console-only logger; it never touches the filesystem."""
    return create_logger(service, context, {"test": True})
