"""
Structured Logging Facade.

Leveled, contextual logging with pluggable sinks:
- console: aligned human-readable lines (or JSON) on stdout
- file: dated JSON-lines files with size rotation and retention

Loggers carry an immutable context; ``child`` derives a logger with more
context that shares the parent's configuration and sinks. Test loggers never
build a file sink.

Library: structlog + orjson, configuration via pydantic-settings.
"""

from .config import LoggerConfig, LoggerConfigOverrides, LoggingSettings, get_settings, resolve_config
from .context import JsonValue, LogContext
from .core import Logger, StructuredLogger
from .errors import describe_error
from .factory import create_logger, create_test_logger
from .levels import Severity
from .sinks import BaseSink, RotatingFileSink, StdioSink, build_sinks

__all__ = [
    # Logger
    "Logger",
    "StructuredLogger",
    "create_logger",
    "create_test_logger",
    # Context & errors
    "LogContext",
    "JsonValue",
    "describe_error",
    # Configuration
    "LoggerConfig",
    "LoggerConfigOverrides",
    "LoggingSettings",
    "get_settings",
    "resolve_config",
    "Severity",
    # Sinks
    "BaseSink",
    "StdioSink",
    "RotatingFileSink",
    "build_sinks",
]
