"""
Logger facade built on a structlog processor chain.

Each StructuredLogger wraps a ``SinkFanout`` with structlog's filtering bound
logger. The processors turn a call into a record and the fan-out hands that
record to every injected sink.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from typing import Any, Protocol, runtime_checkable

import structlog
from structlog.typing import EventDict, WrappedLogger

from .config import LoggerConfig, resolve_config
from .context import JsonValue, LogContext
from .errors import describe_error
from .levels import Severity, is_enabled, min_stdlib_level
from .sinks import BaseSink, SinkErrorHandler, report_sink_error, safe_report


@runtime_checkable
class Logger(Protocol):
    def debug(self, message: str, context: Mapping[str, JsonValue] | None = None) -> None: ...

    def info(self, message: str, context: Mapping[str, JsonValue] | None = None) -> None: ...

    def warn(self, message: str, context: Mapping[str, JsonValue] | None = None) -> None: ...

    def error(
        self,
        message: str,
        error: Any = None,
        context: Mapping[str, JsonValue] | None = None,
    ) -> None: ...

    def child(self, context: Mapping[str, JsonValue]) -> Logger: ...


# =============================================================================
# Structlog Processors
# =============================================================================

_METHOD_SEVERITY = {
    "debug": Severity.DEBUG.value,
    "info": Severity.INFO.value,
    "warning": Severity.WARN.value,
    "error": Severity.ERROR.value,
}


def add_severity(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Record the severity using the facade's level names (warn, not warning)."""
    event_dict["level"] = _METHOD_SEVERITY.get(method_name, method_name)
    return event_dict


def add_timestamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add ISO 8601 timestamp to log event."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def rename_event_key(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Rename structlog's 'event' to 'message'."""
    if "event" in event_dict:
        event_dict["message"] = event_dict.pop("event")
    return event_dict


def to_record(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> tuple[tuple[EventDict], dict]:
    """Shape the final record and pass it positionally to the fan-out."""
    record = {
        "timestamp": event_dict.get("timestamp"),
        "level": event_dict.get("level"),
        "message": event_dict.get("message"),
        "service": event_dict.get("service"),
        "context": event_dict.get("context", {}),
    }
    if "error" in event_dict:
        record["error"] = event_dict["error"]
    return (record,), {}


PROCESSORS = [add_severity, add_timestamp, rename_event_key, to_record]


class SinkFanout:
    """Wrapped logger for structlog: writes each record to every sink.

    A failing sink is reported and skipped; the remaining sinks still get
    the record.
    """

    def __init__(self, sinks: Sequence[BaseSink], on_error: SinkErrorHandler):
        self._sinks = tuple(sinks)
        self._on_error = on_error

    def _write(self, record: EventDict) -> None:
        for sink in self._sinks:
            try:
                sink.emit(record)
            except Exception as exc:
                safe_report(self._on_error, exc, type(sink).__name__)

    debug = info = warning = warn = error = critical = msg = _write


# =============================================================================
# Logger Implementation
# =============================================================================


class StructuredLogger:
    """Contextual logger over injected sinks.

    Context, config and sinks are fixed at construction. ``child`` returns a
    new instance and never mutates this one. No logging call raises.
    """

    def __init__(
        self,
        context: Mapping[str, JsonValue] | None = None,
        config: LoggerConfig | None = None,
        sinks: Sequence[BaseSink] = (),
        *,
        on_sink_error: SinkErrorHandler = report_sink_error,
    ):
        self._context = LogContext.of(context)
        self._config = config if config is not None else resolve_config()
        self._sinks = tuple(sinks)
        self._on_sink_error = on_sink_error
        self._logger = structlog.wrap_logger(
            SinkFanout(self._sinks, on_sink_error),
            processors=PROCESSORS,
            wrapper_class=structlog.make_filtering_bound_logger(min_stdlib_level(self._config.level)),
            context_class=dict,
            cache_logger_on_first_use=True,
            service=self._config.service,
        )

    @property
    def context(self) -> LogContext:
        return self._context

    @property
    def config(self) -> LoggerConfig:
        return self._config

    @property
    def sinks(self) -> tuple[BaseSink, ...]:
        return self._sinks

    def is_enabled(self, level: str | Severity) -> bool:
        return is_enabled(level, self._config.level)

    def debug(self, message: str, context: Mapping[str, JsonValue] | None = None) -> None:
        self._dispatch("debug", message, context)

    def info(self, message: str, context: Mapping[str, JsonValue] | None = None) -> None:
        self._dispatch("info", message, context)

    def warn(self, message: str, context: Mapping[str, JsonValue] | None = None) -> None:
        self._dispatch("warning", message, context)

    def error(
        self,
        message: str,
        error: Any = None,
        context: Mapping[str, JsonValue] | None = None,
    ) -> None:
        self._dispatch("error", message, context, error)

    def child(self, context: Mapping[str, JsonValue]) -> StructuredLogger:
        try:
            merged = self._context.merge(context)
        except Exception as exc:
            safe_report(self._on_sink_error, exc, "child")
            merged = self._context
        return StructuredLogger(merged, self._config, self._sinks, on_sink_error=self._on_sink_error)

    def _dispatch(
        self,
        method: str,
        message: str,
        context: Mapping[str, JsonValue] | None,
        error: Any = None,
    ) -> None:
        try:
            event_kw: dict[str, Any] = {"context": self._context.merge(context).to_dict()}
            if error is not None:
                event_kw["error"] = describe_error(error)
            getattr(self._logger, method)(message, **event_kw)
        except Exception as exc:
            safe_report(self._on_sink_error, exc, "dispatch")

    def __repr__(self) -> str:
        return (
            f"StructuredLogger(service={self._config.service!r}, level={self._config.level!r}, "
            f"context={dict(self._context)!r})"
        )
