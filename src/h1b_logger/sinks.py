"""
Log sink abstractions and concrete implementations.
"""

from __future__ import annotations

import logging
import os
import re
import sys
import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import IO, Any, Literal

from structlog.typing import EventDict

from .config import LoggerConfig
from .formatters import ConsoleFormatter, orjson_dumps

LogFormat = Literal["console", "json"]
SinkErrorHandler = Callable[[BaseException, str], None]

_internal_logger = logging.getLogger(__name__)


def report_sink_error(exc: BaseException, where: str) -> None:
    """Default sink-error channel: a warning on the stdlib ``h1b_logger.sinks`` logger."""
    _internal_logger.warning("log sink failure (%s): %s: %s", where, type(exc).__name__, exc)


def safe_report(on_error: SinkErrorHandler, exc: BaseException, where: str) -> None:
    """Invoke a sink-error handler; a failing handler must not reach the caller."""
    try:
        on_error(exc, where)
    except Exception:
        pass


# =============================================================================
# Sink Abstraction (Strategy Pattern)
# =============================================================================


class BaseSink(ABC):
    """Abstract base class for log sinks."""

    @abstractmethod
    def emit(self, record: EventDict) -> None:
        """Write one record to the sink."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Close the sink and release resources."""
        ...


class StdioSink(BaseSink):
    """Standard I/O sink with configurable format.

    Args:
        fmt: Output format - "console" (aligned, colored on a TTY) or "json"
        stream: Output stream; defaults to whatever ``sys.stdout`` is at emit time
    """

    def __init__(self, fmt: LogFormat = "console", stream: IO[str] | None = None):
        self._fmt = fmt
        self._stream = stream

    def emit(self, record: EventDict) -> None:
        stream = self._stream or sys.stdout
        if self._fmt == "json":
            output = orjson_dumps(record)
        else:
            use_color = bool(getattr(stream, "isatty", lambda: False)())
            output = ConsoleFormatter.format(record, use_color=use_color)

        stream.write(output + "\n")
        stream.flush()

    def close(self) -> None:
        pass


# =============================================================================
# Rotating File Sink
# =============================================================================

_SIZE_PATTERN = re.compile(r"^\s*(\d+)\s*([kmg]?)b?\s*$", re.IGNORECASE)
_SIZE_UNITS = {"": 1, "k": 1024, "m": 1024**2, "g": 1024**3}
_RETENTION_PATTERN = re.compile(r"^\s*(\d+)\s*(d?)\s*$", re.IGNORECASE)


def parse_size(value: str | int) -> int:
    """'10m' -> 10485760. Accepts k/m/g suffixes or a plain byte count."""
    if isinstance(value, int):
        size = value
    else:
        match = _SIZE_PATTERN.match(value)
        if not match:
            raise ValueError(f"invalid size: {value!r}")
        size = int(match.group(1)) * _SIZE_UNITS[match.group(2).lower()]
    if size <= 0:
        raise ValueError(f"size must be positive: {value!r}")
    return size


@dataclass(frozen=True)
class Retention:
    days: int | None = None
    count: int | None = None


def parse_retention(value: str | int) -> Retention:
    """'14d' keeps files for 14 days, '5' keeps at most 5 files."""
    if isinstance(value, int):
        amount, unit = value, ""
    else:
        match = _RETENTION_PATTERN.match(value)
        if not match:
            raise ValueError(f"invalid retention: {value!r}")
        amount, unit = int(match.group(1)), match.group(2).lower()
    if amount <= 0:
        raise ValueError(f"retention must be positive: {value!r}")
    return Retention(days=amount) if unit == "d" else Retention(count=amount)


class RotatingFileSink(BaseSink):
    """Dated JSON-lines file sink with size rotation and retention.

    The active file is ``<service>-<YYYY-MM-DD>.log``. A new file is started
    when the local date changes; once the active file grows past
    ``max_size`` it is renamed to ``<service>-<date>.<n>.log``.

    Before each write the open handle is checked against the file at
    ``path`` (device and inode). When the file was deleted or renamed by
    someone else, e.g. logrotate or another sink for the same service in
    the same directory, it is reopened. Rotation itself is not coordinated
    between sinks: two sinks rotating at the same moment may each produce a
    numbered file.
    """

    DATE_FORMAT = "%Y-%m-%d"

    def __init__(
        self,
        directory: str | Path,
        service: str,
        max_size: str | int = "10m",
        max_files: str | int = "14d",
    ):
        self._max_bytes = parse_size(max_size)
        self._retention = parse_retention(max_files)
        self._dir = Path(directory)
        self._service = service
        self._name_pattern = re.compile(rf"^{re.escape(service)}-\d{{4}}-\d{{2}}-\d{{2}}(\.\d+)?\.log$")
        self._lock = threading.Lock()

        self._dir.mkdir(parents=True, exist_ok=True)
        self._date = self._today()
        self._file = self._open()
        self._prune()

    @property
    def path(self) -> Path:
        return self._dir / f"{self._service}-{self._date}.log"

    def emit(self, record: EventDict) -> None:
        line = orjson_dumps(record) + "\n"
        with self._lock:
            today = self._today()
            if today != self._date:
                self._file.close()
                self._date = today
                self._file = self._open()
                self._prune()
            else:
                self._reopen_if_moved()

            self._file.write(line)
            self._file.flush()
            self._maybe_rotate()

    def close(self) -> None:
        with self._lock:
            self._file.close()

    def _today(self) -> str:
        return datetime.now().strftime(self.DATE_FORMAT)

    def _open(self) -> IO[str]:
        return open(self.path, "a", encoding="utf-8")

    def _reopen_if_moved(self) -> None:
        try:
            on_disk = os.stat(self.path)
        except FileNotFoundError:
            on_disk = None
        opened = os.fstat(self._file.fileno())
        if on_disk is None or (on_disk.st_dev, on_disk.st_ino) != (opened.st_dev, opened.st_ino):
            self._file.close()
            self._file = self._open()

    def _maybe_rotate(self) -> None:
        if os.fstat(self._file.fileno()).st_size <= self._max_bytes:
            return
        self._file.close()
        index = 1
        while (target := self._dir / f"{self._service}-{self._date}.{index}.log").exists():
            index += 1
        self.path.rename(target)
        self._file = self._open()
        self._prune()

    def _service_files(self) -> list[Path]:
        return [
            p for p in self._dir.iterdir()
            if p.is_file() and self._name_pattern.match(p.name) and p != self.path
        ]

    def _prune(self) -> None:
        files = self._service_files()
        if self._retention.days is not None:
            cutoff = time.time() - self._retention.days * 86400
            for p in files:
                if p.stat().st_mtime < cutoff:
                    p.unlink(missing_ok=True)
        elif self._retention.count is not None:
            files.sort(key=lambda p: p.stat().st_mtime, reverse=True)
            # the active file counts towards the limit
            for p in files[self._retention.count - 1 :]:
                p.unlink(missing_ok=True)


# =============================================================================
# Sink Selection
# =============================================================================


def build_sinks(
    config: LoggerConfig,
    *,
    on_error: SinkErrorHandler = report_sink_error,
    stream: Any = None,
) -> tuple[BaseSink, ...]:
    """
    Console sink always; the rotating file sink only outside test mode.

    In test mode the file sink is never instantiated, so logging cannot
    create files or directories. A file sink that fails to construct is
    reported through ``on_error`` and left out.
    """
    sinks: list[BaseSink] = [StdioSink(stream=stream)]
    if config.test:
        return tuple(sinks)

    try:
        sinks.append(
            RotatingFileSink(
                config.log_dir,
                config.service,
                max_size=config.max_size,
                max_files=config.max_files,
            )
        )
    except Exception as exc:
        safe_report(on_error, exc, "file")
    return tuple(sinks)
