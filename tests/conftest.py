import typing as t

import pytest

from h1b_logger.config import LoggerConfig, LoggingSettings, get_settings
from h1b_logger.core import StructuredLogger
from h1b_logger.sinks import BaseSink


class RecordingSink(BaseSink):
    """In-memory sink that keeps every record it receives."""

    def __init__(self) -> None:
        self.records: list[dict[str, t.Any]] = []
        self.closed = False

    def emit(self, record: dict[str, t.Any]) -> None:
        self.records.append(record)

    def close(self) -> None:
        self.closed = True

    @property
    def messages(self) -> list[str]:
        return [r["message"] for r in self.records]


class FailingSink(BaseSink):
    """Sink whose every write blows up."""

    def emit(self, record: dict[str, t.Any]) -> None:
        raise OSError("disk on fire")

    def close(self) -> None:
        pass


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """
    Keeps LOG_LEVEL and any .env file in the working directory from leaking
    into tests, and resets the cached environment settings.
    """
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def no_env() -> LoggingSettings:
    return LoggingSettings()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def make_logger(sink):
    """Build a StructuredLogger over the recording sink."""

    def _make(context=None, **config_fields) -> StructuredLogger:
        config = LoggerConfig(test=True, **config_fields)
        return StructuredLogger(context, config, [sink])

    return _make


@pytest.fixture
def failing_sink() -> FailingSink:
    return FailingSink()
