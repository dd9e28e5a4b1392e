"""
Log context: ambient key/value metadata attached to a logger.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Union

JsonScalar = Union[None, bool, int, float, str]
JsonValue = Union[JsonScalar, list["JsonValue"], dict[str, "JsonValue"]]


class LogContext(Mapping[str, JsonValue]):
    """Immutable mapping of context keys to values.

    The input is copied at construction, so later changes to the source
    mapping are never observed. ``merge`` is a shallow, key-level merge in
    which the argument wins on collision; nested dicts are replaced whole.
    """

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[str, JsonValue] | None = None, /, **values: JsonValue):
        items: dict[str, JsonValue] = {}
        if data:
            items.update(data)
        items.update(values)
        for key in items:
            if not isinstance(key, str):
                raise TypeError(f"context keys must be str, got {type(key).__name__}")
        self._data = MappingProxyType(items)

    @classmethod
    def of(cls, value: LogContext | Mapping[str, JsonValue] | None) -> LogContext:
        if isinstance(value, LogContext):
            return value
        return cls(value)

    def merge(self, other: Mapping[str, JsonValue] | None) -> LogContext:
        if not other:
            return self
        merged = dict(self._data)
        merged.update(other)
        return LogContext(merged)

    def to_dict(self) -> dict[str, JsonValue]:
        """Fresh plain dict, safe to hand to a single dispatch."""
        return dict(self._data)

    def __getitem__(self, key: str) -> JsonValue:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"LogContext({dict(self._data)!r})"
