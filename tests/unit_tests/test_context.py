"""
LogContext snapshot and merge-precedence rules.
"""

from __future__ import annotations

import pytest

from h1b_logger.context import LogContext


class TestLogContext:
    def test_snapshot_ignores_later_mutation_of_source(self) -> None:
        source = {"request_id": "r-1"}
        ctx = LogContext(source)
        source["request_id"] = "r-2"
        source["extra"] = True
        assert dict(ctx) == {"request_id": "r-1"}

    def test_is_read_only(self) -> None:
        ctx = LogContext({"a": 1})
        with pytest.raises(TypeError):
            ctx["a"] = 2  # type: ignore[index]

    def test_keyword_values(self) -> None:
        assert dict(LogContext({"a": 1}, b=2)) == {"a": 1, "b": 2}

    def test_rejects_non_string_keys(self) -> None:
        with pytest.raises(TypeError):
            LogContext({1: "x"})  # type: ignore[dict-item]

    def test_of_reuses_existing_context(self) -> None:
        ctx = LogContext({"a": 1})
        assert LogContext.of(ctx) is ctx
        assert dict(LogContext.of(None)) == {}


class TestMerge:
    def test_later_value_wins_on_collision(self) -> None:
        merged = LogContext({"a": 1, "b": 1}).merge({"b": 2, "c": 3})
        assert dict(merged) == {"a": 1, "b": 2, "c": 3}

    def test_merge_does_not_touch_either_side(self) -> None:
        base = LogContext({"a": 1})
        extra = {"b": 2}
        base.merge(extra)
        assert dict(base) == {"a": 1}
        assert extra == {"b": 2}

    def test_nested_values_are_replaced_not_deep_merged(self) -> None:
        merged = LogContext({"user": {"id": 1, "role": "admin"}}).merge({"user": {"id": 2}})
        assert merged["user"] == {"id": 2}

    def test_merge_with_empty_returns_same_context(self) -> None:
        ctx = LogContext({"a": 1})
        assert ctx.merge({}) is ctx
        assert ctx.merge(None) is ctx

    def test_to_dict_is_fresh_each_time(self) -> None:
        ctx = LogContext({"a": 1})
        first = ctx.to_dict()
        first["a"] = 99
        assert ctx.to_dict() == {"a": 1}

    @pytest.mark.parametrize(
        ("x", "y", "z"),
        [
            ({"a": 1}, {"b": 2}, {"c": 3}),
            ({"a": 1, "k": "x"}, {"k": "y"}, {"k": "z", "a": 0}),
            ({}, {"k": [1, 2]}, {"k": None}),
        ],
    )
    def test_chained_merge_is_associative(self, x, y, z) -> None:
        base = LogContext({"root": True, "k": "base"})
        chained = base.merge(x).merge(y).merge(z)
        flat = {**x, **y, **z}
        assert dict(chained) == dict(base.merge(flat))

    def test_values_are_typed_as_json(self) -> None:
        import h1b_logger
        from h1b_logger import context

        assert LogContext.__getitem__.__annotations__["return"] == "JsonValue"
        assert LogContext.to_dict.__annotations__["return"] == "dict[str, JsonValue]"
        assert h1b_logger.JsonValue is context.JsonValue
        assert not hasattr(context, "EMPTY_CONTEXT")
