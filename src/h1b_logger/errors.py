"""
Normalization of error values into error descriptors.
"""

from __future__ import annotations

import traceback
from collections.abc import Mapping
from typing import Any

ErrorDescriptor = dict[str, str]

_DESCRIPTOR_FIELDS = ("name", "message", "stack")


def describe_error(error: Any) -> ErrorDescriptor:
    """
    Build ``{name, message, stack}`` for an error value.

    Exceptions that were never raised carry no traceback; their descriptor
    has no ``stack`` key. Mappings are treated as already normalized and only
    the known fields that are present are kept. Any other value (a string, an
    error code) becomes ``{name, message}`` from its type and ``str()``.
    """
    if isinstance(error, BaseException):
        descriptor: ErrorDescriptor = {
            "name": type(error).__name__,
            "message": str(error),
        }
        if error.__traceback__ is not None:
            descriptor["stack"] = "".join(
                traceback.format_exception(type(error), error, error.__traceback__)
            ).rstrip()
        return descriptor

    if isinstance(error, Mapping):
        descriptor = {}
        for key in _DESCRIPTOR_FIELDS:
            value = error.get(key)
            if value is not None:
                descriptor[key] = str(value)
        return descriptor

    return {"name": type(error).__name__, "message": str(error)}
