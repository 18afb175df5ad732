# typedcoll/core/errors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import itertools
import json
from typing import Any, Dict, Iterable, List, Optional

from typedcoll.core.config import get_config


class TypedCollError(Exception):
    """
    Base exception class for errors raised by the typed collections library.

    :param message: Human readable description of the failure.
    :param details: Optional structured context describing the failure.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.details: Dict[str, Any] = details or {}


class TypeMismatchError(TypedCollError, TypeError):
    """
    Raised when a value does not satisfy the Type it is validated against,
    including callable arguments and return values checked by
    Type.validate_callable().
    """

    def __init__(self, expected: str, value: Any, context: str = "validate") -> None:
        self.expected = expected
        self.rendered = render_value(value)
        super().__init__(
            f"{context}(): {self.rendered} is an invalid {expected}.",
            {"expected": expected, "value": self.rendered},
        )


class IndexOutOfRangeError(TypedCollError, IndexError):
    """
    Raised when a normalized position falls outside the valid bounds of an
    index-addressable structure.
    """

    def __init__(self, index: int, length: int, inserting: bool = False) -> None:
        self.index = index
        self.length = length
        upper = "]" if inserting else ")"
        super().__init__(
            f"Expected index in range [-{length}, {length}{upper}, actually {index}.",
            {"index": index, "length": length, "inserting": inserting},
        )


class UnderflowError(TypedCollError, LookupError):
    """
    Raised when a value is requested from an empty Optional.
    """


class TypeCollisionError(TypedCollError, TypeError):
    """
    Raised when a Type descriptor is constructed for a structural key that is
    already interned. Descriptors must be obtained through the Type factories.
    """


class StreamConsumedError(TypedCollError, RuntimeError):
    """
    Raised when a Stream that has already been linked or consumed is operated on
    a second time.
    """


def render_value(value: Any) -> str:
    """
    Best-effort rendering of an offending value for error messages. Scalars are
    rendered with repr(), structures as JSON, bounded by the configured render
    limit and depth. Streams render through repr() and are never consumed.
    """
    config = get_config()
    if value is None or isinstance(value, (bool, int, float, complex, str, bytes)):
        rendered = repr(value)
    else:
        try:
            rendered = json.dumps(_structure(value, config.render_depth, _width(config)), default=repr)
        except (TypeError, ValueError):
            rendered = repr(value)

    if len(rendered) > config.render_limit:
        rendered = rendered[: config.render_limit - 3] + "..."
    return rendered


def _width(config) -> int:
    # Every rendered entry takes at least two characters.
    return max(1, config.render_limit // 2)


def _structure(value: Any, depth: int, width: int) -> Any:
    """Reduce a value to JSON-compatible structure, down to the given depth."""
    from typedcoll.containers.stream import Stream
    from typedcoll.core.base import CollectibleMixin

    if depth < 0:
        return "..."
    if isinstance(value, Stream):
        return repr(value)
    if isinstance(value, CollectibleMixin):
        return {"type": value.type.name, "entries": _entries(value, depth, width)}
    if hasattr(value, "dump") and callable(value.dump) and not isinstance(value, type):
        return value.dump()
    if isinstance(value, dict):
        items = itertools.islice(value.items(), width)
        rendered = {str(key): _structure(sub_value, depth - 1, width) for key, sub_value in items}
        if len(value) > width:
            rendered["..."] = "..."
        return rendered
    if isinstance(value, (list, tuple, set, frozenset)):
        return _entries(value, depth, width)
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    return repr(value)


def _entries(values: Iterable[Any], depth: int, width: int) -> List[Any]:
    iterator = iter(values)
    rendered = [_structure(sub_value, depth - 1, width) for sub_value in itertools.islice(iterator, width)]
    if next(iterator, _MISSING) is not _MISSING:
        rendered.append("...")
    return rendered


_MISSING = object()
