# typedcoll/accessor.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from __future__ import annotations

from typing import Any, Iterable, List, MutableMapping

from typedcoll.core.types import Type


class MultiKeyAccessor:
    """
    Reads and writes several keys of a mapping at once.

    Example:
        settings = {"host": "localhost", "port": 8080}
        accessor = MultiKeyAccessor.of(settings)
        assert accessor[["host", "port"]] == ["localhost", 8080]
        accessor[["retries", "timeout"]] = 3
    """

    def __init__(self, mapping: MutableMapping[Any, Any]) -> None:
        self._mapping = mapping

    @classmethod
    def of(cls, mapping: MutableMapping[Any, Any]) -> "MultiKeyAccessor":
        """Wrap a mapping; writes go through to it."""
        return cls(mapping)

    def __contains__(self, keys: Iterable[Any]) -> bool:
        """Whether every key is present with a value other than None."""
        return all(self._mapping.get(key) is not None for key in _keys(keys))

    def __getitem__(self, keys: Iterable[Any]) -> List[Any]:
        """The values of the keys in order, None for missing keys."""
        return [self._mapping.get(key) for key in _keys(keys)]

    def __setitem__(self, keys: Iterable[Any], value: Any) -> None:
        """
        Assign value to every key. With no keys, the value is stored under the
        next integer key, one past the largest integer key present.
        """
        keys = _keys(keys)
        if not keys:
            integer_keys = [key for key in self._mapping if Type.int().is_valid(key)]
            self._mapping[max(integer_keys) + 1 if integer_keys else 0] = value
            return
        for key in keys:
            self._mapping[key] = value

    def __delitem__(self, keys: Iterable[Any]) -> None:
        for key in _keys(keys):
            self._mapping.pop(key, None)


def _keys(keys: Any) -> List[Any]:
    """
    :raises TypeMismatchError: If keys is not iterable.
    """
    return list(Type.iterable().validate(keys))
