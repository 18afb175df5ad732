# typedcoll/core/hashing.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""
Value identity: canonical value hashes and index normalization.

Hashes are MD5 hex digests of a canonical text form of the value. They are
stable within a process run and are not meant to be secure.
"""

from __future__ import annotations

import enum
import hashlib
import itertools
import json
import numbers
import weakref
from typing import Any, Dict, Iterable, Tuple

from typedcoll.core.errors import IndexOutOfRangeError
from typedcoll.interfaces.abc import ValueHashable
from typedcoll.interfaces.types import ValueHash
from typedcoll.runtime.concurrency import get_rlock, with_lock

_SCALAR_TYPES = (bool, int, float, complex, str, bytes)


def _digest(text: str) -> ValueHash:
    return hashlib.md5(text.encode("utf-8"), usedforsecurity=False).hexdigest()


_NULL_HASH = _digest("null")


def hash_value(value: Any) -> ValueHash:
    """
    Hash a value into a string such that values considered identical produce the
    same hash.

    - None hashes to a fixed value
    - scalars hash by (runtime kind, repr), so 1, 1.0 and True differ
    - objects implementing __value_hash__ hash by the string they return
    - lists and tuples hash by their ordered element hashes, dicts by their
      ordered (key hash, value hash) pairs, sets by their sorted element hashes
    - any other object hashes by reference identity

    :param value: The value to hash.
    :return: The hex digest identifying the value.
    """
    return _hash(value, set())


def _hash(value: Any, in_progress: set) -> ValueHash:
    if value is None:
        return _NULL_HASH

    if _is_scalar(value):
        return _digest(f"{type(value).__qualname__}.{value!r}")

    if not isinstance(value, type) and isinstance(value, ValueHashable):
        return _digest(f"value.{type(value).__module__}.{type(value).__qualname__}.{value.__value_hash__()}")

    if isinstance(value, (list, tuple, dict, set, frozenset)):
        # A structure reached again while hashing itself is hashed by reference.
        if id(value) in in_progress:
            return _identity_hash(value)
        in_progress.add(id(value))
        try:
            return _hash_structure(value, in_progress)
        finally:
            in_progress.discard(id(value))

    return _identity_hash(value)


def _hash_structure(value: Any, in_progress: set) -> ValueHash:
    if isinstance(value, dict):
        pairs = [[_hash(key, in_progress), _hash(sub_value, in_progress)] for key, sub_value in value.items()]
        return _digest("dict." + json.dumps(pairs))
    if isinstance(value, (set, frozenset)):
        return _digest("set." + json.dumps(sorted(_hash(sub_value, in_progress) for sub_value in value)))
    return _digest("array." + json.dumps([_hash(sub_value, in_progress) for sub_value in value]))


def _identity_hash(value: Any) -> ValueHash:
    return _digest(f"object.{_identity_token(value)}")


# id() -> (weak reference, token); an entry is dropped when its object dies, so
# a reused id never inherits the token of a freed object.
_tokens: Dict[int, Tuple[weakref.ReferenceType, int]] = {}
_token_counter = itertools.count(1)
_tokens_lock = get_rlock()


def _identity_token(value: Any) -> str:
    """
    Return a token unique to this object for the lifetime of the process.
    Objects that cannot be weakly referenced fall back to their id().
    """
    key = id(value)
    with with_lock(_tokens_lock):
        entry = _tokens.get(key)
        if entry is not None and entry[0]() is value:
            return f"ref.{entry[1]}"

        token = next(_token_counter)
        try:
            reference = weakref.ref(value, lambda _, key=key, token=token: _forget(key, token))
        except TypeError:
            return f"id.{key}"
        _tokens[key] = (reference, token)
        return f"ref.{token}"


def _forget(key: int, token: int) -> None:
    with with_lock(_tokens_lock):
        entry = _tokens.get(key)
        if entry is not None and entry[1] == token:
            del _tokens[key]


def _is_scalar(value: Any) -> bool:
    if isinstance(value, enum.Enum):
        return False
    return type(value) in _SCALAR_TYPES or isinstance(value, (str, bytes, numbers.Number))


def by_hash(values: Iterable[Any]) -> Dict[ValueHash, Any]:
    """
    Key the given values by their hash, keeping the first value seen for each
    hash.

    :param values: The values to index.
    :return: An insertion-ordered mapping of hash to first-seen value.
    """
    indexed: Dict[ValueHash, Any] = {}
    for value in values:
        indexed.setdefault(hash_value(value), value)
    return indexed


def normalize_index(index: int, length: int, inserting: bool = False) -> int:
    """
    Normalize a possibly negative position against a length.

    Negative positions count from the end. For reads the result must lie in
    [0, length); when inserting, a position equal to length is also accepted and
    means "append".

    :param index: The requested position.
    :param length: The current length of the structure.
    :param inserting: Whether the position is an insertion point.
    :raises ValueError: If length is negative.
    :raises IndexOutOfRangeError: If the position is out of range.
    """
    if length < 0:
        raise ValueError(f"Expected length to be non-negative, actually {length}.")

    if inserting and index == length:
        return index

    if -length <= index < length:
        return index + length if index < 0 else index

    raise IndexOutOfRangeError(index, length, inserting)
