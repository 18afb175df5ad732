# typedcoll/containers/map.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from __future__ import annotations

import typing
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Tuple

from typedcoll.core.base import CollectibleMixin, CountableMixin, GenericTypedBase
from typedcoll.core.errors import TypeMismatchError
from typedcoll.core.hashing import by_hash, hash_value
from typedcoll.core.types import Type
from typedcoll.interfaces.types import BiAction, BiFunction, Mapper, ValueHash

if typing.TYPE_CHECKING:
    from typedcoll.containers.sequence import Sequence
    from typedcoll.containers.set import Set


@dataclass(frozen=True)
class _MapEntry:
    """Internal storage cell of a Map, stored under the key hash."""

    key: Any
    value: Any
    value_hash: ValueHash


class Map(GenericTypedBase, CountableMixin, CollectibleMixin):
    """
    A mapping from keys of one declared Type to values of another, unique by key
    hash and iterated in insertion order. Iteration yields (key, value) tuples and
    the declared element type is the 2-tuple of the key and value Types.

    Runtime Invariants:
    - At most one entry is stored per key hash
    - Every stored key satisfies the key Type and every value the value Type
    - Mutators validate all inputs before touching storage

    Example:
        ages = Map.of_type(Type.string(), Type.int()).with_entry("ada", 36)
        assert ages.put("ada", 37) == 36
        assert ages["ada"] == 37
    """

    def __init__(self, key_type: Type, value_type: Type) -> None:
        if not isinstance(key_type, Type):
            raise TypeMismatchError("Type", key_type, "Map")
        if not isinstance(value_type, Type):
            raise TypeMismatchError("Type", value_type, "Map")
        super().__init__(Type.tuple(key_type, value_type))
        self._key_type = key_type
        self._value_type = value_type
        self._key_array_type = Type.array_of(key_type)
        self._value_array_type = Type.array_of(value_type)
        self._entries: Dict[ValueHash, _MapEntry] = {}

    @classmethod
    def of_type(cls, key_type: Type, value_type: Type) -> "Map":
        """
        Create an empty Map between the given Types.

        :raises TypeMismatchError: If either argument is not a Type.
        """
        return cls(key_type, value_type)

    @property
    def key_type(self) -> Type:
        return self._key_type

    @property
    def value_type(self) -> Type:
        return self._value_type

    # -------------------------------------------------------------------------
    # Chain functions
    # -------------------------------------------------------------------------

    def clear(self) -> "Map":
        self._entries = {}
        return self

    def for_each(self, action: BiAction) -> "Map":
        """Invoke action(key, value) on every entry in order."""
        for entry in list(self._entries.values()):
            action(entry.key, entry.value)
        return self

    def with_entry(self, key: Any, value: Any) -> "Map":
        self.put(key, value)
        return self

    def with_entry_if_absent(self, key: Any, value: Any) -> "Map":
        self.put_if_absent(key, value)
        return self

    # -------------------------------------------------------------------------
    # Element functions
    # -------------------------------------------------------------------------

    def put(self, key: Any, value: Any) -> Any:
        """
        Associate value with key.

        :return: The previous value, or None.
        :raises TypeMismatchError: If key or value does not satisfy its Type.
        """
        key_hash = self._key_hash(key)
        new_value = self._value_type.validate(value)
        previous = self._entries.get(key_hash)
        self._entries[key_hash] = _MapEntry(key, new_value, hash_value(new_value))
        return None if previous is None else previous.value

    def put_if_absent(self, key: Any, value: Any) -> Any:
        """
        Associate value with key unless key is present.

        :return: The current value when key is present, otherwise None.
        """
        return self.get(key) if self.contains_key(key) else self.put(key, value)

    def get(self, key: Any) -> Any:
        """
        Return the value for key, or None when absent.

        :raises TypeMismatchError: If key does not satisfy the key Type.
        """
        entry = self._entries.get(self._key_hash(key))
        return None if entry is None else entry.value

    def get_or_default(self, key: Any, default: Any) -> Any:
        """
        Return the value for key, or default when absent. A default other than
        None must satisfy the value Type.
        """
        if self.contains_key(key):
            return self.get(key)
        return Type.nullable(self._value_type).validate(default)

    def remove_at(self, key: Any) -> Any:
        """Remove the entry for key and return its value, or None when absent."""
        entry = self._entries.pop(self._key_hash(key), None)
        return None if entry is None else entry.value

    def remove_if_value(self, key: Any, value: Any) -> bool:
        """Remove the entry for key if its value has the same hash as value."""
        if not self._holds(key, value):
            return False
        self.remove_at(key)
        return True

    def replace(self, key: Any, value: Any) -> Any:
        """
        Replace the value for key if present.

        :return: The previous value, or None when key is absent.
        """
        if not self.contains_key(key):
            self._value_type.validate(value)
            return None
        return self.put(key, value)

    def replace_if_value(self, key: Any, old_value: Any, new_value: Any) -> bool:
        """Replace the value for key if it currently has the same hash as old_value."""
        self._value_type.validate(new_value)
        if not self._holds(key, old_value):
            return False
        self.put(key, new_value)
        return True

    def compute(self, key: Any, remapping: BiFunction) -> Any:
        """
        Write remapping(key, current value or None) for key; a None result removes
        an existing entry.

        :return: The value for key afterwards, or None.
        """
        new_value = remapping(key, self.get(key))
        if new_value is not None:
            self.put(key, new_value)
        elif self.contains_key(key):
            self.remove_at(key)
        return self.get(key)

    def compute_if_absent(self, key: Any, mapping: Mapper) -> Any:
        """Write mapping(key) for an absent key unless the result is None."""
        if not self.contains_key(key):
            new_value = mapping(key)
            if new_value is not None:
                self.put(key, new_value)
        return self.get(key)

    def compute_if_present(self, key: Any, remapping: BiFunction) -> Any:
        """Write remapping(key, value) for a present key; a None result removes it."""
        if self.contains_key(key):
            new_value = remapping(key, self.get(key))
            if new_value is not None:
                self.put(key, new_value)
            else:
                self.remove_at(key)
        return self.get(key)

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def contains_key(self, key: Any) -> bool:
        return self.contains_keys(key)

    def contains_keys(self, *keys: Any) -> bool:
        return all(key_hash in self._entries for key_hash in by_hash(self._key_array_type.validate(keys)))

    def contains_value(self, value: Any) -> bool:
        return self.contains_values(value)

    def contains_values(self, *values: Any) -> bool:
        present = {entry.value_hash for entry in self._entries.values()}
        return all(value_hash in present for value_hash in by_hash(self._value_array_type.validate(values)))

    # -------------------------------------------------------------------------
    # Derived snapshots
    # -------------------------------------------------------------------------

    def entry_set(self) -> "Set":
        """Return a Set of (key, value) tuples."""
        from typedcoll.containers.set import Set

        return Set.of_type(self._type).with_all(*self)

    def key_set(self) -> "Set":
        from typedcoll.containers.set import Set

        return Set.of_type(self._key_type).with_all(*(entry.key for entry in self._entries.values()))

    def values_sequence(self) -> "Sequence":
        from typedcoll.containers.sequence import Sequence

        return Sequence.of_type(self._value_type).with_all(*(entry.value for entry in self._entries.values()))

    # -------------------------------------------------------------------------
    # Python protocols
    # -------------------------------------------------------------------------

    def count(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Tuple[Any, Any]]:
        for entry in list(self._entries.values()):
            yield (entry.key, entry.value)

    def __contains__(self, key: Any) -> bool:
        return self._key_type.is_valid(key) and self.contains_key(key)

    def __getitem__(self, key: Any) -> Any:
        return self.get(key)

    def __setitem__(self, key: Any, value: Any) -> None:
        self.put(key, value)

    def __delitem__(self, key: Any) -> None:
        self.remove_at(key)

    def __repr__(self) -> str:
        return f"Map<{self._key_type},{self._value_type}>({self.to_array()!r})"

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _key_hash(self, key: Any) -> ValueHash:
        return hash_value(self._key_type.validate(key))

    def _holds(self, key: Any, value: Any) -> bool:
        value_hash = hash_value(self._value_type.validate(value))
        entry = self._entries.get(self._key_hash(key))
        return entry is not None and entry.value_hash == value_hash
