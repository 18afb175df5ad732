# typedcoll/containers/sequence.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from __future__ import annotations

import typing
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Any, Iterator, List

from typedcoll.core.base import CollectibleMixin, CountableMixin, GenericTypedBase
from typedcoll.core.errors import IndexOutOfRangeError
from typedcoll.core.hashing import by_hash, hash_value, normalize_index
from typedcoll.core.types import Type
from typedcoll.interfaces.types import Action, Comparator, Mapper, ValueHash


@dataclass(frozen=True)
class _Entry:
    """Internal storage cell: a value and its hash."""

    value: Any
    value_hash: ValueHash


class Sequence(GenericTypedBase, CountableMixin, CollectibleMixin):
    """
    An ordered, index-addressable collection of values of one declared Type.
    Duplicates are allowed.

    Runtime Invariants:
    - Every stored value satisfies the declared Type
    - Mutators validate all inputs before touching storage, so a failed call
      leaves the sequence unchanged
    - Lookups compare by value hash: objects without value identity match by
      reference only

    Example:
        names = Sequence.of_type(Type.string()).with_all("b", "a")
        names.sort()
        assert names.to_array() == ["a", "b"]
    """

    def __init__(self, type_: Type) -> None:
        super().__init__(type_)
        self._array_type = Type.array_of(type_)
        self._entries: List[_Entry] = []

    @classmethod
    def of_type(cls, type_: Type) -> "Sequence":
        """
        Create an empty Sequence of the given Type.

        :raises TypeMismatchError: If type_ is not a Type.
        """
        return cls(type_)

    @classmethod
    def of_class(cls, class_: type) -> "Sequence":
        """Create an empty Sequence of instances of the given class."""
        return cls(Type.of_class(class_))

    # -------------------------------------------------------------------------
    # Chain functions
    # -------------------------------------------------------------------------

    def clear(self) -> "Sequence":
        self._entries = []
        return self

    def for_each(self, action: Action) -> "Sequence":
        """Invoke action on every value in order."""
        for entry in list(self._entries):
            action(entry.value)
        return self

    def with_all(self, *elements: Any) -> "Sequence":
        self.append_all(*elements)
        return self

    def with_none(self, *elements: Any) -> "Sequence":
        self.remove_all(*elements)
        return self

    def with_only(self, *elements: Any) -> "Sequence":
        self.retain_all(*elements)
        return self

    # -------------------------------------------------------------------------
    # Insertion
    # -------------------------------------------------------------------------

    def append(self, element: Any) -> bool:
        return self.insert_all(self.count(), element)

    def append_all(self, *elements: Any) -> bool:
        return self.insert_all(self.count(), *elements)

    def prepend(self, element: Any) -> bool:
        return self.insert_all(0, element)

    def prepend_all(self, *elements: Any) -> bool:
        return self.insert_all(0, *elements)

    def insert(self, index: int, element: Any) -> bool:
        return self.insert_all(index, element)

    def insert_all(self, index: int, *elements: Any) -> bool:
        """
        Insert the given values before the given position, keeping their order.

        :param index: Insertion point; may be negative, and equal to the length
            to append.
        :param elements: Values to insert.
        :raises IndexOutOfRangeError: If index is outside the insertion range.
        :raises TypeMismatchError: If any value does not satisfy the Type.
        """
        position = normalize_index(_require_index(index), self.count(), inserting=True)
        new_entries = self._entries_for(elements)
        self._entries[position:position] = new_entries
        return True

    # -------------------------------------------------------------------------
    # Positional access
    # -------------------------------------------------------------------------

    def get(self, index: int) -> Any:
        """
        Return the value at the given position.

        :raises IndexOutOfRangeError: If index is out of range.
        """
        return self._entries[normalize_index(_require_index(index), self.count())].value

    def remove_at(self, index: int) -> Any:
        """
        Remove and return the value at the given position.

        :raises IndexOutOfRangeError: If index is out of range.
        """
        return self._entries.pop(normalize_index(_require_index(index), self.count())).value

    def replace_at(self, index: int, element: Any) -> Any:
        """
        Replace the value at the given position and return the previous value.

        :raises IndexOutOfRangeError: If index is out of range.
        :raises TypeMismatchError: If element does not satisfy the Type.
        """
        position = normalize_index(_require_index(index), self.count())
        entry = self._entry_for(element)
        previous, self._entries[position] = self._entries[position], entry
        return previous.value

    def replace_all(self, operator: Mapper) -> None:
        """
        Replace every value with operator(value). All results are validated
        before any of them is written.

        :raises TypeMismatchError: If any result does not satisfy the Type.
        """
        self._entries = self._entries_for([operator(entry.value) for entry in self._entries])

    def sub_list(self, from_index: int, to_index: int) -> List[Any]:
        """
        Return the values in the half-open range [from_index, to_index).

        :raises IndexOutOfRangeError: If either bound is out of range or
            from_index lies after to_index.
        """
        start = normalize_index(_require_index(from_index), self.count(), inserting=True)
        stop = normalize_index(_require_index(to_index), self.count(), inserting=True)
        if start > stop:
            raise IndexOutOfRangeError(from_index, stop, inserting=True)
        return [entry.value for entry in self._entries[start:stop]]

    # -------------------------------------------------------------------------
    # Lookup by value
    # -------------------------------------------------------------------------

    def contains(self, element: Any) -> bool:
        """
        Check whether a value with the same hash is present.

        :raises TypeMismatchError: If element does not satisfy the Type.
        """
        value_hash = self._entry_for(element).value_hash
        return any(entry.value_hash == value_hash for entry in self._entries)

    def contains_all(self, *elements: Any) -> bool:
        present = {entry.value_hash for entry in self._entries}
        return all(value_hash in present for value_hash in by_hash(self._array_type.validate(elements)))

    def first_index_of(self, element: Any) -> typing.Optional[int]:
        """Return the first position holding the value, or None."""
        value_hash = self._entry_for(element).value_hash
        for index, entry in enumerate(self._entries):
            if entry.value_hash == value_hash:
                return index
        return None

    def last_index_of(self, element: Any) -> typing.Optional[int]:
        """Return the last position holding the value, or None."""
        value_hash = self._entry_for(element).value_hash
        for index in range(self.count() - 1, -1, -1):
            if self._entries[index].value_hash == value_hash:
                return index
        return None

    def remove(self, element: Any) -> bool:
        """Remove the first occurrence of the value; report whether one was found."""
        index = self.first_index_of(element)
        if index is None:
            return False
        del self._entries[index]
        return True

    def remove_all(self, *elements: Any) -> bool:
        """Remove every occurrence of the given values; report whether any was found."""
        hashes = by_hash(self._array_type.validate(elements))
        return self._keep(lambda entry: entry.value_hash not in hashes)

    def retain_all(self, *elements: Any) -> bool:
        """Remove every value other than the given ones; report whether any was removed."""
        hashes = by_hash(self._array_type.validate(elements))
        return self._keep(lambda entry: entry.value_hash in hashes)

    def sort(self, comparator: typing.Optional[Comparator] = None) -> None:
        """
        Stable in-place sort with a three-way comparator.

        :param comparator: Callable returning a negative, zero or positive int;
            defaults to natural ordering.
        """
        if comparator is None:
            from typedcoll.functional import Functional

            comparator = Functional.default_comparator()
        self._entries.sort(key=cmp_to_key(lambda left, right: comparator(left.value, right.value)))

    # -------------------------------------------------------------------------
    # Python protocols
    # -------------------------------------------------------------------------

    def count(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Any]:
        for entry in list(self._entries):
            yield entry.value

    def __contains__(self, element: Any) -> bool:
        return self._type.is_valid(element) and self.contains(element)

    def __getitem__(self, index: int) -> Any:
        return self.get(index)

    def __setitem__(self, index: int, element: Any) -> None:
        self.replace_at(index, element)

    def __delitem__(self, index: int) -> None:
        self.remove_at(index)

    def __repr__(self) -> str:
        return f"Sequence<{self._type}>({self.to_array()!r})"

    # -------------------------------------------------------------------------
    # Collectible
    # -------------------------------------------------------------------------

    def to_sequence(self) -> "Sequence":
        copy = Sequence(self._type)
        copy._entries = list(self._entries)
        return copy

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _entry_for(self, element: Any) -> _Entry:
        value = self._type.validate(element)
        return _Entry(value, hash_value(value))

    def _entries_for(self, elements: typing.Sequence[Any]) -> List[_Entry]:
        return [_Entry(value, hash_value(value)) for value in self._array_type.validate(list(elements))]

    def _keep(self, predicate: typing.Callable[[_Entry], bool]) -> bool:
        snapshot = list(self._entries)
        kept = [entry for entry in snapshot if predicate(entry)]
        changed = len(kept) != len(snapshot)
        self._entries = kept
        return changed


def _require_index(index: Any) -> int:
    return Type.int().validate(index)
