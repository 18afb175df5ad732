# typedcoll/containers/set.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from __future__ import annotations

from typing import Any, Dict, Iterator

from typedcoll.core.base import CollectibleMixin, CountableMixin, GenericTypedBase
from typedcoll.core.hashing import by_hash, hash_value
from typedcoll.core.types import Type
from typedcoll.interfaces.types import Action, Predicate, ValueHash


class Set(GenericTypedBase, CountableMixin, CollectibleMixin):
    """
    A collection of unique values of one declared Type, keyed by value hash and
    iterated in insertion order.

    Runtime Invariants:
    - At most one value is stored per value hash
    - Every stored value satisfies the declared Type
    - Mutators validate all inputs before touching storage
    """

    def __init__(self, type_: Type) -> None:
        super().__init__(type_)
        self._array_type = Type.array_of(type_)
        self._entries: Dict[ValueHash, Any] = {}

    @classmethod
    def of_type(cls, type_: Type) -> "Set":
        """
        Create an empty Set of the given Type.

        :raises TypeMismatchError: If type_ is not a Type.
        """
        return cls(type_)

    @classmethod
    def of_class(cls, class_: type) -> "Set":
        """Create an empty Set of instances of the given class."""
        return cls(Type.of_class(class_))

    # -------------------------------------------------------------------------
    # Chain functions
    # -------------------------------------------------------------------------

    def clear(self) -> "Set":
        self._entries = {}
        return self

    def for_each(self, action: Action) -> "Set":
        for value in list(self._entries.values()):
            action(value)
        return self

    def with_all(self, *elements: Any) -> "Set":
        self.add_all(*elements)
        return self

    def with_none(self, *elements: Any) -> "Set":
        self.remove_all(*elements)
        return self

    def with_only(self, *elements: Any) -> "Set":
        self.retain_all(*elements)
        return self

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def add(self, element: Any) -> bool:
        """
        Add a value unless one with the same hash is present.

        :return: Whether the set changed.
        :raises TypeMismatchError: If element does not satisfy the Type.
        """
        return self.add_all(element)

    def add_all(self, *elements: Any) -> bool:
        """
        Add every value whose hash is not yet present.

        :return: Whether the set changed.
        :raises TypeMismatchError: If any value does not satisfy the Type.
        """
        changed = False
        for value_hash, value in by_hash(self._array_type.validate(elements)).items():
            if value_hash not in self._entries:
                self._entries[value_hash] = value
                changed = True
        return changed

    def remove(self, element: Any) -> bool:
        """Remove the value; report whether it was present."""
        return self.remove_all(element)

    def remove_all(self, *elements: Any) -> bool:
        """Remove the given values; report whether any was present."""
        hashes = by_hash(self._array_type.validate(elements))
        return self._keep(lambda value_hash, value: value_hash not in hashes)

    def remove_if(self, predicate: Predicate) -> bool:
        """
        Remove every value matching predicate; report whether any matched. The
        predicate sees a snapshot of the values.
        """
        return self._keep(lambda value_hash, value: not predicate(value))

    def retain_all(self, *elements: Any) -> bool:
        """Remove every value other than the given ones; report whether any was removed."""
        hashes = by_hash(self._array_type.validate(elements))
        return self._keep(lambda value_hash, value: value_hash in hashes)

    def retain_if(self, predicate: Predicate) -> bool:
        """Remove every value not matching predicate; report whether any was removed."""
        return self._keep(lambda value_hash, value: bool(predicate(value)))

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def contains(self, element: Any) -> bool:
        """
        Check whether a value with the same hash is present.

        :raises TypeMismatchError: If element does not satisfy the Type.
        """
        return hash_value(self._type.validate(element)) in self._entries

    def contains_all(self, *elements: Any) -> bool:
        return all(value_hash in self._entries for value_hash in by_hash(self._array_type.validate(elements)))

    # -------------------------------------------------------------------------
    # Python protocols
    # -------------------------------------------------------------------------

    def count(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Any]:
        yield from list(self._entries.values())

    def __contains__(self, element: Any) -> bool:
        return self._type.is_valid(element) and self.contains(element)

    def __repr__(self) -> str:
        return f"Set<{self._type}>({self.to_array()!r})"

    # -------------------------------------------------------------------------
    # Collectible
    # -------------------------------------------------------------------------

    def to_set(self) -> "Set":
        copy = Set(self._type)
        copy._entries = dict(self._entries)
        return copy

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _keep(self, predicate) -> bool:
        snapshot = list(self._entries.items())
        kept = {value_hash: value for value_hash, value in snapshot if predicate(value_hash, value)}
        changed = len(kept) != len(snapshot)
        self._entries = kept
        return changed
