# typedcoll/interfaces/abc.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Protocol, runtime_checkable

if TYPE_CHECKING:
    from typedcoll.containers.sequence import Sequence
    from typedcoll.containers.set import Set
    from typedcoll.containers.stream import Stream
    from typedcoll.core.types import Type


@runtime_checkable
class GenericTyped(Protocol):
    """
    Protocol for structures declaring the Type of their elements.

    Runtime Invariants:
    - The declared Type never changes after construction
    - Every element held satisfies the declared Type
    """

    @property
    def type(self) -> "Type": ...


@runtime_checkable
class Collectible(GenericTyped, Protocol):
    """
    Protocol for containers that can be viewed as any other container.

    Runtime Invariants:
    - Conversions are snapshots, never live views
    - Conversions preserve iteration order
    """

    def to_sequence(self) -> "Sequence": ...

    def to_set(self) -> "Set": ...

    def to_stream(self) -> "Stream": ...

    def to_array(self) -> List[Any]: ...

    def to_iterable(self) -> Iterator[Any]: ...

    def dump(self) -> Dict[str, Any]: ...

    def __iter__(self) -> Iterator[Any]: ...


@runtime_checkable
class ValueHashable(Protocol):
    """
    Protocol for objects opting into value identity.

    Objects implementing __value_hash__ are hashed by the returned string rather
    than by reference, so two instances returning the same string are treated
    as the same element by Set, Map and Sequence lookups.

    Runtime Invariants:
    - The returned string is stable for the lifetime of the object
    """

    def __value_hash__(self) -> str: ...
