# typedcoll/core/base.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Iterator, List

from typedcoll.core.errors import TypeMismatchError

if TYPE_CHECKING:
    from typedcoll.containers.sequence import Sequence
    from typedcoll.containers.set import Set
    from typedcoll.containers.stream import Stream
    from typedcoll.core.types import Type


class GenericTypedBase:
    """Base class for containers declaring the Type of their elements."""

    def __init__(self, type_: "Type") -> None:
        from typedcoll.core.types import Type

        if not isinstance(type_, Type):
            raise TypeMismatchError("Type", type_, type(self).__name__)
        self._type = type_

    @property
    def type(self) -> "Type":
        """The declared element Type."""
        return self._type


class CountableMixin:
    """Emptiness checks derived from count()."""

    def count(self) -> int:
        raise NotImplementedError

    def is_empty(self) -> bool:
        return self.count() == 0

    def is_not_empty(self) -> bool:
        return self.count() != 0

    def __len__(self) -> int:
        return self.count()


class CollectibleMixin:
    """
    Conversions shared by every container, derived from the declared type and
    __iter__. Every conversion is a snapshot of the current elements.
    """

    def to_sequence(self) -> "Sequence":
        from typedcoll.containers.sequence import Sequence

        return Sequence.of_type(self.type).with_all(*self)

    def to_set(self) -> "Set":
        from typedcoll.containers.set import Set

        return Set.of_type(self.type).with_all(*self)

    def to_stream(self) -> "Stream":
        from typedcoll.containers.stream import Stream

        return Stream.generate(self.to_array(), self.type)

    def to_array(self) -> List[Any]:
        return list(self)

    def to_iterable(self) -> Iterator[Any]:
        yield from self.to_array()

    def dump(self) -> Dict[str, Any]:
        """Structural dump for diagnostics: the declared type and the entries."""
        return {"type": self.type.dump(), "entries": [_dump(value) for value in self]}


def _dump(value: Any) -> Any:
    dump = getattr(value, "dump", None)
    if callable(dump) and not isinstance(value, type):
        return dump()
    if isinstance(value, (list, tuple)):
        return [_dump(sub_value) for sub_value in value]
    if isinstance(value, dict):
        return {key: _dump(sub_value) for key, sub_value in value.items()}
    return value
