# typedcoll/containers/stream.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""
Lazy, single-pass, typed pipelines.

Each Stage wraps the iterator of the stage before it and pulls from it on
demand, one element at a time, so side effects of successive stages interleave
per element:

    seen = []
    Stream.of(Type.int(), 1, 2, 3, 4, 5) \\
        .peek(seen.append) \\
        .filter(lambda n: n % 2 == 0) \\
        .to_array()                      # [2, 4]

A Stream may be linked or consumed exactly once. Calling a second operator on
the same instance raises StreamConsumedError.
"""

from __future__ import annotations

import logging
import typing
from typing import Any, Dict, Iterable, Iterator, List

from typedcoll.containers.optional import Optional
from typedcoll.core.base import CollectibleMixin, GenericTypedBase
from typedcoll.core.errors import StreamConsumedError
from typedcoll.core.hashing import hash_value
from typedcoll.core.types import Type
from typedcoll.interfaces.types import (
    Action,
    BiFunction,
    Collector,
    Comparator,
    FlatMapper,
    Mapper,
    Operator,
    Predicate,
    ValueHash,
)

logger = logging.getLogger(__name__)


class Stream(GenericTypedBase, CollectibleMixin):
    """
    A lazily evaluated sequence of values of a declared Type.

    Runtime Invariants:
    - Every element is validated once, by the stage that produces it
    - Elements flow through stages strictly in order, one at a time
    - An instance is drained at most once

    Threading/Concurrency Guarantees:
    - None; a Stream is driven by the thread consuming it
    """

    def __init__(self, source: Iterable[Any], type_: Type) -> None:
        super().__init__(type_)
        self._source = source
        self._consumed = False

    # -------------------------------------------------------------------------
    # Factories
    # -------------------------------------------------------------------------

    @classmethod
    def empty(cls, type_: Type) -> "Stream":
        return cls((), type_)

    @classmethod
    def generate(cls, iterable: Iterable[Any], type_: Type) -> "Stream":
        """
        Stream the values of an iterable, validating each one as it is pulled.

        :raises TypeMismatchError: On consumption, for a value not satisfying type_.
        """
        return cls(_validated(iterable, type_), type_)

    @classmethod
    def of(cls, type_: Type, *values: Any) -> "Stream":
        return cls.generate(values, type_)

    @classmethod
    def iterate(cls, seed: Any, has_next: Predicate, next_: Mapper, type_: Type) -> "Stream":
        """
        Stream seed, next_(seed), next_(next_(seed)), ... for as long as has_next
        holds. next_ is only called when the following element is pulled.
        """
        return cls(_iterate(seed, has_next, next_, type_), type_)

    # -------------------------------------------------------------------------
    # Intermediate operators
    # -------------------------------------------------------------------------

    def filter(self, predicate: Predicate) -> "Stream":
        return Stream(_filter(self._drain("filter"), predicate), self._type)

    def map(self, mapper: Mapper, type_: Type) -> "Stream":
        """Apply mapper to every element, validating results against type_."""
        return Stream(_map(self._drain("map"), mapper, type_), type_)

    def flat_map(self, mapper: FlatMapper, type_: Type) -> "Stream":
        """Expand every element into the iterable mapper returns, validating against type_."""
        return Stream(_flat_map(self._drain("flat_map"), mapper, type_), type_)

    def distinct(self) -> "Stream":
        """Drop elements whose value hash was already seen."""
        return Stream(_distinct(self._drain("distinct")), self._type)

    def peek(self, action: Action) -> "Stream":
        return Stream(_peek(self._drain("peek"), action), self._type)

    def limit(self, threshold: int) -> "Stream":
        """Pass at most threshold elements, never pulling beyond the last one passed."""
        return Stream(_limit(self._drain("limit"), threshold), self._type)

    def skip(self, threshold: int) -> "Stream":
        return Stream(_skip(self._drain("skip"), threshold), self._type)

    def take_while(self, predicate: Predicate) -> "Stream":
        return Stream(_take_while(self._drain("take_while"), predicate), self._type)

    def drop_while(self, predicate: Predicate) -> "Stream":
        """Drop the longest prefix matching predicate; later elements are not tested."""
        return Stream(_drop_while(self._drain("drop_while"), predicate), self._type)

    def batch(self, threshold: int) -> "Stream":
        """
        Group elements into lists of max(1, threshold) elements; the last list may
        be shorter. The element type becomes an array of this Type.
        """
        batch_type = Type.array_of(self._type)
        return Stream(_batch(self._drain("batch"), max(1, threshold), batch_type), batch_type)

    def append(self, *iterables: Iterable[Any]) -> "Stream":
        """Continue with the values of the given iterables, validated against this Type."""
        sources = [
            iterable._drain("append") if isinstance(iterable, Stream) else iterable for iterable in iterables
        ]
        return Stream(_append(self._drain("append"), sources, self._type), self._type)

    def with_operator(self, operator: Operator, type_: Type) -> "Stream":
        """
        Hand the element iterator to operator and stream what it returns,
        validated against type_.
        """
        return Stream(_with_operator(self._drain("with_operator"), operator, type_), type_)

    # -------------------------------------------------------------------------
    # Terminal operators
    # -------------------------------------------------------------------------

    def all_match(self, predicate: Predicate) -> bool:
        return all(predicate(value) for value in self._drain("all_match"))

    def any_match(self, predicate: Predicate) -> bool:
        return any(predicate(value) for value in self._drain("any_match"))

    def none_match(self, predicate: Predicate) -> bool:
        return not any(predicate(value) for value in self._drain("none_match"))

    def find_first(self) -> Optional:
        """Return an Optional of the first element, empty when there is none."""
        for value in self._drain("find_first"):
            return Optional.of_nullable(value, self._type)
        return Optional.empty(self._type)

    def min(self, comparator: typing.Optional[Comparator] = None) -> Optional:
        """Return an Optional of the first smallest element."""
        return self._extreme("min", comparator, -1)

    def max(self, comparator: typing.Optional[Comparator] = None) -> Optional:
        """Return an Optional of the first largest element."""
        return self._extreme("max", comparator, 1)

    def reduce(self, function: BiFunction, seed: Any, type_: Type) -> Any:
        """
        Fold the elements left to right starting from seed.

        :raises TypeMismatchError: If the final accumulator does not satisfy type_.
        """
        accumulator = seed
        for value in self._drain("reduce"):
            accumulator = function(accumulator, value)
        return type_.validate(accumulator)

    def count(self) -> int:
        return sum(1 for _ in self._drain("count"))

    def collect(self, collector: Collector) -> Any:
        """Hand the raw element iterator to collector and return its result."""
        return collector(self._drain("collect"))

    def for_each(self, action: Action) -> None:
        for value in self._drain("for_each"):
            action(value)

    # -------------------------------------------------------------------------
    # Collectible
    # -------------------------------------------------------------------------

    def to_stream(self) -> "Stream":
        return self

    def to_iterable(self) -> Iterator[Any]:
        source = self._drain("to_iterable")
        return (value for value in source)

    def __iter__(self) -> Iterator[Any]:
        return self._drain("__iter__")

    @property
    def consumed(self) -> bool:
        """Whether this Stream has been linked or consumed."""
        return self._consumed

    def __repr__(self) -> str:
        state = "consumed" if self._consumed else "pending"
        return f"Stream<{self._type}>({state})"

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _drain(self, operation: str) -> Iterator[Any]:
        if self._consumed:
            raise StreamConsumedError(
                f"Stream<{self._type}>.{operation}(): stream has already been linked or consumed.",
                {"type": self._type.name, "operation": operation},
            )
        self._consumed = True
        logger.debug("Stream<%s> drained by %s()", self._type, operation)
        return iter(self._source)

    def _extreme(self, operation: str, comparator: typing.Optional[Comparator], sign: int) -> Optional:
        if comparator is None:
            from typedcoll.functional import Functional

            comparator = Functional.default_comparator()

        found = False
        extreme = None
        for value in self._drain(operation):
            if not found:
                found, extreme = True, value
                continue
            order = comparator(value, extreme)
            if (order > 0) - (order < 0) == sign:
                extreme = value
        return Optional.of_nullable(extreme, self._type) if found else Optional.empty(self._type)


# -----------------------------------------------------------------------------
# Stages
# -----------------------------------------------------------------------------


def _validated(iterable: Iterable[Any], type_: Type) -> Iterator[Any]:
    for value in iterable:
        yield type_.validate(value)


def _iterate(seed: Any, has_next: Predicate, next_: Mapper, type_: Type) -> Iterator[Any]:
    value = seed
    while has_next(value):
        yield type_.validate(value)
        value = next_(value)


def _filter(source: Iterator[Any], predicate: Predicate) -> Iterator[Any]:
    for value in source:
        if predicate(value):
            yield value


def _map(source: Iterator[Any], mapper: Mapper, type_: Type) -> Iterator[Any]:
    for value in source:
        yield type_.validate(mapper(value))


def _flat_map(source: Iterator[Any], mapper: FlatMapper, type_: Type) -> Iterator[Any]:
    for value in source:
        for inner_value in mapper(value):
            yield type_.validate(inner_value)


def _distinct(source: Iterator[Any]) -> Iterator[Any]:
    # Values are held so that no hash seen here can be reissued to another object.
    seen: Dict[ValueHash, Any] = {}
    for value in source:
        value_hash = hash_value(value)
        if value_hash not in seen:
            seen[value_hash] = value
            yield value


def _peek(source: Iterator[Any], action: Action) -> Iterator[Any]:
    for value in source:
        action(value)
        yield value


def _limit(source: Iterator[Any], threshold: int) -> Iterator[Any]:
    if threshold <= 0:
        return
    for passed, value in enumerate(source, 1):
        yield value
        if passed >= threshold:
            return


def _skip(source: Iterator[Any], threshold: int) -> Iterator[Any]:
    for skipped, value in enumerate(source):
        if skipped >= threshold:
            yield value


def _take_while(source: Iterator[Any], predicate: Predicate) -> Iterator[Any]:
    for value in source:
        if not predicate(value):
            return
        yield value


def _drop_while(source: Iterator[Any], predicate: Predicate) -> Iterator[Any]:
    dropping = True
    for value in source:
        if dropping and predicate(value):
            continue
        dropping = False
        yield value


def _batch(source: Iterator[Any], threshold: int, batch_type: Type) -> Iterator[List[Any]]:
    chunk: List[Any] = []
    for value in source:
        chunk.append(value)
        if len(chunk) >= threshold:
            yield batch_type.validate(chunk)
            chunk = []
    if chunk:
        yield batch_type.validate(chunk)


def _append(source: Iterator[Any], iterables: List[Iterable[Any]], type_: Type) -> Iterator[Any]:
    yield from source
    for iterable in iterables:
        yield from _validated(iterable, type_)


def _with_operator(source: Iterator[Any], operator: Operator, type_: Type) -> Iterator[Any]:
    yield from _validated(operator(source), type_)
