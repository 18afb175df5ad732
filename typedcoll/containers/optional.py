# typedcoll/containers/optional.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from __future__ import annotations

import typing
from typing import Any, Iterator

from typedcoll.core.base import CollectibleMixin, GenericTypedBase
from typedcoll.core.errors import TypeMismatchError, UnderflowError
from typedcoll.core.types import Type
from typedcoll.interfaces.types import Action, Mapper, Predicate, Supplier


class Optional(GenericTypedBase, CollectibleMixin):
    """
    A container holding zero or one value of a declared Type.

    None stands for absence, so an Optional never holds None as a value.

    Runtime Invariants:
    - A present value satisfies the declared Type
    - Instances are never mutated; transformations return new Optionals

    Example:
        name = Optional.of_nullable(lookup("ada"), Type.string())
        greeting = name.map(lambda n: f"hi {n}", Type.string()).or_else("hi")
    """

    def __init__(self, value: Any, type_: Type) -> None:
        """
        :param value: The held value, or None for an empty Optional.
        :param type_: The declared Type.
        :raises TypeMismatchError: If value is not None and does not satisfy type_.
        """
        super().__init__(type_)
        self._value = None if value is None else type_.validate(value)

    @classmethod
    def empty(cls, type_: Type) -> "Optional":
        return cls(None, type_)

    @classmethod
    def of(cls, value: Any, type_: Type) -> "Optional":
        """
        Create a present Optional.

        :raises TypeMismatchError: If value is None or does not satisfy type_.
        """
        if value is None:
            raise TypeMismatchError(f"non-null {type_}", value, "of")
        return cls(value, type_)

    @classmethod
    def of_nullable(cls, value: Any, type_: Type) -> "Optional":
        """
        Create an Optional that is empty when value is None.

        :raises TypeMismatchError: If value is not None and does not satisfy type_.
        """
        return cls(value, type_)

    # -------------------------------------------------------------------------
    # Chain functions
    # -------------------------------------------------------------------------

    def filter(self, predicate: Predicate) -> "Optional":
        """Return this Optional if empty or its value matches, otherwise an empty one."""
        if self.is_present() and not predicate(self._value):
            return Optional.empty(self._type)
        return self

    def map(self, mapper: Mapper, type_: Type) -> "Optional":
        """
        Apply mapper to a present value; a None result yields an empty Optional.

        :param type_: Type of the mapped value.
        """
        if self.is_empty():
            return Optional.empty(type_)
        return Optional.of_nullable(mapper(self._value), type_)

    def flat_map(self, mapper: typing.Callable[[Any], "Optional"], type_: Type) -> "Optional":
        """
        Apply an Optional-returning mapper to a present value.

        :param type_: Type of the resulting Optional.
        :raises TypeMismatchError: If mapper does not return an Optional.
        """
        if self.is_empty():
            return Optional.empty(type_)
        result = Type.of_class(Optional).validate(mapper(self._value))
        return Optional.of_nullable(result._value, type_)

    def or_optional(self, supplier: typing.Callable[[], "Optional"]) -> "Optional":
        """
        Return this Optional if present, otherwise the supplied one re-typed to
        this Optional's Type.

        :raises TypeMismatchError: If supplier does not return an Optional, or its
            value does not satisfy this Type.
        """
        if self.is_present():
            return self
        result = Type.of_class(Optional).validate(supplier())
        return Optional.of_nullable(result._value, self._type)

    # -------------------------------------------------------------------------
    # Collector functions
    # -------------------------------------------------------------------------

    def get_value(self) -> Any:
        """
        Return the present value.

        :raises UnderflowError: If no value is present.
        """
        if self.is_present():
            return self._value
        raise UnderflowError("Optional.get_value(): No value present.", {"type": self._type.name})

    def if_present(self, action: Action) -> None:
        if self.is_present():
            action(self._value)

    def if_present_or_else(self, action: Action, empty_action: typing.Callable[[], Any]) -> None:
        if self.is_present():
            action(self._value)
        else:
            empty_action()

    def is_present(self) -> bool:
        return self._value is not None

    def is_empty(self) -> bool:
        return self._value is None

    def or_else(self, other: Any) -> Any:
        """
        Return the present value, otherwise other.

        :raises TypeMismatchError: If other is used, is not None and does not
            satisfy the Type.
        """
        if self.is_present():
            return self._value
        return None if other is None else self._type.validate(other)

    def or_else_get(self, supplier: Supplier) -> Any:
        """Return the present value, otherwise the validated result of supplier()."""
        if self.is_present():
            return self._value
        return self.or_else(supplier())

    def or_else_throw(self, exception_supplier: typing.Optional[Supplier] = None) -> Any:
        """
        Return the present value, otherwise raise the supplied exception.

        :param exception_supplier: Callable returning the exception to raise;
            defaults to raising UnderflowError.
        """
        if self.is_present():
            return self._value
        if exception_supplier is None:
            return self.get_value()
        from typedcoll.functional import Functional

        return Functional.raise_(exception_supplier)

    # -------------------------------------------------------------------------
    # Python protocols
    # -------------------------------------------------------------------------

    def __iter__(self) -> Iterator[Any]:
        if self.is_present():
            yield self._value

    def __bool__(self) -> bool:
        return self.is_present()

    def __repr__(self) -> str:
        if self.is_empty():
            return f"Optional<{self._type}>.empty"
        return f"Optional<{self._type}>({self._value!r})"
