# typedcoll/functional.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""
Ready-made callables for Stream, Sequence, Set and Optional operations.

Example:
    Stream.of(Type.int(), 3, 1, 2).filter(Functional.not_empty()).min(Functional.default_comparator())
"""

from __future__ import annotations

from typing import Any, NoReturn

from typedcoll.core.errors import TypeMismatchError
from typedcoll.core.types import Type
from typedcoll.interfaces.types import BiPredicate, Comparator, Mapper, Predicate, Supplier


class Functional:
    """Static factories of predicates, comparators and helpers."""

    def __init__(self) -> None:
        raise TypeError("Functional is a namespace and cannot be instantiated")

    # -------------------------------------------------------------------------
    # Unary predicates
    # -------------------------------------------------------------------------

    @staticmethod
    def empty() -> Predicate:
        """Matches falsy values: None, 0, "", empty containers."""
        return lambda value: not value

    @staticmethod
    def not_empty() -> Predicate:
        return lambda value: bool(value)

    @staticmethod
    def is_set() -> Predicate:
        return lambda value: value is not None

    @staticmethod
    def is_not_set() -> Predicate:
        return lambda value: value is None

    @staticmethod
    def always_true() -> Predicate:
        return lambda value: True

    @staticmethod
    def always_false() -> Predicate:
        return lambda value: False

    @staticmethod
    def is_string() -> Predicate:
        return Type.string().is_valid

    @staticmethod
    def is_int() -> Predicate:
        return Type.int().is_valid

    @staticmethod
    def is_float() -> Predicate:
        return Type.float().is_valid

    @staticmethod
    def is_numeric() -> Predicate:
        """Matches ints, floats and strings holding a number."""
        numeric = Type.numeric()
        return lambda value: numeric.is_valid(value) or (isinstance(value, str) and _is_numeric_text(value))

    @staticmethod
    def is_bool() -> Predicate:
        return Type.bool().is_valid

    @staticmethod
    def is_array() -> Predicate:
        return Type.array().is_valid

    @staticmethod
    def is_resource() -> Predicate:
        return Type.resource().is_valid

    @staticmethod
    def is_object() -> Predicate:
        return Type.object().is_valid

    @staticmethod
    def is_instance_of(class_: type) -> Predicate:
        """
        :raises TypeMismatchError: If class_ is not a class.
        """
        return Type.of_class(class_).is_valid

    # -------------------------------------------------------------------------
    # Binary predicates
    # -------------------------------------------------------------------------

    @staticmethod
    def equal() -> BiPredicate:
        return lambda left, right: left == right

    @staticmethod
    def not_equal() -> BiPredicate:
        return lambda left, right: left != right

    @staticmethod
    def identical() -> BiPredicate:
        """Matches the same object, or equal values of the same runtime type."""
        return lambda left, right: left is right or (type(left) is type(right) and left == right)

    @staticmethod
    def not_identical() -> BiPredicate:
        identical = Functional.identical()
        return lambda left, right: not identical(left, right)

    @staticmethod
    def less_than() -> BiPredicate:
        return lambda left, right: left < right

    @staticmethod
    def not_less_than() -> BiPredicate:
        return lambda left, right: left >= right

    @staticmethod
    def greater_than() -> BiPredicate:
        return lambda left, right: left > right

    @staticmethod
    def not_greater_than() -> BiPredicate:
        return lambda left, right: left <= right

    # -------------------------------------------------------------------------
    # Comparators and helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def default_comparator() -> Comparator:
        """Three-way natural ordering returning -1, 0 or 1."""
        return lambda left, right: (left > right) - (left < right)

    @staticmethod
    def dump() -> Mapper:
        """Maps values offering dump() to their dump, others to themselves."""

        def dump(value: Any) -> Any:
            dumper = getattr(value, "dump", None)
            return dumper() if callable(dumper) and not isinstance(value, type) else value

        return dump

    @staticmethod
    def raise_(supplier: Supplier) -> NoReturn:
        """
        Raise the exception returned by supplier.

        :raises TypeMismatchError: If supplier does not return an exception.
        """
        error = supplier()
        if not isinstance(error, BaseException):
            raise TypeMismatchError("exception", error, "raise_")
        raise error


def _is_numeric_text(text: str) -> bool:
    try:
        float(text)
    except ValueError:
        return False
    return True
