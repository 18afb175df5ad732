# typedcoll/core/types.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""
Runtime type descriptors.

A Type couples a validation predicate with a structural description (a base
name plus ordered sub-types). Descriptors are interned through the process-wide
TypeRegistry: composing the same structure twice yields the same instance, so
descriptors compare by identity.

Example:
    pair = Type.tuple(Type.string(), Type.int())
    assert pair is Type.tuple(Type.string(), Type.int())
    assert Type.union(Type.int(), Type.string()) is Type.union(Type.string(), Type.int())
    pair.validate(["answer", 42])
"""

from __future__ import annotations

import functools
import io
import mmap
import re
import socket
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterator, List, Optional, Sequence as SequenceOf

from typedcoll.core.errors import TypeMismatchError
from typedcoll.core.hashing import normalize_index
from typedcoll.interfaces.types import TypeKey
from typedcoll.runtime.registry import get_registry

if TYPE_CHECKING:
    from typedcoll.containers.map import Map
    from typedcoll.containers.optional import Optional as OptionalContainer
    from typedcoll.containers.sequence import Sequence
    from typedcoll.containers.set import Set
    from typedcoll.containers.stream import Stream

_SCALARS = (bool, int, float, complex, str, bytes)
_ARRAYS = (list, tuple, dict)
_RESOURCES = (io.IOBase, socket.socket, mmap.mmap)


class Type:
    """
    An immutable, interned type descriptor.

    Descriptors are obtained through the class-level factories (primitives such
    as Type.int(), compositions such as Type.union(...)), never by calling the
    constructor directly: constructing a descriptor whose structure is already
    interned raises TypeCollisionError.

    Runtime Invariants:
    - One instance per (base name, discriminator, ordered sub-type identities)
    - Base name, sub-types and predicate never change after construction
    - validate() returns its argument unchanged or raises TypeMismatchError
    """

    __slots__ = ("_predicate", "_base_name", "_name", "_sub_types", "_key", "_id")

    def __init__(
        self,
        predicate: Callable[[Any], bool],
        base_name: str,
        *sub_types: "Type",
        discriminator: Any = None,
    ) -> None:
        """
        Construct and intern a descriptor.

        :param predicate: Callable deciding whether a value adheres to this Type.
        :param base_name: The base name, e.g. "int", "tuple" or a class name.
        :param sub_types: The ordered sub-types referenced by this Type.
        :param discriminator: Extra key component for descriptors whose base name
            alone is not unique (classes).
        :raises TypeCollisionError: If this structure is already interned.
        """
        _require_types(sub_types, "Type")
        self._predicate = predicate
        self._base_name = base_name
        self._sub_types = sub_types
        self._name = base_name if not sub_types else f"{base_name}<{','.join(t.name for t in sub_types)}>"
        self._key = _key(base_name, sub_types, discriminator)
        self._id = get_registry().register(self._key, self)

    # -------------------------------------------------------------------------
    # Structure
    # -------------------------------------------------------------------------

    @property
    def base_name(self) -> str:
        """The base name of this Type."""
        return self._base_name

    @property
    def name(self) -> str:
        """The full name of this Type, including sub-types."""
        return self._name

    @property
    def sub_types(self) -> SequenceOf["Type"]:
        """The ordered sub-types referenced by this Type."""
        return self._sub_types

    @property
    def type_id(self) -> int:
        """The interning order of this Type."""
        return self._id

    def sub_type_at(self, index: int) -> "Type":
        """
        Return the sub-type at the given position. Negative positions count from
        the end.

        :raises IndexOutOfRangeError: If the position is out of range.
        """
        return self._sub_types[normalize_index(index, len(self._sub_types))]

    def dump(self) -> Dict[str, Any]:
        """Structural dump for diagnostics."""
        return {"base": self._base_name, "sub_types": [sub_type.dump() for sub_type in self._sub_types]}

    def __str__(self) -> str:
        return self._name

    def __repr__(self) -> str:
        return f"Type({self._name})"

    def __copy__(self) -> "Type":
        return self

    def __deepcopy__(self, memo) -> "Type":
        return self

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def is_valid(self, value: Any) -> bool:
        """
        Check whether a value adheres to this Type.

        :param value: The value to check.
        """
        return bool(self._predicate(value))

    def validate(self, value: Any) -> Any:
        """
        Return the value unchanged if it adheres to this Type.

        :param value: The value to validate.
        :raises TypeMismatchError: If the value does not adhere to this Type.
        """
        if self._predicate(value):
            return value
        raise TypeMismatchError(self._name, value)

    @classmethod
    def validate_callable(
        cls,
        fn: Callable,
        output_type: "Type",
        required: SequenceOf["Type"] = (),
        optional: SequenceOf["Type"] = (),
        variadic: Optional["Type"] = None,
    ) -> Callable:
        """
        Wrap a callable so that its positional arguments and return value are
        validated on every call.

        Arguments bind to the required types first, then to as many optional
        types as the extra arguments allow, then to the variadic type.

        :param fn: The callable to wrap.
        :param output_type: Type of the return value.
        :param required: Types of the required positional arguments.
        :param optional: Types of the optional positional arguments.
        :param variadic: Type of any further positional arguments.
        :raises TypeMismatchError: If fn is not callable or a type list holds
            something other than Types. The returned wrapper raises it when the
            arguments cannot be matched or a value fails validation.
        """
        type_of_type = cls.of_class(Type)
        required = tuple(cls.array_of(type_of_type).validate(list(required)))
        optional = tuple(cls.array_of(type_of_type).validate(list(optional)))
        cls.nullable(type_of_type).validate(variadic)
        type_of_type.validate(output_type)
        cls.callable().validate(fn)

        @functools.wraps(fn)
        def validated(*inputs):
            input_types = list(required)
            for input_type in optional:
                if len(inputs) > len(input_types):
                    input_types.append(input_type)
            if variadic is not None:
                input_types.extend([variadic] * max(0, len(inputs) - len(input_types)))

            cls.tuple(*input_types).validate(list(inputs))
            return output_type.validate(fn(*inputs))

        return validated

    # -------------------------------------------------------------------------
    # Primitives
    # -------------------------------------------------------------------------

    @classmethod
    def null(cls) -> "Type":
        """Type of None."""
        return cls._primitive("null", lambda value: value is None)

    @classmethod
    def mixed(cls) -> "Type":
        """Type accepting every value."""
        return cls._primitive("mixed", lambda value: True)

    @classmethod
    def string(cls) -> "Type":
        return cls._primitive("string", lambda value: isinstance(value, str))

    @classmethod
    def int(cls) -> "Type":
        """Type of integers, excluding booleans."""
        return cls._primitive("int", lambda value: isinstance(value, int) and not isinstance(value, bool))

    @classmethod
    def float(cls) -> "Type":
        return cls._primitive("float", lambda value: isinstance(value, float))

    @classmethod
    def numeric(cls) -> "Type":
        """Union of float and int."""
        return cls.union(cls.float(), cls.int())

    @classmethod
    def bool(cls) -> "Type":
        return cls._primitive("bool", lambda value: isinstance(value, bool))

    @classmethod
    def array(cls) -> "Type":
        """Type of lists, tuples and dicts."""
        return cls._primitive("array", lambda value: isinstance(value, _ARRAYS))

    @classmethod
    def resource(cls) -> "Type":
        """Type of open I/O handles (files, sockets, memory maps)."""
        return cls._primitive("resource", _is_open_resource)

    @classmethod
    def iterable(cls) -> "Type":
        return cls._primitive("iterable", lambda value: isinstance(value, Iterable))

    @classmethod
    def callable(cls) -> "Type":
        return cls._primitive("callable", callable)

    @classmethod
    def object(cls) -> "Type":
        """Type of every value that is neither None, a scalar nor an array."""
        return cls._primitive(
            "object",
            lambda value: value is not None and not isinstance(value, _SCALARS + _ARRAYS),
        )

    @classmethod
    def of_class(cls, class_: type, *sub_types: "Type") -> "Type":
        """
        Type of instances of the given class.

        :param class_: The class values must be instances of.
        :param sub_types: Optional sub-types recorded on the descriptor.
        :raises TypeMismatchError: If class_ is not a class.
        """
        if not isinstance(class_, type):
            raise TypeMismatchError("class", class_, "of_class")
        _require_types(sub_types, "of_class")

        base_name = f"{class_.__module__}.{class_.__qualname__}"
        return get_registry().get_or_create(
            _key(base_name, sub_types, id(class_)),
            lambda: cls(lambda value: isinstance(value, class_), base_name, *sub_types, discriminator=id(class_)),
        )

    @classmethod
    def _primitive(cls, base_name: str, predicate: Callable[[Any], bool]) -> "Type":
        return get_registry().get_or_create(_key(base_name, ()), lambda: cls(predicate, base_name))

    # -------------------------------------------------------------------------
    # Composition
    # -------------------------------------------------------------------------

    @classmethod
    def tuple(cls, *types: "Type") -> "Type":
        """
        Type of lists or tuples of exactly len(types) elements, each adhering to
        the Type at the same position.
        """
        _require_types(types, "tuple")

        def predicate(values: Any) -> bool:
            return (
                isinstance(values, (list, tuple))
                and len(values) == len(types)
                and all(type_.is_valid(value) for type_, value in zip(types, values))
            )

        return get_registry().get_or_create(_key("tuple", types), lambda: cls(predicate, "tuple", *types))

    @classmethod
    def array_of(cls, type_: "Type") -> "Type":
        """
        Type of lists or tuples whose elements, or dicts whose values, all adhere
        to the given Type.
        """
        _require_types((type_,), "array_of")

        def predicate(values: Any) -> bool:
            if isinstance(values, dict):
                return all(type_.is_valid(value) for value in values.values())
            return isinstance(values, (list, tuple)) and all(type_.is_valid(value) for value in values)

        return get_registry().get_or_create(_key("array", (type_,)), lambda: cls(predicate, "array", type_))

    @classmethod
    def union(cls, *types: "Type") -> "Type":
        """
        Type of values adhering to any of the given Types.

        Nested unions are flattened and duplicates dropped. Any mixed operand
        makes the union mixed; no operand yields null and a single operand
        yields that operand.
        """
        _require_types(types, "union")
        mixed = cls.mixed()

        operands: Dict[int, Type] = {}
        for type_ in _flatten("union", types):
            if type_ is mixed:
                return mixed
            operands.setdefault(type_.type_id, type_)

        if len(operands) <= 1:
            return next(iter(operands.values()), None) or cls.null()

        ordered = tuple(operands[type_id] for type_id in sorted(operands))

        def predicate(value: Any) -> bool:
            return any(type_.is_valid(value) for type_ in ordered)

        return get_registry().get_or_create(_key("union", ordered), lambda: cls(predicate, "union", *ordered))

    @classmethod
    def intersection(cls, *types: "Type") -> "Type":
        """
        Type of values adhering to all of the given Types.

        Nested intersections are flattened and duplicates dropped. Any null
        operand makes the intersection null; no operand yields mixed and a
        single operand yields that operand.
        """
        _require_types(types, "intersection")
        null = cls.null()

        operands: Dict[int, Type] = {}
        for type_ in _flatten("intersection", types):
            if type_ is null:
                return null
            operands.setdefault(type_.type_id, type_)

        if len(operands) <= 1:
            return next(iter(operands.values()), None) or cls.mixed()

        ordered = tuple(operands[type_id] for type_id in sorted(operands))

        def predicate(value: Any) -> bool:
            return all(type_.is_valid(value) for type_ in ordered)

        return get_registry().get_or_create(
            _key("intersection", ordered), lambda: cls(predicate, "intersection", *ordered)
        )

    @classmethod
    def nullable(cls, type_: "Type") -> "Type":
        """Union of the given Type and null."""
        return cls.union(type_, cls.null())

    @classmethod
    def map(cls, key_type: "Type", value_type: "Type") -> "Type":
        """Type of Maps declared with exactly the given key and value Types."""
        from typedcoll.containers.map import Map

        _require_types((key_type, value_type), "map")
        return get_registry().get_or_create(
            _key("map", (key_type, value_type)),
            lambda: cls(
                lambda value: isinstance(value, Map) and value.key_type is key_type and value.value_type is value_type,
                "map",
                key_type,
                value_type,
            ),
        )

    @classmethod
    def optional(cls, type_: "Type") -> "Type":
        """Type of Optionals declared with exactly the given Type."""
        from typedcoll.containers.optional import Optional as OptionalContainer

        return cls._container("optional", OptionalContainer, type_)

    @classmethod
    def sequence(cls, type_: "Type") -> "Type":
        """Type of Sequences declared with exactly the given Type."""
        from typedcoll.containers.sequence import Sequence

        return cls._container("sequence", Sequence, type_)

    @classmethod
    def set(cls, type_: "Type") -> "Type":
        """Type of Sets declared with exactly the given Type."""
        from typedcoll.containers.set import Set

        return cls._container("set", Set, type_)

    @classmethod
    def stream(cls, type_: "Type") -> "Type":
        """Type of Streams declared with exactly the given Type."""
        from typedcoll.containers.stream import Stream

        return cls._container("stream", Stream, type_)

    @classmethod
    def _container(cls, base_name: str, container_class: type, type_: "Type") -> "Type":
        _require_types((type_,), base_name)
        return get_registry().get_or_create(
            _key(base_name, (type_,)),
            lambda: cls(
                lambda value: isinstance(value, container_class) and value.type is type_,
                base_name,
                type_,
            ),
        )

    # -------------------------------------------------------------------------
    # Chaining
    # -------------------------------------------------------------------------

    def __or__(self, other: Any) -> "Type":
        if not isinstance(other, Type):
            return NotImplemented
        return Type.union(self, other)

    def __and__(self, other: Any) -> "Type":
        if not isinstance(other, Type):
            return NotImplemented
        return Type.intersection(self, other)

    def or_(self, *types: "Type") -> "Type":
        """Union of this Type and the given Types."""
        return Type.union(self, *types)

    def and_(self, *types: "Type") -> "Type":
        """Intersection of this Type and the given Types."""
        return Type.intersection(self, *types)

    def into_n_tuple(self, length: int) -> "Type":
        """Tuple of this Type repeated length times."""
        return Type.tuple(*([self] * length))

    def into_array(self) -> "Type":
        return Type.array_of(self)

    def into_optional(self) -> "Type":
        return Type.optional(self)

    def into_sequence(self) -> "Type":
        return Type.sequence(self)

    def into_set(self) -> "Type":
        return Type.set(self)

    def into_stream(self) -> "Type":
        return Type.stream(self)

    # -------------------------------------------------------------------------
    # Container factories
    # -------------------------------------------------------------------------

    def new_sequence(self) -> "Sequence":
        """Return a new empty Sequence of this Type."""
        from typedcoll.containers.sequence import Sequence

        return Sequence.of_type(self)

    def new_set(self) -> "Set":
        """Return a new empty Set of this Type."""
        from typedcoll.containers.set import Set

        return Set.of_type(self)

    def new_optional(self) -> "OptionalContainer":
        """Return a new empty Optional of this Type."""
        from typedcoll.containers.optional import Optional as OptionalContainer

        return OptionalContainer.empty(self)

    def new_stream(self) -> "Stream":
        """Return a new empty Stream of this Type."""
        from typedcoll.containers.stream import Stream

        return Stream.empty(self)

    def new_map(self) -> "Map":
        """
        Return a new empty Map keyed by the first and valued by the second Type
        of this 2-tuple Type.

        :raises TypeMismatchError: If this Type is not a tuple of two Types.
        """
        if self._base_name != "tuple" or len(self._sub_types) != 2:
            raise TypeMismatchError("tuple<K,V>", self, "new_map")
        key_type, value_type = self._sub_types
        return key_type.new_map_to(value_type)

    def new_map_to(self, value_type: "Type") -> "Map":
        """Return a new empty Map from this Type to the given value Type."""
        from typedcoll.containers.map import Map

        return Map.of_type(self, value_type)

    def new_map_from(self, key_type: "Type") -> "Map":
        """Return a new empty Map from the given key Type to this Type."""
        from typedcoll.containers.map import Map

        return Map.of_type(key_type, self)

    # -------------------------------------------------------------------------
    # Parsing
    # -------------------------------------------------------------------------

    @classmethod
    def parse(cls, text: str) -> "Type":
        """
        Parse a type name as produced by Type.name, e.g. "map<string,array<int>>".
        Class types cannot be parsed.

        :param text: The type name.
        :raises ValueError: If the text is malformed or names an unknown type.
        """
        tokens = _TOKEN_PATTERN.findall(text)
        if "".join(tokens) != re.sub(r"\s+", "", text) or not tokens:
            raise ValueError(f"Malformed type name: {text!r}")

        parser = _TypeParser(tokens)
        type_ = parser.parse_type()
        if not parser.at_end():
            raise ValueError(f"Unexpected trailing input in type name: {text!r}")
        return type_


def _key(base_name: str, sub_types: SequenceOf[Type], discriminator: Any = None) -> TypeKey:
    return (base_name, discriminator, tuple(sub_type.type_id for sub_type in sub_types))


def _require_types(types: SequenceOf[Any], context: str) -> None:
    for type_ in types:
        if not isinstance(type_, Type):
            raise TypeMismatchError("Type", type_, context)


def _is_open_resource(value: Any) -> bool:
    if isinstance(value, socket.socket):
        return value.fileno() != -1
    return isinstance(value, _RESOURCES) and not value.closed


def _flatten(base_name: str, types: SequenceOf[Type]) -> Iterator[Type]:
    for type_ in types:
        if type_.base_name == base_name:
            yield from _flatten(base_name, type_.sub_types)
        else:
            yield type_


_TOKEN_PATTERN = re.compile(r"[\w.]+|<|>|,")


class _TypeParser:
    """
    Internal recursive-descent parser over type name tokens:

        type := NAME ( "<" type ( "," type )* ">" )?
    """

    _NULLARY = {
        "null": Type.null,
        "mixed": Type.mixed,
        "string": Type.string,
        "int": Type.int,
        "float": Type.float,
        "numeric": Type.numeric,
        "bool": Type.bool,
        "array": Type.array,
        "resource": Type.resource,
        "iterable": Type.iterable,
        "callable": Type.callable,
        "object": Type.object,
        "tuple": Type.tuple,
        "union": Type.union,
        "intersection": Type.intersection,
    }

    _PARAMETRIZED = {
        "tuple": (None, Type.tuple),
        "union": (None, Type.union),
        "intersection": (None, Type.intersection),
        "array": (1, Type.array_of),
        "nullable": (1, Type.nullable),
        "optional": (1, Type.optional),
        "sequence": (1, Type.sequence),
        "set": (1, Type.set),
        "stream": (1, Type.stream),
        "map": (2, Type.map),
    }

    def __init__(self, tokens: List[str]) -> None:
        self._tokens = tokens
        self._position = 0

    def at_end(self) -> bool:
        return self._position >= len(self._tokens)

    def parse_type(self) -> Type:
        name = self._next()
        if name in ("<", ">", ","):
            raise ValueError(f"Expected a type name, found {name!r}")

        if self._peek() != "<":
            if name not in self._NULLARY:
                raise ValueError(f"Unknown type name: {name!r}")
            return self._NULLARY[name]()

        self._next()
        arguments = [self.parse_type()]
        while self._peek() == ",":
            self._next()
            arguments.append(self.parse_type())
        if self._next() != ">":
            raise ValueError(f"Expected '>' to close {name!r}")

        if name not in self._PARAMETRIZED:
            raise ValueError(f"Type {name!r} takes no sub-types")
        arity, factory = self._PARAMETRIZED[name]
        if arity is not None and len(arguments) != arity:
            raise ValueError(f"Type {name!r} takes {arity} sub-type(s), got {len(arguments)}")
        return factory(*arguments)

    def _peek(self) -> Optional[str]:
        return None if self.at_end() else self._tokens[self._position]

    def _next(self) -> str:
        if self.at_end():
            raise ValueError("Unexpected end of type name")
        token = self._tokens[self._position]
        self._position += 1
        return token
