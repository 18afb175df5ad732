# tests/unit/test_types.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""Test suite for type descriptors: primitives, composition, interning,
parsing and callable validation."""

import copy
import io
import itertools
import socket

import pytest
from hypothesis import given
from hypothesis import strategies as st

from typedcoll.containers.map import Map
from typedcoll.containers.optional import Optional
from typedcoll.containers.sequence import Sequence
from typedcoll.containers.set import Set
from typedcoll.containers.stream import Stream
from typedcoll.core.errors import IndexOutOfRangeError, TypeMismatchError
from typedcoll.core.types import Type

PRIMITIVES = [
    Type.null,
    Type.mixed,
    Type.string,
    Type.int,
    Type.float,
    Type.bool,
    Type.array,
    Type.iterable,
    Type.callable,
    Type.object,
]


@pytest.fixture
def open_file(tmp_path):
    """An open file handle, closed after the test."""
    handle = open(tmp_path / "data.txt", "w")
    yield handle
    handle.close()


# -----------------------------------------------------------------------------
# PRIMITIVE TESTS
# -----------------------------------------------------------------------------
@pytest.mark.parametrize(
    "factory,valid,invalid",
    [
        (Type.null, [None], [0, "", []]),
        (Type.mixed, [None, 1, "a", [], object()], []),
        (Type.string, ["", "abc"], [b"abc", 1, None]),
        (Type.int, [0, -3, 10**20], [True, 1.0, "1"]),
        (Type.float, [0.0, 1.5], [1, "1.5"]),
        (Type.bool, [True, False], [0, 1, None]),
        (Type.array, [[], (1,), {"a": 1}], ["abc", {1}, None]),
        (Type.iterable, [[], "abc", {1}, iter([])], [1, None]),
        (Type.callable, [len, lambda: None, Type], [1, "len"]),
    ],
)
def test_primitive_predicates(factory, valid, invalid):
    """Primitive descriptors accept exactly their runtime kind."""
    type_ = factory()
    for value in valid:
        assert type_.is_valid(value), value
    for value in invalid:
        assert not type_.is_valid(value), value


def test_numeric_is_union_of_float_and_int():
    """numeric accepts ints and floats but not booleans."""
    numeric = Type.numeric()

    assert numeric is Type.union(Type.int(), Type.float())
    assert numeric.is_valid(1) and numeric.is_valid(1.5)
    assert not numeric.is_valid(True)


def test_object_excludes_scalars_and_arrays(token_class):
    """object accepts every non-None value that is neither scalar nor array."""
    object_type = Type.object()

    assert object_type.is_valid(token_class("a"))
    assert object_type.is_valid({1, 2})
    for value in (None, 1, "a", [], (), {}):
        assert not object_type.is_valid(value)


def test_resource_accepts_open_handles(open_file):
    """resource accepts open I/O handles only."""
    resource = Type.resource()

    assert resource.is_valid(open_file)
    assert resource.is_valid(io.BytesIO())
    assert not resource.is_valid("data.txt")

    open_file.close()
    assert not resource.is_valid(open_file)


def test_resource_rejects_closed_sockets():
    """resource accepts a socket only while it is open."""
    resource = Type.resource()

    with socket.socket() as sock:
        assert resource.is_valid(sock)

    assert not resource.is_valid(sock)


def test_of_class(token_class):
    """of_class accepts instances of the class and its subclasses."""

    class SubToken(token_class):
        pass

    token_type = Type.of_class(token_class)

    assert token_type.is_valid(token_class("a"))
    assert token_type.is_valid(SubToken("b"))
    assert not token_type.is_valid("a")
    assert token_type.name.endswith("Token")
    assert Type.of_class(token_class) is token_type
    assert Type.of_class(SubToken) is not token_type


def test_of_class_rejects_non_classes():
    """of_class requires a class."""
    with pytest.raises(TypeMismatchError):
        Type.of_class("Token")


# -----------------------------------------------------------------------------
# VALIDATION TESTS
# -----------------------------------------------------------------------------
def test_validate_returns_value_unchanged():
    """validate hands back the very object it was given."""
    values = [1, 2]

    assert Type.array_of(Type.int()).validate(values) is values


def test_validate_raises_on_mismatch():
    """validate never substitutes a value."""
    with pytest.raises(TypeMismatchError) as exc_info:
        Type.string().validate(5)

    assert exc_info.value.expected == "string"


# -----------------------------------------------------------------------------
# COMPOSITION TESTS
# -----------------------------------------------------------------------------
def test_tuple_matches_positionally():
    """tuple accepts lists or tuples of exact length with positional matches."""
    pair = Type.tuple(Type.int(), Type.string())

    assert pair.name == "tuple<int,string>"
    assert pair.is_valid([1, "a"])
    assert pair.is_valid((1, "a"))
    assert not pair.is_valid(["a", 1])
    assert not pair.is_valid([1])
    assert not pair.is_valid([1, "a", None])
    assert not pair.is_valid("1a")
    assert Type.tuple(Type.string(), Type.int()) is not pair


def test_empty_tuple():
    """The empty tuple accepts only empty lists and tuples."""
    empty = Type.tuple()

    assert empty.name == "tuple"
    assert empty.is_valid([])
    assert not empty.is_valid([1])


def test_array_of():
    """array_of checks every element of a list or tuple, or every value of a dict."""
    ints = Type.array_of(Type.int())

    assert ints.name == "array<int>"
    assert ints.is_valid([])
    assert ints.is_valid((1, 2))
    assert ints.is_valid({"a": 1, "b": 2})
    assert not ints.is_valid([1, "2"])
    assert not ints.is_valid({"a": "1"})
    assert not ints.is_valid("12")


def test_union_accepts_any_operand():
    """A union accepts values adhering to any operand."""
    text_or_int = Type.union(Type.string(), Type.int())

    assert text_or_int.is_valid("a")
    assert text_or_int.is_valid(1)
    assert not text_or_int.is_valid(1.0)
    assert text_or_int.base_name == "union"


def test_union_is_order_independent():
    """Operand order does not change the union instance."""
    assert Type.union(Type.int(), Type.string()) is Type.union(Type.string(), Type.int())


def test_union_flattens_and_deduplicates():
    """Nested unions flatten and duplicates collapse."""
    nested = Type.union(Type.union(Type.int(), Type.string()), Type.bool(), Type.int())

    assert nested is Type.union(Type.int(), Type.string(), Type.bool())
    assert len(nested.sub_types) == 3


def test_union_degenerate_cases():
    """No operand yields null, one operand yields itself, mixed absorbs."""
    assert Type.union() is Type.null()
    assert Type.union(Type.int()) is Type.int()
    assert Type.union(Type.int(), Type.int()) is Type.int()
    assert Type.union(Type.int(), Type.mixed()) is Type.mixed()


def test_intersection(token_class):
    """An intersection accepts values adhering to every operand."""
    iterable_object = Type.intersection(Type.iterable(), Type.object())

    assert iterable_object.is_valid({1, 2})
    assert not iterable_object.is_valid([1, 2])
    assert not iterable_object.is_valid(token_class("a"))
    assert iterable_object is Type.intersection(Type.object(), Type.iterable())


def test_intersection_degenerate_cases():
    """No operand yields mixed, one operand yields itself, null absorbs."""
    assert Type.intersection() is Type.mixed()
    assert Type.intersection(Type.int()) is Type.int()
    assert Type.intersection(Type.int(), Type.null()) is Type.null()


def test_nullable():
    """nullable accepts None in addition to the wrapped type."""
    nullable_int = Type.nullable(Type.int())

    assert nullable_int is Type.union(Type.null(), Type.int())
    assert nullable_int.is_valid(None)
    assert nullable_int.is_valid(3)
    assert not nullable_int.is_valid("3")


def test_operators():
    """| builds unions and & builds intersections."""
    assert (Type.int() | Type.string()) is Type.union(Type.int(), Type.string())
    assert (Type.iterable() & Type.object()) is Type.intersection(Type.iterable(), Type.object())
    assert Type.int().or_(Type.string(), Type.bool()) is Type.union(Type.int(), Type.string(), Type.bool())
    assert Type.iterable().and_(Type.object()) is Type.intersection(Type.iterable(), Type.object())


def test_composition_rejects_non_types():
    """Composition factories only accept Types."""
    with pytest.raises(TypeMismatchError):
        Type.tuple(Type.int(), int)
    with pytest.raises(TypeMismatchError):
        Type.union("int")
    with pytest.raises(TypeMismatchError):
        Type.array_of(None)


# -----------------------------------------------------------------------------
# CONTAINER TYPE TESTS
# -----------------------------------------------------------------------------
def test_container_types_match_declared_type():
    """Container descriptors require the exact declared element Type."""
    ints = Sequence.of_type(Type.int())

    assert Type.sequence(Type.int()).is_valid(ints)
    assert not Type.sequence(Type.numeric()).is_valid(ints)
    assert not Type.set(Type.int()).is_valid(ints)
    assert Type.set(Type.int()).is_valid(Set.of_type(Type.int()))
    assert Type.optional(Type.int()).is_valid(Optional.empty(Type.int()))
    assert Type.stream(Type.int()).is_valid(Stream.empty(Type.int()))
    assert Type.map(Type.string(), Type.int()).is_valid(Map.of_type(Type.string(), Type.int()))
    assert not Type.map(Type.int(), Type.string()).is_valid(Map.of_type(Type.string(), Type.int()))


def test_chain_helpers():
    """into_* helpers build container and array descriptors of this Type."""
    int_type = Type.int()

    assert int_type.into_array() is Type.array_of(int_type)
    assert int_type.into_n_tuple(3) is Type.tuple(int_type, int_type, int_type)
    assert int_type.into_optional() is Type.optional(int_type)
    assert int_type.into_sequence() is Type.sequence(int_type)
    assert int_type.into_set() is Type.set(int_type)
    assert int_type.into_stream() is Type.stream(int_type)


def test_factory_helpers():
    """new_* helpers create empty containers of this Type."""
    int_type = Type.int()

    assert int_type.new_sequence().type is int_type
    assert int_type.new_set().type is int_type
    assert int_type.new_optional().is_empty()
    assert int_type.new_stream().to_array() == []
    assert int_type.new_map_to(Type.string()).value_type is Type.string()
    assert int_type.new_map_from(Type.string()).key_type is Type.string()

    mapping = Type.tuple(Type.string(), int_type).new_map()
    assert mapping.key_type is Type.string()
    assert mapping.value_type is int_type


def test_new_map_requires_pair():
    """new_map is only defined on 2-tuple Types."""
    with pytest.raises(TypeMismatchError):
        Type.int().new_map()
    with pytest.raises(TypeMismatchError):
        Type.tuple(Type.int()).new_map()


# -----------------------------------------------------------------------------
# STRUCTURE TESTS
# -----------------------------------------------------------------------------
def test_structure_accessors():
    """base_name, sub_types and sub_type_at describe the composition."""
    pair = Type.tuple(Type.int(), Type.string())

    assert pair.base_name == "tuple"
    assert tuple(pair.sub_types) == (Type.int(), Type.string())
    assert pair.sub_type_at(0) is Type.int()
    assert pair.sub_type_at(-1) is Type.string()
    with pytest.raises(IndexOutOfRangeError):
        pair.sub_type_at(2)


def test_dump():
    """dump describes base name and sub-types recursively."""
    assert Type.array_of(Type.int()).dump() == {
        "base": "array",
        "sub_types": [{"base": "int", "sub_types": []}],
    }


def test_copies_preserve_identity():
    """Copying a descriptor yields the interned instance."""
    pair = Type.tuple(Type.int(), Type.string())

    assert copy.copy(pair) is pair
    assert copy.deepcopy(pair) is pair
    assert str(pair) == pair.name
    assert repr(pair) == "Type(tuple<int,string>)"


# -----------------------------------------------------------------------------
# PARSE TESTS
# -----------------------------------------------------------------------------
@pytest.mark.parametrize(
    "text,expected",
    [
        ("int", lambda: Type.int()),
        ("array", lambda: Type.array()),
        ("array<int>", lambda: Type.array_of(Type.int())),
        ("tuple<int,string>", lambda: Type.tuple(Type.int(), Type.string())),
        ("map<string,array<int>>", lambda: Type.map(Type.string(), Type.array_of(Type.int()))),
        ("nullable<float>", lambda: Type.nullable(Type.float())),
        ("union<bool,string>", lambda: Type.union(Type.bool(), Type.string())),
        ("sequence<set<int>>", lambda: Type.sequence(Type.set(Type.int()))),
        (" optional < stream<mixed> > ", lambda: Type.optional(Type.stream(Type.mixed()))),
    ],
)
def test_parse(text, expected):
    """parse resolves type names to the interned descriptors."""
    assert Type.parse(text) is expected()


@pytest.mark.parametrize(
    "text",
    ["", "foo", "array<int", "array<int>>", "int<string>", "map<int>", "a-b", "<int>", "tuple<,int>"],
)
def test_parse_rejects_malformed(text):
    """Malformed or unknown names raise ValueError."""
    with pytest.raises(ValueError):
        Type.parse(text)


def test_parse_round_trips_names():
    """Parsing a descriptor's name yields the descriptor."""
    for type_ in (
        Type.numeric(),
        Type.tuple(Type.int(), Type.array_of(Type.string())),
        Type.intersection(Type.iterable(), Type.object()),
        Type.map(Type.string(), Type.optional(Type.int())),
    ):
        assert Type.parse(type_.name) is type_


# -----------------------------------------------------------------------------
# CALLABLE VALIDATION TESTS
# -----------------------------------------------------------------------------
def test_validate_callable_checks_arguments_and_result():
    """The wrapper validates positional arguments and the return value."""

    def add(left, right):
        return left + right

    checked = Type.validate_callable(add, Type.int(), [Type.int(), Type.int()])

    assert checked(1, 2) == 3
    assert checked.__name__ == "add"
    with pytest.raises(TypeMismatchError):
        checked(1, "2")
    with pytest.raises(TypeMismatchError):
        checked(1)


def test_validate_callable_checks_result():
    """A return value of the wrong Type raises."""
    checked = Type.validate_callable(lambda: "x", Type.int())

    with pytest.raises(TypeMismatchError):
        checked()


def test_validate_callable_optional_arguments():
    """Optional types bind to extra arguments only when they are passed."""

    def scale(value, factor=2):
        return value * factor

    checked = Type.validate_callable(scale, Type.int(), [Type.int()], [Type.int()])

    assert checked(3) == 6
    assert checked(3, 3) == 9
    with pytest.raises(TypeMismatchError):
        checked(3, "3")
    with pytest.raises(TypeMismatchError):
        checked(3, 3, 3)


def test_validate_callable_variadic_arguments():
    """The variadic type applies to every argument past the declared ones."""
    checked = Type.validate_callable(
        lambda separator, *parts: separator.join(str(part) for part in parts),
        Type.string(),
        [Type.string()],
        variadic=Type.int(),
    )

    assert checked("-", 1, 2, 3) == "1-2-3"
    assert checked(",") == ""
    with pytest.raises(TypeMismatchError):
        checked("-", 1, "2")


def test_validate_callable_rejects_bad_declarations():
    """The callable and every declared type are checked up front."""
    with pytest.raises(TypeMismatchError):
        Type.validate_callable("not callable", Type.int())
    with pytest.raises(TypeMismatchError):
        Type.validate_callable(len, Type.int(), [int])
    with pytest.raises(TypeMismatchError):
        Type.validate_callable(len, "int")


# -----------------------------------------------------------------------------
# PROPERTY TESTS
# -----------------------------------------------------------------------------
@pytest.mark.property
@given(st.lists(st.sampled_from(PRIMITIVES), min_size=1, max_size=5))
def test_union_interning_is_order_independent(factories):
    """Every permutation of union operands yields the same instance."""
    operands = [factory() for factory in factories]

    unions = {id(Type.union(*permutation)) for permutation in itertools.permutations(operands)}

    assert len(unions) == 1


@pytest.mark.property
@given(st.lists(st.sampled_from(PRIMITIVES), min_size=1, max_size=4))
def test_structural_interning(factories):
    """Composing the same structure twice yields the same instance."""
    first = Type.tuple(*[factory() for factory in factories])
    second = Type.tuple(*[factory() for factory in factories])

    assert first is second
    assert Type.array_of(first) is Type.array_of(second)


@pytest.mark.property
@given(st.one_of(st.none(), st.integers(), st.text(), st.floats(allow_nan=False), st.lists(st.integers())))
def test_validate_agrees_with_is_valid(value):
    """validate returns the value exactly when is_valid holds."""
    for factory in PRIMITIVES:
        type_ = factory()
        if type_.is_valid(value):
            assert type_.validate(value) is value
        else:
            with pytest.raises(TypeMismatchError):
                type_.validate(value)
