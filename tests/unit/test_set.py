# tests/unit/test_set.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
import pytest
from hypothesis import given
from hypothesis import strategies as st

from typedcoll.containers.sequence import Sequence
from typedcoll.containers.set import Set
from typedcoll.core.errors import TypeMismatchError
from typedcoll.core.hashing import hash_value
from typedcoll.core.types import Type


@pytest.fixture
def letters():
    """A Set of strings holding a, b, c."""
    return Set.of_type(Type.string()).with_all("a", "b", "c")


# -----------------------------------------------------------------------------
# ADD TESTS
# -----------------------------------------------------------------------------
def test_add_reports_change():
    """add reports a change only for a value not yet present."""
    numbers = Set.of_type(Type.int())

    assert numbers.add(1) is True
    assert numbers.add(1) is False
    assert numbers.count() == 1


def test_add_all_reports_any_change(letters):
    """add_all reports whether at least one value was new."""
    assert letters.add_all("a", "d") is True
    assert letters.add_all("a", "b") is False
    assert letters.to_array() == ["a", "b", "c", "d"]


def test_add_all_validates_everything_first(letters):
    """A single invalid value rejects the whole batch."""
    with pytest.raises(TypeMismatchError):
        letters.add_all("d", 5)

    assert letters.to_array() == ["a", "b", "c"]


def test_kinds_are_distinct():
    """1, 1.0 and True are different elements."""
    mixed = Set.of_type(Type.mixed()).with_all(1, 1.0, True, 1)

    assert mixed.count() == 3


def test_structures_deduplicate_by_content():
    """Lists with equal content are one element."""
    pairs = Set.of_type(Type.array_of(Type.int())).with_all([1, 2], [1, 2], [2, 1])

    assert pairs.to_array() == [[1, 2], [2, 1]]


def test_objects_deduplicate_by_reference(token_class, money_class):
    """Plain objects are unique by reference, value-hashable ones by value."""
    token = token_class("a")
    tokens = Set.of_class(token_class).with_all(token, token, token_class("a"))
    wallet = Set.of_class(money_class).with_all(money_class(1, "EUR"), money_class(1, "EUR"))

    assert tokens.count() == 2
    assert wallet.count() == 1


# -----------------------------------------------------------------------------
# REMOVAL TESTS
# -----------------------------------------------------------------------------
def test_remove(letters):
    """remove reports whether the value was present."""
    assert letters.remove("b") is True
    assert letters.remove("b") is False
    assert letters.to_array() == ["a", "c"]


def test_remove_all_and_retain_all(letters):
    """remove_all and retain_all report whether anything was removed."""
    assert letters.remove_all("a", "z") is True
    assert letters.remove_all("z") is False
    assert letters.retain_all("c") is True
    assert letters.retain_all("c") is False
    assert letters.to_array() == ["c"]


def test_remove_if_and_retain_if():
    """Predicate removals report whether anything was removed."""
    numbers = Set.of_type(Type.int()).with_all(1, 2, 3, 4, 5)

    assert numbers.remove_if(lambda value: value % 2 == 0) is True
    assert numbers.to_array() == [1, 3, 5]
    assert numbers.retain_if(lambda value: value > 1) is True
    assert numbers.to_array() == [3, 5]
    assert numbers.retain_if(lambda value: value > 1) is False
    assert numbers.remove_if(lambda value: value > 10) is False


# -----------------------------------------------------------------------------
# LOOKUP AND CHAIN TESTS
# -----------------------------------------------------------------------------
def test_contains(letters):
    """Membership is a hash lookup."""
    assert letters.contains("a")
    assert not letters.contains("z")
    assert "a" in letters
    assert 1 not in letters
    assert letters.contains_all("a", "c")
    assert not letters.contains_all("a", "z")
    with pytest.raises(TypeMismatchError):
        letters.contains(1)


def test_chain_functions(letters):
    """Chain functions return the set itself."""
    seen = []

    assert letters.with_all("d").with_none("a").with_only("b", "d").for_each(seen.append) is letters
    assert seen == ["b", "d"]
    assert letters.clear().is_empty()


# -----------------------------------------------------------------------------
# COLLECTIBLE TESTS
# -----------------------------------------------------------------------------
def test_conversions(letters):
    """Conversions are snapshots in insertion order."""
    copy = letters.to_set()
    sequence = letters.to_sequence()
    letters.add("d")

    assert copy is not letters
    assert copy.to_array() == ["a", "b", "c"]
    assert isinstance(sequence, Sequence) and sequence.to_array() == ["a", "b", "c"]
    assert letters.to_stream().count() == 4
    assert letters.dump() == {"type": {"base": "string", "sub_types": []}, "entries": ["a", "b", "c", "d"]}


# -----------------------------------------------------------------------------
# PROPERTY TESTS
# -----------------------------------------------------------------------------
@pytest.mark.property
@given(st.lists(st.one_of(st.integers(), st.text(max_size=3), st.booleans()), max_size=30))
def test_count_bounded_by_distinct_hashes(values):
    """count never exceeds the number of distinct value hashes added."""
    elements = Set.of_type(Type.mixed())
    for value in values:
        elements.add(value)

    assert elements.count() == len({hash_value(value) for value in values})


@pytest.mark.property
@given(st.integers())
def test_second_add_reports_no_change(value):
    """Adding the same value twice changes the set once."""
    numbers = Set.of_type(Type.int())

    assert numbers.add(value) is True
    assert numbers.add(value) is False
