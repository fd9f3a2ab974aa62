"""Tests for the deep equality comparator."""

import array
import asyncio
import datetime
import re
import weakref
from collections import OrderedDict, namedtuple
from collections.abc import Set
from dataclasses import dataclass, field
from decimal import Decimal
from enum import IntEnum

import pytest

from wirecheck.compare import (
    CompareKind,
    ValueComparator,
    classify,
    compare,
    deep_strict_equal,
    shallow_equal,
)
from wirecheck.config import assert_config
from wirecheck.errors import AssertionFailure, AssertionFatal
from wirecheck.scope import create_context

from conftest import nested


# --- identity ---


def test_identity_is_always_equal_for_circular_values():
    a = [1]
    a.append(a)
    assert compare(a, a)
    assert compare(a, a, strict=True)


@pytest.mark.parametrize(
    "factory",
    [
        lambda: (lambda: 1),
        object,
        weakref.WeakSet,
        weakref.WeakKeyDictionary,
        lambda: (x for x in range(3)),
    ],
)
def test_reference_kinds_are_equal_only_to_themselves(factory):
    first = factory()
    second = factory()
    assert compare(first, first, strict=True)
    assert not compare(first, second)


def test_futures_are_reference_only():
    loop = asyncio.new_event_loop()
    try:
        first = loop.create_future()
        second = loop.create_future()
        assert compare(first, first)
        assert not compare(first, second)
    finally:
        loop.close()


# --- cycles ---


def test_isomorphic_circular_structures_are_equal():
    a = {"name": "node"}
    a["self"] = a
    b = {"name": "node"}
    b["self"] = b
    assert compare(a, b)
    assert compare(a, b, strict=True)


def test_extra_circular_path_makes_structures_unequal():
    a = {"name": "node"}
    a["self"] = a
    b = {"name": "node"}
    b["self"] = b
    a["again"] = a
    assert not compare(a, b)


def test_mutually_recursive_lists():
    a1, b1 = [], []
    a2, b2 = [a1], [b1]
    a1.append(a2)
    b1.append(b2)
    assert compare(a1, b1)


def test_cycle_longer_than_check_window_hits_depth_limit():
    a1, b1 = [], []
    a2, b2 = [a1], [b1]
    a1.append(a2)
    b1.append(b2)

    narrow = ValueComparator(max_compare_depth=20, max_compare_check_depth=1)
    with pytest.raises(AssertionFatal, match="Maximum comparison depth exceeded: 20"):
        narrow.compare(a1, b1)

    wide = ValueComparator(max_compare_depth=20, max_compare_check_depth=2)
    assert wide.compare(a1, b1)


class Node:
    def __init__(self):
        self.kids = []


class InsertionSet(Set):
    """A set that iterates in insertion order and holds unhashable items."""

    def __init__(self, items):
        self._items = list(items)

    def __contains__(self, item):
        return any(item is existing for existing in self._items)

    def __iter__(self):
        return iter(self._items)

    def __len__(self):
        return len(self._items)


def linked_nodes():
    """c -> a -> (c, 1) and d -> b -> (d, 2), plus f shaped like a and e like b."""
    a, b, c, d, e, f = (Node() for _ in range(6))
    c.kids = [a]
    d.kids = [b]
    a.kids = [c, 1]
    b.kids = [d, 2]
    f.kids = [c, 1]
    e.kids = [d, 2]
    return a, b, c, d, e, f


def test_cycle_assumption_inside_failed_branch_is_not_reused():
    a, b, c, d, e, f = linked_nodes()
    assert not compare(c, d)
    assert not compare([InsertionSet([a, e]), c], [InsertionSet([b, f]), d])


def test_failed_set_candidate_followed_by_same_pair():
    a, b, c, d, e, f = linked_nodes()
    assert compare(InsertionSet([a, e]), InsertionSet([b, f]))
    assert not compare(InsertionSet([a, e, c]), InsertionSet([b, f, d]))


def test_settled_cycle_results_stay_equal():
    a, b, c, d, _, _ = linked_nodes()
    b.kids[1] = 1
    assert compare([c, a, c], [d, b, d])


# --- numbers ---


def test_nan_equals_nan_in_both_modes():
    assert compare(float("nan"), float("nan"))
    assert compare(float("nan"), float("nan"), strict=True)
    assert compare([float("nan")], [float("nan")], strict=True)


def test_zero_and_negative_zero_are_equal_in_both_modes():
    assert compare(0.0, -0.0)
    assert compare(0.0, -0.0, strict=True)


def test_int_and_float_loose_but_not_strict():
    assert compare(1, 1.0)
    assert not compare(1, 1.0, strict=True)


def test_boxed_values_unbox_only_in_loose_mode():
    class Level(IntEnum):
        LOW = 1

    class Name(str):
        pass

    assert compare(Level.LOW, 1)
    assert not compare(Level.LOW, 1, strict=True)
    assert compare(Name("x"), "x")
    assert not compare(Name("x"), "x", strict=True)
    assert compare(Decimal("2"), 2)
    assert not compare(Decimal("2"), 2, strict=True)


# --- shallow ---


def test_shallow_equal_never_traverses_containers():
    items = [1, 2]
    assert shallow_equal(items, items)
    assert not shallow_equal([1, 2], [1, 2])
    assert not shallow_equal({"a": 1}, {"a": 1})


def test_shallow_equal_primitives():
    assert shallow_equal(1, 1.0)
    assert not shallow_equal(1, 1.0, strict=True)
    assert shallow_equal(float("nan"), float("nan"), strict=True)
    assert shallow_equal(datetime.date(2024, 1, 1), datetime.date(2024, 1, 1))


# --- containers ---


def test_sequences_compare_element_wise():
    assert compare([1, [2, 3]], [1, [2, 3]])
    assert not compare([1, 2], [1, 2, 3])
    assert not compare([1, 2], [2, 1])


def test_list_and_tuple_loose_but_not_strict():
    assert compare([1, 2], (1, 2))
    assert not compare([1, 2], (1, 2), strict=True)


def test_namedtuple_compares_as_sequence():
    Point = namedtuple("Point", "x y")
    assert compare(Point(1, 2), Point(1, 2), strict=True)
    assert not compare(Point(1, 2), Point(1, 3))


def test_dict_key_order_does_not_matter():
    assert compare({"a": 1, "b": 2}, {"b": 2, "a": 1})
    assert not compare({"a": 1}, {"a": 1, "b": 2})
    assert not compare({"a": 1}, {"b": 1})


def test_strict_dict_requires_identical_key_types():
    assert compare({1: "a"}, {1.0: "a"})
    assert not compare({1: "a"}, {1.0: "a"}, strict=True)


def test_ordered_mappings_compare_in_insertion_order():
    first = OrderedDict([("a", 1), ("b", 2)])
    same = OrderedDict([("a", 1), ("b", 2)])
    reordered = OrderedDict([("b", 2), ("a", 1)])
    assert compare(first, same)
    assert not compare(first, reordered)


def test_sets_compare_by_membership():
    assert compare({1, 2, 3}, {3, 2, 1})
    assert compare({1, 2}, frozenset({1, 2}))
    assert not compare({1, 2}, frozenset({1, 2}), strict=True)
    assert not compare({1, 2}, {1, 3})


def test_binary_values_compare_by_content():
    assert compare(b"abc", bytearray(b"abc"))
    assert compare(bytearray(b"abc"), memoryview(b"abc"))
    assert not compare(bytearray(b"abc"), bytearray(b"abd"))


def test_typed_arrays_compare_typecode_and_items():
    assert compare(array.array("i", [1, 2]), array.array("i", [1, 2]))
    assert not compare(array.array("i", [1, 2]), array.array("l", [1, 2]))
    assert not compare(array.array("i", [1, 2]), array.array("i", [1, 3]))


# --- values ---


def test_dates_compare_by_value():
    assert compare(datetime.datetime(2024, 5, 1, 12), datetime.datetime(2024, 5, 1, 12))
    assert not compare(datetime.datetime(2024, 5, 1), datetime.datetime(2024, 5, 2))
    assert compare(datetime.timedelta(seconds=60), datetime.timedelta(minutes=1))


def test_patterns_compare_by_source_and_flags():
    assert compare(re.compile("a+"), re.compile("a+"))
    assert not compare(re.compile("a+"), re.compile("a+", re.IGNORECASE))
    assert not compare(re.compile("a+"), re.compile("b+"))


def test_errors_compare_by_type_args_and_attributes():
    assert compare(ValueError("bad"), ValueError("bad"))
    assert not compare(ValueError("bad"), ValueError("worse"))
    assert not compare(ValueError("bad"), TypeError("bad"))

    first, second = KeyError("k"), KeyError("k")
    first.code = 1
    second.code = 2
    assert not compare(first, second)


# --- class instances ---


@dataclass
class Point:
    x: int
    y: int
    tags: list = field(default_factory=list)


class Slotted:
    __slots__ = ("a", "b")

    def __init__(self, a, b):
        self.a = a
        self.b = b


class Temperature:
    def __init__(self, celsius):
        self._celsius = celsius

    @property
    def fahrenheit(self):
        return self._celsius * 9 / 5 + 32


class Money:
    def __init__(self, amount, note=""):
        self.amount = amount
        self.note = note

    def __eq__(self, other):
        return isinstance(other, Money) and self.amount == other.amount


def test_dataclasses_compare_field_wise():
    assert compare(Point(1, 2, [3]), Point(1, 2, [3]), strict=True)
    assert not compare(Point(1, 2, [3]), Point(1, 2, [4]))


def test_slotted_instances_compare_slot_values():
    assert compare(Slotted(1, [2]), Slotted(1, [2]))
    assert not compare(Slotted(1, 2), Slotted(1, 3))


def test_properties_compare_by_computed_value():
    assert compare(Temperature(10), Temperature(10))
    assert not compare(Temperature(10), Temperature(20))


def test_custom_eq_is_used():
    assert compare(Money(5, "lunch"), Money(5, "dinner"))
    assert not compare(Money(5), Money(6))


def test_strict_instances_require_identical_type():
    class Base:
        def __init__(self):
            self.value = 1

    class Derived(Base):
        pass

    assert compare(Base(), Derived())
    assert not compare(Base(), Derived(), strict=True)
    assert not deep_strict_equal(Base(), Derived())


# --- mismatches never raise ---


@pytest.mark.parametrize(
    "a, b",
    [
        ([1], {"a": 1}),
        (None, 0),
        ("1", 1),
        ({1, 2}, [1, 2]),
        (Point(1, 2), {"x": 1, "y": 2}),
    ],
)
def test_kind_mismatches_are_unequal(a, b):
    assert not compare(a, b)


# --- depth limit ---


def test_configured_depth_limit_raises_fatal_then_reset_restores():
    assert_config.max_compare_depth = 5

    with pytest.raises(AssertionFatal, match="Maximum comparison depth exceeded: 5") as exc_info:
        compare(nested(10), nested(10))
    assert isinstance(exc_info.value, AssertionFailure)
    assert exc_info.value.is_fatal

    assert_config.reset()
    assert compare(nested(10), nested(10))


def test_depth_limit_counts_container_levels():
    comparator = ValueComparator(max_compare_depth=5)
    assert comparator.compare(nested(5), nested(5))
    with pytest.raises(AssertionFatal):
        comparator.compare(nested(6), nested(6))


def test_depth_limit_from_context_options():
    context = create_context("subject", config={"max_compare_depth": 3})
    with pytest.raises(AssertionFatal, match="Maximum comparison depth exceeded: 3") as exc_info:
        compare(nested(4), nested(4), context=context)
    assert exc_info.value.details["max_compare_depth"] == 3
    assert exc_info.value.details["actual"] == "subject"


# --- classification ---


@pytest.mark.parametrize(
    "value, kind",
    [
        (1, CompareKind.PRIMITIVE),
        (None, CompareKind.PRIMITIVE),
        (Decimal("1"), CompareKind.BOXED),
        ([1], CompareKind.SEQUENCE),
        ({"a": 1}, CompareKind.PLAIN_OBJECT),
        (OrderedDict(), CompareKind.MAP),
        ({1}, CompareKind.SET),
        (bytearray(), CompareKind.BINARY),
        (array.array("i"), CompareKind.TYPED_ARRAY),
        (datetime.date(2024, 1, 1), CompareKind.DATE),
        (re.compile("x"), CompareKind.REGEXP),
        (ValueError(), CompareKind.ERROR),
        (object(), CompareKind.REFERENCE),
        (len, CompareKind.REFERENCE),
        (iter([]), CompareKind.REFERENCE),
        (Money(1), CompareKind.CUSTOM_EQ),
        (Point(1, 2), CompareKind.OBJECT),
    ],
)
def test_classify(value, kind):
    assert classify(value) == kind
