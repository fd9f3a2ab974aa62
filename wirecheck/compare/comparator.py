"""
Deep equality comparator.

This module provides the cycle-safe, type-polymorphic comparison used by
the deep equality assertions, plus the shallow comparison used by the
plain equality assertions.
"""

from __future__ import annotations

import sys
from itertools import islice
from typing import TYPE_CHECKING, Any, Callable

from ..config.store import assert_config
from ..errors import AssertionFatal
from .kinds import classify, is_nan, object_fields, safe_equals
from .models import CompareKind, ComparisonState

if TYPE_CHECKING:
    from ..scope.context import ScopeContext


class ValueComparator:
    """
    Compares two values structurally.

    Containers are compared element-wise. A pair of references already
    being compared further up the current path counts as equal, so
    circular structures terminate. Only exceeding the depth limit raises;
    every ordinary mismatch returns False.

    Example:
        comparator = ValueComparator(strict=True)
        comparator.compare({"a": [1, 2]}, {"a": [1, 2]})    # True
        comparator.compare({"a": 1}, {"a": 1.0})            # False (int vs float)
    """

    def __init__(
        self,
        strict: bool = False,
        max_compare_depth: int | None = None,
        max_compare_check_depth: int | None = None,
    ):
        self.strict = strict
        self.max_compare_depth = max_compare_depth
        self.max_compare_check_depth = max_compare_check_depth

    def compare(self, a: Any, b: Any, context: ScopeContext | None = None) -> bool:
        """
        Compare two values.

        Args:
            a: The actual value
            b: The expected value
            context: Optional scope context; its options supply unset
                limits and its ``fatal`` reports an exceeded depth

        Returns:
            True if the values are deeply equal

        Raises:
            AssertionFatal: If the nesting exceeds the maximum depth
        """
        opts = context.opts if context is not None else assert_config
        state = ComparisonState(
            strict=self.strict,
            max_depth=_pick(self.max_compare_depth, opts.max_compare_depth),
            max_check_depth=_pick(self.max_compare_check_depth, opts.max_compare_check_depth),
            context=context,
        )
        return self._equals(a, b, state)

    # ─────────────────────────────────────────────────────────────────────
    # Dispatch
    # ─────────────────────────────────────────────────────────────────────

    def _equals(self, a: Any, b: Any, state: ComparisonState) -> bool:
        if a is b:
            return True

        if is_nan(a) and is_nan(b):
            return not state.strict or type(a) is type(b)

        if state.strict and type(a) is not type(b):
            return False

        kind_a = classify(a)
        kind_b = classify(b)

        if kind_a.is_leaf or kind_b.is_leaf:
            # bytearray vs bytes is a content comparison in loose mode
            return safe_equals(a, b)

        if CompareKind.REFERENCE in (kind_a, kind_b):
            return False

        if kind_a != kind_b:
            if {kind_a, kind_b} == {CompareKind.PLAIN_OBJECT, CompareKind.MAP}:
                return self._enter(a, b, state, self._plain_object_equals)
            return False

        compare_fn = self._handlers.get(kind_a)
        if compare_fn is None:
            return safe_equals(a, b)

        if kind_a.is_container:
            return self._enter(a, b, state, compare_fn.__get__(self))

        return compare_fn(self, a, b, state)

    def _enter(
        self,
        a: Any,
        b: Any,
        state: ComparisonState,
        compare_fn: Callable[[Any, Any, ComparisonState], bool],
    ) -> bool:
        """Compare one container level, guarding against cycles and depth."""
        frame = len(state.visiting)
        for offset, (seen_a, seen_b) in enumerate(
            islice(reversed(state.visiting), state.max_check_depth)
        ):
            if seen_a is a and seen_b is b:
                state.cycle_floor = min(state.cycle_floor, frame - 1 - offset)
                return True

        key = (id(a), id(b))
        cached = state.memo.get(key)
        if cached is not None:
            return cached[2]

        if state.depth >= state.max_depth:
            self._depth_exceeded(state)

        outer_floor = state.cycle_floor
        state.cycle_floor = sys.maxsize
        state.depth += 1
        state.visiting.append((a, b))
        try:
            result = compare_fn(a, b, state)
        finally:
            state.visiting.pop()
            state.depth -= 1
            floor = state.cycle_floor
            state.cycle_floor = min(outer_floor, floor)

        # A True that leaned on an enclosing pair still being compared is
        # provisional until that pair settles
        if not result or floor >= frame:
            state.memo[key] = (a, b, result)
        return result

    def _depth_exceeded(self, state: ComparisonState) -> None:
        __tracebackhide__ = True
        message = f"Maximum comparison depth exceeded: {state.max_depth}"
        details = {"max_compare_depth": state.max_depth}
        if state.context is not None:
            state.context.fatal(message, {**state.context.get_details(), **details})
        raise AssertionFatal(message, details)

    # ─────────────────────────────────────────────────────────────────────
    # Containers
    # ─────────────────────────────────────────────────────────────────────

    def _sequence_equals(self, a: Any, b: Any, state: ComparisonState) -> bool:
        if len(a) != len(b):
            return False
        return all(self._equals(x, y, state) for x, y in zip(a, b))

    def _plain_object_equals(self, a: Any, b: Any, state: ComparisonState) -> bool:
        if len(a) != len(b):
            return False

        if state.strict:
            b_keys = {key: key for key in b}

        for key, value in a.items():
            if key not in b:
                return False
            if state.strict and type(b_keys[key]) is not type(key):
                return False
            if not self._equals(value, b[key], state):
                return False

        return True

    def _map_equals(self, a: Any, b: Any, state: ComparisonState) -> bool:
        if len(a) != len(b):
            return False

        # Entries are compared in iteration order
        for (key_a, value_a), (key_b, value_b) in zip(a.items(), b.items()):
            if not self._equals(key_a, key_b, state):
                return False
            if not self._equals(value_a, value_b, state):
                return False

        return True

    def _set_equals(self, a: Any, b: Any, state: ComparisonState) -> bool:
        if len(a) != len(b):
            return False

        if not state.strict and safe_equals(a, b):
            return True

        remaining = list(b)
        for item in a:
            for index, candidate in enumerate(remaining):
                if self._equals(item, candidate, state):
                    del remaining[index]
                    break
            else:
                return False

        return True

    def _error_equals(self, a: Any, b: Any, state: ComparisonState) -> bool:
        if type(a).__name__ != type(b).__name__:
            return False
        if not self._equals(a.args, b.args, state):
            return False
        return self._plain_object_equals(vars(a), vars(b), state)

    def _object_equals(self, a: Any, b: Any, state: ComparisonState) -> bool:
        return self._plain_object_equals(object_fields(a), object_fields(b), state)

    # ─────────────────────────────────────────────────────────────────────
    # Values
    # ─────────────────────────────────────────────────────────────────────

    def _binary_equals(self, a: Any, b: Any, state: ComparisonState) -> bool:
        return bytes(a) == bytes(b)

    def _typed_array_equals(self, a: Any, b: Any, state: ComparisonState) -> bool:
        if a.typecode != b.typecode or len(a) != len(b):
            return False
        return all(self._equals(x, y, state) for x, y in zip(a, b))

    def _regexp_equals(self, a: Any, b: Any, state: ComparisonState) -> bool:
        return a.pattern == b.pattern and a.flags == b.flags

    def _value_equals(self, a: Any, b: Any, state: ComparisonState) -> bool:
        return safe_equals(a, b)

    _handlers: dict[CompareKind, Callable[..., bool]] = {
        CompareKind.SEQUENCE: _sequence_equals,
        CompareKind.PLAIN_OBJECT: _plain_object_equals,
        CompareKind.MAP: _map_equals,
        CompareKind.SET: _set_equals,
        CompareKind.ERROR: _error_equals,
        CompareKind.OBJECT: _object_equals,
        CompareKind.BINARY: _binary_equals,
        CompareKind.TYPED_ARRAY: _typed_array_equals,
        CompareKind.REGEXP: _regexp_equals,
        CompareKind.DATE: _value_equals,
        CompareKind.CUSTOM_EQ: _value_equals,
    }


def _pick(value: int | None, default: int) -> int:
    return default if value is None else value


# Convenience functions for quick comparisons
def compare(
    a: Any,
    b: Any,
    *,
    strict: bool = False,
    max_compare_depth: int | None = None,
    max_compare_check_depth: int | None = None,
    context: ScopeContext | None = None,
) -> bool:
    """Deeply compare two values (see ValueComparator.compare)."""
    comparator = ValueComparator(strict, max_compare_depth, max_compare_check_depth)
    return comparator.compare(a, b, context)


def deep_equal(a: Any, b: Any, context: ScopeContext | None = None) -> bool:
    """Loose deep equality."""
    return ValueComparator(strict=False).compare(a, b, context)


def deep_strict_equal(a: Any, b: Any, context: ScopeContext | None = None) -> bool:
    """Deep equality requiring identical types at every level."""
    return ValueComparator(strict=True).compare(a, b, context)


def shallow_equal(a: Any, b: Any, strict: bool = False) -> bool:
    """
    Compare two values without traversing structure.

    Containers and class instances are only equal to themselves; primitive,
    boxed and date values compare by value (and by type when strict).
    """
    if a is b:
        return True

    if is_nan(a) and is_nan(b):
        return not strict or type(a) is type(b)

    kind_a = classify(a)
    kind_b = classify(b)
    if not _is_value_kind(kind_a) or not _is_value_kind(kind_b):
        return False

    if strict and type(a) is not type(b):
        return False

    return safe_equals(a, b)


def _is_value_kind(kind: CompareKind) -> bool:
    return kind.is_leaf or kind == CompareKind.DATE
