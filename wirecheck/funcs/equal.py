"""
Equality checks.

Plain equality never traverses structure: two distinct lists are unequal
even when they hold the same items. The ``deep`` modifier switches to
the structural comparator.
"""

from __future__ import annotations

from typing import Any

from ..compare import ValueComparator, shallow_equal
from ..scope import DEEP, AssertScope, MsgSource


def equals_func(scope: AssertScope, expected: Any, eval_msg: MsgSource = None) -> Any:
    """Loose equality, or loose deep equality after ``deep``."""
    __tracebackhide__ = True
    context = scope.context
    context.set("expected", expected)

    if context.get(DEEP):
        result = ValueComparator(strict=False).compare(context.value, expected, context)
        context.eval(result, eval_msg or "expected {value} to deeply equal {expected}")
    else:
        result = shallow_equal(context.value, expected)
        context.eval(result, eval_msg or "expected {value} to equal {expected}")

    return scope.that


def strict_equals_func(scope: AssertScope, expected: Any, eval_msg: MsgSource = None) -> Any:
    """Strict equality, or strict deep equality after ``deep``."""
    __tracebackhide__ = True
    context = scope.context
    context.set("expected", expected)

    if context.get(DEEP):
        result = ValueComparator(strict=True).compare(context.value, expected, context)
        context.eval(result, eval_msg or "expected {value} to deeply and strictly equal {expected}")
    else:
        result = shallow_equal(context.value, expected, strict=True)
        context.eval(result, eval_msg or "expected {value} to strictly equal {expected}")

    return scope.that
