"""
Truthiness and presence checks.
"""

from __future__ import annotations

from typing import Any

from ..scope import AssertScope, MsgSource


def ok_func(scope: AssertScope, eval_msg: MsgSource = None) -> Any:
    __tracebackhide__ = True
    scope.context.eval(bool(scope.context.value), eval_msg or "expected {value} to be truthy")
    return scope.that


def true_func(scope: AssertScope, eval_msg: MsgSource = None) -> Any:
    __tracebackhide__ = True
    scope.context.eval(scope.context.value is True, eval_msg or "expected {value} to be true")
    return scope.that


def false_func(scope: AssertScope, eval_msg: MsgSource = None) -> Any:
    __tracebackhide__ = True
    scope.context.eval(scope.context.value is False, eval_msg or "expected {value} to be false")
    return scope.that


def none_func(scope: AssertScope, eval_msg: MsgSource = None) -> Any:
    __tracebackhide__ = True
    scope.context.eval(scope.context.value is None, eval_msg or "expected {value} to be None")
    return scope.that


def exists_func(scope: AssertScope, eval_msg: MsgSource = None) -> Any:
    __tracebackhide__ = True
    scope.context.eval(scope.context.value is not None, eval_msg or "expected {value} to exist (not None)")
    return scope.that


def fail_func(scope: AssertScope, msg: MsgSource = None, details: dict | None = None) -> Any:
    """Fail unconditionally."""
    __tracebackhide__ = True
    scope.fail(msg, details)


def fatal_func(scope: AssertScope, msg: MsgSource = None, details: dict | None = None) -> Any:
    """Raise a fatal error unconditionally."""
    __tracebackhide__ = True
    scope.fatal(msg, details)
