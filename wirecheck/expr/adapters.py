"""
Scope function adapters.

Small wrappers that turn plain callables into scope functions without
going through expression parsing.
"""

from __future__ import annotations

from typing import Any, Callable

from ..scope import AssertScope, MsgSource, callable_name, negate


def create_not_adapter(scope_fn: Callable[..., Any]) -> Callable[..., Any]:
    """
    Wrap a scope function so it runs against a negated context.

    Example:
        not_positive = create_not_adapter(is_positive)
    """

    def not_fn(scope: AssertScope, *args: Any) -> Any:
        __tracebackhide__ = True
        context = scope.context
        context.stack_markers.push(not_fn)
        if context.opts.is_verbose:
            context.set_op("[[not]]")

        negate(scope)
        return scope.exec(scope_fn, args)

    not_fn.__name__ = callable_name(scope_fn)
    return not_fn


def create_eval_adapter(
    eval_fn: Callable[..., bool],
    eval_msg: MsgSource = None,
    func_name: str | None = None,
) -> Callable[..., Any]:
    """
    Turn a predicate into a scope function.

    ``eval_fn(actual, *args)`` receives the subject value followed by the
    call arguments; a falsy result fails with ``eval_msg``.

    Example:
        is_even = create_eval_adapter(lambda v: v % 2 == 0, "expected {value} to be even", "isEven")
    """
    name = func_name or callable_name(eval_fn)

    def eval_adapter(scope: AssertScope, *args: Any) -> Any:
        __tracebackhide__ = True
        context = scope.context
        context.stack_markers.push(eval_adapter)
        if context.opts.is_verbose:
            context.set_op(f"[[{name}]]")

        context.eval(eval_fn(context.value, *args), eval_msg)
        return scope.that

    eval_adapter.__name__ = name
    return eval_adapter
