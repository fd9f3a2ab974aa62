"""
Assert scope.

The AssertScope is the handle every scope function receives as its first
argument. It owns the current context (which negation replaces with a
child) and the chain-continuation handle returned on success.
"""

from __future__ import annotations

from typing import Any, Callable, NoReturn, Sequence

from ..errors import AssertionFailure
from .context import (
    EXEC,
    ContextOverrides,
    MsgSource,
    ScopeContext,
    create_context,
)

_MISSING = object()

# Scope function signature: fn(scope, *args) -> chain handle or result
ScopeFn = Callable[..., Any]


def callable_name(fn: Callable, default: str = "anonymous") -> str:
    name = getattr(fn, "__name__", None) or getattr(fn, "display_name", None)
    return name if name and name != "<lambda>" else default


class AssertScope:
    """
    Handle passed to scope functions.

    Attributes:
        context: The current ScopeContext
        that: The value returned to continue a chain (the scope itself
            unless a caller replaces it)

    Example:
        def is_positive(scope):
            scope.context.eval(scope.context.value > 0, "expected {value} to be positive")
            return scope.that
    """

    def __init__(self, context: ScopeContext):
        self._context = context
        self.that: Any = self

    @property
    def context(self) -> ScopeContext:
        return self._context

    def new_scope(self, value: Any = _MISSING) -> AssertScope:
        """Create a scope over a child context (same subject unless given)."""
        if value is _MISSING:
            value = self._context.value
        return AssertScope(self._context.new(value))

    def update_ctx(
        self,
        value: Any,
        overrides: ContextOverrides | dict[str, Callable] | None = None,
    ) -> AssertScope:
        """
        Replace the current context with a child for a new value or overrides.

        The scope is updated in place so every function chained after this
        call sees the new context.
        """
        if value is not self._context.value or overrides:
            self._context = self._context.new(value, overrides)
        return self

    def exec(self, fn: ScopeFn, args: Sequence[Any] = (), func_name: str | None = None) -> Any:
        """Run a scope function against this scope and return its result."""
        __tracebackhide__ = True
        name = func_name or callable_name(fn)
        if self._context.opts.is_verbose:
            self._context.set_op(f"[[{name}]]")

        self._context.set(EXEC, name)
        self._context.stack_markers.push(AssertScope.exec)

        return fn(self, *args)

    def fail(
        self,
        msg: MsgSource = None,
        details: dict[str, Any] | None = None,
        *,
        actual: Any = _MISSING,
        expected: Any = _MISSING,
        operator: str | None = None,
    ) -> NoReturn:
        """
        Raise an AssertionFailure without evaluating anything.

        ``actual``, ``expected`` and ``operator`` are tracked on the
        context before the message is resolved.
        """
        __tracebackhide__ = True
        context = self._context
        if actual is not _MISSING:
            context.set("actual", actual)
        if expected is not _MISSING:
            context.set("expected", expected)
        if operator is not None:
            context.set("operator", operator)

        context.stack_markers.push(AssertScope.fail)
        raise AssertionFailure(
            context.get_message(msg or context.opts.def_assert_msg, True),
            details or context.get_details(),
            context.failure_markers(),
            show_diff=context.opts.show_diff,
        )

    def fatal(self, msg: MsgSource = None, details: dict[str, Any] | None = None) -> NoReturn:
        __tracebackhide__ = True
        self._context.stack_markers.push(AssertScope.fatal)
        self._context.fatal(msg, details)

    def __repr__(self) -> str:
        return f"AssertScope({self._context!r})"


# ─────────────────────────────────────────────────────────────────────────────
# Negation
# ─────────────────────────────────────────────────────────────────────────────

def _not_eval(ctx: ScopeContext, expr: Any, msg: MsgSource = None, caused_by: BaseException | None = None):
    __tracebackhide__ = True
    return ctx.eval(not expr, msg, caused_by)


def _not_eval_message(ctx: ScopeContext, msg: MsgSource = None, skip_overrides: bool = False) -> str:
    return "not " + ctx.get_eval_message(msg, skip_overrides)


NOT_OVERRIDES = ContextOverrides(
    eval=_not_eval,
    get_eval_message=_not_eval_message,
)


def negate(scope: AssertScope) -> AssertScope:
    """Install the negating overrides on a child of the scope's context."""
    return scope.update_ctx(scope.context.value, NOT_OVERRIDES)


def get_scope_context(value: Any) -> ScopeContext:
    """
    Return the context behind a scope or context, or a fresh root context
    for any other value.
    """
    if isinstance(value, ScopeContext):
        return value

    context = getattr(value, "context", None)
    if isinstance(value, AssertScope) or isinstance(context, ScopeContext):
        return context

    return create_context(value)


def create_scope(
    value: Any = None,
    init_msg: MsgSource = None,
    stack_marker: Callable | None = None,
    org_args: Sequence[Any] | None = None,
    config: Any = None,
) -> AssertScope:
    """Create a scope over a new root context."""
    return AssertScope(create_context(value, init_msg, stack_marker, org_args, config))
