"""
Scope contexts for assertion evaluation

A context carries the subject value, tracked named values, message
templating and stack markers for one assertion call. Scope functions
receive an AssertScope wrapping the current context.

Usage:
    from wirecheck.scope import create_context, negate, AssertScope

    ctx = create_context(42, init_msg="checking the answer")
    ctx.set("expected", 41)
    ctx.eval(ctx.value == 41, "expected {value} to equal {expected}")
    # AssertionFailure: checking the answer: expected 42 to equal 41

    # Negated evaluation on a child context
    scope = AssertScope(create_context(42))
    negate(scope)
    scope.context.eval(False)    # passes
"""

# Context
from .context import (
    ALL,
    ANY,
    DEEP,
    EXEC,
    OWN,
    OP_PATH,
    OPERATION,
    ContextOverrides,
    MsgSource,
    ScopeContext,
    StackMarkers,
    create_context,
)

# Scope
from .scope import (
    NOT_OVERRIDES,
    AssertScope,
    ScopeFn,
    callable_name,
    create_scope,
    get_scope_context,
    negate,
)

# Templates
from .template import Literal, Lookup, parse_template, render_template

__all__ = [
    # Context
    "ScopeContext",
    "ContextOverrides",
    "StackMarkers",
    "MsgSource",
    "create_context",
    "OPERATION",
    "OP_PATH",
    "EXEC",
    "DEEP",
    "OWN",
    "ANY",
    "ALL",
    # Scope
    "AssertScope",
    "ScopeFn",
    "NOT_OVERRIDES",
    "negate",
    "create_scope",
    "get_scope_context",
    "callable_name",
    # Templates
    "Literal",
    "Lookup",
    "parse_template",
    "render_template",
]
