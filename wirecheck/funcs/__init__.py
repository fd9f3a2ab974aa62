"""
Built-in terminal checks

Scope functions the expression compiler resolves by name in the final
segment of an expression. Each takes the AssertScope as its first argument,
reports through the scope's context and returns ``scope.that``.

Usage:
    from wirecheck.expr import create_expr_adapter

    create_expr_adapter("deep.equal").evaluate({"a": [1]}, {"a": [1]})
    create_expr_adapter("not.include").evaluate([1, 2], 3)
    create_expr_adapter("has.any.keys").evaluate({"a": 1}, ["a", "b"])
"""

from .equal import equals_func, strict_equals_func
from .include import include_func
from .keys import keys_func
from .terminals import TERMINALS, get_terminal
from .truthy import (
    exists_func,
    fail_func,
    false_func,
    fatal_func,
    none_func,
    ok_func,
    true_func,
)

__all__ = [
    # Lookup
    "TERMINALS",
    "get_terminal",
    # Checks
    "equals_func",
    "strict_equals_func",
    "include_func",
    "keys_func",
    "ok_func",
    "true_func",
    "false_func",
    "none_func",
    "exists_func",
    "fail_func",
    "fatal_func",
]
