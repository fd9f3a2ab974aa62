"""
Built-in terminal steps known to the expression compiler.
"""

from __future__ import annotations

from typing import Callable

from .equal import equals_func, strict_equals_func
from .include import include_func
from .keys import keys_func
from .truthy import (
    false_func,
    fail_func,
    fatal_func,
    none_func,
    ok_func,
    true_func,
)

TERMINALS: dict[str, Callable] = {
    # Equality
    "equal": equals_func,
    "equals": equals_func,
    "eq": equals_func,
    "strictEqual": strict_equals_func,
    # Membership
    "include": include_func,
    "includes": include_func,
    "contain": include_func,
    "contains": include_func,
    "keys": keys_func,
    # Truthiness
    "ok": ok_func,
    "true": true_func,
    "false": false_func,
    "none": none_func,
    # Unconditional
    "fail": fail_func,
    "fatal": fatal_func,
}


def get_terminal(name: str) -> Callable | None:
    return TERMINALS.get(name)
