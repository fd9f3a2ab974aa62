"""
Key set checks.
"""

from __future__ import annotations

from collections.abc import Mapping, Set
from typing import Any

from ..compare import deep_equal
from ..scope import ANY, DEEP, AssertScope


def keys_func(scope: AssertScope, *args: Any) -> Any:
    """
    Check the subject's keys.

    Keys may be passed individually or as a single list, tuple, set or
    mapping (whose keys are used). After ``has.any`` at least one key must
    be present; otherwise every key must be.
    """
    __tracebackhide__ = True
    context = scope.context
    expected_keys = _arg_keys(scope, args)
    value_keys = _value_keys(context.value)
    deep = bool(context.get(DEEP))

    context.set("expectedKeys", expected_keys)
    if not expected_keys:
        scope.fatal("expected at least one key to be provided {expectedKeys}")

    missing = [key for key in expected_keys if not _has_key(context, value_keys, key, deep)]
    context.set("valueKeys", value_keys)
    context.set("missingKeys", missing)

    if context.get(ANY):
        context.eval(
            len(missing) < len(expected_keys),
            f"expected any key: {{expectedKeys}}, found: {{valueKeys}} ({len(value_keys)} keys)",
        )
    else:
        context.eval(
            not missing,
            "expected all keys: {expectedKeys}, missing: {missingKeys}, found: {valueKeys}",
        )

    return scope.that


def _arg_keys(scope: AssertScope, args: tuple) -> list:
    if args and isinstance(args[0], (list, tuple, Set, Mapping)):
        if len(args) > 1:
            scope.context.set("fatal", list(args))
            scope.fatal("expected only one argument of type list or mapping - {fatal}")
        return list(args[0])
    return list(args)


def _value_keys(value: Any) -> list:
    if value is None:
        return []
    if isinstance(value, (Mapping, Set)):
        return list(value)
    if hasattr(value, "__dict__"):
        return list(vars(value))
    return []


def _has_key(context, value_keys: list, key: Any, deep: bool) -> bool:
    if deep:
        return any(deep_equal(candidate, key, context) for candidate in value_keys)
    return key in value_keys
