"""
Membership checks.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Set
from typing import Any

from ..compare import deep_equal, shallow_equal
from ..compare.kinds import PRIMITIVE_TYPES
from ..scope import DEEP, OWN, AssertScope, MsgSource, ScopeContext

_MISSING = object()


def include_func(scope: AssertScope, match: Any, eval_msg: MsgSource = None) -> Any:
    """
    Check that the subject includes ``match``.

    Strings check for a substring, sequences and sets for an item, and
    mappings for a key or, when ``match`` is itself a mapping, for every
    key/value pair of it. Any other object with a mapping ``match`` is
    checked attribute by attribute (instance attributes only after
    ``own``).
    """
    __tracebackhide__ = True
    context = scope.context
    value = context.value
    deep = bool(context.get(DEEP))

    if value is None or (type(value) in PRIMITIVE_TYPES and not isinstance(value, str)):
        context.fatal("argument {value} is not a supported collection type for the operation")

    context.set("match", match)
    default_msg = "expected {value} to deep include {match}" if deep else "expected {value} to include {match}"

    if isinstance(value, str):
        found = isinstance(match, str) and match in value
    elif isinstance(match, Mapping) and not isinstance(value, (Set, list, tuple)):
        found = _includes_items(context, value, match, deep)
    elif isinstance(value, Mapping):
        found = match in value
        default_msg = "expected {value} to have a {match} key"
    elif isinstance(value, Iterable):
        found = _includes_item(context, value, match, deep)
    else:
        context.fatal("argument {value} is not a supported collection type for the operation")

    context.eval(found, eval_msg or default_msg)
    return scope.that


def _includes_item(context: ScopeContext, value: Any, match: Any, deep: bool) -> bool:
    if not deep:
        if isinstance(value, Set):
            try:
                return match in value
            except TypeError:
                return False
        return any(shallow_equal(item, match) for item in value)

    return any(deep_equal(item, match, context) for item in value)


def _includes_items(context: ScopeContext, value: Any, match: Mapping, deep: bool) -> bool:
    own = bool(context.get(OWN))
    for key, expected in match.items():
        actual = _lookup(value, key, own)
        if actual is _MISSING:
            return False
        if deep:
            if not deep_equal(actual, expected, context):
                return False
        elif not shallow_equal(actual, expected):
            return False
    return True


def _lookup(value: Any, key: Any, own: bool) -> Any:
    if isinstance(value, Mapping):
        return value[key] if key in value else _MISSING

    if not isinstance(key, str):
        return _MISSING
    if own:
        return vars(value).get(key, _MISSING) if hasattr(value, "__dict__") else _MISSING
    return getattr(value, key, _MISSING)
