"""
Structural classification of values.
"""

from __future__ import annotations

import array
import asyncio
import cmath
import concurrent.futures
import dataclasses
import datetime
import functools
import math
import re
import types
import weakref
from collections import OrderedDict
from collections.abc import Iterator, Mapping, Sequence, Set
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from typing import Any

from .models import CompareKind

PRIMITIVE_TYPES = (type(None), bool, int, float, complex, str, bytes)

_BOXED_TYPES = PRIMITIVE_TYPES + (Decimal, Fraction, Enum)

_DATE_TYPES = (datetime.date, datetime.time, datetime.timedelta)

_REFERENCE_TYPES = (
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
    types.BuiltinMethodType,
    types.MethodWrapperType,
    types.ModuleType,
    types.CoroutineType,
    types.GeneratorType,
    types.AsyncGeneratorType,
    functools.partial,
    type,
    asyncio.Future,
    concurrent.futures.Future,
    weakref.ref,
    weakref.WeakKeyDictionary,
    weakref.WeakValueDictionary,
    weakref.WeakSet,
)


def classify(value: Any) -> CompareKind:
    """Return the structural kind used to compare a value."""
    value_type = type(value)

    if value_type in PRIMITIVE_TYPES:
        return CompareKind.PRIMITIVE
    if isinstance(value, _BOXED_TYPES):
        return CompareKind.BOXED
    if isinstance(value, _DATE_TYPES):
        return CompareKind.DATE
    if isinstance(value, re.Pattern):
        return CompareKind.REGEXP
    if isinstance(value, BaseException):
        return CompareKind.ERROR
    # A bare object() is the closest thing to a unique symbol
    if value_type is object or isinstance(value, _REFERENCE_TYPES):
        return CompareKind.REFERENCE
    if isinstance(value, array.array):
        return CompareKind.TYPED_ARRAY
    if isinstance(value, (bytearray, memoryview)):
        return CompareKind.BINARY
    if isinstance(value, dict) and not isinstance(value, OrderedDict):
        return CompareKind.PLAIN_OBJECT
    if isinstance(value, Mapping):
        return CompareKind.MAP
    if isinstance(value, Sequence):
        return CompareKind.SEQUENCE
    if isinstance(value, Set):
        return CompareKind.SET
    # Consuming an iterator to compare it would destroy it
    if isinstance(value, Iterator):
        return CompareKind.REFERENCE
    if dataclasses.is_dataclass(value):
        return CompareKind.OBJECT
    if value_type.__eq__ is not object.__eq__:
        return CompareKind.CUSTOM_EQ

    return CompareKind.OBJECT


def is_nan(value: Any) -> bool:
    if isinstance(value, float):
        return math.isnan(value)
    if isinstance(value, complex):
        return cmath.isnan(value)
    if isinstance(value, Decimal):
        return value.is_nan()
    return False


def safe_equals(a: Any, b: Any) -> bool:
    """``a == b`` coerced to a bool; a comparison that raises is unequal."""
    try:
        return bool(a == b)
    except Exception:
        return False


def object_fields(value: Any) -> dict[str, Any]:
    """
    Collect the comparable attributes of a class instance.

    Dataclass fields, instance ``__dict__`` entries, ``__slots__`` values and
    the computed values of public ``property`` getters are included.
    """
    if dataclasses.is_dataclass(value):
        return {
            f.name: getattr(value, f.name)
            for f in dataclasses.fields(value)
            if f.compare and hasattr(value, f.name)
        }

    result: dict[str, Any] = dict(getattr(value, "__dict__", {}))

    for cls in type(value).__mro__:
        slots = cls.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name in ("__dict__", "__weakref__") or name in result:
                continue
            if hasattr(value, name):
                result[name] = getattr(value, name)

    for cls in type(value).__mro__:
        for name, attr in cls.__dict__.items():
            if not isinstance(attr, property) or name.startswith("_") or name in result:
                continue
            try:
                result[name] = getattr(value, name)
            except AttributeError:
                continue

    return result
