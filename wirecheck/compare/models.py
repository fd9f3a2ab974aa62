"""
Comparison data structures.

This module defines the structural kinds the comparator dispatches on and
the transient per-call comparison state.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..scope.context import ScopeContext


class CompareKind(str, Enum):
    """Structural kind of a value, used to pick the equality rule."""
    PRIMITIVE = "primitive"  # None, bool, int, float, complex, str, bytes
    BOXED = "boxed"  # Subclasses of the primitives, Decimal, Fraction, Enum
    SEQUENCE = "sequence"
    PLAIN_OBJECT = "plain_object"  # dict
    MAP = "map"  # OrderedDict and other mappings, ordered
    SET = "set"
    BINARY = "binary"  # bytearray, memoryview
    TYPED_ARRAY = "typed_array"  # array.array
    DATE = "date"
    REGEXP = "regexp"
    ERROR = "error"
    REFERENCE = "reference"  # Only equal to itself
    CUSTOM_EQ = "custom_eq"  # Class defines its own __eq__
    OBJECT = "object"

    @property
    def is_leaf(self) -> bool:
        return self in _LEAF_KINDS

    @property
    def is_container(self) -> bool:
        return self in _CONTAINER_KINDS


_LEAF_KINDS = frozenset({CompareKind.PRIMITIVE, CompareKind.BOXED})

_CONTAINER_KINDS = frozenset({
    CompareKind.SEQUENCE,
    CompareKind.PLAIN_OBJECT,
    CompareKind.MAP,
    CompareKind.SET,
    CompareKind.ERROR,
    CompareKind.OBJECT,
})


@dataclass
class ComparisonState:
    """
    Transient state of a single ``compare()`` call.

    Attributes:
        strict: Require identical types at every level
        max_depth: Container nesting that raises a fatal once exceeded
        max_check_depth: How many of the most recent visiting pairs are
            scanned for a cycle
        context: Optional scope context used to raise the depth fatal
        visiting: Stack of reference pairs currently being compared
        depth: Current container nesting
        memo: Settled pair results keyed by id pair; each entry keeps
            the pair alive so ids cannot be reused during the call
        cycle_floor: Lowest visiting index a cycle short-circuit has
            assumed equal since the innermost open frame started
    """
    strict: bool
    max_depth: int
    max_check_depth: int
    context: ScopeContext | None = None
    visiting: list[tuple[Any, Any]] = field(default_factory=list)
    depth: int = 0
    memo: dict[tuple[int, int], tuple[Any, Any, bool]] = field(default_factory=dict)
    cycle_floor: int = sys.maxsize
