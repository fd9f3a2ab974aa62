"""
Deep equality comparison

Cycle-safe structural comparison of arbitrary Python values, plus the
shallow comparison used by plain equality checks.

Usage:
    from wirecheck.compare import compare, shallow_equal, ValueComparator

    compare([1, {"a": 2}], [1, {"a": 2}])          # True
    compare(1, 1.0)                                 # True
    compare(1, 1.0, strict=True)                    # False
    shallow_equal([1], [1])                         # False, not the same list

    # Reusable comparator with explicit limits
    comparator = ValueComparator(strict=True, max_compare_depth=20)
    comparator.compare(left, right)
"""

# Comparator
from .comparator import (
    ValueComparator,
    compare,
    deep_equal,
    deep_strict_equal,
    shallow_equal,
)

# Classification
from .kinds import classify, is_nan, object_fields

# Models
from .models import CompareKind, ComparisonState

__all__ = [
    # Comparator
    "ValueComparator",
    "compare",
    "deep_equal",
    "deep_strict_equal",
    "shallow_equal",
    # Classification
    "classify",
    "is_nan",
    "object_fields",
    # Models
    "CompareKind",
    "ComparisonState",
]
