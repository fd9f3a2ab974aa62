"""
wirecheck - Fluent assertion engine

This package provides the core of a fluent assertion library: a cycle-safe
deep equality comparator, scope contexts that carry per-call assertion
state, and a compiler for dot-path assertion expressions.

Subpackages:
    - compare: Deep and shallow value comparison
    - scope: Scope contexts, message templates and the assert scope
    - expr: Expression parsing, compilation, custom step registry
    - funcs: Built-in terminal checks
    - config: Process-wide configuration and YAML loading
    - formatting: Value rendering for failure messages

Usage:
    from wirecheck import compare, create_expr_adapter, add_assert_func, AssertionFailure

    compare({"a": [1, 2]}, {"a": [1, 2]})               # True

    not_deep_equal = create_expr_adapter("to.not.deep.equal")
    not_deep_equal.evaluate([1, 2], [1, 3])             # passes

    try:
        create_expr_adapter("deep.equal").evaluate([1, 2], [1, 3], init_msg="lists")
    except AssertionFailure as e:
        print(e.message)    # lists: expected [1, 2] to deeply equal [1, 3]
"""

__version__ = "0.1.0"

# Re-export errors for convenience
from .errors import (
    AssertionFailure,
    AssertionFatal,
    ExpressionError,
    FailureKind,
    InvalidExpressionError,
    InvalidStepError,
)

# Re-export config for convenience
from .config import (
    AssertConfig,
    ConfigStore,
    FormatOptions,
    Formatter,
    Removable,
    apply_config_file,
    assert_config,
    load_config,
)

# Re-export formatting for convenience
from .formatting import format_value

# Re-export compare for convenience
from .compare import (
    CompareKind,
    ValueComparator,
    compare,
    deep_equal,
    deep_strict_equal,
    shallow_equal,
)

# Re-export scope for convenience
from .scope import (
    NOT_OVERRIDES,
    AssertScope,
    ContextOverrides,
    ScopeContext,
    create_context,
    create_scope,
    get_scope_context,
    negate,
)

# Re-export expr for convenience
from .expr import (
    CompiledExpression,
    StepDescriptor,
    StepRegistry,
    add_assert_func,
    add_assert_funcs,
    create_eval_adapter,
    create_expr_adapter,
    create_not_adapter,
    default_registry,
    parse_expression,
)

__all__ = [
    # Package info
    "__version__",
    # Errors
    "AssertionFailure",
    "AssertionFatal",
    "ExpressionError",
    "FailureKind",
    "InvalidExpressionError",
    "InvalidStepError",
    # Config
    "AssertConfig",
    "ConfigStore",
    "FormatOptions",
    "Formatter",
    "Removable",
    "apply_config_file",
    "assert_config",
    "load_config",
    # Formatting
    "format_value",
    # Compare
    "CompareKind",
    "ValueComparator",
    "compare",
    "deep_equal",
    "deep_strict_equal",
    "shallow_equal",
    # Scope
    "AssertScope",
    "ContextOverrides",
    "ScopeContext",
    "NOT_OVERRIDES",
    "create_context",
    "create_scope",
    "get_scope_context",
    "negate",
    # Expressions
    "CompiledExpression",
    "StepDescriptor",
    "StepRegistry",
    "add_assert_func",
    "add_assert_funcs",
    "create_eval_adapter",
    "create_expr_adapter",
    "create_not_adapter",
    "default_registry",
    "parse_expression",
]
