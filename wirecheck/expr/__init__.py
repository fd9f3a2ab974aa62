"""
Expression compiler for fluent assertion chains

Compiles dot-path expressions into reusable scope functions. Modifier
segments (not, deep, own, has.any, has.all and filler words) set flags on
the scope's context; the final segment is a built-in terminal check or a
custom step looked up in the registry when the expression is called.

Usage:
    from wirecheck.expr import add_assert_func, create_expr_adapter, create_eval_adapter

    # Built-in terminal
    create_expr_adapter("to.not.deep.equal").evaluate([1, 2], [1, 3])

    # Custom step, registered after the expression was compiled
    check = create_expr_adapter("not.isPositive")
    add_assert_func("isPositive", create_eval_adapter(lambda v: v > 0, "expected {value} to be positive"))
    check.evaluate(-1)

    # Arguments: {0} is a call argument, {text} a literal, a bare word a context value
    create_expr_adapter("has.any.keys({a},{0})").evaluate({"b": 1}, "b")
"""

# Adapters
from .adapters import create_eval_adapter, create_not_adapter

# Compiler
from .compiler import CompiledExpression, create_expr_adapter

# Models
from .models import ArgKind, Step, StepArg, StepDef, StepKind

# Grammar
from .modifiers import FLAGS, MODIFIERS, Modifier

# Parser
from .parser import ExpressionParser, parse_expression

# Registry
from .registry import (
    StepDescriptor,
    StepRegistry,
    add_assert_func,
    add_assert_funcs,
    default_registry,
)

__all__ = [
    # Compiler
    "CompiledExpression",
    "create_expr_adapter",
    # Adapters
    "create_not_adapter",
    "create_eval_adapter",
    # Parser
    "ExpressionParser",
    "parse_expression",
    # Models
    "ArgKind",
    "Step",
    "StepArg",
    "StepDef",
    "StepKind",
    # Grammar
    "Modifier",
    "MODIFIERS",
    "FLAGS",
    # Registry
    "StepDescriptor",
    "StepRegistry",
    "add_assert_func",
    "add_assert_funcs",
    "default_registry",
]
