"""Tests for the expression compiler."""

import pytest

from wirecheck.errors import (
    AssertionFailure,
    AssertionFatal,
    InvalidExpressionError,
    InvalidStepError,
)
from wirecheck.expr import (
    CompiledExpression,
    StepKind,
    add_assert_func,
    create_eval_adapter,
    create_expr_adapter,
)
from wirecheck.scope import AssertScope, create_scope


def is_positive(scope):
    scope.context.eval(scope.context.value > 0, "expected {value} to be positive")
    return scope.that


# --- compilation ---


def test_steps_are_resolved_at_compile_time():
    compiled = create_expr_adapter("to.not.deep.equal")
    assert [step.kind for step in compiled.steps] == [
        StepKind.MODIFIER,
        StepKind.MODIFIER,
        StepKind.MODIFIER,
        StepKind.TERMINAL,
    ]
    assert compiled.__name__ == "equal"
    assert repr(compiled) == "CompiledExpression('to.not.deep.equal')"


def test_unknown_final_step_is_custom():
    compiled = create_expr_adapter("not.isPositive")
    assert compiled.steps[-1].kind == StepKind.CUSTOM


def test_segment_list_expression():
    compiled = create_expr_adapter(["not", "deep", "equal"])
    assert compiled.expression == "not.deep.equal"
    compiled.evaluate([1], [2])


@pytest.mark.parametrize(
    "expression, reason",
    [
        ("not.bogus.equal", "only the last step may evaluate"),
        ("equal.not", "only the last step may evaluate"),
        ("any.keys", "must follow 'has'"),
        ("has.not.all.keys", "must follow 'has'"),
        ("not().equal", "modifiers take no arguments"),
    ],
)
def test_invalid_steps_fail_at_compile_time(expression, reason):
    with pytest.raises(InvalidStepError, match=reason) as exc_info:
        create_expr_adapter(expression)
    assert exc_info.value.expression == expression


def test_malformed_expression_fails_at_compile_time():
    with pytest.raises(InvalidExpressionError):
        create_expr_adapter("not..equal")


def test_supplied_function_requires_modifier_only_expression():
    with pytest.raises(InvalidExpressionError):
        create_expr_adapter("not.equal", is_positive)


# --- evaluation ---


def test_not_deep_equal_passes_on_different_values():
    create_expr_adapter("to.not.deep.equal").evaluate([1, 2], [1, 3])


def test_deep_equal_failure_message():
    with pytest.raises(AssertionFailure) as exc_info:
        create_expr_adapter("deep.equal").evaluate([1, 2], [1, 3], init_msg="lists")
    assert exc_info.value.message == "lists: expected [1, 2] to deeply equal [1, 3]"
    assert exc_info.value.details["expected"] == [1, 3]


def test_plain_equal_does_not_traverse():
    with pytest.raises(AssertionFailure, match=r"expected \[1, 2\] to equal \[1, 2\]"):
        create_expr_adapter("equal").evaluate([1, 2], [1, 2])
    create_expr_adapter("equal").evaluate(1, 1.0)


def test_negated_failure_message():
    with pytest.raises(AssertionFailure) as exc_info:
        create_expr_adapter("not.equal").evaluate(1, 1)
    assert exc_info.value.message == "not expected 1 to equal 1"


def test_negation_does_not_invert_fatal():
    with pytest.raises(AssertionFatal, match="not a supported collection type"):
        create_expr_adapter("not.include").evaluate(5, 1)


def test_evaluation_is_stateless():
    compiled = create_expr_adapter("not.deep.equal")
    compiled.evaluate([1], [2])
    with pytest.raises(AssertionFailure):
        compiled.evaluate([1], [1])
    compiled.evaluate({"a": 1}, {"a": 2})


def test_exist_final_step():
    create_expr_adapter("to.exist").evaluate(0)
    create_expr_adapter("not.exist").evaluate(None)
    with pytest.raises(AssertionFailure, match=r"expected None to exist \(not None\)"):
        create_expr_adapter("to.exist").evaluate(None)


def test_modifier_only_expression_returns_chain_handle():
    result = create_expr_adapter("to.be").evaluate(1)
    assert isinstance(result, AssertScope)
    assert result.that is result


def test_supplied_function_runs_after_modifiers():
    not_positive = create_expr_adapter("to.not", is_positive)
    assert not_positive.__name__ == "is_positive"
    not_positive.evaluate(-1)
    with pytest.raises(AssertionFailure, match="not expected 1 to be positive"):
        not_positive.evaluate(1)


def test_runs_as_a_scope_function():
    scope = create_scope([1, 2])
    create_expr_adapter("not.deep.equal")(scope, [2, 1])
    assert scope.context.parent is not None


# --- arguments ---


def test_index_argument():
    create_expr_adapter("equal({1})").evaluate(5, "ignored", 5)


def test_missing_index_argument_is_none():
    create_expr_adapter("none").evaluate(None)
    create_expr_adapter("equal({3})").evaluate(None, 1)


def test_literal_argument():
    create_expr_adapter("equal({hello world})").evaluate("hello world")
    with pytest.raises(AssertionFailure):
        create_expr_adapter("equal({5})").evaluate("5", "unused")


def test_named_argument_reads_context():
    compiled = create_expr_adapter("equal(limit)")

    def with_limit(scope):
        scope.context.set("limit", 3)
        return compiled(scope)

    scope = create_scope(3)
    scope.exec(with_limit)

    failing = create_scope(4)
    with pytest.raises(AssertionFailure, match="expected 4 to equal 3"):
        failing.exec(with_limit)


def test_mixed_arguments():
    create_expr_adapter("has.any.keys({a},{0})").evaluate({"b": 1}, "b")
    with pytest.raises(AssertionFailure):
        create_expr_adapter("has.all.keys({a},{0})").evaluate({"b": 1}, "b")


# --- custom steps ---


def test_custom_step_registered_after_compilation():
    compiled = create_expr_adapter("not.isPositive")
    with pytest.raises(InvalidStepError, match="not registered"):
        compiled.evaluate(-1)

    add_assert_func("isPositive", is_positive)
    compiled.evaluate(-1)
    with pytest.raises(AssertionFailure, match="not expected 1 to be positive"):
        compiled.evaluate(1)


def test_custom_step_cannot_follow_structural_modifier():
    add_assert_func("isPositive", is_positive)
    compiled = create_expr_adapter("deep.isPositive")
    with pytest.raises(InvalidStepError, match="custom step cannot follow 'deep'"):
        compiled.evaluate(1)


def test_custom_step_defined_by_expression():
    add_assert_func("notDeepEqual", "not.deep.equal")
    create_expr_adapter("notDeepEqual").evaluate([1], [2])
    with pytest.raises(AssertionFailure, match="not expected"):
        create_expr_adapter("to.notDeepEqual").evaluate([1], [1])


def test_custom_step_arguments():
    add_assert_func("between", create_eval_adapter(lambda v, lo, hi: lo <= v <= hi, "out of range"))
    create_expr_adapter("between({0},{1})").evaluate(5, 1, 10)
    with pytest.raises(AssertionFailure, match="out of range"):
        create_expr_adapter("between").evaluate(50, 1, 10)


# --- diagnostics ---


def test_verbose_records_operation_path():
    with pytest.raises(AssertionFailure) as exc_info:
        create_expr_adapter("not.equal").evaluate(1, 1, config={"is_verbose": True})
    assert exc_info.value.details["op_path"] == ['[["not.equal"]]', "not", "[[equal]]"]


def test_verbose_records_result():
    compiled = create_expr_adapter("ok")
    scope = create_scope(1, config={"is_verbose": True})
    compiled(scope)
    path = scope.context.get("op_path")
    assert path[:2] == ['[["ok"]]', "[[ok]]"]
    assert path[-1].startswith("=>[[r:")


def test_failure_markers_include_entry_point():
    with pytest.raises(AssertionFailure) as exc_info:
        create_expr_adapter("ok").evaluate(0)
    names = exc_info.value.marker_names
    assert "CompiledExpression.evaluate" in names
    assert "CompiledExpression.__call__" in names
    assert "AssertScope.exec" in names


def test_compiled_expression_type():
    assert isinstance(create_expr_adapter("ok"), CompiledExpression)


# --- reuse ---


def test_one_terminal_run_per_call_without_leakage():
    calls = []

    def record(scope, expected):
        calls.append(scope.context.value)
        scope.context.set("seen", expected)
        assert scope.context.get("$deep") is None
        return scope.that

    compiled = create_expr_adapter("to.be", record)
    for index in range(100):
        scope = create_scope(index)
        compiled(scope, index * 2)
        assert scope.context.get("seen") == index * 2

    assert calls == list(range(100))


@pytest.mark.parametrize("expression", ["func(arg", "func(arg)(arg2)"])
def test_malformed_groups_fail_before_any_context(expression):
    with pytest.raises(InvalidExpressionError, match="Invalid expression"):
        create_expr_adapter(expression)
