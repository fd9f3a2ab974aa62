"""Tests for expression parsing."""

import pytest

from wirecheck.errors import ExpressionError, InvalidExpressionError
from wirecheck.expr import ArgKind, ExpressionParser, StepArg, StepDef, parse_expression
from wirecheck.scope import create_context


def test_parse_dot_path():
    assert parse_expression("to.not.deep.equal") == (
        StepDef("to"),
        StepDef("not"),
        StepDef("deep"),
        StepDef("equal"),
    )


def test_parse_segment_list():
    assert parse_expression(["not", "equal"]) == (StepDef("not"), StepDef("equal"))
    assert ExpressionParser(["not", "equal"]).text == "not.equal"


def test_parse_empty_argument_group():
    (step,) = parse_expression("ok()")
    assert step.args == ()
    assert str(step) == "ok()"


def test_parse_argument_kinds():
    (step,) = parse_expression("keys({0},{some text},expected)")
    assert step.args == (
        StepArg(ArgKind.INDEX, 0),
        StepArg(ArgKind.LITERAL, "some text"),
        StepArg(ArgKind.NAMED, "expected"),
    )
    assert str(step) == "keys({0},{some text},expected)"


def test_dots_inside_arguments_do_not_split():
    steps = parse_expression("has.keys({a.b})")
    assert [step.name for step in steps] == ["has", "keys"]
    assert steps[1].args == (StepArg(ArgKind.LITERAL, "a.b"),)


def test_identifiers_may_use_dollar_and_underscore():
    assert parse_expression("$check._private2") == (StepDef("$check"), StepDef("_private2"))


@pytest.mark.parametrize(
    "expression",
    [
        "",
        "not..equal",
        "not.equal.",
        ".equal",
        "1equal",
        "equal(a",
        "equal(a))",
        "equal((a))",
        "equal(a)b",
        "eq ual",
        "equal( a)",
        "equal(a,)",
        "equal({a}{b})",
        "equal({{a}})",
        [],
        ["not", 1],
        ["not.equal"],
    ],
)
def test_malformed_expressions_are_rejected(expression):
    with pytest.raises(InvalidExpressionError, match="Invalid expression"):
        parse_expression(expression)


def test_invalid_expression_error_keeps_text():
    with pytest.raises(ExpressionError) as exc_info:
        parse_expression(["a", "b c"])
    assert exc_info.value.expression == "a.b c"
    assert isinstance(exc_info.value, ValueError)


# --- argument resolution ---


def test_index_argument_resolves_call_argument():
    ctx = create_context(1)
    assert StepArg(ArgKind.INDEX, 1).resolve(ctx, ("a", "b")) == "b"
    assert StepArg(ArgKind.INDEX, 5).resolve(ctx, ("a",)) is None


def test_named_argument_resolves_context_value():
    ctx = create_context(1).set("limit", 10)
    assert StepArg(ArgKind.NAMED, "limit").resolve(ctx, ()) == 10
    assert StepArg(ArgKind.NAMED, "unknown").resolve(ctx, ()) is None


def test_literal_argument_resolves_to_text():
    assert StepArg(ArgKind.LITERAL, "x y").resolve(create_context(1), ()) == "x y"
