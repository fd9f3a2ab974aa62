"""Tests for message templates."""

from wirecheck.scope import Literal, Lookup, parse_template, render_template


def lookup(values):
    def resolve(token):
        if token in values:
            return True, values[token]
        return False, None

    return resolve


# --- parsing ---


def test_parse_splits_literals_and_lookups():
    assert parse_template("expected {value} to be {kind}") == (
        Literal("expected "),
        Lookup("value"),
        Literal(" to be "),
        Lookup("kind"),
    )


def test_parse_plain_text():
    assert parse_template("no tokens here") == (Literal("no tokens here"),)
    assert parse_template("") == ()


def test_parse_escaped_brace():
    assert parse_template("{{literal}") == (Literal("{literal}"),)


def test_parse_unterminated_brace_is_kept():
    assert parse_template("broken {value") == (Literal("broken {value"),)


def test_lookup_raw():
    assert Lookup("missing").raw == "{missing}"


# --- rendering ---


def test_render_substitutes_known_tokens():
    text = render_template("{a} and {b}", lookup({"a": 1, "b": "two"}))
    assert text == "1 and two"


def test_render_keeps_unknown_tokens_verbatim():
    text = render_template("{a} and {nope}", lookup({"a": 1}))
    assert text == "1 and {nope}"


def test_render_uses_format_function():
    text = render_template("got {a}", lookup({"a": "x"}), repr)
    assert text == "got 'x'"


def test_render_without_tokens_never_resolves():
    calls = []

    def resolve(token):
        calls.append(token)
        return False, None

    assert render_template("plain", resolve) == "plain"
    assert calls == []


def test_render_escape_and_token_together():
    text = render_template("{{ {a} }", lookup({"a": 3}))
    assert text == "{ 3 }"
