"""Unit tests for polar_lang.formatter — PolarFormatter, to_polar and format_lines."""
from __future__ import annotations

import pytest

from polar_lang import parse_lines, parse_rules, parse_term
from polar_lang.builders import op, param, rule, term, var
from polar_lang.formatter.formatter import PolarFormatter, format_lines, to_polar


# ---------------------------------------------------------------------------
# Terms
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("source", [
    "x",
    "1",
    "-1",
    "1.5",
    "true",
    '"read"',
    "[1, 2, *rest]",
    "{a: 1, b: [x]}",
    "f(x, 1)",
    "f(1, a: 2)",
    "a.b.c",
    "a.f(x)",
    "a.(x)",
    'a.("b c")',
    "a.type",
    "x = 1",
    "x := 1",
    "x + 1 > y * 2",
    "1 - 2 - 3",
    "x mod 2 == 0",
    "a and b and c",
    "a or b",
    "not x = 1",
    "x in xs",
    "x matches Foo",
    "x matches Foo{a: 1}",
    "x matches {a: [1, *r]}",
    "new Foo(1, b: 2)",
    "cut",
    "debug()",
    'print(x, "y")',
    "forall(x in xs, x > 0)",
])
def test_canonical_terms_render_unchanged(source: str) -> None:
    assert to_polar(parse_term(source)) == source


class TestParentheses:
    def test_looser_left_operand_is_parenthesized(self) -> None:
        assert to_polar(parse_term("(1 + 2) * 3")) == "(1 + 2) * 3"

    def test_same_level_right_operand_is_parenthesized(self) -> None:
        assert to_polar(parse_term("1 - (2 - 3)")) == "1 - (2 - 3)"

    def test_redundant_parentheses_are_dropped(self) -> None:
        assert to_polar(parse_term("(1 * 2) + ((3))")) == "1 * 2 + 3"

    def test_or_inside_and(self) -> None:
        assert to_polar(parse_term("a and (b or c)")) == "a and (b or c)"

    def test_and_inside_not(self) -> None:
        assert to_polar(parse_term("not (a and b)")) == "not (a and b)"

    def test_left_nested_and_keeps_parentheses(self) -> None:
        text = to_polar(parse_term("(a and b) and c"))
        assert text == "(a and b) and c"
        assert parse_term(text) == parse_term("(a and b) and c")

    def test_dot_on_parenthesized_sum(self) -> None:
        assert to_polar(parse_term("(a + b).c")) == "(a + b).c"


class TestLiterals:
    def test_dictionary_keys_render_sorted(self) -> None:
        assert to_polar(parse_term("{b: 1, a: 2}")) == "{a: 2, b: 1}"

    def test_string_escapes(self) -> None:
        assert to_polar(term('a"b\\c\n')) == '"a\\"b\\\\c\\n"'

    def test_float_with_exponent_round_trips(self) -> None:
        text = to_polar(parse_term("1e20"))
        assert parse_term(text) == parse_term("1e20")

    def test_empty_call(self) -> None:
        assert to_polar(parse_term("f()")) == "f()"


# ---------------------------------------------------------------------------
# Rules and lines
# ---------------------------------------------------------------------------


class TestRules:
    def test_fact(self) -> None:
        assert to_polar(rule("f", ["x", 1])) == "f(x, 1);"

    def test_single_goal_rule(self) -> None:
        assert to_polar(parse_rules("f(x) if g(x);")[0]) == "f(x) if g(x);"

    def test_single_or_goal_round_trips(self) -> None:
        (original,) = parse_rules("f(x) if a or b;")
        assert parse_rules(to_polar(original)) == [original]

    def test_multi_goal_rule_puts_one_goal_per_line(self) -> None:
        (result,) = parse_rules("f(x: User) if g(x) and h(x);")
        assert to_polar(result) == "f(x: User) if\n    g(x) and\n    h(x);"

    def test_specializers(self) -> None:
        assert to_polar(param("x", "User")) == "x: User"
        assert to_polar(param("x", {"id": 1})) == "x: {id: 1}"

    def test_rule_type(self) -> None:
        (line,) = parse_lines("type f(x: Integer);")
        assert to_polar(line) == "type f(x: Integer);"

    def test_query(self) -> None:
        (line,) = parse_lines("?=   f( 1 ) ;")
        assert to_polar(line) == "?= f(1);"

    def test_empty_conjunction_and_disjunction(self) -> None:
        assert to_polar(term(op("AND"))) == "true"
        assert to_polar(term(op("OR"))) == "false"

    def test_formatter_class(self) -> None:
        formatter = PolarFormatter()
        assert formatter.format_term(term(op("ADD", var("a"), 1))) == "a + 1"


class TestResourceBlocks:
    def test_block_layout(self) -> None:
        (line,) = parse_lines(
            'resource Repo { roles = ["reader"]; relations = {parent: Org};'
            ' "read" if "reader"; "read" if "member" on "parent"; }'
        )
        assert to_polar(line) == (
            "resource Repo {\n"
            '  roles = ["reader"];\n'
            "  relations = {parent: Org};\n"
            '  "read" if "reader";\n'
            '  "read" if "member" on "parent";\n'
            "}"
        )

    def test_empty_block(self) -> None:
        (line,) = parse_lines("actor   User {\n}")
        assert to_polar(line) == "actor User {}"

    def test_production(self) -> None:
        (line,) = parse_lines('Org { "read" if "owner"; }')
        assert to_polar(line.productions[0]) == '"read" if "owner";'


# ---------------------------------------------------------------------------
# Whole files
# ---------------------------------------------------------------------------


class TestFormatLines:
    def test_rules_with_same_name_are_grouped(self) -> None:
        lines = parse_lines("f(1); f(2); g(1);")
        assert format_lines(lines) == "f(1);\nf(2);\n\ng(1);\n"

    def test_empty_file(self) -> None:
        assert format_lines([]) == ""

    def test_output_ends_with_newline(self, sample_policy: str) -> None:
        assert format_lines(parse_lines(sample_policy)).endswith(";\n")

    def test_round_trip_preserves_ast(self, sample_policy: str) -> None:
        lines = parse_lines(sample_policy)
        assert parse_lines(format_lines(lines)) == lines

    def test_formatting_is_idempotent(self, sample_policy: str) -> None:
        once = format_lines(parse_lines(sample_policy))
        assert format_lines(parse_lines(once)) == once
