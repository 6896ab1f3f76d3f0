"""Unit tests for polar_lang.parser — expression precedence and classification."""
from __future__ import annotations

import pytest

from polar_lang import parse_term
from polar_lang.ast.nodes import (
    Boolean,
    Call,
    InstancePattern,
    Number,
    Operation,
    Operator,
    String,
    Symbol,
    Term,
    Variable,
)
from polar_lang.builders import call, instance, op, term, var
from polar_lang.grammar.tokens import TokenType
from polar_lang.parser import UnrecognizedToken, ValueKind, WrongValueType


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def operation(text: str) -> Operation:
    """Parse ``text`` and return its top-level operation."""
    value = parse_term(text).value
    assert isinstance(value, Operation)
    return value


# ---------------------------------------------------------------------------
# Atoms
# ---------------------------------------------------------------------------


class TestAtoms:
    def test_variable(self) -> None:
        assert parse_term("actor") == var("actor")

    def test_boolean(self) -> None:
        assert parse_term("true").value == Boolean(True)

    def test_string(self) -> None:
        assert parse_term('"read"').value == String("read")

    def test_call(self) -> None:
        assert parse_term("f(x, 1)") == term(call("f", [var("x"), 1]))

    def test_parenthesized_expression_resets_precedence(self) -> None:
        assert parse_term("(1 + 2) * 3") == term(op("MUL", op("ADD", 1, 2), 3))

    def test_cut(self) -> None:
        assert parse_term("cut") == term(op("CUT"))

    def test_debug_and_print(self) -> None:
        assert parse_term("debug()") == term(op("DEBUG"))
        assert parse_term('print(x, "y")') == term(op("PRINT", var("x"), "y"))

    def test_forall(self) -> None:
        expected = op("FOR_ALL", op("IN", var("x"), var("xs")), op("GT", var("x"), 0))
        assert parse_term("forall(x in xs, x > 0)") == term(expected)

    def test_forall_condition_must_be_logical(self) -> None:
        with pytest.raises(WrongValueType):
            parse_term("forall(1, x > 0)")


# ---------------------------------------------------------------------------
# Binary operators and precedence
# ---------------------------------------------------------------------------


class TestPrecedence:
    def test_multiplication_binds_tighter_than_addition(self) -> None:
        assert parse_term("1 + 2 * 3") == term(op("ADD", 1, op("MUL", 2, 3)))

    def test_binary_operators_are_left_associative(self) -> None:
        assert parse_term("1 - 2 - 3") == term(op("SUB", op("SUB", 1, 2), 3))

    @pytest.mark.parametrize("source, operator", [
        ("a * b", Operator.MUL),
        ("a / b", Operator.DIV),
        ("a mod b", Operator.MOD),
        ("a rem b", Operator.REM),
        ("a + b", Operator.ADD),
        ("a - b", Operator.SUB),
        ("a == b", Operator.EQ),
        ("a != b", Operator.NEQ),
        ("a <= b", Operator.LEQ),
        ("a >= b", Operator.GEQ),
        ("a < b", Operator.LT),
        ("a > b", Operator.GT),
        ("a = b", Operator.UNIFY),
        ("a := b", Operator.ASSIGN),
        ("a in b", Operator.IN),
    ])
    def test_binary_operator_mapping(self, source: str, operator: Operator) -> None:
        assert parse_term(source) == term(op(operator, var("a"), var("b")))

    def test_comparison_binds_tighter_than_unify(self) -> None:
        with pytest.raises(WrongValueType):
            parse_term("x = 1 > 2")

    def test_arithmetic_inside_comparison(self) -> None:
        assert parse_term("x + 1 > y * 2") == term(
            op("GT", op("ADD", var("x"), 1), op("MUL", var("y"), 2))
        )

    def test_dot_binds_tightest(self) -> None:
        assert parse_term("a.b + 1") == term(op("ADD", op("DOT", var("a"), "b"), 1))

    def test_in_binds_tighter_than_and(self) -> None:
        assert parse_term("x in xs and y") == term(
            op("AND", op("IN", var("x"), var("xs")), var("y"))
        )

    def test_not_binds_tighter_than_and(self) -> None:
        assert parse_term("not a and b") == term(op("AND", op("NOT", var("a")), var("b")))

    def test_not_applies_to_unification(self) -> None:
        assert parse_term("not x = 1") == term(op("NOT", op("UNIFY", var("x"), 1)))

    def test_double_negation(self) -> None:
        assert parse_term("not not a") == term(op("NOT", op("NOT", var("a"))))


# ---------------------------------------------------------------------------
# And / Or flattening
# ---------------------------------------------------------------------------


class TestConnectives:
    def test_and_chain_is_flattened(self) -> None:
        result = operation("a and b and c")
        assert result.operator is Operator.AND
        assert result.args == (var("a"), var("b"), var("c"))

    def test_or_chain_is_flattened(self) -> None:
        result = operation("a or b or c or d")
        assert result.operator is Operator.OR
        assert len(result.args) == 4

    def test_and_binds_tighter_than_or(self) -> None:
        assert parse_term("a and b or c") == term(
            op("OR", op("AND", var("a"), var("b")), var("c"))
        )

    def test_or_inside_and_is_not_flattened(self) -> None:
        assert parse_term("a and (b or c)") == term(
            op("AND", var("a"), op("OR", var("b"), var("c")))
        )

    def test_and_span_covers_whole_chain(self) -> None:
        result = parse_term("a and b and c")
        assert (result.start, result.end) == (0, 13)

    def test_and_operand_must_be_logical(self) -> None:
        with pytest.raises(WrongValueType) as exc_info:
            parse_term("a and 1")
        assert exc_info.value.expected is ValueKind.LOGICAL
        assert exc_info.value.span.text() == "1"


# ---------------------------------------------------------------------------
# Dot lookups
# ---------------------------------------------------------------------------


class TestDot:
    def test_field_name_becomes_string(self) -> None:
        assert parse_term("a.b") == term(op("DOT", var("a"), "b"))

    def test_keyword_field_name(self) -> None:
        assert parse_term("a.type") == term(op("DOT", var("a"), "type"))

    def test_method_call(self) -> None:
        assert parse_term("a.f(x)") == term(op("DOT", var("a"), call("f", [var("x")])))

    def test_variable_key(self) -> None:
        assert parse_term("a.(x)") == term(op("DOT", var("a"), var("x")))

    def test_string_key(self) -> None:
        assert parse_term('a.("b c")') == term(op("DOT", var("a"), "b c"))

    def test_chained_dots_are_left_associative(self) -> None:
        assert parse_term("a.b.c") == term(op("DOT", op("DOT", var("a"), "b"), "c"))

    def test_dot_can_be_used_as_goal(self) -> None:
        assert parse_term("a.b and c").is_operation(Operator.AND)

    def test_dot_on_call_is_rejected(self) -> None:
        with pytest.raises(WrongValueType):
            parse_term("f(x).y")

    def test_dot_requires_a_key(self) -> None:
        with pytest.raises(UnrecognizedToken):
            parse_term("a.1")


# ---------------------------------------------------------------------------
# Matches and new
# ---------------------------------------------------------------------------


class TestMatchesAndNew:
    def test_matches_bare_class_becomes_instance_pattern(self) -> None:
        assert parse_term("x matches Foo") == term(op("ISA", var("x"), instance("Foo")))

    def test_matches_rewrite_keeps_the_class_span(self) -> None:
        result = parse_term("x matches Foo")
        pattern = result.value.args[1]
        assert isinstance(pattern.value, InstancePattern)
        assert pattern.span.text() == "Foo"

    def test_matches_instance_with_fields(self) -> None:
        assert parse_term("x matches Foo{a: 1}") == term(
            op("ISA", var("x"), instance("Foo", {"a": 1}))
        )

    def test_new_wraps_call(self) -> None:
        result = operation("new Foo(1, 2)")
        assert result.operator is Operator.NEW
        assert len(result.args) == 1
        assert result.args[0].value == Call(Symbol("Foo"), (Term(Number(1)), Term(Number(2))))

    def test_new_is_a_value(self) -> None:
        assert parse_term("x = new Foo()") == term(op("UNIFY", var("x"), op("NEW", call("Foo"))))

    def test_new_requires_a_call(self) -> None:
        with pytest.raises(UnrecognizedToken):
            parse_term("new Foo")

    def test_call_is_not_a_value(self) -> None:
        with pytest.raises(WrongValueType):
            parse_term("x = f(1)")


# ---------------------------------------------------------------------------
# Assignment
# ---------------------------------------------------------------------------


class TestAssign:
    def test_assign_to_variable(self) -> None:
        assert parse_term("x := 1") == term(op("ASSIGN", var("x"), 1))

    def test_assign_to_non_variable_is_a_syntax_error(self) -> None:
        with pytest.raises(UnrecognizedToken) as exc_info:
            parse_term("x.y := 1")
        assert exc_info.value.span.text() == ":="
        assert exc_info.value.expected == (TokenType.SYMBOL,)


# ---------------------------------------------------------------------------
# Spans
# ---------------------------------------------------------------------------


class TestSpans:
    def test_binary_span_covers_operands(self) -> None:
        result = parse_term("  x = 1  ")
        assert (result.start, result.end) == (2, 7)

    def test_every_term_shares_the_source(self) -> None:
        result = parse_term("a.b = c")
        left, right = result.value.args
        assert left.source is result.source
        assert right.source is result.source

    def test_filename_reaches_error_location(self) -> None:
        with pytest.raises(WrongValueType) as exc_info:
            parse_term("x = (1 > 2)", filename="inline.polar")
        assert str(exc_info.value).startswith("ParseError at inline.polar:1:")

    def test_variable_span(self) -> None:
        result = parse_term("foo")
        assert isinstance(result.value, Variable)
        assert result.span.text() == "foo"
