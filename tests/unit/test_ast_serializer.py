"""Unit tests for polar_lang.ast.serializer — AstSerializer dict, JSON and YAML paths."""
from __future__ import annotations

import json

import pytest
import yaml

from polar_lang import parse_lines, parse_term
from polar_lang.ast.nodes import Operator, Source, Span
from polar_lang.ast.serializer import AstSerializer


@pytest.fixture()
def serializer() -> AstSerializer:
    return AstSerializer()


# ---------------------------------------------------------------------------
# Terms
# ---------------------------------------------------------------------------


class TestTermToDict:
    def test_number(self, serializer: AstSerializer) -> None:
        data = serializer.term_to_dict(parse_term("42"))
        assert data == {"kind": "Number", "value": 42, "span": {"start": 0, "end": 2}}

    def test_variable(self, serializer: AstSerializer) -> None:
        data = serializer.term_to_dict(parse_term("actor"))
        assert data["kind"] == "Variable"
        assert data["name"] == "actor"

    def test_operation_uses_operator_name(self, serializer: AstSerializer) -> None:
        data = serializer.term_to_dict(parse_term("x matches Foo"))
        assert data["kind"] == "Operation"
        assert data["operator"] == "ISA"
        assert data["args"][1]["kind"] == "InstancePattern"
        assert data["args"][1]["tag"] == "Foo"

    def test_dictionary_keys_are_sorted(self, serializer: AstSerializer) -> None:
        data = serializer.term_to_dict(parse_term("{b: 1, a: 2}"))
        assert list(data["fields"]) == ["a", "b"]

    def test_call_without_kwargs(self, serializer: AstSerializer) -> None:
        data = serializer.term_to_dict(parse_term("f(1)"))
        assert data["kwargs"] is None

    def test_call_with_kwargs(self, serializer: AstSerializer) -> None:
        data = serializer.term_to_dict(parse_term("f(a: 1)"))
        assert data["kwargs"]["a"]["value"] == 1

    def test_spanless_term(self, serializer: AstSerializer) -> None:
        from polar_lang.builders import term

        assert serializer.term_to_dict(term("s"))["span"] is None


class TestTermFromDict:
    @pytest.mark.parametrize("source", [
        "1",
        "-2.5",
        '"s"',
        "false",
        "[1, *rest]",
        "{a: {b: x}}",
        "f(1, k: v)",
        "new Foo(1)",
        "x.y.f(z) > 1 and not w",
        "x matches Foo{a: {b: [1]}}",
        "forall(x in xs, x = 1) or cut",
    ])
    def test_round_trip(self, serializer: AstSerializer, source: str) -> None:
        original = parse_term(source)
        assert serializer.term_from_dict(serializer.term_to_dict(original)) == original

    def test_restored_operator_is_enum(self, serializer: AstSerializer) -> None:
        restored = serializer.term_from_dict(serializer.term_to_dict(parse_term("a or b")))
        assert restored.value.operator is Operator.OR

    def test_spans_are_restored_without_source(self, serializer: AstSerializer) -> None:
        restored = serializer.term_from_dict(serializer.term_to_dict(parse_term("  x")))
        assert restored.span == Span(None, 2, 3)

    def test_spans_attach_given_source(self) -> None:
        source = Source("  x")
        serializer = AstSerializer(source)
        restored = serializer.term_from_dict(serializer.term_to_dict(parse_term("  x")))
        assert restored.source is source
        assert restored.span.text() == "x"

    def test_unknown_kind_raises(self, serializer: AstSerializer) -> None:
        with pytest.raises(ValueError, match="Unknown term kind"):
            serializer.term_from_dict({"kind": "Mystery"})


# ---------------------------------------------------------------------------
# Lines
# ---------------------------------------------------------------------------


class TestLines:
    def test_file_kind(self, serializer: AstSerializer, sample_policy: str) -> None:
        data = serializer.lines_to_dict(parse_lines(sample_policy))
        assert data["kind"] == "PolarFile"
        kinds = [line["kind"] for line in data["lines"]]
        assert kinds == [
            "ResourceBlock", "ResourceBlock", "RuleType", "Rule", "Rule", "Rule", "Query",
        ]

    def test_rule_dict(self, serializer: AstSerializer) -> None:
        data = serializer.line_to_dict(parse_lines("f(x: Foo);")[0])
        assert data["name"] == "f"
        assert data["required"] is False
        assert data["params"][0]["specializer"]["kind"] == "InstancePattern"
        assert data["span"] == {"start": 0, "end": 10}

    def test_shorthand_rule_relation(self, serializer: AstSerializer) -> None:
        data = serializer.line_to_dict(parse_lines('R { "a" if "b" on "c"; }')[0])
        production = data["productions"][0]
        assert production["kind"] == "ShorthandRule"
        assert [t["kind"] for t in production["relation"]] == ["Variable", "String"]

    def test_dict_round_trip(self, serializer: AstSerializer, sample_policy: str) -> None:
        lines = parse_lines(sample_policy)
        assert serializer.lines_from_dict(serializer.lines_to_dict(lines)) == lines

    def test_wrong_file_kind(self, serializer: AstSerializer) -> None:
        with pytest.raises(ValueError, match="PolarFile"):
            serializer.lines_from_dict({"kind": "Rule", "lines": []})

    def test_unknown_line_kind(self, serializer: AstSerializer) -> None:
        with pytest.raises(ValueError, match="Unknown line kind"):
            serializer.line_from_dict({"kind": "Mystery"})


# ---------------------------------------------------------------------------
# JSON and YAML
# ---------------------------------------------------------------------------


class TestJsonYaml:
    def test_json_is_valid(self, serializer: AstSerializer, sample_policy: str) -> None:
        text = serializer.to_json(parse_lines(sample_policy))
        assert json.loads(text)["kind"] == "PolarFile"

    def test_json_round_trip(self, serializer: AstSerializer, sample_policy: str) -> None:
        lines = parse_lines(sample_policy)
        assert serializer.from_json(serializer.to_json(lines)) == lines

    def test_yaml_is_valid(self, serializer: AstSerializer, sample_policy: str) -> None:
        text = serializer.to_yaml(parse_lines(sample_policy))
        assert yaml.safe_load(text)["kind"] == "PolarFile"

    def test_yaml_round_trip(self, serializer: AstSerializer, sample_policy: str) -> None:
        lines = parse_lines(sample_policy)
        assert serializer.from_yaml(serializer.to_yaml(lines)) == lines

    def test_yaml_must_be_a_mapping(self, serializer: AstSerializer) -> None:
        with pytest.raises(ValueError, match="mapping"):
            serializer.from_yaml("- 1\n- 2\n")
