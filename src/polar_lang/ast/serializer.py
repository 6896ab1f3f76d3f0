"""AST serialization and deserialization for Polar.

Provides round-trip serialization of Polar terms and file-level lines
to and from JSON and YAML.  The serialized form is a plain dict/list
structure that maps naturally to both formats.

Spans are serialized as ``{"start": ..., "end": ...}``; the source text
is not.  Deserialized terms therefore carry no ``Source`` unless one is
passed in.

Usage
-----
::

    from polar_lang.ast.serializer import AstSerializer

    serializer = AstSerializer()
    data = serializer.lines_to_dict(lines)
    json_text = serializer.to_json(lines)
    lines2 = serializer.from_json(json_text)
    assert lines == lines2
"""
from __future__ import annotations

import json

import yaml

from polar_lang.ast.nodes import (
    Boolean,
    Call,
    Declaration,
    Dictionary,
    DictionaryPattern,
    InstancePattern,
    Line,
    List,
    Number,
    Operation,
    Operator,
    Parameter,
    Production,
    Query,
    ResourceBlock,
    RestVariable,
    Rule,
    RuleType,
    ShorthandRule,
    Source,
    Span,
    String,
    Symbol,
    Term,
    Value,
    Variable,
)


class AstSerializer:
    """Converts between Polar AST objects and plain Python dicts.

    The serialized representation uses ``"kind"`` discriminator fields on
    union types so that deserialization is unambiguous.

    Parameters
    ----------
    source:
        Source attached to the spans of deserialized terms.
    """

    def __init__(self, source: Source | None = None) -> None:
        self._source = source

    # ------------------------------------------------------------------
    # Serialization (AST → dict)
    # ------------------------------------------------------------------

    def lines_to_dict(self, lines: list[Line]) -> dict[str, object]:
        """Serialize a parsed file to a JSON-compatible dict."""
        return {"kind": "PolarFile", "lines": [self.line_to_dict(line) for line in lines]}

    def line_to_dict(self, line: Line) -> dict[str, object]:
        if isinstance(line, Rule):
            return self._rule_to_dict(line)
        if isinstance(line, RuleType):
            return {"kind": "RuleType", "rule": self._rule_to_dict(line.rule)}
        if isinstance(line, Query):
            return {"kind": "Query", "term": self.term_to_dict(line.term)}
        if isinstance(line, ResourceBlock):
            return {
                "kind": "ResourceBlock",
                "keyword": self.term_to_dict(line.keyword) if line.keyword else None,
                "resource": self.term_to_dict(line.resource),
                "productions": [self._production_to_dict(p) for p in line.productions],
            }
        raise TypeError(f"Unknown line type: {type(line)}")

    def _span_to_dict(self, span: Span | None) -> dict[str, int] | None:
        if span is None:
            return None
        return {"start": span.start, "end": span.end}

    def _rule_to_dict(self, rule: Rule) -> dict[str, object]:
        return {
            "kind": "Rule",
            "name": rule.name.name,
            "params": [self._param_to_dict(p) for p in rule.params],
            "body": self.term_to_dict(rule.body),
            "required": rule.required,
            "span": self._span_to_dict(rule.span),
        }

    def _param_to_dict(self, param: Parameter) -> dict[str, object]:
        return {
            "parameter": self.term_to_dict(param.parameter),
            "specializer": self.term_to_dict(param.specializer) if param.specializer else None,
        }

    def _production_to_dict(self, production: Production) -> dict[str, object]:
        if isinstance(production, Declaration):
            return {
                "kind": "Declaration",
                "name": self.term_to_dict(production.name),
                "value": self.term_to_dict(production.value),
            }
        if isinstance(production, ShorthandRule):
            relation = None
            if production.relation is not None:
                relation = [self.term_to_dict(t) for t in production.relation]
            return {
                "kind": "ShorthandRule",
                "head": self.term_to_dict(production.head),
                "implier": self.term_to_dict(production.implier),
                "relation": relation,
            }
        raise TypeError(f"Unknown production type: {type(production)}")

    def _fields_to_dict(self, fields: Dictionary) -> dict[str, object]:
        return {key.name: self.term_to_dict(value) for key, value in fields.fields.items()}

    def term_to_dict(self, term: Term) -> dict[str, object]:
        data = self._value_to_dict(term.value)
        data["span"] = self._span_to_dict(term.span)
        return data

    def _value_to_dict(self, value: Value) -> dict[str, object]:
        if isinstance(value, Number):
            return {"kind": "Number", "value": value.value}
        if isinstance(value, String):
            return {"kind": "String", "value": value.value}
        if isinstance(value, Boolean):
            return {"kind": "Boolean", "value": value.value}
        if isinstance(value, Variable):
            return {"kind": "Variable", "name": value.name.name}
        if isinstance(value, RestVariable):
            return {"kind": "RestVariable", "name": value.name.name}
        if isinstance(value, List):
            return {"kind": "List", "elements": [self.term_to_dict(t) for t in value.elements]}
        if isinstance(value, Dictionary):
            return {"kind": "Dictionary", "fields": self._fields_to_dict(value)}
        if isinstance(value, Call):
            return {
                "kind": "Call",
                "name": value.name.name,
                "args": [self.term_to_dict(t) for t in value.args],
                "kwargs": self._fields_to_dict(value.kwargs) if value.kwargs is not None else None,
            }
        if isinstance(value, Operation):
            return {
                "kind": "Operation",
                "operator": value.operator.name,
                "args": [self.term_to_dict(t) for t in value.args],
            }
        if isinstance(value, DictionaryPattern):
            return {"kind": "DictionaryPattern", "fields": self._fields_to_dict(value.fields)}
        if isinstance(value, InstancePattern):
            return {
                "kind": "InstancePattern",
                "tag": value.tag.name,
                "fields": self._fields_to_dict(value.fields),
            }
        raise TypeError(f"Unknown value type: {type(value)}")

    # ------------------------------------------------------------------
    # Deserialization (dict → AST)
    # ------------------------------------------------------------------

    def lines_from_dict(self, data: dict[str, object]) -> list[Line]:
        """Deserialize a dict produced by ``lines_to_dict``."""
        if data.get("kind") != "PolarFile":
            raise ValueError(f"Expected kind 'PolarFile', got {data.get('kind')!r}")
        return [self.line_from_dict(d) for d in data["lines"]]

    def line_from_dict(self, data: dict[str, object]) -> Line:
        kind = data.get("kind")
        if kind == "Rule":
            return self._rule_from_dict(data)
        if kind == "RuleType":
            return RuleType(rule=self._rule_from_dict(data["rule"]))
        if kind == "Query":
            return Query(term=self.term_from_dict(data["term"]))
        if kind == "ResourceBlock":
            keyword = data.get("keyword")
            return ResourceBlock(
                keyword=self.term_from_dict(keyword) if keyword else None,
                resource=self.term_from_dict(data["resource"]),
                productions=tuple(
                    self._production_from_dict(p) for p in data.get("productions", [])
                ),
            )
        raise ValueError(f"Unknown line kind: {kind!r}")

    def _span_from_dict(self, data: dict[str, int] | None) -> Span | None:
        if data is None:
            return None
        return Span(self._source, data["start"], data["end"])

    def _rule_from_dict(self, data: dict[str, object]) -> Rule:
        return Rule(
            name=Symbol(str(data["name"])),
            params=tuple(self._param_from_dict(p) for p in data.get("params", [])),
            body=self.term_from_dict(data["body"]),
            span=self._span_from_dict(data.get("span")),
            required=bool(data.get("required", False)),
        )

    def _param_from_dict(self, data: dict[str, object]) -> Parameter:
        specializer = data.get("specializer")
        return Parameter(
            parameter=self.term_from_dict(data["parameter"]),
            specializer=self.term_from_dict(specializer) if specializer else None,
        )

    def _production_from_dict(self, data: dict[str, object]) -> Production:
        kind = data.get("kind")
        if kind == "Declaration":
            return Declaration(
                name=self.term_from_dict(data["name"]),
                value=self.term_from_dict(data["value"]),
            )
        if kind == "ShorthandRule":
            relation = data.get("relation")
            return ShorthandRule(
                head=self.term_from_dict(data["head"]),
                implier=self.term_from_dict(data["implier"]),
                relation=(
                    (self.term_from_dict(relation[0]), self.term_from_dict(relation[1]))
                    if relation
                    else None
                ),
            )
        raise ValueError(f"Unknown production kind: {kind!r}")

    def _fields_from_dict(self, data: dict[str, object]) -> Dictionary:
        return Dictionary({Symbol(k): self.term_from_dict(v) for k, v in data.items()})

    def term_from_dict(self, data: dict[str, object]) -> Term:
        return Term(value=self._value_from_dict(data), span=self._span_from_dict(data.get("span")))

    def _value_from_dict(self, data: dict[str, object]) -> Value:
        kind = data.get("kind")
        if kind == "Number":
            return Number(data["value"])
        if kind == "String":
            return String(str(data["value"]))
        if kind == "Boolean":
            return Boolean(bool(data["value"]))
        if kind == "Variable":
            return Variable(Symbol(str(data["name"])))
        if kind == "RestVariable":
            return RestVariable(Symbol(str(data["name"])))
        if kind == "List":
            return List(tuple(self.term_from_dict(t) for t in data["elements"]))
        if kind == "Dictionary":
            return self._fields_from_dict(data["fields"])
        if kind == "Call":
            kwargs = data.get("kwargs")
            return Call(
                name=Symbol(str(data["name"])),
                args=tuple(self.term_from_dict(t) for t in data.get("args", [])),
                kwargs=self._fields_from_dict(kwargs) if kwargs is not None else None,
            )
        if kind == "Operation":
            return Operation(
                operator=Operator[str(data["operator"])],
                args=tuple(self.term_from_dict(t) for t in data.get("args", [])),
            )
        if kind == "DictionaryPattern":
            return DictionaryPattern(self._fields_from_dict(data["fields"]))
        if kind == "InstancePattern":
            return InstancePattern(
                tag=Symbol(str(data["tag"])),
                fields=self._fields_from_dict(data.get("fields", {})),
            )
        raise ValueError(f"Unknown term kind: {kind!r}")

    # ------------------------------------------------------------------
    # JSON / YAML wrappers
    # ------------------------------------------------------------------

    def to_json(self, lines: list[Line], indent: int = 2) -> str:
        """Serialize ``lines`` to a JSON string."""
        return json.dumps(self.lines_to_dict(lines), indent=indent)

    def from_json(self, text: str) -> list[Line]:
        """Deserialize lines from a JSON string."""
        return self.lines_from_dict(json.loads(text))

    def to_yaml(self, lines: list[Line]) -> str:
        """Serialize ``lines`` to a YAML string."""
        return yaml.safe_dump(self.lines_to_dict(lines), sort_keys=False, allow_unicode=True)

    def from_yaml(self, text: str) -> list[Line]:
        """Deserialize lines from a YAML string."""
        data = yaml.safe_load(text)
        if not isinstance(data, dict):
            raise ValueError("YAML document must be a mapping")
        return self.lines_from_dict(data)
