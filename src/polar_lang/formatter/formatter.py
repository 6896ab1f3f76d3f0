"""Polar formatter: AST → Polar source text.

The ``PolarFormatter`` renders terms, rules and whole files back into
Polar text with:

- 2-space indentation inside resource blocks
- one conjunct per line in multi-clause rule bodies
- parentheses only where operator precedence requires them
- dictionary fields in key order
- COMMENT tokens are not preserved (the formatter works from the AST)

Parsing the formatter's output yields an AST equal to the one that was
formatted.  This is used by ``polar-lang fmt`` and for rendering terms
in diagnostics.

Usage
-----
::

    from polar_lang.formatter import to_polar
    from polar_lang import parse_term

    to_polar(parse_term("x.y  =  {b: 2, a: 1}"))
    # 'x.y = {a: 1, b: 2}'
"""
from __future__ import annotations

import re

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
    String,
    Term,
    Variable,
)
from polar_lang.grammar.grammar import OPERATOR_PRECEDENCE, OPERATOR_SPELLING

_INDENT = "  "  # 2 spaces per level
_BODY_INDENT = "    "

_ATOM_LEVEL = 10
_NOT_LEVEL = OPERATOR_PRECEDENCE[Operator.NOT]
_CLAUSE_LEVEL = OPERATOR_PRECEDENCE[Operator.AND] + 1
_FIELD_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*\Z")
_STRING_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\t": "\\t", "\r": "\\r", "\0": "\\0"}
_BUILTINS = (Operator.DEBUG, Operator.PRINT, Operator.FOR_ALL)


class PolarFormatter:
    """Produces Polar source text from AST nodes."""

    # ------------------------------------------------------------------
    # Files and lines
    # ------------------------------------------------------------------

    def format_lines(self, lines: list[Line]) -> str:
        """Render a parsed file, always ending with a newline.

        Consecutive rules with the same name are kept together; any other
        change of line is separated by a blank line.
        """
        out: list[str] = []
        previous: Line | None = None
        for line in lines:
            if previous is not None and not self._same_group(previous, line):
                out.append("")
            out.append(self.format_line(line))
            previous = line
        return "\n".join(out) + "\n" if out else ""

    @staticmethod
    def _same_group(previous: Line, line: Line) -> bool:
        return isinstance(previous, Rule) and isinstance(line, Rule) and previous.name == line.name

    def format_line(self, line: Line) -> str:
        if isinstance(line, Rule):
            return self.format_rule(line)
        if isinstance(line, RuleType):
            return f"type {self._format_head(line.rule)};"
        if isinstance(line, Query):
            return f"?= {self.format_term(line.term)};"
        if isinstance(line, ResourceBlock):
            return self._format_resource_block(line)
        raise TypeError(f"Unknown line type: {type(line)}")

    def format_rule(self, rule: Rule) -> str:
        head = self._format_head(rule)
        body = rule.body.value
        if not isinstance(body, Operation) or body.operator is not Operator.AND:
            return f"{head} if {self.format_term(rule.body)};"
        if not body.args:
            return f"{head};"
        clauses = [self._format_operand(arg, _CLAUSE_LEVEL) for arg in body.args]
        if len(clauses) == 1:
            return f"{head} if {clauses[0]};"
        return f"{head} if\n{_BODY_INDENT}" + f" and\n{_BODY_INDENT}".join(clauses) + ";"

    def _format_head(self, rule: Rule) -> str:
        params = ", ".join(self.format_parameter(p) for p in rule.params)
        return f"{rule.name.name}({params})"

    def format_parameter(self, param: Parameter) -> str:
        text = self.format_term(param.parameter)
        if param.specializer is not None:
            text += f": {self._format_top_pattern(param.specializer)}"
        return text

    def _format_resource_block(self, block: ResourceBlock) -> str:
        header = self.format_term(block.resource)
        if block.keyword is not None:
            header = f"{self.format_term(block.keyword)} {header}"
        if not block.productions:
            return f"{header} {{}}"
        lines = [f"{header} {{"]
        lines.extend(f"{_INDENT}{self.format_production(p)}" for p in block.productions)
        lines.append("}")
        return "\n".join(lines)

    def format_production(self, production: Production) -> str:
        if isinstance(production, Declaration):
            return f"{self.format_term(production.name)} = {self.format_term(production.value)};"
        if isinstance(production, ShorthandRule):
            text = f"{self.format_term(production.head)} if {self.format_term(production.implier)}"
            if production.relation is not None:
                keyword, relation = production.relation
                text += f" {self.format_term(keyword)} {self.format_term(relation)}"
            return text + ";"
        raise TypeError(f"Unknown production type: {type(production)}")

    # ------------------------------------------------------------------
    # Terms
    # ------------------------------------------------------------------

    def format_term(self, term: Term) -> str:
        """Render a term as a Polar expression."""
        value = term.value
        if isinstance(value, Number):
            return self._format_number(value.value)
        if isinstance(value, String):
            return self._format_string(value.value)
        if isinstance(value, Boolean):
            return "true" if value.value else "false"
        if isinstance(value, Variable):
            return value.name.name
        if isinstance(value, RestVariable):
            return f"*{value.name.name}"
        if isinstance(value, List):
            return "[" + ", ".join(self.format_term(t) for t in value.elements) + "]"
        if isinstance(value, Dictionary):
            return self._format_fields(value)
        if isinstance(value, DictionaryPattern):
            return self._format_fields(value.fields)
        if isinstance(value, InstancePattern):
            return f"{value.tag.name}{self._format_fields(value.fields)}"
        if isinstance(value, Call):
            return self._format_call(value)
        if isinstance(value, Operation):
            return self._format_operation(value)
        raise TypeError(f"Unknown value type: {type(value)}")

    def _format_operation(self, op: Operation) -> str:
        operator = op.operator
        level = OPERATOR_PRECEDENCE[operator]
        spelling = OPERATOR_SPELLING[operator]

        if operator is Operator.CUT:
            return "cut"
        if operator in _BUILTINS:
            return f"{spelling}(" + ", ".join(self.format_term(a) for a in op.args) + ")"
        if operator is Operator.NEW:
            return f"new {self.format_term(op.args[0])}"
        if operator is Operator.NOT:
            return f"not {self._format_operand(op.args[0], _NOT_LEVEL)}"
        if operator in (Operator.AND, Operator.OR):
            if not op.args:
                return "true" if operator is Operator.AND else "false"
            return f" {spelling} ".join(self._format_operand(a, level + 1) for a in op.args)
        if operator is Operator.DOT:
            left, key = op.args
            return f"{self._format_operand(left, level)}.{self._format_dot_key(key)}"
        if operator is Operator.ISA:
            left, pattern = op.args
            return f"{self._format_operand(left, level)} matches {self._format_top_pattern(pattern)}"

        left, right = op.args
        # Left-associative: a right operand at the same level needs parens.
        return f"{self._format_operand(left, level)} {spelling} {self._format_operand(right, level + 1)}"

    def _format_operand(self, term: Term, min_level: int) -> str:
        """Render ``term``, parenthesized if it binds looser than ``min_level``."""
        text = self.format_term(term)
        if self._level(term) < min_level:
            return f"({text})"
        return text

    @staticmethod
    def _level(term: Term) -> int:
        value = term.value
        if isinstance(value, Operation):
            if value.operator in (Operator.AND, Operator.OR) and not value.args:
                return _ATOM_LEVEL
            return OPERATOR_PRECEDENCE[value.operator]
        return _ATOM_LEVEL

    def _format_dot_key(self, key: Term) -> str:
        value = key.value
        if isinstance(value, Call):
            return self._format_call(value)
        if isinstance(value, String) and _FIELD_NAME.match(value.value) and value.value not in ("true", "false"):
            return value.value
        return f"({self.format_term(key)})"

    def _format_top_pattern(self, pattern: Term) -> str:
        """Render a specializer or ``matches`` pattern; ``Foo{}`` prints as ``Foo``."""
        value = pattern.value
        if isinstance(value, InstancePattern) and not value.fields.fields:
            return value.tag.name
        return self.format_term(pattern)

    def _format_call(self, call: Call) -> str:
        args = [self.format_term(a) for a in call.args]
        if call.kwargs is not None:
            args.extend(f"{k.name}: {self.format_term(v)}" for k, v in call.kwargs.fields.items())
        return f"{call.name.name}(" + ", ".join(args) + ")"

    def _format_fields(self, fields: Dictionary) -> str:
        return "{" + ", ".join(f"{k.name}: {self.format_term(v)}" for k, v in fields.fields.items()) + "}"

    @staticmethod
    def _format_number(value: int | float) -> str:
        if isinstance(value, float):
            return repr(value)
        return str(value)

    @staticmethod
    def _format_string(value: str) -> str:
        """Render a Python string as a Polar double-quoted string literal."""
        return '"' + "".join(_STRING_ESCAPES.get(ch, ch) for ch in value) + '"'


def to_polar(node: Term | Line | Parameter | Production) -> str:
    """Convenience function: render any AST node as Polar text."""
    formatter = PolarFormatter()
    if isinstance(node, Term):
        return formatter.format_term(node)
    if isinstance(node, Parameter):
        return formatter.format_parameter(node)
    if isinstance(node, (Declaration, ShorthandRule)):
        return formatter.format_production(node)
    return formatter.format_line(node)


def format_lines(lines: list[Line]) -> str:
    """Convenience function: render a parsed file as Polar text."""
    return PolarFormatter().format_lines(lines)
