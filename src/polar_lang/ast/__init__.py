"""Polar AST module.

Exports all AST node types and the serializer for converting AST trees
to and from JSON/YAML.
"""
from __future__ import annotations

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
    Pattern,
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
from polar_lang.ast.serializer import AstSerializer

__all__ = [
    # Source location
    "Source",
    "Span",
    # Terms
    "Term",
    "Value",
    "Symbol",
    "Number",
    "String",
    "Boolean",
    "Variable",
    "RestVariable",
    "List",
    "Dictionary",
    "Call",
    "Operation",
    "Operator",
    # Patterns
    "Pattern",
    "DictionaryPattern",
    "InstancePattern",
    # Rules and lines
    "Parameter",
    "Rule",
    "RuleType",
    "Query",
    "ResourceBlock",
    "Declaration",
    "ShorthandRule",
    "Production",
    "Line",
    # Serializer
    "AstSerializer",
]
