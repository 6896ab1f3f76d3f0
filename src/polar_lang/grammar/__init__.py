"""Polar grammar module.

Exports token definitions, formal grammar constants and operator tables.
"""
from __future__ import annotations

from polar_lang.grammar.grammar import (
    FULL_GRAMMAR,
    GRAMMAR_EXPRESSION,
    GRAMMAR_PATTERN,
    GRAMMAR_RESOURCE_BLOCK,
    GRAMMAR_ROOT,
    GRAMMAR_RULE,
    OPERATOR_PRECEDENCE,
    OPERATOR_SPELLING,
)
from polar_lang.grammar.tokens import KEYWORDS, OPERATORS, Token, TokenType

__all__ = [
    # Token types
    "TokenType",
    "Token",
    "KEYWORDS",
    "OPERATORS",
    # Grammar constants
    "FULL_GRAMMAR",
    "GRAMMAR_ROOT",
    "GRAMMAR_RULE",
    "GRAMMAR_RESOURCE_BLOCK",
    "GRAMMAR_EXPRESSION",
    "GRAMMAR_PATTERN",
    # Operator tables
    "OPERATOR_PRECEDENCE",
    "OPERATOR_SPELLING",
]
