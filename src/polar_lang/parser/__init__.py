"""Polar Parser module.

Exports the ``Parser`` class, the token-level entry points, the
value/logical classification helpers and parse error types.
"""
from __future__ import annotations

from polar_lang.parser.classification import Classified, ValueKind, require_logical, require_value
from polar_lang.parser.errors import (
    DuplicateKey,
    ParseError,
    UnrecognizedEOF,
    UnrecognizedToken,
    WrongValueType,
)
from polar_lang.parser.parser import Parser, parse_lines, parse_rules, parse_term

__all__ = [
    "Parser",
    "parse_term",
    "parse_rules",
    "parse_lines",
    "Classified",
    "ValueKind",
    "require_value",
    "require_logical",
    "ParseError",
    "UnrecognizedToken",
    "UnrecognizedEOF",
    "WrongValueType",
    "DuplicateKey",
]
