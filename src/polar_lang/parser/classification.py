"""Value/logical classification of parsed expressions.

Every expression production returns its term together with a
``ValueKind``.  Operators narrow their operands with ``require_value``
or ``require_logical``, which is how malformed programs such as
``x = 1 > 2`` are rejected while parsing.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from polar_lang.ast.nodes import Span, Term
from polar_lang.parser.errors import WrongValueType


class ValueKind(Enum):
    """What an expression denotes when evaluated."""

    VALUE = auto()
    LOGICAL = auto()
    EITHER = auto()


@dataclass(frozen=True, slots=True)
class Classified:
    """A parsed term and its ``ValueKind``."""

    term: Term
    kind: ValueKind


def _describe(kind: ValueKind) -> str:
    return "a value" if kind is ValueKind.VALUE else "a logical expression"


def _wrong_type(classified: Classified, expected: ValueKind) -> WrongValueType:
    term = classified.term
    span = term.span or Span(None, 0, 0)
    found = span.text() or type(term.value).__name__
    return WrongValueType(
        message=f"Expected {_describe(expected)}, found {found!r}",
        span=span,
        term=term,
        expected=expected,
    )


def require_value(classified: Classified) -> Term:
    """Return the term if it may be used as a value, else raise."""
    if classified.kind is ValueKind.LOGICAL:
        raise _wrong_type(classified, ValueKind.VALUE)
    return classified.term


def require_logical(classified: Classified) -> Term:
    """Return the term if it may be used as a goal, else raise."""
    if classified.kind is ValueKind.VALUE:
        raise _wrong_type(classified, ValueKind.LOGICAL)
    return classified.term
