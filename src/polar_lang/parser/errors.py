"""Parse error types for the Polar parser.

All parse errors carry source-location information so that the CLI and
editor integrations can display precise, actionable error messages.
Parsing stops at the first error: there is no recovery and no partial
result.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from polar_lang.ast.nodes import Span, Symbol, Term
from polar_lang.grammar.tokens import Token, TokenType

if TYPE_CHECKING:
    from polar_lang.parser.classification import ValueKind


@dataclass(frozen=True)
class ParseError(Exception):
    """Base class for every error raised by the parser.

    Parameters
    ----------
    message:
        Human-readable description of the error.
    span:
        Source location of the offending token or term.
    """

    message: str
    span: Span

    def __str__(self) -> str:
        return f"ParseError at {self.span.location()}: {self.message}"

    # dataclass(frozen=True) doesn't call Exception.__init__ automatically
    def __post_init__(self) -> None:
        object.__setattr__(self, "args", (str(self),))


@dataclass(frozen=True)
class UnrecognizedToken(ParseError):
    """A token that no production accepts at the current position."""

    token: Token
    expected: tuple[TokenType, ...] = ()

    def __str__(self) -> str:
        return (
            f"ParseError at {self.span.location()}: {self.message} "
            f"(found {self.token.type.name} {self.token.value!r})"
        )


@dataclass(frozen=True)
class UnrecognizedEOF(ParseError):
    """The token stream ended in the middle of a production."""

    expected: tuple[TokenType, ...] = ()


@dataclass(frozen=True)
class WrongValueType(ParseError):
    """A logical term where a value was required, or vice versa."""

    term: Term
    expected: "ValueKind"


@dataclass(frozen=True)
class DuplicateKey(ParseError):
    """A key repeated within one dictionary, call or pattern literal."""

    key: Symbol
