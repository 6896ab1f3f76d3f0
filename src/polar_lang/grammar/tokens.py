"""Token definitions for the Polar policy language.

Defines the complete token vocabulary consumed by the Polar grammar.
Every keyword, punctuation mark and literal kind is represented as a
member of the ``TokenType`` enum, and every scanned token is represented
by a ``Token`` dataclass that carries its type, payload and source
position.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    """Exhaustive enumeration of all Polar token types."""

    # -----------------------------------------------------------------
    # Literals
    # -----------------------------------------------------------------
    INTEGER = auto()
    FLOAT = auto()
    STRING = auto()
    BOOLEAN = auto()
    SYMBOL = auto()

    # -----------------------------------------------------------------
    # Punctuation
    # -----------------------------------------------------------------
    COLON = auto()        # :
    COMMA = auto()        # ,
    LBRACKET = auto()     # [
    RBRACKET = auto()     # ]
    LPAREN = auto()       # (
    RPAREN = auto()       # )
    LBRACE = auto()       # {
    RBRACE = auto()       # }
    DOT = auto()          # .
    BANG = auto()         # !
    PIPE = auto()         # |
    SEMICOLON = auto()    # ;
    QUERY = auto()        # ?=

    # -----------------------------------------------------------------
    # Arithmetic operators
    # -----------------------------------------------------------------
    MUL = auto()          # *
    DIV = auto()          # /
    MOD = auto()          # mod
    REM = auto()          # rem
    ADD = auto()          # +
    SUB = auto()          # -

    # -----------------------------------------------------------------
    # Comparison and unification operators
    # -----------------------------------------------------------------
    EQ = auto()           # ==
    NEQ = auto()          # !=
    LEQ = auto()          # <=
    GEQ = auto()          # >=
    LT = auto()           # <
    GT = auto()           # >
    UNIFY = auto()        # =
    ASSIGN = auto()       # :=

    # -----------------------------------------------------------------
    # Keywords
    # -----------------------------------------------------------------
    NEW = auto()
    CUT = auto()
    DEBUG = auto()
    PRINT = auto()
    IN = auto()
    FORALL = auto()
    IF = auto()
    AND = auto()
    OR = auto()
    NOT = auto()
    MATCHES = auto()
    TYPE = auto()

    # -----------------------------------------------------------------
    # Structure
    # -----------------------------------------------------------------
    COMMENT = auto()
    EOF = auto()


# Mapping from reserved word text to its TokenType.  ``true``/``false``
# are handled separately because they carry a boolean payload.
KEYWORDS: dict[str, TokenType] = {
    "new": TokenType.NEW,
    "mod": TokenType.MOD,
    "rem": TokenType.REM,
    "cut": TokenType.CUT,
    "debug": TokenType.DEBUG,
    "print": TokenType.PRINT,
    "in": TokenType.IN,
    "forall": TokenType.FORALL,
    "if": TokenType.IF,
    "and": TokenType.AND,
    "or": TokenType.OR,
    "not": TokenType.NOT,
    "matches": TokenType.MATCHES,
    "type": TokenType.TYPE,
}

# Fixed punctuation and operator spellings, longest first within a prefix.
OPERATORS: dict[str, TokenType] = {
    "?=": TokenType.QUERY,
    ":=": TokenType.ASSIGN,
    "==": TokenType.EQ,
    "!=": TokenType.NEQ,
    "<=": TokenType.LEQ,
    ">=": TokenType.GEQ,
    ":": TokenType.COLON,
    ",": TokenType.COMMA,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    ".": TokenType.DOT,
    "!": TokenType.BANG,
    "|": TokenType.PIPE,
    ";": TokenType.SEMICOLON,
    "*": TokenType.MUL,
    "/": TokenType.DIV,
    "+": TokenType.ADD,
    "-": TokenType.SUB,
    "<": TokenType.LT,
    ">": TokenType.GT,
    "=": TokenType.UNIFY,
}

_LITERAL_TYPES = frozenset({
    TokenType.INTEGER,
    TokenType.FLOAT,
    TokenType.STRING,
    TokenType.BOOLEAN,
    TokenType.SYMBOL,
})


@dataclass(frozen=True, slots=True)
class Token:
    """A single scanned token with source-location metadata.

    Parameters
    ----------
    type:
        The ``TokenType`` variant for this token.
    value:
        The payload: ``int``/``float``/``str``/``bool`` for literal
        tokens, the raw spelling for keywords and punctuation.
    offset:
        0-based character index of the first character in the source string.
    end:
        0-based offset *past* the last character.
    line:
        1-based line number of the first character.
    col:
        1-based column number of the first character.
    """

    type: TokenType
    value: object
    offset: int
    end: int
    line: int = 0
    col: int = 0

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.col})"

    @property
    def is_keyword(self) -> bool:
        """Return True if this token is a reserved word."""
        return self.type in _KEYWORD_TYPES

    @property
    def is_literal(self) -> bool:
        """Return True if this token carries a literal payload."""
        return self.type in _LITERAL_TYPES


_KEYWORD_TYPES = frozenset(KEYWORDS.values())
