"""Polar Lexer: converts raw source text into a flat list of tokens.

The lexer is a single-pass character scanner that produces a
``list[Token]`` from a Polar source string.  It records the offset,
line and column of every token so the parser can attach spans to the
terms it builds.

Comments run from ``#`` to the end of the line and are emitted as
``COMMENT`` tokens, which the parser skips.

String literals are double-quoted, may span lines, and support the
backslash escapes ``\\n``, ``\\t``, ``\\r``, ``\\0``, ``\\\\`` and ``\\"``.

Numbers are integers or floats (``1``, ``1.5``, ``1e10``, ``2.5e-3``).
A leading ``-`` or ``+`` is emitted as its own token; the parser folds
it into the literal.

Symbols follow ``[A-Za-z_][A-Za-z0-9_]*`` and may contain ``::`` path
separators (``Foo::Bar``).  Reserved words are emitted as their keyword
token type.
"""
from __future__ import annotations

import logging
import re
from typing import Final

from polar_lang.grammar.tokens import KEYWORDS, OPERATORS, Token, TokenType

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_IDENT_START: Final[re.Pattern[str]] = re.compile(r"[A-Za-z_]")
_IDENT_CONT: Final[re.Pattern[str]] = re.compile(r"[A-Za-z0-9_]")
_DIGIT: Final[re.Pattern[str]] = re.compile(r"[0-9]")

_MAX_INTEGER: Final[int] = 2**63 - 1

_ESCAPE_MAP: Final[dict[str, str]] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "\\": "\\",
    '"': '"',
    "0": "\0",
}


class LexError(Exception):
    """Raised when the lexer encounters invalid input.

    Parameters
    ----------
    message:
        Human-readable description of the problem.
    line:
        1-based line number where the error occurred.
    col:
        1-based column number where the error occurred.
    offset:
        0-based offset in the source where the error occurred.
    """

    def __init__(self, message: str, line: int, col: int, offset: int) -> None:
        super().__init__(f"LexError at {line}:{col}: {message}")
        self.lex_message = message
        self.line = line
        self.col = col
        self.offset = offset


class Lexer:
    """Single-pass Polar lexer.

    Parameters
    ----------
    source:
        The complete Polar source text to tokenize.
    """

    __slots__ = ("_source", "_pos", "_line", "_col", "_tokens", "_token_line", "_token_col")

    def __init__(self, source: str) -> None:
        self._source: str = source
        self._pos: int = 0
        self._line: int = 1
        self._col: int = 1
        self._tokens: list[Token] = []
        self._token_line: int = 1
        self._token_col: int = 1

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def tokenize(self) -> list[Token]:
        """Scan the entire source and return the complete token list.

        The list always ends with an ``EOF`` token.

        Raises
        ------
        LexError
            On any character that cannot begin a valid token.
        """
        while self._pos < len(self._source):
            self._scan_one()
        self._token_line = self._line
        self._token_col = self._col
        self._emit(TokenType.EOF, "", self._pos)
        logger.debug("Scanned %d token(s) from %d character(s)", len(self._tokens), len(self._source))
        return self._tokens

    # ------------------------------------------------------------------
    # Internal scanner
    # ------------------------------------------------------------------

    def _current(self) -> str:
        """Return the character at the current position without advancing."""
        return self._source[self._pos] if self._pos < len(self._source) else ""

    def _peek(self, offset: int = 1) -> str:
        """Return the character at ``pos + offset`` without advancing."""
        idx = self._pos + offset
        return self._source[idx] if idx < len(self._source) else ""

    def _advance(self) -> str:
        """Consume and return the current character, updating line/col."""
        ch = self._source[self._pos]
        self._pos += 1
        if ch == "\n":
            self._line += 1
            self._col = 1
        else:
            self._col += 1
        return ch

    def _emit(self, token_type: TokenType, value: object, start_offset: int) -> None:
        """Append a token spanning ``start_offset`` to the current position."""
        self._tokens.append(
            Token(
                type=token_type,
                value=value,
                offset=start_offset,
                end=self._pos,
                line=self._token_line,
                col=self._token_col,
            )
        )

    def _error(self, message: str, start: int) -> LexError:
        return LexError(message, self._token_line, self._token_col, start)

    def _scan_one(self) -> None:
        """Scan exactly one token (or skip whitespace)."""
        self._token_line = self._line
        self._token_col = self._col
        start = self._pos
        ch = self._current()

        if ch.isspace():
            self._advance()
            return

        if ch == "#":
            self._scan_comment(start)
            return

        if ch == '"':
            self._scan_string(start)
            return

        if _DIGIT.match(ch):
            self._scan_number(start)
            return

        if _IDENT_START.match(ch):
            self._scan_symbol_or_keyword(start)
            return

        two = ch + self._peek()
        if len(two) == 2 and two in OPERATORS:
            self._advance()
            self._advance()
            self._emit(OPERATORS[two], two, start)
            return
        if ch in OPERATORS:
            self._advance()
            self._emit(OPERATORS[ch], ch, start)
            return

        raise self._error(f"Unexpected character {ch!r}", start)

    # ------------------------------------------------------------------
    # Token-specific scanners
    # ------------------------------------------------------------------

    def _scan_comment(self, start: int) -> None:
        """Consume a ``#`` comment through the end of the line."""
        while self._pos < len(self._source) and self._current() != "\n":
            self._advance()
        self._emit(TokenType.COMMENT, self._source[start : self._pos], start)

    def _scan_string(self, start: int) -> None:
        """Consume a double-quoted string literal with backslash escape support."""
        self._advance()  # opening "
        buf: list[str] = []
        while self._pos < len(self._source):
            ch = self._current()
            if ch == '"':
                self._advance()  # closing "
                self._emit(TokenType.STRING, "".join(buf), start)
                return
            if ch == "\\":
                self._advance()
                esc = self._current()
                if esc not in _ESCAPE_MAP:
                    raise self._error(f"Invalid escape sequence \\{esc}", start)
                buf.append(_ESCAPE_MAP[esc])
                self._advance()
            else:
                buf.append(self._advance())
        raise self._error("Unterminated string literal (EOF)", start)

    def _scan_digits(self, buf: list[str]) -> None:
        while self._pos < len(self._source) and _DIGIT.match(self._current()):
            buf.append(self._advance())

    def _scan_number(self, start: int) -> None:
        """Consume an integer or float literal."""
        buf: list[str] = []
        is_float = False
        self._scan_digits(buf)
        if self._current() == "." and _DIGIT.match(self._peek()):
            is_float = True
            buf.append(self._advance())
            self._scan_digits(buf)
        if self._current() in ("e", "E"):
            sign = self._peek() if self._peek() in ("+", "-") else ""
            if _DIGIT.match(self._peek(1 + len(sign))):
                is_float = True
                buf.append(self._advance())
                if sign:
                    buf.append(self._advance())
                self._scan_digits(buf)
        text = "".join(buf)
        if is_float:
            self._emit(TokenType.FLOAT, float(text), start)
            return
        value = int(text)
        if value > _MAX_INTEGER:
            raise self._error(f"Integer literal {text} does not fit in 64 bits", start)
        self._emit(TokenType.INTEGER, value, start)

    def _scan_symbol_or_keyword(self, start: int) -> None:
        """Consume a symbol, then classify it as keyword, boolean or SYMBOL."""
        buf: list[str] = []
        while self._pos < len(self._source):
            ch = self._current()
            if _IDENT_CONT.match(ch):
                buf.append(self._advance())
            elif ch == ":" and self._peek() == ":" and _IDENT_START.match(self._peek(2)):
                buf.append(self._advance())
                buf.append(self._advance())
            else:
                break
        word = "".join(buf)
        if word in ("true", "false"):
            self._emit(TokenType.BOOLEAN, word == "true", start)
        elif word in KEYWORDS:
            self._emit(KEYWORDS[word], word, start)
        else:
            self._emit(TokenType.SYMBOL, word, start)


# ---------------------------------------------------------------------------
# Module-level convenience function
# ---------------------------------------------------------------------------


def tokenize(source: str) -> list[Token]:
    """Tokenize a Polar source string and return the complete token list.

    Raises
    ------
    LexError
        If the source contains invalid characters or unterminated literals.

    Example
    -------
    ::

        from polar_lang.lexer import tokenize
        tokens = tokenize('allow(actor, "read", resource) if actor.admin;')
    """
    return Lexer(source).tokenize()
