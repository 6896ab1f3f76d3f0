"""polar-lang — grammar core for the Polar authorization policy language.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import polar_lang

    # Parse a single expression
    term = polar_lang.parse_term('actor.role = "admin" and not actor.banned')

    # Parse a whole policy file
    lines = polar_lang.parse_lines('''
        actor User {}

        resource Repository {
          permissions = ["read", "push"];
          roles = ["contributor", "maintainer"];

          "read" if "contributor";
          "push" if "maintainer";
        }

        allow(actor, action, resource) if
          has_permission(actor, action, resource);
    ''')

    # Render back to canonical Polar
    text = polar_lang.format(lines)

    polar_lang.__version__
    '0.1.0'
"""
from __future__ import annotations

from typing import TYPE_CHECKING

__version__: str = "0.1.0"

if TYPE_CHECKING:
    from polar_lang.ast.nodes import Line, Rule, Source, Term


def _tokenize(text: str, filename: str | None) -> tuple[list, "Source"]:
    from polar_lang.ast.nodes import Source
    from polar_lang.lexer import tokenize

    return tokenize(text), Source(text, filename)


def parse_term(text: str, filename: str | None = None) -> "Term":
    """Parse a single Polar expression.

    Parameters
    ----------
    text:
        The expression text, without a trailing ``;``.
    filename:
        Optional name reported in error locations.

    Raises
    ------
    polar_lang.lexer.LexError
        If the text contains invalid characters.
    polar_lang.parser.ParseError
        On the first syntax, classification or duplicate-key error.
    """
    from polar_lang.parser.parser import parse_term as _parse_term

    tokens, source = _tokenize(text, filename)
    return _parse_term(tokens, source)


def parse_rules(text: str, filename: str | None = None) -> list["Rule"]:
    """Parse a sequence of rule definitions."""
    from polar_lang.parser.parser import parse_rules as _parse_rules

    tokens, source = _tokenize(text, filename)
    return _parse_rules(tokens, source)


def parse_lines(text: str, filename: str | None = None) -> list["Line"]:
    """Parse a whole Polar file into rules, rule types, queries and resource blocks.

    Parameters
    ----------
    text:
        Complete Polar source text.
    filename:
        Optional name reported in error locations.

    Returns
    -------
    list[Line]
        The file's lines in source order.
    """
    from polar_lang.parser.parser import parse_lines as _parse_lines

    tokens, source = _tokenize(text, filename)
    return _parse_lines(tokens, source)


def format(node: "Term | Line | list[Line]") -> str:  # noqa: A001
    """Render a term, a line or a parsed file as canonical Polar text."""
    from polar_lang.formatter import format_lines, to_polar

    if isinstance(node, list):
        return format_lines(node)
    return to_polar(node)


__all__ = [
    "__version__",
    "parse_term",
    "parse_rules",
    "parse_lines",
    "format",
]
