"""Polar Lexer module.

Exports the ``Lexer`` class and the ``tokenize`` convenience function.
"""
from __future__ import annotations

from polar_lang.lexer.lexer import LexError, Lexer, tokenize

__all__ = ["Lexer", "tokenize", "LexError"]
