"""Polar Formatter module.

Exports the ``PolarFormatter`` class and the ``to_polar`` / ``format_lines``
convenience functions.
"""
from __future__ import annotations

from polar_lang.formatter.formatter import PolarFormatter, format_lines, to_polar

__all__ = ["PolarFormatter", "to_polar", "format_lines"]
