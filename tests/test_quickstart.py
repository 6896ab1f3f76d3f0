"""Test that the 3-line quickstart API works for polar-lang."""
from __future__ import annotations


def test_quickstart_parse_import() -> None:
    import polar_lang

    assert callable(polar_lang.parse_lines)
    assert callable(polar_lang.parse_rules)
    assert callable(polar_lang.parse_term)
    assert callable(polar_lang.format)


def test_quickstart_version(expected_version: str) -> None:
    import polar_lang

    assert polar_lang.__version__ == expected_version


def test_quickstart_parse_and_format() -> None:
    import polar_lang

    lines = polar_lang.parse_lines('allow(actor, "read", doc)   if actor = doc.owner;')
    text = polar_lang.format(lines)
    assert text == 'allow(actor, "read", doc) if actor = doc.owner;\n'


def test_quickstart_format_term() -> None:
    import polar_lang

    assert polar_lang.format(polar_lang.parse_term("( 1+2 ) *x")) == "(1 + 2) * x"
