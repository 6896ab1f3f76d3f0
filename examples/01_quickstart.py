#!/usr/bin/env python3
"""Example: Quickstart — polar-lang

Minimal working example: parse a Polar policy, inspect its lines,
render it back to canonical Polar and dump the AST as JSON.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install polar-lang
"""
from __future__ import annotations

import polar_lang
from polar_lang.ast import AstSerializer, ResourceBlock, Rule
from polar_lang.parser import ParseError

POLAR_SOURCE = '''
actor User {}

resource Document {
  permissions = ["read", "edit"];
  roles = ["viewer", "editor"];

  "read" if "viewer";
  "edit" if "editor";
  "viewer" if "editor";
}

allow(actor, action, resource) if has_permission(actor, action, resource);

has_role(user: User, "editor", doc: Document) if doc.owner_id = user.id;
'''


def main() -> None:
    print(f"polar-lang version: {polar_lang.__version__}")

    # Step 1: Parse Polar source into lines
    lines = polar_lang.parse_lines(POLAR_SOURCE, filename="quickstart.polar")
    rules = [line for line in lines if isinstance(line, Rule)]
    blocks = [line for line in lines if isinstance(line, ResourceBlock)]
    print(f"Parsed {len(rules)} rule(s) and {len(blocks)} resource block(s)")
    for rule in rules:
        print(f"  {rule.name}/{len(rule.params)} at {rule.span.location()}")

    # Step 2: Parse a single expression
    term = polar_lang.parse_term("x.y.z > 1 + 2 * 3")
    print(f"\nExpression: {polar_lang.format(term)}")

    # Step 3: Format to canonical style
    canonical = polar_lang.format(lines)
    print(f"\nFormatted policy ({len(canonical)} chars):")
    print(canonical)

    # Step 4: Export the AST
    json_text = AstSerializer().to_json(lines)
    print(f"AST JSON: {len(json_text)} chars")

    # Step 5: Errors carry a location
    try:
        polar_lang.parse_term("x = {a: 1, a: 2}")
    except ParseError as exc:
        print(f"\n{exc}")


if __name__ == "__main__":
    main()
