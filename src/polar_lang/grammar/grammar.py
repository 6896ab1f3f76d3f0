"""Formal grammar rules for the Polar policy language.

This module documents the Polar grammar as EBNF-style string constants.
The grammar is implemented as a hand-written recursive-descent parser
(see ``polar_lang.parser``); these constants serve as reference
documentation.  ``OPERATOR_PRECEDENCE`` and ``OPERATOR_SPELLING`` are
used by the formatter to decide where parentheses are needed.

Grammar notation used here:
    ``::=``     production rule
    ``|``       alternation
    ``( )``     grouping
    ``[ ]``     optional (zero or one)
    ``{ }``     zero or more repetitions
    ``STRING``  terminal: double-quoted string literal
    ``NUMBER``  terminal: integer or float literal, optionally signed
    ``BOOL``    terminal: ``true`` or ``false``
    ``NAME``    terminal: symbol
"""
from __future__ import annotations

from polar_lang.ast.nodes import Operator

# ---------------------------------------------------------------------------
# Top-level
# ---------------------------------------------------------------------------

GRAMMAR_ROOT = """
polar_file ::= { line } EOF

line ::= rule | rule_type | query | resource_block

query ::= '?=' expression ';'
"""

# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

GRAMMAR_RULE = """
rule      ::= rule_head [ 'if' expression ] ';'
rule_type ::= 'type' rule_head ';'

rule_head ::= NAME '(' [ parameter { ',' parameter } [ ',' ] ] ')'
parameter ::= expression [ ':' pattern ]
"""

# ---------------------------------------------------------------------------
# Resource blocks
# ---------------------------------------------------------------------------

GRAMMAR_RESOURCE_BLOCK = """
resource_block ::= [ NAME ] NAME '{' { production } '}'

production     ::= declaration | shorthand_rule
declaration    ::= NAME '=' ( string_list | type_dict ) ';'
string_list    ::= '[' [ STRING { ',' STRING } [ ',' ] ] ']'
type_dict      ::= '{' [ NAME ':' NAME { ',' NAME ':' NAME } [ ',' ] ] '}'
shorthand_rule ::= STRING 'if' STRING [ NAME STRING ] ';'
"""

# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------

GRAMMAR_EXPRESSION = """
expression     ::= or_expr

or_expr        ::= and_expr [ 'or' or_expr ]
and_expr       ::= not_expr [ 'and' and_expr ]
not_expr       ::= 'not' not_expr | unify_expr
unify_expr     ::= comparison { ( '=' | ':=' ) comparison }
comparison     ::= additive { ( '==' | '!=' | '<=' | '>=' | '<' | '>' ) additive }
additive       ::= multiplicative { ( '+' | '-' ) multiplicative }
multiplicative ::= membership { ( '*' | '/' | 'mod' | 'rem' ) membership }
membership     ::= dot_expr { 'in' dot_expr | 'matches' pattern }
dot_expr       ::= atom { '.' dot_key }
dot_key        ::= call | NAME | KEYWORD | '(' NAME ')' | '(' STRING ')'

atom ::= NUMBER | STRING | BOOL | NAME | call | list | dictionary
       | 'new' call
       | '(' expression ')'
       | 'cut' | 'debug' args | 'print' args
       | 'forall' '(' expression ',' expression ')'

call       ::= NAME '(' [ arguments ] ')'
arguments  ::= value { ',' value } { ',' NAME ':' value } [ ',' ]
             | NAME ':' value { ',' NAME ':' value } [ ',' ]
list       ::= '[' [ value { ',' value } ] [ ',' '*' NAME ] [ ',' ] ']'
dictionary ::= '{' [ NAME ':' value { ',' NAME ':' value } [ ',' ] ] '}'
"""

# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

GRAMMAR_PATTERN = """
pattern ::= NUMBER | STRING | BOOL | NAME
          | NAME '{' [ pattern_fields ] '}'
          | '{' [ pattern_fields ] '}'
          | '[' [ pattern { ',' pattern } ] [ ',' '*' NAME ] [ ',' ] ']'

pattern_fields ::= NAME ':' pattern { ',' NAME ':' pattern } [ ',' ]
"""

FULL_GRAMMAR = "\n".join([
    GRAMMAR_ROOT,
    GRAMMAR_RULE,
    GRAMMAR_RESOURCE_BLOCK,
    GRAMMAR_EXPRESSION,
    GRAMMAR_PATTERN,
])

# ---------------------------------------------------------------------------
# Operator tables
# ---------------------------------------------------------------------------

# Binding strength of each operator, loosest (1) to tightest.  Built-ins,
# ``new`` and ``cut`` are atoms.
OPERATOR_PRECEDENCE: dict[Operator, int] = {
    Operator.OR: 1,
    Operator.AND: 2,
    Operator.NOT: 3,
    Operator.UNIFY: 4,
    Operator.ASSIGN: 4,
    Operator.EQ: 5,
    Operator.NEQ: 5,
    Operator.LEQ: 5,
    Operator.GEQ: 5,
    Operator.LT: 5,
    Operator.GT: 5,
    Operator.ADD: 6,
    Operator.SUB: 6,
    Operator.MUL: 7,
    Operator.DIV: 7,
    Operator.MOD: 7,
    Operator.REM: 7,
    Operator.IN: 8,
    Operator.ISA: 8,
    Operator.DOT: 9,
    Operator.NEW: 10,
    Operator.CUT: 10,
    Operator.DEBUG: 10,
    Operator.PRINT: 10,
    Operator.FOR_ALL: 10,
}

OPERATOR_SPELLING: dict[Operator, str] = {
    Operator.OR: "or",
    Operator.AND: "and",
    Operator.NOT: "not",
    Operator.UNIFY: "=",
    Operator.ASSIGN: ":=",
    Operator.EQ: "==",
    Operator.NEQ: "!=",
    Operator.LEQ: "<=",
    Operator.GEQ: ">=",
    Operator.LT: "<",
    Operator.GT: ">",
    Operator.ADD: "+",
    Operator.SUB: "-",
    Operator.MUL: "*",
    Operator.DIV: "/",
    Operator.MOD: "mod",
    Operator.REM: "rem",
    Operator.IN: "in",
    Operator.ISA: "matches",
    Operator.DOT: ".",
    Operator.NEW: "new",
    Operator.CUT: "cut",
    Operator.DEBUG: "debug",
    Operator.PRINT: "print",
    Operator.FOR_ALL: "forall",
}
