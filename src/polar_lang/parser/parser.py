"""Polar Recursive-Descent Parser.

Converts a flat list of ``Token`` objects into Polar AST terms, rules
and file-level lines.  COMMENT tokens are skipped transparently.

Expression parsing uses one method per precedence level, loosest
first::

    or > and > not > unify/assign > comparison > additive
       > multiplicative > in/matches > dot > atom

Each level returns a ``Classified`` term.  Operators narrow their
operands with ``require_value``/``require_logical``, so a program such
as ``x = 1 > 2`` is rejected here rather than by the solver.

Patterns (specializers, ``matches`` right-hand sides) have their own
entry point, ``_parse_pattern``, which shares the literal productions
with the expression grammar but admits no operators.

The first error aborts the parse: there is no recovery.
"""
from __future__ import annotations

import logging
from collections.abc import Callable

from polar_lang.ast.nodes import (
    Boolean,
    Call,
    Declaration,
    Dictionary,
    DictionaryPattern,
    InstancePattern,
    Line,
    List,
    Number,
    Operation,
    Operator,
    Parameter,
    Production,
    Query,
    ResourceBlock,
    RestVariable,
    Rule,
    RuleType,
    ShorthandRule,
    Source,
    Span,
    String,
    Symbol,
    Term,
    Value,
    Variable,
)
from polar_lang.grammar.tokens import Token, TokenType
from polar_lang.parser.classification import (
    Classified,
    ValueKind,
    require_logical,
    require_value,
)
from polar_lang.parser.errors import DuplicateKey, UnrecognizedEOF, UnrecognizedToken

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Operator tables
# ---------------------------------------------------------------------------

_UNIFY_OPS: dict[TokenType, Operator] = {
    TokenType.UNIFY: Operator.UNIFY,
    TokenType.ASSIGN: Operator.ASSIGN,
}
_COMPARISON_OPS: dict[TokenType, Operator] = {
    TokenType.EQ: Operator.EQ,
    TokenType.NEQ: Operator.NEQ,
    TokenType.LEQ: Operator.LEQ,
    TokenType.GEQ: Operator.GEQ,
    TokenType.LT: Operator.LT,
    TokenType.GT: Operator.GT,
}
_ADDITIVE_OPS: dict[TokenType, Operator] = {
    TokenType.ADD: Operator.ADD,
    TokenType.SUB: Operator.SUB,
}
_MULTIPLICATIVE_OPS: dict[TokenType, Operator] = {
    TokenType.MUL: Operator.MUL,
    TokenType.DIV: Operator.DIV,
    TokenType.MOD: Operator.MOD,
    TokenType.REM: Operator.REM,
}
_NUMBER_TOKENS = (TokenType.INTEGER, TokenType.FLOAT)
_SIGN_TOKENS = (TokenType.ADD, TokenType.SUB)

Fields = dict[Symbol, Term]


class Parser:
    """Recursive descent parser over one token stream.

    Parameters
    ----------
    tokens:
        The flat token list produced by the lexer.  Must include the
        terminal ``EOF`` token.
    source:
        The source unit the tokens were scanned from.  Every parsed term
        refers to it.
    """

    def __init__(self, tokens: list[Token], source: Source) -> None:
        self._tokens: list[Token] = [t for t in tokens if t.type is not TokenType.COMMENT]
        if not self._tokens or self._tokens[-1].type is not TokenType.EOF:
            end = self._tokens[-1].end if self._tokens else len(source.text)
            self._tokens.append(Token(type=TokenType.EOF, value="", offset=end, end=end))
        self._source: Source = source
        self._pos: int = 0

    # ------------------------------------------------------------------
    # Navigation helpers
    # ------------------------------------------------------------------

    def _current(self) -> Token:
        """Return the current token without consuming it."""
        return self._tokens[self._pos]

    def _peek(self, offset: int = 1) -> Token:
        """Return the token ``offset`` positions ahead without consuming."""
        idx = self._pos + offset
        if idx < len(self._tokens):
            return self._tokens[idx]
        return self._tokens[-1]

    def _advance(self) -> Token:
        """Consume and return the current token."""
        tok = self._current()
        if tok.type is not TokenType.EOF:
            self._pos += 1
        return tok

    def _check(self, *types: TokenType) -> bool:
        """Return True if the current token matches any of the given types."""
        return self._current().type in types

    def _match(self, *types: TokenType) -> Token | None:
        """Consume and return the current token if it matches; else None."""
        if self._check(*types):
            return self._advance()
        return None

    def _expect(self, token_type: TokenType, message: str | None = None) -> Token:
        """Consume the current token if it matches, else raise."""
        if self._check(token_type):
            return self._advance()
        raise self._unexpected(message or f"Expected {token_type.name}", (token_type,))

    def _unexpected(
        self,
        message: str,
        expected: tuple[TokenType, ...] = (),
        tok: Token | None = None,
    ) -> UnrecognizedToken | UnrecognizedEOF:
        """Build the syntax error for ``tok`` (default: the current token)."""
        tok = tok or self._current()
        span = Span(self._source, tok.offset, tok.end)
        if tok.type is TokenType.EOF:
            return UnrecognizedEOF(message=f"{message}, found end of input", span=span, expected=expected)
        return UnrecognizedToken(message=message, span=span, token=tok, expected=expected)

    def _term(self, start: int, end: int, value: Value) -> Term:
        return Term.new_from_parser(self._source, start, end, value)

    def _token_term(self, tok: Token, value: Value) -> Term:
        return self._term(tok.offset, tok.end, value)

    def _operation(self, operator: Operator, args: tuple[Term, ...], start: int, end: int) -> Term:
        return self._term(start, end, Operation(operator, args))

    def _binary(self, operator: Operator, left: Term, right: Term) -> Term:
        return self._operation(operator, (left, right), left.start, right.end)

    # ------------------------------------------------------------------
    # Top-level entry points
    # ------------------------------------------------------------------

    def parse_term(self) -> Term:
        """Parse one complete expression followed by end of input."""
        term = self._parse_expression().term
        self._expect(TokenType.EOF, "Expected end of input after expression")
        return term

    def parse_rules(self) -> list[Rule]:
        """Parse zero or more rule definitions up to end of input."""
        rules: list[Rule] = []
        while not self._check(TokenType.EOF):
            rules.append(self._parse_rule())
        logger.debug("Parsed %d rule(s) from %d token(s)", len(rules), len(self._tokens))
        return rules

    def parse_lines(self) -> list[Line]:
        """Parse a whole file: rules, rule types, queries and resource blocks."""
        lines: list[Line] = []
        while not self._check(TokenType.EOF):
            lines.append(self._parse_line())
        logger.debug("Parsed %d line(s) from %d token(s)", len(lines), len(self._tokens))
        return lines

    def _parse_line(self) -> Line:
        tok = self._current()
        if tok.type is TokenType.QUERY:
            return self._parse_query()
        if tok.type is TokenType.TYPE:
            return self._parse_rule_type()
        if tok.type is TokenType.SYMBOL:
            nxt = self._peek()
            if nxt.type is TokenType.LPAREN:
                return self._parse_rule()
            if nxt.type is TokenType.LBRACE or (
                nxt.type is TokenType.SYMBOL and self._peek(2).type is TokenType.LBRACE
            ):
                return self._parse_resource_block()
            raise self._unexpected(
                "Expected '(' to start a rule head or '{' to start a resource block",
                (TokenType.LPAREN, TokenType.LBRACE),
                nxt,
            )
        raise self._unexpected(
            "Expected a rule, 'type' declaration, '?=' query or resource block",
            (TokenType.SYMBOL, TokenType.TYPE, TokenType.QUERY),
        )

    def _parse_query(self) -> Query:
        """Parse: ``'?=' expression ';'``"""
        self._advance()  # consume '?='
        term = require_logical(self._parse_expression())
        self._expect(TokenType.SEMICOLON, "Expected ';' after query")
        return Query(term=term)

    # ------------------------------------------------------------------
    # Expression parsing (precedence climbing)
    # ------------------------------------------------------------------

    def _parse_expression(self) -> Classified:
        """Entry point for expression parsing (loosest precedence)."""
        return self._parse_or()

    def _parse_connective(
        self,
        token_type: TokenType,
        operator: Operator,
        operand: Callable[[], Classified],
        rest: Callable[[], Classified],
    ) -> Classified:
        """Parse ``operand (token rest)?`` and flatten same-operator chains."""
        left = operand()
        if not self._match(token_type):
            return left
        lhs = require_logical(left)
        rhs = require_logical(rest())
        if rhs.is_operation(operator):
            args = (lhs, *rhs.value.args)
        else:
            args = (lhs, rhs)
        return Classified(self._operation(operator, args, lhs.start, rhs.end), ValueKind.LOGICAL)

    def _parse_or(self) -> Classified:
        """Parse: ``and_expr ('or' or_expr)?``"""
        return self._parse_connective(TokenType.OR, Operator.OR, self._parse_and, self._parse_or)

    def _parse_and(self) -> Classified:
        """Parse: ``not_expr ('and' and_expr)?``"""
        return self._parse_connective(TokenType.AND, Operator.AND, self._parse_not, self._parse_and)

    def _parse_not(self) -> Classified:
        """Parse: ``'not' not_expr | unify_expr``"""
        op_tok = self._match(TokenType.NOT)
        if op_tok is None:
            return self._parse_unify()
        operand = require_logical(self._parse_not())
        term = self._operation(Operator.NOT, (operand,), op_tok.offset, operand.end)
        return Classified(term, ValueKind.LOGICAL)

    def _parse_unify(self) -> Classified:
        """Parse: ``comparison (('=' | ':=') comparison)*``"""
        left = self._parse_comparison()
        while self._current().type in _UNIFY_OPS:
            op_tok = self._advance()
            operator = _UNIFY_OPS[op_tok.type]
            if operator is Operator.ASSIGN and not isinstance(left.term.value, Variable):
                raise self._unexpected(
                    "Left-hand side of ':=' must be a variable", (TokenType.SYMBOL,), op_tok
                )
            lhs = require_value(left)
            rhs = require_value(self._parse_comparison())
            left = Classified(self._binary(operator, lhs, rhs), ValueKind.LOGICAL)
        return left

    def _parse_binary_level(
        self,
        operators: dict[TokenType, Operator],
        operand: Callable[[], Classified],
        result: ValueKind,
    ) -> Classified:
        """Parse a left-associative level whose operands are all values."""
        left = operand()
        while self._current().type in operators:
            operator = operators[self._advance().type]
            lhs = require_value(left)
            rhs = require_value(operand())
            left = Classified(self._binary(operator, lhs, rhs), result)
        return left

    def _parse_comparison(self) -> Classified:
        """Parse: ``additive (('==' | '!=' | '<=' | '>=' | '<' | '>') additive)*``"""
        return self._parse_binary_level(_COMPARISON_OPS, self._parse_additive, ValueKind.LOGICAL)

    def _parse_additive(self) -> Classified:
        """Parse: ``multiplicative (('+' | '-') multiplicative)*``"""
        return self._parse_binary_level(_ADDITIVE_OPS, self._parse_multiplicative, ValueKind.VALUE)

    def _parse_multiplicative(self) -> Classified:
        """Parse: ``membership (('*' | '/' | 'mod' | 'rem') membership)*``"""
        return self._parse_binary_level(_MULTIPLICATIVE_OPS, self._parse_membership, ValueKind.VALUE)

    def _parse_membership(self) -> Classified:
        """Parse: ``dot_expr (('in' dot_expr) | ('matches' pattern))*``"""
        left = self._parse_dot()
        while self._check(TokenType.IN, TokenType.MATCHES):
            op_tok = self._advance()
            lhs = require_value(left)
            if op_tok.type is TokenType.IN:
                term = self._binary(Operator.IN, lhs, require_value(self._parse_dot()))
            else:
                term = self._binary(Operator.ISA, lhs, self._parse_matches_pattern())
            left = Classified(term, ValueKind.LOGICAL)
        return left

    def _parse_matches_pattern(self) -> Term:
        """Parse the right side of ``matches``; ``Foo`` means ``Foo{}``."""
        pattern = self._parse_pattern()
        return self._instance_of_variable(pattern)

    def _parse_dot(self) -> Classified:
        """Parse: ``atom ('.' dot_key)*``"""
        left = self._parse_atom()
        while self._match(TokenType.DOT):
            lhs = require_value(left)
            key = self._parse_dot_key()
            left = Classified(self._binary(Operator.DOT, lhs, key), ValueKind.EITHER)
        return left

    def _parse_dot_key(self) -> Term:
        """Parse the right side of ``.``.

        ``a.f(x)`` is a call, ``a.b`` and ``a.type`` are field names,
        ``a.(x)`` and ``a.("b")`` look up a variable or string key.
        """
        tok = self._current()
        if tok.type is TokenType.SYMBOL:
            if self._peek().type is TokenType.LPAREN:
                return self._parse_call()
            self._advance()
            return self._token_term(tok, String(str(tok.value)))
        if tok.is_keyword:
            self._advance()
            return self._token_term(tok, String(str(tok.value)))
        if tok.type is TokenType.LPAREN:
            self._advance()
            inner = self._current()
            if inner.type is TokenType.SYMBOL:
                key = self._token_term(inner, Variable(Symbol(str(inner.value))))
            elif inner.type is TokenType.STRING:
                key = self._token_term(inner, String(str(inner.value)))
            else:
                raise self._unexpected(
                    "Expected a variable or string inside '.( )'",
                    (TokenType.SYMBOL, TokenType.STRING),
                )
            self._advance()
            self._expect(TokenType.RPAREN, "Expected ')' after dot lookup key")
            return key
        raise self._unexpected(
            "Expected a field name, method call or '(' after '.'",
            (TokenType.SYMBOL, TokenType.LPAREN),
        )

    def _parse_atom(self) -> Classified:
        """Parse an atom: literal, variable, call, list, dictionary,
        ``new``, built-in or parenthesized expression."""
        tok = self._current()

        if tok.type in _NUMBER_TOKENS or (
            tok.type in _SIGN_TOKENS and self._peek().type in _NUMBER_TOKENS
        ):
            return Classified(self._parse_number(), ValueKind.VALUE)

        if tok.type is TokenType.STRING:
            self._advance()
            return Classified(self._token_term(tok, String(str(tok.value))), ValueKind.VALUE)

        if tok.type is TokenType.BOOLEAN:
            self._advance()
            return Classified(self._token_term(tok, Boolean(bool(tok.value))), ValueKind.EITHER)

        if tok.type is TokenType.SYMBOL:
            if self._peek().type is TokenType.LPAREN:
                return Classified(self._parse_call(), ValueKind.LOGICAL)
            return Classified(self._parse_variable(), ValueKind.EITHER)

        if tok.type is TokenType.LBRACKET:
            return Classified(self._parse_list(self._parse_value), ValueKind.VALUE)

        if tok.type is TokenType.LBRACE:
            start = tok.offset
            fields, end = self._parse_fields(self._parse_value)
            return Classified(self._term(start, end, Dictionary(fields)), ValueKind.VALUE)

        if tok.type is TokenType.NEW:
            self._advance()
            if not (self._check(TokenType.SYMBOL) and self._peek().type is TokenType.LPAREN):
                raise self._unexpected("Expected a constructor call after 'new'", (TokenType.SYMBOL,))
            call = self._parse_call()
            term = self._operation(Operator.NEW, (call,), tok.offset, call.end)
            return Classified(term, ValueKind.VALUE)

        if tok.type is TokenType.LPAREN:
            self._advance()
            inner = self._parse_expression()
            self._expect(TokenType.RPAREN, "Expected ')' to close grouped expression")
            return inner

        if tok.type is TokenType.CUT:
            self._advance()
            return Classified(self._operation(Operator.CUT, (), tok.offset, tok.end), ValueKind.LOGICAL)

        if tok.type in (TokenType.DEBUG, TokenType.PRINT):
            self._advance()
            operator = Operator.DEBUG if tok.type is TokenType.DEBUG else Operator.PRINT
            args, end = self._parse_builtin_args()
            return Classified(self._operation(operator, args, tok.offset, end), ValueKind.LOGICAL)

        if tok.type is TokenType.FORALL:
            self._advance()
            self._expect(TokenType.LPAREN, "Expected '(' after 'forall'")
            condition = require_logical(self._parse_expression())
            self._expect(TokenType.COMMA, "Expected ',' between forall condition and action")
            action = require_logical(self._parse_expression())
            end_tok = self._expect(TokenType.RPAREN, "Expected ')' to close forall")
            term = self._operation(Operator.FOR_ALL, (condition, action), tok.offset, end_tok.end)
            return Classified(term, ValueKind.LOGICAL)

        raise self._unexpected(
            "Expected an expression",
            (TokenType.SYMBOL, TokenType.STRING, TokenType.INTEGER, TokenType.LPAREN),
        )

    def _parse_value(self) -> Term:
        """Parse a full expression that must denote a value."""
        return require_value(self._parse_expression())

    # ------------------------------------------------------------------
    # Literal productions shared by terms and patterns
    # ------------------------------------------------------------------

    def _parse_number(self) -> Term:
        """Parse ``[+|-] (INTEGER | FLOAT)``, folding the sign into the literal."""
        start_tok = self._current()
        sign = self._match(*_SIGN_TOKENS)
        tok = self._current()
        if tok.type not in _NUMBER_TOKENS:
            raise self._unexpected("Expected a number", _NUMBER_TOKENS)
        self._advance()
        value = tok.value
        if sign is not None and sign.type is TokenType.SUB:
            value = -value
        return self._term(start_tok.offset, tok.end, Number(value))

    def _parse_string(self) -> Term:
        tok = self._expect(TokenType.STRING, "Expected a string")
        return self._token_term(tok, String(str(tok.value)))

    def _parse_variable(self) -> Term:
        tok = self._expect(TokenType.SYMBOL, "Expected a variable name")
        return self._token_term(tok, Variable(Symbol(str(tok.value))))

    def _parse_builtin_args(self) -> tuple[tuple[Term, ...], int]:
        """Parse ``'(' [value (',' value)* [',']] ')'`` for debug/print."""
        self._expect(TokenType.LPAREN, "Expected '(' after built-in")
        args: list[Term] = []
        while not self._check(TokenType.RPAREN):
            args.append(self._parse_value())
            if not self._match(TokenType.COMMA):
                break
        end_tok = self._expect(TokenType.RPAREN, "Expected ')' to close argument list")
        return tuple(args), end_tok.end

    def _parse_list(self, element: Callable[[], Term], allow_rest: bool = True) -> Term:
        """Parse ``'[' [elem (',' elem)* [',' '*' NAME] [',']] ']'``.

        ``element`` parses one item: a value in expressions, a pattern in
        patterns.  A ``*rest`` variable may only be the last item.
        """
        start_tok = self._expect(TokenType.LBRACKET, "Expected '['")
        elements: list[Term] = []
        while not self._check(TokenType.RBRACKET):
            star = self._match(TokenType.MUL) if allow_rest else None
            if star is not None:
                name_tok = self._expect(TokenType.SYMBOL, "Expected a variable name after '*'")
                rest = self._term(star.offset, name_tok.end, RestVariable(Symbol(str(name_tok.value))))
                elements.append(rest)
                break
            elements.append(element())
            if not self._match(TokenType.COMMA):
                break
        end_tok = self._expect(TokenType.RBRACKET, "Expected ']' to close list")
        return self._term(start_tok.offset, end_tok.end, List(tuple(elements)))

    def _insert_field(self, fields: Fields, key_tok: Token, value: Term) -> None:
        """Add ``key: value`` to ``fields``; a repeated key is an error."""
        key = Symbol(str(key_tok.value))
        if key in fields:
            raise DuplicateKey(
                message=f"Duplicate key {key.name!r}",
                span=Span(self._source, key_tok.offset, key_tok.end),
                key=key,
            )
        fields[key] = value

    def _parse_fields(self, value: Callable[[], Term]) -> tuple[Fields, int]:
        """Parse ``'{' [NAME ':' value (',' NAME ':' value)* [',']] '}'``.

        Returns the fields and the end offset of the closing brace.
        """
        self._expect(TokenType.LBRACE, "Expected '{'")
        fields: Fields = {}
        while not self._check(TokenType.RBRACE):
            key_tok = self._expect(TokenType.SYMBOL, "Expected a field name")
            self._expect(TokenType.COLON, "Expected ':' after field name")
            self._insert_field(fields, key_tok, value())
            if not self._match(TokenType.COMMA):
                break
        end_tok = self._expect(TokenType.RBRACE, "Expected '}' to close fields")
        return fields, end_tok.end

    def _parse_call(self) -> Term:
        """Parse ``NAME '(' [args] [kwargs] ')'``.

        Positional arguments come first; ``name: value`` keyword
        arguments follow.  ``kwargs`` is ``None`` when none are given.
        """
        name_tok = self._expect(TokenType.SYMBOL, "Expected a call name")
        self._expect(TokenType.LPAREN, "Expected '(' after call name")
        args: list[Term] = []
        kwargs: Fields | None = None
        while not self._check(TokenType.RPAREN):
            if self._check(TokenType.SYMBOL) and self._peek().type is TokenType.COLON:
                key_tok = self._advance()
                self._advance()  # consume ':'
                if kwargs is None:
                    kwargs = {}
                self._insert_field(kwargs, key_tok, self._parse_value())
            elif kwargs is not None:
                raise self._unexpected("Positional argument follows keyword argument", (TokenType.SYMBOL,))
            else:
                args.append(self._parse_value())
            if not self._match(TokenType.COMMA):
                break
        end_tok = self._expect(TokenType.RPAREN, "Expected ')' to close argument list")
        call = Call(
            name=Symbol(str(name_tok.value)),
            args=tuple(args),
            kwargs=Dictionary(kwargs) if kwargs is not None else None,
        )
        return self._term(name_tok.offset, end_tok.end, call)

    # ------------------------------------------------------------------
    # Pattern parsing
    # ------------------------------------------------------------------

    def _parse_pattern(self) -> Term:
        """Parse a pattern: literal, variable, list, dictionary or instance shape."""
        tok = self._current()

        if tok.type in _NUMBER_TOKENS or tok.type in _SIGN_TOKENS:
            return self._parse_number()
        if tok.type is TokenType.STRING:
            return self._parse_string()
        if tok.type is TokenType.BOOLEAN:
            self._advance()
            return self._token_term(tok, Boolean(bool(tok.value)))
        if tok.type is TokenType.SYMBOL:
            if self._peek().type is TokenType.LBRACE:
                self._advance()
                fields, end = self._parse_fields(self._parse_pattern)
                instance = InstancePattern(tag=Symbol(str(tok.value)), fields=Dictionary(fields))
                return self._term(tok.offset, end, instance)
            return self._parse_variable()
        if tok.type is TokenType.LBRACE:
            fields, end = self._parse_fields(self._parse_pattern)
            return self._term(tok.offset, end, DictionaryPattern(Dictionary(fields)))
        if tok.type is TokenType.LBRACKET:
            return self._parse_list(self._parse_pattern)

        raise self._unexpected(
            "Expected a pattern",
            (TokenType.SYMBOL, TokenType.LBRACE, TokenType.LBRACKET, TokenType.STRING),
        )

    @staticmethod
    def _instance_of_variable(pattern: Term) -> Term:
        """Rewrite a bare variable pattern ``Foo`` into ``Foo{}``."""
        if isinstance(pattern.value, Variable):
            return pattern.clone_with_value(InstancePattern(tag=pattern.value.name))
        return pattern

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    def _parse_parameter(self) -> Parameter:
        """Parse: ``value [':' pattern]``"""
        parameter = self._parse_value()
        specializer = None
        if self._match(TokenType.COLON):
            specializer = self._instance_of_variable(self._parse_pattern())
        return Parameter(parameter=parameter, specializer=specializer)

    def _parse_rule_head(self) -> tuple[Token, tuple[Parameter, ...], Token]:
        """Parse: ``NAME '(' [param (',' param)* [',']] ')'``"""
        name_tok = self._expect(TokenType.SYMBOL, "Expected a rule name")
        self._expect(TokenType.LPAREN, "Expected '(' after rule name")
        params: list[Parameter] = []
        while not self._check(TokenType.RPAREN):
            params.append(self._parse_parameter())
            if not self._match(TokenType.COMMA):
                break
        close_tok = self._expect(TokenType.RPAREN, "Expected ')' to close rule parameters")
        return name_tok, tuple(params), close_tok

    def _parse_rule(self) -> Rule:
        """Parse: ``head ';'`` (a fact) or ``head 'if' expression ';'``"""
        name_tok, params, close_tok = self._parse_rule_head()
        if self._match(TokenType.IF):
            body = require_logical(self._parse_expression())
            if not body.is_operation(Operator.AND):
                body = self._operation(Operator.AND, (body,), body.start, body.end)
        else:
            body = self._operation(Operator.AND, (), close_tok.end, close_tok.end)
        end_tok = self._expect(TokenType.SEMICOLON, "Expected ';' or 'if' after rule head")
        return Rule(
            name=Symbol(str(name_tok.value)),
            params=params,
            body=body,
            span=Span(self._source, name_tok.offset, end_tok.end),
        )

    def _parse_rule_type(self) -> RuleType:
        """Parse: ``'type' head ';'``"""
        type_tok = self._expect(TokenType.TYPE, "Expected 'type'")
        name_tok, params, close_tok = self._parse_rule_head()
        end_tok = self._expect(TokenType.SEMICOLON, "Expected ';' after rule type; rule types have no body")
        rule = Rule(
            name=Symbol(str(name_tok.value)),
            params=params,
            body=self._operation(Operator.AND, (), close_tok.end, close_tok.end),
            span=Span(self._source, type_tok.offset, end_tok.end),
        )
        return RuleType(rule=rule)

    # ------------------------------------------------------------------
    # Resource blocks
    # ------------------------------------------------------------------

    def _parse_resource_block(self) -> ResourceBlock:
        """Parse: ``[keyword] NAME '{' production* '}'``"""
        keyword = None
        if self._peek().type is TokenType.SYMBOL:
            keyword = self._parse_variable()
        resource = self._parse_variable()
        self._expect(TokenType.LBRACE, "Expected '{' to open resource block")
        productions: list[Production] = []
        while not self._check(TokenType.RBRACE):
            productions.append(self._parse_production())
        self._expect(TokenType.RBRACE, "Expected '}' to close resource block")
        return ResourceBlock(keyword=keyword, resource=resource, productions=tuple(productions))

    def _parse_production(self) -> Production:
        tok = self._current()
        if tok.type is TokenType.SYMBOL:
            return self._parse_declaration()
        if tok.type is TokenType.STRING:
            return self._parse_shorthand_rule()
        raise self._unexpected(
            "Expected a declaration or shorthand rule in resource block",
            (TokenType.SYMBOL, TokenType.STRING, TokenType.RBRACE),
        )

    def _parse_declaration(self) -> Declaration:
        """Parse: ``NAME '=' (string_list | variable_dict) ';'``"""
        name = self._parse_variable()
        self._expect(TokenType.UNIFY, "Expected '=' after declaration name")
        if self._check(TokenType.LBRACKET):
            value = self._parse_list(self._parse_string, allow_rest=False)
        elif self._check(TokenType.LBRACE):
            start = self._current().offset
            fields, end = self._parse_fields(self._parse_variable)
            value = self._term(start, end, Dictionary(fields))
        else:
            raise self._unexpected(
                "Expected a list of strings or a dictionary of types",
                (TokenType.LBRACKET, TokenType.LBRACE),
            )
        self._expect(TokenType.SEMICOLON, "Expected ';' after declaration")
        return Declaration(name=name, value=value)

    def _parse_shorthand_rule(self) -> ShorthandRule:
        """Parse: ``STRING 'if' STRING [NAME STRING] ';'``"""
        head = self._parse_string()
        self._expect(TokenType.IF, "Expected 'if' after shorthand rule head")
        implier = self._parse_string()
        relation = None
        if self._check(TokenType.SYMBOL):
            relation = (self._parse_variable(), self._parse_string())
        self._expect(TokenType.SEMICOLON, "Expected ';' after shorthand rule")
        return ShorthandRule(head=head, implier=implier, relation=relation)


# ---------------------------------------------------------------------------
# Module-level entry points
# ---------------------------------------------------------------------------


def parse_term(tokens: list[Token], source: Source) -> Term:
    """Parse one complete expression from ``tokens``.

    Raises
    ------
    ParseError
        On the first syntax, classification or duplicate-key error.
    """
    return Parser(tokens, source).parse_term()


def parse_rules(tokens: list[Token], source: Source) -> list[Rule]:
    """Parse zero or more rule definitions from ``tokens``."""
    return Parser(tokens, source).parse_rules()


def parse_lines(tokens: list[Token], source: Source) -> list[Line]:
    """Parse a whole Polar file from ``tokens``.

    Example
    -------
    ::

        from polar_lang.ast.nodes import Source
        from polar_lang.lexer import tokenize
        from polar_lang.parser import parse_lines

        text = 'allow(actor, "read", _doc) if actor.admin;'
        lines = parse_lines(tokenize(text), Source(text))
    """
    return Parser(tokens, source).parse_lines()
