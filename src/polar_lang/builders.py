"""Helpers for building Polar AST nodes by hand.

Terms built here carry no span, and spans never take part in equality,
so a built term compares equal to the same term parsed from text::

    from polar_lang import parse_term
    from polar_lang.builders import op, term, var

    assert parse_term("x = 1") == term(op("UNIFY", var("x"), 1))

Python values are converted eagerly wherever a term is expected:

====================  ==========================
Python value          Polar value
====================  ==========================
``bool``              ``Boolean``
``int`` / ``float``   ``Number``
``str``               ``String``
``Symbol``            ``Variable``
``list``              ``List`` of terms
``dict``              ``Dictionary`` of terms
AST value             unchanged
====================  ==========================
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping

from polar_lang.ast.nodes import (
    Boolean,
    Call,
    Dictionary,
    DictionaryPattern,
    InstancePattern,
    List,
    Number,
    Operation,
    Operator,
    Parameter,
    Rule,
    RuleType,
    String,
    Symbol,
    Term,
    Value,
    Variable,
)

_AST_VALUES = (
    Number,
    String,
    Boolean,
    Variable,
    List,
    Dictionary,
    Call,
    Operation,
    DictionaryPattern,
    InstancePattern,
)


def sym(name: str | Symbol) -> Symbol:
    return name if isinstance(name, Symbol) else Symbol(name)


def value(obj: object) -> Value:
    """Convert a Python value or AST node to a Polar ``Value``."""
    if isinstance(obj, Term):
        return obj.value
    if isinstance(obj, _AST_VALUES):
        return obj
    if isinstance(obj, Symbol):
        return Variable(obj)
    # bool is a subclass of int
    if isinstance(obj, bool):
        return Boolean(obj)
    if isinstance(obj, (int, float)):
        return Number(obj)
    if isinstance(obj, str):
        return String(obj)
    if isinstance(obj, list):
        return List(tuple(term(item) for item in obj))
    if isinstance(obj, Mapping):
        return dictionary(obj)
    raise TypeError(f"Cannot convert {type(obj).__name__} to a Polar value")


def term(obj: object) -> Term:
    """Wrap ``obj`` in a ``Term``; an existing ``Term`` is returned as is."""
    if isinstance(obj, Term):
        return obj
    return Term(value(obj))


def var(name: str | Symbol) -> Term:
    return Term(Variable(sym(name)))


def string(text: str) -> String:
    return String(text)


def string_term(text: str) -> Term:
    return Term(String(text))


def dictionary(fields: Mapping[str | Symbol, object]) -> Dictionary:
    return Dictionary({sym(key): term(val) for key, val in fields.items()})


def call(
    name: str | Symbol,
    args: Iterable[object] = (),
    kwargs: Mapping[str | Symbol, object] | None = None,
) -> Call:
    """Build a call; ``kwargs=None`` means no keyword arguments were written."""
    return Call(
        name=sym(name),
        args=tuple(term(arg) for arg in args),
        kwargs=dictionary(kwargs) if kwargs is not None else None,
    )


def op(operator: Operator | str, *args: object) -> Operation:
    """Build an operation, e.g. ``op("AND", var("a"), var("b"))``."""
    if isinstance(operator, str):
        operator = Operator[operator]
    return Operation(operator, tuple(term(arg) for arg in args))


def instance(tag: str | Symbol, fields: Mapping[str | Symbol, object] | None = None) -> InstancePattern:
    return InstancePattern(tag=sym(tag), fields=dictionary(fields or {}))


def pattern(obj: object) -> DictionaryPattern | InstancePattern:
    """Build a pattern from a field mapping, a ``Dictionary`` or an instance pattern."""
    if isinstance(obj, (DictionaryPattern, InstancePattern)):
        return obj
    if isinstance(obj, Dictionary):
        return DictionaryPattern(obj)
    if isinstance(obj, Mapping):
        return DictionaryPattern(dictionary(obj))
    raise TypeError(f"Cannot convert {type(obj).__name__} to a Polar pattern")


def param(parameter: object, specializer: object = None) -> Parameter:
    """Build a rule parameter.

    A ``str`` parameter names a variable; anything else becomes a value
    term.  A ``str`` specializer names a class and becomes ``Tag{}``,
    a mapping becomes a dictionary pattern.
    """
    param_term = var(parameter) if isinstance(parameter, str) else term(parameter)
    if specializer is None:
        return Parameter(parameter=param_term)
    if isinstance(specializer, str):
        spec_term = Term(instance(specializer))
    elif isinstance(specializer, (Mapping, Dictionary)):
        spec_term = Term(pattern(specializer))
    else:
        spec_term = term(specializer)
    return Parameter(parameter=param_term, specializer=spec_term)


def _params(params: Iterable[object]) -> tuple[Parameter, ...]:
    built = []
    for p in params:
        if isinstance(p, Parameter):
            built.append(p)
        elif isinstance(p, tuple):
            built.append(param(*p))
        else:
            built.append(param(p))
    return tuple(built)


def rule(
    name: str | Symbol,
    params: Iterable[object] = (),
    body: Iterable[object] = (),
    required: bool = False,
) -> Rule:
    """Build a rule whose body is the conjunction of ``body``.

    Each parameter is a ``Parameter``, a ``(parameter, specializer)``
    tuple or anything ``param`` accepts.  An empty ``body`` makes a fact.
    """
    return Rule(
        name=sym(name),
        params=_params(params),
        body=Term(op(Operator.AND, *body)),
        required=required,
    )


def rule_type(name: str | Symbol, params: Iterable[object] = (), required: bool = False) -> RuleType:
    return RuleType(rule=rule(name, params, required=required))
