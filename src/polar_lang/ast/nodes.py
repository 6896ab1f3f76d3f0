"""AST node definitions for the Polar policy language.

Every node produced by the Polar parser is a frozen dataclass so that
AST trees are immutable once parsed.  The ``Value`` union covers all
term payloads; downstream code should use ``isinstance`` checks to
dispatch.

A ``Term`` pairs a ``Value`` with a ``Span`` recording where in which
``Source`` the value came from.  Spans are diagnostic metadata only:
two terms with equal values compare equal wherever they were parsed.
"""
from __future__ import annotations

import dataclasses
import itertools
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Union

_source_ids = itertools.count()


# ---------------------------------------------------------------------------
# Source location
# ---------------------------------------------------------------------------


@dataclass(frozen=True, eq=False)
class Source:
    """An immutable unit of Polar source text.

    Every ``Term`` parsed from the text holds a reference to the same
    ``Source`` object.  Sources compare by identity.

    Parameters
    ----------
    text:
        The complete source text.
    filename:
        Optional name used when reporting locations.
    """

    text: str
    filename: str | None = None
    src_id: int = field(default_factory=lambda: next(_source_ids))

    def line_col(self, offset: int) -> tuple[int, int]:
        """Return the 1-based ``(line, col)`` of ``offset`` in the text."""
        offset = max(0, min(offset, len(self.text)))
        line = self.text.count("\n", 0, offset) + 1
        col = offset - (self.text.rfind("\n", 0, offset) + 1) + 1
        return line, col


@dataclass(frozen=True, slots=True)
class Span:
    """Half-open offset range ``[start, end)`` within a ``Source``."""

    source: Source | None
    start: int
    end: int

    def __repr__(self) -> str:
        return f"Span({self.start}:{self.end})"

    @property
    def line(self) -> int:
        return self.source.line_col(self.start)[0] if self.source else 0

    @property
    def col(self) -> int:
        return self.source.line_col(self.start)[1] if self.source else 0

    def location(self) -> str:
        """Return ``file:line:col`` (or ``line:col``) for error messages."""
        if self.source is None:
            return "<unknown>"
        line, col = self.source.line_col(self.start)
        if self.source.filename:
            return f"{self.source.filename}:{line}:{col}"
        return f"{line}:{col}"

    def text(self) -> str:
        """Return the source text covered by this span."""
        if self.source is None:
            return ""
        return self.source.text[self.start : self.end]


# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------


class Operator(Enum):
    """Closed set of operators an ``Operation`` may apply."""

    DEBUG = auto()
    PRINT = auto()
    CUT = auto()
    FOR_ALL = auto()
    DOT = auto()
    NEW = auto()
    IN = auto()
    ISA = auto()
    MUL = auto()
    DIV = auto()
    MOD = auto()
    REM = auto()
    ADD = auto()
    SUB = auto()
    EQ = auto()
    NEQ = auto()
    LEQ = auto()
    GEQ = auto()
    LT = auto()
    GT = auto()
    UNIFY = auto()
    ASSIGN = auto()
    NOT = auto()
    AND = auto()
    OR = auto()


# ---------------------------------------------------------------------------
# Values
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True, order=True)
class Symbol:
    """An identifier name."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class Number:
    """An integer or floating-point literal."""

    value: int | float


@dataclass(frozen=True, slots=True)
class String:
    """A double-quoted string literal."""

    value: str


@dataclass(frozen=True, slots=True)
class Boolean:
    """``true`` or ``false``."""

    value: bool


@dataclass(frozen=True, slots=True)
class Variable:
    """A variable reference, e.g. ``actor``."""

    name: Symbol


@dataclass(frozen=True, slots=True)
class RestVariable:
    """A ``*rest`` variable binding the tail of a list."""

    name: Symbol


@dataclass(frozen=True, slots=True)
class List:
    """An ordered list of terms; a ``RestVariable`` may only come last."""

    elements: tuple["Term", ...]

    @property
    def rest_var(self) -> Symbol | None:
        """Return the tail variable name, if the list has one."""
        if self.elements and isinstance(self.elements[-1].value, RestVariable):
            return self.elements[-1].value.name
        return None


@dataclass(frozen=True, slots=True)
class Dictionary:
    """A mapping from field name to term, kept in key order."""

    fields: Mapping[Symbol, "Term"] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", dict(sorted(self.fields.items())))

    def __hash__(self) -> int:
        return hash(tuple(self.fields.items()))


@dataclass(frozen=True, slots=True)
class Call:
    """A predicate or method call, e.g. ``allow(actor, "read", resource)``."""

    name: Symbol
    args: tuple["Term", ...] = ()
    kwargs: Dictionary | None = None


@dataclass(frozen=True, slots=True)
class Operation:
    """An operator applied to an ordered tuple of operands."""

    operator: Operator
    args: tuple["Term", ...] = ()


@dataclass(frozen=True, slots=True)
class DictionaryPattern:
    """A dictionary shape used as a specializer or ``matches`` pattern."""

    fields: Dictionary


@dataclass(frozen=True, slots=True)
class InstancePattern:
    """An instance shape ``Tag{field: pattern, ...}``."""

    tag: Symbol
    fields: Dictionary = field(default_factory=Dictionary)


Pattern = Union[DictionaryPattern, InstancePattern]

Value = Union[
    Number,
    String,
    Boolean,
    Variable,
    RestVariable,
    List,
    Dictionary,
    Call,
    Operation,
    DictionaryPattern,
    InstancePattern,
]


# ---------------------------------------------------------------------------
# Term
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Term:
    """A ``Value`` together with the span it was parsed from.

    ``span`` is ``None`` for terms built programmatically.
    """

    value: Value
    span: Span | None = field(default=None, compare=False, repr=False)

    @classmethod
    def new_from_parser(cls, source: Source, start: int, end: int, value: Value) -> "Term":
        """Create a term located at ``[start, end)`` in ``source``."""
        return cls(value=value, span=Span(source, start, end))

    def clone_with_value(self, value: Value) -> "Term":
        """Return a new term with the same span and a different value."""
        return dataclasses.replace(self, value=value)

    @property
    def start(self) -> int:
        return self.span.start if self.span else 0

    @property
    def end(self) -> int:
        return self.span.end if self.span else 0

    @property
    def source(self) -> Source | None:
        return self.span.source if self.span else None

    def is_operation(self, operator: Operator) -> bool:
        """Return True if this term is an ``Operation`` with ``operator``."""
        return isinstance(self.value, Operation) and self.value.operator is operator


# ---------------------------------------------------------------------------
# Rules and file-level lines
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Parameter:
    """A rule parameter with an optional specializer pattern."""

    parameter: Term
    specializer: Term | None = None


@dataclass(frozen=True, slots=True)
class Rule:
    """A named rule: head parameters and an ``and`` body.

    A fact has a body with no arguments.  ``required`` marks a rule type
    that policies must implement.
    """

    name: Symbol
    params: tuple[Parameter, ...]
    body: Term
    span: Span | None = field(default=None, compare=False, repr=False)
    required: bool = False

    @property
    def is_fact(self) -> bool:
        return isinstance(self.body.value, Operation) and not self.body.value.args


@dataclass(frozen=True, slots=True)
class RuleType:
    """A rule signature declared with ``type``; it has no body."""

    rule: Rule


@dataclass(frozen=True, slots=True)
class Query:
    """A top-level ``?= term;`` query."""

    term: Term


@dataclass(frozen=True, slots=True)
class Declaration:
    """``roles = ["reader", "writer"];`` or ``relations = {parent: Org};``."""

    name: Term
    value: Term


@dataclass(frozen=True, slots=True)
class ShorthandRule:
    """``"read" if "reader" [on "parent"];`` inside a resource block.

    ``relation`` is the ``(keyword, relation name)`` pair of the ``on``
    clause, or ``None``.
    """

    head: Term
    implier: Term
    relation: tuple[Term, Term] | None = None

    @property
    def body(self) -> tuple[Term, tuple[Term, Term] | None]:
        return (self.implier, self.relation)


Production = Union[Declaration, ShorthandRule]


@dataclass(frozen=True, slots=True)
class ResourceBlock:
    """``[keyword] Resource { productions }``."""

    keyword: Term | None
    resource: Term
    productions: tuple[Production, ...]


Line = Union[Rule, RuleType, Query, ResourceBlock]
