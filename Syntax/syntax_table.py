"""
Syntax tables: which LaTeX spellings mean which logical constructs.

A table maps a spelling (a single character such as "=", or a control word
without its backslash such as "land") to one construct descriptor. The parser
only ever looks a spelling up and inspects the descriptor's `kind` and `style`
tags, so callers can add predicates and functions without touching the parser.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, fields
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, ClassVar, Dict, FrozenSet, Iterator, Optional, Union

from Utils.helpers import read_yaml_file

logger = logging.getLogger(__name__)

DEFAULT_SYNTAX_PATH = Path(__file__).with_name("default_syntax.yaml")


@dataclass(frozen=True)
class Connective:
    label: str
    style: str  # prefix | infix | nullary
    precedence: Optional[int] = None
    associativity: Optional[str] = None  # left | right, infix only

    kind: ClassVar[str] = "connective"

    def __post_init__(self):
        if self.style not in ("prefix", "infix", "nullary"):
            raise ValueError(f"Unknown connective style: {self.style}")
        _check_int(self, "precedence")
        if self.style != "nullary" and self.precedence is None:
            raise ValueError(f"Connective {self.label} needs a precedence")
        if self.style == "infix" and self.associativity not in ("left", "right"):
            raise ValueError(f"Infix connective {self.label} needs associativity 'left' or 'right'")

    @property
    def arity(self) -> int:
        return {"nullary": 0, "prefix": 1, "infix": 2}[self.style]


@dataclass(frozen=True)
class Quantifier:
    label: str

    kind: ClassVar[str] = "quantifier"
    arity: ClassVar[int] = 2  # bound variable and scope


@dataclass(frozen=True)
class Predicate:
    label: str
    style: str  # prefix | infix
    arity: int

    kind: ClassVar[str] = "predicate"

    def __post_init__(self):
        _check_applicative(self)


@dataclass(frozen=True)
class Function:
    label: str
    style: str  # prefix | infix
    arity: int
    precedence: Optional[int] = None  # infix only

    kind: ClassVar[str] = "function"

    def __post_init__(self):
        _check_applicative(self)
        if self.style == "infix" and self.precedence is None:
            raise ValueError(f"Infix function {self.label} needs a precedence")


SyntaxConstruct = Union[Connective, Quantifier, Predicate, Function]

CONSTRUCTS = {cls.kind: cls for cls in (Connective, Quantifier, Predicate, Function)}


def _check_int(construct, name: str):
    value = getattr(construct, name)
    # bool is an int subclass, but `true` in a YAML table is a mistake
    if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
        raise ValueError(f"{construct.kind.capitalize()} {construct.label}: {name} must be an integer, not {value!r}")


def _check_applicative(construct):
    _check_int(construct, "arity")
    if hasattr(construct, "precedence"):
        _check_int(construct, "precedence")
    if construct.style not in ("prefix", "infix"):
        raise ValueError(f"Unknown {construct.kind} style: {construct.style}")
    if construct.style == "infix" and construct.arity != 2:
        raise ValueError(f"Infix {construct.kind} {construct.label} must have arity 2, not {construct.arity}")
    if construct.arity < 1:
        raise ValueError(f"{construct.kind.capitalize()} {construct.label} must take at least one argument")


def construct_from_dict(entry: Dict[str, Any]) -> SyntaxConstruct:
    """
    Build a construct descriptor from plain data, e.g. one entry of a YAML table.

    Args:
        entry (Dict[str, Any]): Must hold `kind` plus the fields of that kind.

    Returns:
        SyntaxConstruct: The matching descriptor.

    Raises:
        ValueError: If the kind is unknown or the fields don't fit it.
    """
    entry = dict(entry)
    kind = entry.pop("kind", None)
    if kind not in CONSTRUCTS:
        raise ValueError(f"Unknown construct kind: {kind}. Available: {list(CONSTRUCTS.keys())}")
    cls = CONSTRUCTS[kind]
    allowed = {f.name for f in fields(cls)}
    unknown = set(entry) - allowed
    if unknown:
        raise ValueError(f"Unexpected fields for {kind}: {sorted(unknown)}")
    try:
        return cls(**entry)
    except TypeError as e:
        raise ValueError(f"Invalid {kind} entry {entry}: {e}") from e


def construct_to_dict(construct: SyntaxConstruct) -> Dict[str, Any]:
    data = {"kind": construct.kind}
    for f in fields(construct):
        value = getattr(construct, f.name)
        if value is not None:
            data[f.name] = value
    return data


class SyntaxTable(Mapping):
    """Read-only mapping from token spelling to construct descriptor."""

    def __init__(self, entries: Optional[Mapping] = None):
        table = {}
        for spelling, construct in (entries or {}).items():
            if isinstance(construct, Mapping):
                construct = construct_from_dict(construct)
            if not isinstance(construct, tuple(CONSTRUCTS.values())):
                raise ValueError(f"Not a syntax construct for {spelling!r}: {construct!r}")
            if not spelling:
                raise ValueError("Spellings must be non-empty")
            table[str(spelling)] = construct
        _check_label_kinds(table)
        self._table = MappingProxyType(table)
        self._quantifier_labels = frozenset(c.label for c in table.values() if c.kind == "quantifier")

    def __getitem__(self, spelling: str) -> SyntaxConstruct:
        return self._table[spelling]

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def __repr__(self):
        return f"SyntaxTable({dict(self._table)!r})"

    def extend(self, entries: Mapping) -> "SyntaxTable":
        """Return a new table with `entries` added; same spellings are replaced."""
        merged = dict(self._table)
        for spelling, construct in entries.items():
            merged[spelling] = construct_from_dict(construct) if isinstance(construct, Mapping) else construct
        return SyntaxTable(merged)

    @property
    def quantifier_labels(self) -> FrozenSet[str]:
        return self._quantifier_labels

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {spelling: construct_to_dict(c) for spelling, c in self._table.items()}


def _check_label_kinds(table):
    """A label may be shared by aliases of one kind, never across kinds."""
    kinds = {}
    for spelling, construct in table.items():
        seen = kinds.setdefault(construct.label, (construct.kind, spelling))
        if seen[0] != construct.kind:
            raise ValueError(
                f"Label {construct.label!r} is used by {seen[0]} {seen[1]!r} and {construct.kind} {spelling!r}"
            )


def load_syntax_table(path: Union[str, Path], base: Optional[SyntaxTable] = None) -> SyntaxTable:
    """Load a YAML syntax table, optionally as an extension of `base`."""
    entries = read_yaml_file(path)
    if not isinstance(entries, Mapping):
        raise ValueError(f"Syntax table at {path} must be a mapping from spelling to construct")
    logger.info(f"Loaded {len(entries)} syntax entries from {path}")
    if base is None:
        return SyntaxTable(entries)
    return base.extend(entries)


@lru_cache(maxsize=1)
def default_syntax() -> SyntaxTable:
    """The bundled table: propositional connectives, truth constants, quantifiers and equality."""
    return load_syntax_table(DEFAULT_SYNTAX_PATH)
