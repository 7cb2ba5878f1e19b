"""
Formula trees.

A tree is either an atom (a label such as "phi", "true" or "x_1") or a tuple
whose head is an operator label followed by the argument subtrees, e.g.
("and", ("not", "phi"), "psi"). Metavariable applications are represented by
`MetavarNode` until the semantic analyzer strips them down to their name.
"""

import re
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

from Syntax.errors import WrongNumArgs

EIGENVAR_PATTERN = re.compile(r"[a-r](_[0-9]+)?")
REGVAR_PATTERN = re.compile(r"[s-z](_[0-9]+)?")
DIGIT_PATTERN = re.compile(r"[0-9]")

METAVARIABLE_LETTERS = ("phi", "psi", "chi")


@dataclass(frozen=True)
class MetavarNode:
    """A metavariable with the variables it was declared to have free."""

    name: str
    free_vars: Tuple[str, ...] = ()


Tree = Union[str, tuple, MetavarNode]


def make_node(label: str, args: Sequence[Tree], arity: int, symbol: Optional[str] = None) -> tuple:
    """
    Build the node `(label, *args)`, refusing argument lists that don't fit the operator.

    Raises:
        WrongNumArgs: If `len(args)` differs from `arity`. The error names
            `symbol` (the spelling the user wrote) when given, else the label.
    """
    if len(args) != arity:
        raise WrongNumArgs(symbol or label, arity, len(args))
    return (label, *args)


def is_eigenvar(val) -> bool:
    return isinstance(val, str) and EIGENVAR_PATTERN.fullmatch(val) is not None


def is_regvar(val) -> bool:
    return isinstance(val, str) and REGVAR_PATTERN.fullmatch(val) is not None


def is_digit(val) -> bool:
    return isinstance(val, str) and DIGIT_PATTERN.fullmatch(val) is not None
