import pytest

from Syntax.parse import FormulaParser
from Syntax.syntax_table import default_syntax

SAMPLE_ENTRIES = {
    "funcF": {"kind": "function", "label": "F", "style": "prefix", "arity": 1},
    "funcG": {"kind": "function", "label": "G", "style": "prefix", "arity": 2},
    "funcH": {"kind": "function", "label": "H", "style": "prefix", "arity": 3},
    "+": {"kind": "function", "label": "plus", "style": "infix", "arity": 2, "precedence": 1},
    "-": {"kind": "function", "label": "minus", "style": "infix", "arity": 2, "precedence": 1},
    "cdot": {"kind": "function", "label": "times", "style": "infix", "arity": 2, "precedence": 2},
    "predP": {"kind": "predicate", "label": "P", "style": "prefix", "arity": 1},
    "predQ": {"kind": "predicate", "label": "Q", "style": "prefix", "arity": 2},
    "predR": {"kind": "predicate", "label": "R", "style": "prefix", "arity": 3},
}


@pytest.fixture(scope="session")
def sample_syntax():
    """Default syntax plus a few predicates and functions."""
    return default_syntax().extend(SAMPLE_ENTRIES)


@pytest.fixture(scope="session")
def sample_parser(sample_syntax):
    return FormulaParser(sample_syntax)
