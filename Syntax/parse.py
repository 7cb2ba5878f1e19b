"""Parser for LaTeX first-order logic with metavariables, predicates and functions"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from Semantics.analyzer import (
    AllowedSubs,
    check_allowed_subs,
    check_double_bindings,
    check_eigenvars,
    check_free_variables,
)
from Syntax.errors import BadToken, BlankExpression, FreeVar, ParseError
from Syntax.parser import TokenStream, parse_formula
from Syntax.syntax_table import SyntaxTable, default_syntax
from Syntax.tokenizer import tokenize
from Syntax.transform import tree_to_json_compatible
from Syntax.tree import Tree

logger = logging.getLogger(__name__)


@dataclass
class ParseSuccess:
    tree: Tree
    allowed_subs: AllowedSubs = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": "success",
            "tree": tree_to_json_compatible(self.tree),
            "allowed_subs": {metavar: sorted(frees) for metavar, frees in self.allowed_subs.items()},
        }


ParseResult = Union[ParseSuccess, ParseError]


class FormulaParser:
    """
    Parses LaTeX formula text against one syntax table.

    The table is only read, so one parser can be shared freely. Each call to
    `parse` works on its own tokens and returns a fresh result.
    """

    def __init__(self, syntax: Optional[SyntaxTable] = None):
        self.syntax = syntax if syntax is not None else default_syntax()

    def parse(self, text: str) -> ParseSuccess:
        """
        Parse and validate one formula.

        Returns:
            ParseSuccess: The formula tree and the free variables each
                metavariable is allowed.

        Raises:
            ParseError: The first problem found. Syntax errors come first, then
                free variables, inconsistent metavariable declarations, double
                bindings and eigenvariables declared free, in that order.
            RecursionError: If brackets or prefix operators nest deeper than the
                interpreter's recursion limit allows. `try_parse` lets it through.
        """
        if not text.strip():
            raise BlankExpression()

        stream = TokenStream(tokenize(text, self.syntax))
        raw_tree = parse_formula(stream)
        if not stream.at_end():
            raise BadToken(stream.peek_value())

        free_var = next(iter(check_free_variables(raw_tree, self.syntax)), None)
        if free_var is not None:
            raise FreeVar(free_var)
        tree, allowed_subs = check_allowed_subs(raw_tree)
        check_double_bindings(tree, self.syntax)
        check_eigenvars(raw_tree)

        logger.debug(f"Parsed {text!r} into {tree}")
        return ParseSuccess(tree, allowed_subs)

    def try_parse(self, text: str) -> ParseResult:
        """Like `parse`, but return the error instead of raising it."""
        try:
            return self.parse(text)
        except ParseError as e:
            logger.debug(f"Failed to parse {text!r}: {e}")
            return e


def parse(text: str, syntax: Optional[SyntaxTable] = None) -> ParseSuccess:
    return FormulaParser(syntax).parse(text)


# Setup parser
parser = FormulaParser()
