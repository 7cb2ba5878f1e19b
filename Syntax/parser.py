"""
Precedence-climbing parsers for formulas and terms.

Both parsers read from a `TokenStream` and move its cursor forward as they
consume tokens. Binding powers are derived from the precedences in the syntax
table: a connective of precedence p gets base 4p, an infix function base 2p.
"""

import logging
import math
from typing import Callable, List, Optional, Sequence, Tuple

from Syntax.errors import BadToken, BoundEigenvar, ParseError, UnexpectedEnd, WrongNumArgs
from Syntax.syntax_table import Connective, Function
from Syntax.tokenizer import Token
from Syntax.tree import MetavarNode, Tree, is_digit, is_eigenvar, make_node

logger = logging.getLogger(__name__)

NO_BINDING = -1


class TokenStream:
    """A cursor over a fixed token sequence."""

    def __init__(self, tokens: Sequence[Token]):
        self.tokens = tuple(tokens)
        self.pos = 0

    def peek(self, offset: int = 0) -> Optional[Token]:
        index = self.pos + offset
        return self.tokens[index] if index < len(self.tokens) else None

    def peek_value(self, offset: int = 0) -> Optional[str]:
        token = self.peek(offset)
        return token.value if token is not None else None

    def next(self) -> Optional[Token]:
        token = self.peek()
        if token is not None:
            self.pos += 1
        return token

    def at_end(self) -> bool:
        return self.pos >= len(self.tokens)

    def mark(self) -> int:
        return self.pos

    def reset(self, mark: int):
        self.pos = mark

    def expect(self, value: str) -> Token:
        token = self.next()
        if token is None:
            raise UnexpectedEnd(value)
        if token.value != value:
            raise BadToken(token.value, value)
        return token


Parser = Callable[[TokenStream], Tree]


def connective_binding_power(op: Connective) -> Tuple[int, int]:
    """Left and right binding power of a connective."""
    if op.style == "nullary":
        return NO_BINDING, NO_BINDING
    base = 4 * op.precedence
    if op.style == "prefix":
        return NO_BINDING, base
    if op.associativity == "left":
        # the left side binds tighter, so a run of the same operator folds left
        return base + 2, base + 3
    return base + 1, base


def function_binding_power(op: Function) -> Tuple[int, int]:
    """Left and right binding power of a function; infix functions are all left-associative."""
    if op.style != "infix":
        return NO_BINDING, NO_BINDING
    base = 2 * op.precedence
    return base, base + 1


def parse_formula(stream: TokenStream, min_bp: float = 0) -> Tree:
    first = stream.peek()
    if first is None:
        raise UnexpectedEnd()

    if first.is_a("connective", "prefix"):
        stream.next()
        _, r_bp = connective_binding_power(first.construct)
        rhs = parse_formula(stream, r_bp)
        lhs = make_node(first.construct.label, [rhs], first.construct.arity, first.value)
    elif first.is_a("quantifier"):
        stream.next()
        bound = parse_variable(stream)
        if is_eigenvar(bound):
            raise BoundEigenvar(bound)
        # the scope takes no infix continuation, so it binds tighter than every connective
        scope = parse_formula(stream, math.inf)
        lhs = make_node(first.construct.label, [bound, scope], first.construct.arity, first.value)
    else:
        lhs = parse_basic_formula(stream)

    tree = lhs
    while True:
        infix = stream.peek()
        if infix is None or not infix.is_a("connective", "infix"):
            break
        l_bp, r_bp = connective_binding_power(infix.construct)
        if l_bp < min_bp:
            break
        stream.next()
        rhs = parse_formula(stream, r_bp)
        tree = make_node(infix.construct.label, [tree, rhs], infix.construct.arity, infix.value)
    return tree


def parse_basic_formula(stream: TokenStream) -> Tree:
    first = stream.peek()
    if first is None:
        raise UnexpectedEnd()

    if first.kind == "metavariable":
        stream.next()
        name = first.letter
        if stream.peek_value() == "_":
            name = f"{name}_{parse_subscript(stream)}"
        free_vars = ()
        if delim_up_next(stream, "("):
            free_vars = tuple(parse_parens(stream, lambda s: parse_list(s, parse_variable)))
        return MetavarNode(name, free_vars)

    if first.is_a("connective", "nullary"):
        stream.next()
        return first.construct.label

    if first.is_a("predicate", "prefix"):
        stream.next()
        args = parse_parens(stream, lambda s: parse_list(s, parse_term))
        return make_node(first.construct.label, args, first.construct.arity, first.value)

    if delim_up_next(stream, "("):
        # a parenthesis may open a formula or a term, so try the formula and back off on failure
        mark = stream.mark()
        try:
            return parse_parens(stream, parse_formula)
        except WrongNumArgs:
            # an arity mismatch is final; the term reading stops at the same application
            raise
        except ParseError as e:
            logger.debug(f"Parenthesised formula failed at token {mark} ({e}), retrying as a term")
            stream.reset(mark)

    return parse_infix_predicate(stream)


def parse_infix_predicate(stream: TokenStream) -> Tree:
    lhs = parse_term(stream)
    pred = stream.next()
    if pred is None:
        raise UnexpectedEnd()
    if not pred.is_a("predicate", "infix"):
        raise BadToken(pred.value)
    rhs = parse_term(stream)
    return make_node(pred.construct.label, [lhs, rhs], pred.construct.arity, pred.value)


def parse_term(stream: TokenStream, min_bp: float = 0) -> Tree:
    if stream.peek() is None:
        raise UnexpectedEnd()

    tree = parse_basic_term(stream)
    while True:
        infix = stream.peek()
        if infix is None or not infix.is_a("function", "infix"):
            break
        l_bp, r_bp = function_binding_power(infix.construct)
        if l_bp < min_bp:
            break
        stream.next()
        rhs = parse_term(stream, r_bp)
        tree = make_node(infix.construct.label, [tree, rhs], infix.construct.arity, infix.value)
    return tree


def parse_basic_term(stream: TokenStream) -> Tree:
    first = stream.peek()
    if first is None:
        raise UnexpectedEnd()

    if first.is_a("function", "prefix"):
        stream.next()
        # arguments are basic terms; infix operators apply to the finished application
        args = parse_parens(stream, lambda s: parse_list(s, parse_basic_term))
        return make_node(first.construct.label, args, first.construct.arity, first.value)

    if delim_up_next(stream, "("):
        return parse_parens(stream, parse_term)

    return parse_variable(stream)


def parse_variable(stream: TokenStream) -> str:
    token = stream.next()
    if token is None:
        raise UnexpectedEnd()
    if token.kind != "char" or len(token.value) != 1 or not ("a" <= token.value <= "z"):
        raise BadToken(token.value)
    if stream.peek_value() == "_":
        return f"{token.value}_{parse_subscript(stream)}"
    return token.value


def parse_subscript(stream: TokenStream) -> str:
    stream.expect("_")
    first = stream.peek()
    if first is None:
        raise UnexpectedEnd()
    # one digit may stand alone, longer numbers must be grouped in braces
    if first.kind == "char" and is_digit(first.value):
        stream.next()
        return first.value
    return parse_group(stream, parse_integer)


def parse_group(stream: TokenStream, parser: Parser):
    stream.expect("{")
    result = parser(stream)
    stream.expect("}")
    return result


def parse_integer(stream: TokenStream) -> str:
    digits = []
    while True:
        token = stream.peek()
        if token is None or token.kind != "char" or not is_digit(token.value):
            break
        digits.append(stream.next().value)
    if not digits:
        if stream.at_end():
            raise UnexpectedEnd()
        raise BadToken(stream.peek_value())
    return "".join(digits)


def parse_list(stream: TokenStream, parser: Parser) -> List[Tree]:
    """Parse one or more comma-separated items."""
    items = [parser(stream)]
    while stream.peek_value() == ",":
        stream.next()
        items.append(parser(stream))
    return items


def parse_parens(stream: TokenStream, parser: Parser):
    return parse_delimited(stream, "(", ")", parser)


def parse_delimited(stream: TokenStream, l_delim: str, r_delim: str, parser: Parser):
    """Parse `l_delim ... r_delim` or its `\\left l_delim ... \\right r_delim` form."""
    first = stream.next()
    if first is None:
        raise UnexpectedEnd(l_delim)
    if first.value == "\\left":
        stream.expect(l_delim)
        result = parser(stream)
        stream.expect("\\right")
        stream.expect(r_delim)
        return result
    if first.value == l_delim:
        result = parser(stream)
        stream.expect(r_delim)
        return result
    raise BadToken(first.value, l_delim)


def delim_up_next(stream: TokenStream, delim: str) -> bool:
    return stream.peek_value() == delim or (stream.peek_value() == "\\left" and stream.peek_value(1) == delim)
