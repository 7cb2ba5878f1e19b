"""
Errors reported by the formula parser.

Every failure of a parse is exactly one of the classes below. Each carries a
`msg` tag naming the failure and only the fields needed to explain it.
"""

from typing import Any, Dict, Optional


class ParseError(Exception):
    """Base class for every failure reported while parsing a formula."""

    msg = "ParseError"

    def fields(self) -> Dict[str, Any]:
        return {}

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": "error", "msg": self.msg, **self.fields()}

    def __eq__(self, other):
        return type(self) is type(other) and self.fields() == other.fields()

    def __hash__(self):
        return hash((self.msg, tuple(sorted(self.fields().items()))))

    def __repr__(self):
        args = ", ".join(f"{k}={v!r}" for k, v in self.fields().items())
        return f"{type(self).__name__}({args})"


class BadToken(ParseError):
    msg = "BadToken"

    def __init__(self, actual: str, expected: Optional[str] = None):
        self.actual = actual
        self.expected = expected
        if expected is None:
            super().__init__(f"Unexpected token {actual!r}")
        else:
            super().__init__(f"Expected {expected!r} but found {actual!r}")

    def fields(self):
        return {"expected": self.expected, "actual": self.actual}


class BlankExpression(ParseError):
    msg = "BlankExpression"

    def __init__(self):
        super().__init__("Expression is blank")


class UnexpectedEnd(ParseError):
    msg = "UnexpectedEnd"

    def __init__(self, expected: Optional[str] = None):
        self.expected = expected
        if expected is None:
            super().__init__("Unexpected end of input")
        else:
            super().__init__(f"Unexpected end of input, expected {expected!r}")

    def fields(self):
        return {"expected": self.expected}


class WrongNumArgs(ParseError):
    msg = "WrongNumArgs"

    def __init__(self, symbol: str, expected: int, actual: int):
        self.symbol = symbol
        self.expected = expected
        self.actual = actual
        super().__init__(f"{symbol} takes {expected} argument(s) but was given {actual}")

    def fields(self):
        return {"symbol": self.symbol, "expected": self.expected, "actual": self.actual}


class BoundEigenvar(ParseError):
    msg = "BoundEigenvar"

    def __init__(self, variable: str):
        self.variable = variable
        super().__init__(f"Eigenvariable {variable} cannot be bound by a quantifier")

    def fields(self):
        return {"variable": self.variable}


class DoubleBound(ParseError):
    msg = "DoubleBound"

    def __init__(self, variable: str):
        self.variable = variable
        super().__init__(f"Variable {variable} is bound more than once")

    def fields(self):
        return {"variable": self.variable}


class EigenvarDeclaredFree(ParseError):
    msg = "EigenvarDeclaredFree"

    def __init__(self, variable: str, metavariable: str):
        self.variable = variable
        self.metavariable = metavariable
        super().__init__(f"Eigenvariable {variable} is always free and cannot be declared free in {metavariable}")

    def fields(self):
        return {"variable": self.variable, "metavariable": self.metavariable}


class FreeVar(ParseError):
    msg = "FreeVar"

    def __init__(self, variable: str):
        self.variable = variable
        super().__init__(f"Variable {variable} occurs free")

    def fields(self):
        return {"variable": self.variable}


class InconsistentAllowedSubs(ParseError):
    msg = "InconsistentAllowedSubs"

    def __init__(self, metavar: str):
        self.metavar = metavar
        super().__init__(f"Metavariable {metavar} is declared with different free variables")

    def fields(self):
        return {"metavar": self.metavar}
