import logging
from dataclasses import dataclass
from typing import List, Optional

from Syntax.syntax_table import SyntaxConstruct, SyntaxTable
from Syntax.tree import METAVARIABLE_LETTERS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Token:
    """
    One classified unit of input.

    `kind` is the construct kind for spellings found in the syntax table, or one
    of "metavariable", "char" and "unrecognized". `value` is always the text as
    written, backslash included.
    """

    kind: str
    value: str
    construct: Optional[SyntaxConstruct] = None
    letter: Optional[str] = None  # metavariables only

    @property
    def style(self) -> Optional[str]:
        return getattr(self.construct, "style", None)

    def is_a(self, kind: str, style: Optional[str] = None) -> bool:
        return self.kind == kind and (style is None or self.style == style)


def _classify(spelling: str, value: str, syntax: SyntaxTable, default_kind: str) -> Token:
    construct = syntax.get(spelling)
    if construct is None:
        return Token(default_kind, value)
    return Token(construct.kind, value, construct)


def tokenize(text: str, syntax: SyntaxTable) -> List[Token]:
    """
    Split LaTeX text into tokens.

    A backslash starts a control sequence. Letters extend a control word, which
    ends at the first non-letter; a single non-letter right after the backslash
    forms a control symbol such as `\\_`. Other characters are tokens of their
    own, and whitespace outside control sequences is dropped.
    """
    tokens = []
    ctrl_seq = None

    def end_ctrl_seq():
        nonlocal ctrl_seq
        if ctrl_seq is None:
            return
        value = f"\\{ctrl_seq}"
        if ctrl_seq in METAVARIABLE_LETTERS:
            tokens.append(Token("metavariable", value, letter=ctrl_seq))
        else:
            tokens.append(_classify(ctrl_seq, value, syntax, "unrecognized"))
        ctrl_seq = None

    for char in text:
        if ctrl_seq is not None and char.isascii() and char.isalpha():
            ctrl_seq += char
        elif ctrl_seq == "":
            ctrl_seq = char
            end_ctrl_seq()
        else:
            end_ctrl_seq()
            if char == "\\":
                ctrl_seq = ""
            elif char.isspace():
                continue
            else:
                tokens.append(_classify(char, char, syntax, "char"))
    end_ctrl_seq()

    logger.debug(f"Tokenized {text!r} into {[t.value for t in tokens]}")
    return tokens
