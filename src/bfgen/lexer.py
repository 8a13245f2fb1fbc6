import re

from dataclasses import dataclass
from typing import List

from .errors import make_lexical_error

ID = 'ID'
NUM = 'NUM'
ASSIGN = 'ASSIGN'
EQ = 'EQ'
NE = 'NE'
AND = 'AND'
LB = 'LB'
RB = 'RB'
LP = 'LP'
RP = 'RP'
EOF = 'EOF'

_TWO_CHAR = {'==': EQ, '!=': NE, '&&': AND}
_ONE_CHAR = {'=': ASSIGN, '{': LB, '}': RB, '(': LP, ')': RP}

MAX_LITERAL = 255


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    line: int
    column: int

    def __str__(self) -> str:
        if self.kind == EOF:
            return 'end of input'
        return repr(self.text)


def _strip_comments(code: str) -> str:
    # Keeps line structure intact so positions stay valid.
    return re.sub(r'//[^\n]*', '', code)


def _is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'


def _is_ident_start(ch: str) -> bool:
    return 'a' <= ch <= 'z' or 'A' <= ch <= 'Z' or ch == '_'


def _is_ident_char(ch: str) -> bool:
    return _is_ident_start(ch) or _is_digit(ch)


def tokenize(source: str) -> List[Token]:
    """
    Split source text into tokens.

    The returned list always ends with a single EOF token positioned just
    past the last character of the input.
    """
    code = _strip_comments(source)
    tokens: List[Token] = []
    line = 1
    line_start = 0
    i = 0
    while i < len(code):
        ch = code[i]
        col = i - line_start + 1

        if ch == '\n':
            line += 1
            line_start = i + 1
            i += 1
            continue
        if ch.isspace():
            i += 1
            continue

        pair = code[i:i + 2]
        if pair in _TWO_CHAR:
            tokens.append(Token(_TWO_CHAR[pair], pair, line, col))
            i += 2
        elif ch in _ONE_CHAR:
            tokens.append(Token(_ONE_CHAR[ch], ch, line, col))
            i += 1
        elif _is_digit(ch):
            j = i
            while j < len(code) and _is_digit(code[j]):
                j += 1
            if j < len(code) and _is_ident_char(code[j]):
                while j < len(code) and _is_ident_char(code[j]):
                    j += 1
                raise make_lexical_error(
                    message=f"Invalid token: {code[i:j]!r}", source=source, line=line, column=col
                )
            text = code[i:j]
            if len(text.lstrip('0')) > len(str(MAX_LITERAL)) or int(text) > MAX_LITERAL:
                raise make_lexical_error(
                    message=f"Literal {text} out of range (0..{MAX_LITERAL})",
                    source=source, line=line, column=col,
                )
            tokens.append(Token(NUM, text, line, col))
            i = j
        elif _is_ident_start(ch):
            j = i
            while j < len(code) and _is_ident_char(code[j]):
                j += 1
            tokens.append(Token(ID, code[i:j], line, col))
            i = j
        else:
            raise make_lexical_error(
                message=f"Unexpected character {ch!r}", source=source, line=line, column=col
            )

    tokens.append(Token(EOF, '', line, len(code) - line_start + 1))
    return tokens
