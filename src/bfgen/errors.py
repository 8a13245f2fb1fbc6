from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Type, TypeVar


def _build_context(lines: List[str], line_no_1: int, *, context: int = 2) -> str:
    if not lines:
        return ""
    idx = min(max(1, line_no_1), len(lines))
    start = max(1, idx - context)
    end = min(len(lines), idx + context)

    out: List[str] = []
    for i in range(start, end + 1):
        prefix = '>' if i == idx else ' '
        out.append(f"{prefix} {i:4d} | {lines[i - 1]}")
    return "\n".join(out)


def _hint_for(message: str, *, kind: str) -> Optional[str]:
    msg = message.lower()
    if kind == 'lex':
        if 'out of range' in msg:
            return 'Literals are single cells and must be between 0 and 255.'
        if 'unexpected character' in msg:
            return 'Only identifiers, numbers, =, ==, !=, &&, braces and parentheses are allowed.'
        return None
    if kind == 'parse':
        if 'reserved word' in msg:
            return 'if, else, while, move_right, move_left, input and output cannot be used as variable names.'
        if "expected '}'" in msg:
            return 'Check for a missing closing "}" at the end of a block.'
        if 'expected statement' in msg:
            return 'Statements are: x = N, input ( x ), output ( x ), move_right, move_left, if, while.'
        return None
    if kind == 'assemble':
        if 'unknown operation' in msg:
            return 'Known mnemonics: #define add sub set rs ls loop end copy read write.'
        if 'unresolved' in msg:
            return 'Define the name first with "#define <name> <value>".'
        return None
    return None


@dataclass
class BFGenError(Exception):
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass
class LexicalError(BFGenError):
    line: int
    column: int
    context: str


@dataclass
class ParseError(BFGenError):
    line: int
    column: int
    context: str


@dataclass
class ReservedNameError(BFGenError):
    name: str


@dataclass
class AssembleError(BFGenError):
    line: int
    context: str


@dataclass
class MalformedInstructionError(AssembleError):
    pass


@dataclass
class UnknownOperationError(AssembleError):
    pass


def make_lexical_error(*, message: str, source: str, line: int, column: int) -> LexicalError:
    ctx = _build_context(source.split('\n'), line)
    hint = _hint_for(message, kind='lex')
    hint_block = f"\nHint: {hint}" if hint else ""
    return LexicalError(
        message=f"LexicalError: {message} (line {line}, column {column})\n{ctx}{hint_block}",
        line=line,
        column=column,
        context=ctx,
    )


def make_parse_error(*, message: str, source: str, line: int, column: int) -> ParseError:
    ctx = _build_context(source.split('\n'), line)
    hint = _hint_for(message, kind='parse')
    hint_block = f"\nHint: {hint}" if hint else ""
    return ParseError(
        message=f"ParseError: {message} (line {line}, column {column})\n{ctx}{hint_block}",
        line=line,
        column=column,
        context=ctx,
    )


def make_reserved_name_error(name: str) -> ReservedNameError:
    return ReservedNameError(
        message=f"ReservedNameError: '{name}' is reserved for compiler-internal flags",
        name=name,
    )


_E = TypeVar('_E', bound=AssembleError)


def make_assemble_error(
    cls: Type[_E], *, message: str, line: int, source: Optional[str] = None
) -> _E:
    ctx = _build_context(source.split('\n'), line) if source is not None else ""
    hint = _hint_for(message, kind='assemble')
    hint_block = f"\nHint: {hint}" if hint else ""
    ctx_block = f"\n{ctx}" if ctx else ""
    return cls(
        message=f"{cls.__name__}: {message} (line {line}){ctx_block}{hint_block}",
        line=line,
        context=ctx,
    )
