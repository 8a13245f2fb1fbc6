"""
Assembler: Asm -> Brainfuck.

Every instruction except `rs`/`ls` leaves the head where it found it (the
row origin), so offsets in one instruction never depend on the previous one.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from . import asm
from .asm import Add, Asm, Comment, Copy, Define, End, Loop, Ls, Read, Rs, Set, Sub, Write, _Operand
from .errors import MalformedInstructionError, make_assemble_error

Numbered = Tuple[int, Asm]


# ===== Macro expansion =====

def _expand(numbered: Iterable[Numbered], source: Optional[str] = None) -> List[Numbered]:
    table: Dict[str, int] = {}
    out: List[Numbered] = []
    for line, op in numbered:
        if isinstance(op, Define):
            value = op.value.resolve(table)
            if not value.is_resolved:
                raise make_assemble_error(
                    MalformedInstructionError,
                    message=f"Unresolved value {value.ref!r} in '{asm.to_line(op)}'",
                    line=line,
                    source=source,
                )
            table[op.name] = value.ref
            continue
        out.append((line, asm.map_operands(op, lambda o: o.resolve(table))))
    return out


def expand_macros(ops: Sequence[Asm]) -> List[Asm]:
    """Substitute #define'd names into operands and drop the defines."""
    return [op for _, op in _expand(enumerate(ops, start=1))]


def preprocess(source: str) -> str:
    expanded = _expand(asm.parse_program(source), source)
    return ''.join(asm.to_line(op) + '\n' for _, op in expanded)


# ===== Encoding =====

def _right(n: int) -> str:
    return '>' * n


def _left(n: int) -> str:
    return '<' * n


def _at(offset: int, code: str) -> str:
    return _right(offset) + code + _left(offset)


def _copy(src: int, dests: Sequence[int]) -> str:
    inner = ''.join(_at(d, '+') for d in dests)
    return _right(src) + '[-' + _left(src) + inner + _right(src) + ']' + _left(src)


def encode(op: Asm, *, line: int = 1, source: Optional[str] = None) -> str:
    def number(operand: _Operand) -> int:
        if not operand.is_resolved:
            raise make_assemble_error(
                MalformedInstructionError,
                message=f"Unresolved operand {operand.ref!r} in '{asm.to_line(op)}'",
                line=line,
                source=source,
            )
        if operand.ref < 0:
            raise make_assemble_error(
                MalformedInstructionError,
                message=f"Negative operand {operand.ref} in '{asm.to_line(op)}'",
                line=line,
                source=source,
            )
        return operand.ref

    if isinstance(op, (Define, Comment)):
        return ''
    if isinstance(op, Add):
        return _at(number(op.var), '+' * number(op.value))
    if isinstance(op, Sub):
        return _at(number(op.var), '-' * number(op.value))
    if isinstance(op, Set):
        return _at(number(op.var), '[-]' + '+' * number(op.value))
    if isinstance(op, Rs):
        return _right(number(op.value))
    if isinstance(op, Ls):
        return _left(number(op.value))
    if isinstance(op, Loop):
        return _at(number(op.var), '[')
    if isinstance(op, End):
        return _at(number(op.var), ']')
    if isinstance(op, Read):
        return _at(number(op.var), ',')
    if isinstance(op, Write):
        return _at(number(op.var), '.')
    if isinstance(op, Copy):
        return _copy(number(op.src), [number(d) for d in op.dests])
    raise TypeError(f"Cannot encode {op!r}")


def assemble_ops(ops: Sequence[Asm]) -> str:
    """Expand macros in structured instructions and encode them."""
    return ''.join(encode(op, line=line) for line, op in _expand(enumerate(ops, start=1)))


def assemble(source: str) -> str:
    """Assemble Asm text into a Brainfuck program."""
    expanded = _expand(asm.parse_program(source), source)
    return ''.join(encode(op, line=line, source=source) for line, op in expanded)
