"""
Code generator: syntax tree -> Asm.

The target machine only has "repeat while the current cell is nonzero", so
every branch is lowered into flag cells gated by loops:

- a comparison copies the variable into a flag (restoring the variable
  through a scratch cell) and subtracts the literal, leaving the flag
  nonzero exactly when the values differ;
- a != test runs its code inside a loop on that flag, zeroing the flag
  before the loop closes so the body runs at most once;
- a == test arms a second flag, lets the != loop disarm it, then gates
  its code on the second flag;
- && nests each later term inside the previous term's gate.

Flags are named after the block depth (and the term position inside an
&& chain) so nested blocks never share a live flag.

Each logical tape position is a full row of cells, one per symbol, so
`move_right`/`move_left` shift by the row width `__cell_size`.
"""

from __future__ import annotations

import re

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from . import asm
from .asm import Asm, Comment, Copy, Define, End, Loop, Ls, Read, Rs, Set, Sub, Value, Variable, Write
from .errors import make_reserved_name_error
from .syntax import (
    Assign, Compare, Condition, Direction, Equal, If, Input, Move, NotEqual, Output, Program, Statement, While,
)

TEMP_VAR = '__tmp'
CELL_SIZE = '__cell_size'

RESERVED_NAMES = frozenset({TEMP_VAR, CELL_SIZE})
_RESERVED_FLAG_RE = re.compile(r'^__(?:(?:if|eq)_\d+_\d+|(?:else|while)_\d+)$')


def if_flag(depth: int, term: int) -> str:
    return f"__if_{depth}_{term}"


def eq_flag(depth: int, term: int) -> str:
    return f"__eq_{depth}_{term}"


def else_flag(depth: int) -> str:
    return f"__else_{depth}"


def while_flag(depth: int) -> str:
    return f"__while_{depth}"


def is_reserved(name: str) -> bool:
    return name in RESERVED_NAMES or bool(_RESERVED_FLAG_RE.match(name))


# ===== Variable discovery =====

def _condition_variables(condition: Condition) -> List[str]:
    return [c.var for c in condition.compares]


def _statement_variables(stmt: Statement) -> List[str]:
    if isinstance(stmt, (Input, Output, Assign)):
        return [stmt.var]
    if isinstance(stmt, While):
        names = _condition_variables(stmt.condition)
        for s in stmt.body:
            names.extend(_statement_variables(s))
        return names
    if isinstance(stmt, If):
        names = _condition_variables(stmt.condition)
        for s in stmt.then_body:
            names.extend(_statement_variables(s))
        for s in stmt.else_body or ():
            names.extend(_statement_variables(s))
        return names
    return []


def list_variables(program: Program) -> List[str]:
    """
    User variables in order of first reference.

    Raises ReservedNameError if one of them collides with an internal name.
    """
    seen: Dict[str, None] = {}
    for stmt in program.statements:
        for name in _statement_variables(stmt):
            if is_reserved(name):
                raise make_reserved_name_error(name)
            seen.setdefault(name, None)
    return list(seen)


# ===== Symbol table =====

@dataclass(frozen=True)
class SymbolTable:
    offsets: Dict[str, int]

    @classmethod
    def from_names(cls, names: Sequence[str]) -> 'SymbolTable':
        offsets: Dict[str, int] = {}
        for name in names:
            if name not in offsets:
                offsets[name] = len(offsets)
        return cls(offsets)

    @property
    def cell_size(self) -> int:
        return len(self.offsets)

    def __contains__(self, name: str) -> bool:
        return name in self.offsets

    def __getitem__(self, name: str) -> int:
        return self.offsets[name]

    def __len__(self) -> int:
        return len(self.offsets)


def build_symbol_table(user_vars: Sequence[str], ops: Sequence[Asm]) -> SymbolTable:
    names = list(user_vars)
    for op in ops:
        names.extend(asm.variable_names(op))
    return SymbolTable.from_names(names)


# ===== Lowering =====

def _var(name: str) -> Variable:
    return Variable(name)


def _num(n: int) -> Value:
    return Value(n)


def compare_into(var: str, value: int, flag: str) -> List[Asm]:
    """flag = var - value, leaving var intact."""
    return [
        Set(_var(flag), _num(0)),
        Copy(_var(var), (_var(TEMP_VAR), _var(flag))),
        Copy(_var(TEMP_VAR), (_var(var),)),
        Sub(_var(flag), _num(value)),
    ]


def generate_not_equal(compare: NotEqual, inner: Sequence[Asm], flag: str) -> List[Asm]:
    return [
        *compare_into(compare.var, compare.value, flag),
        Loop(_var(flag)),
        *inner,
        Set(_var(flag), _num(0)),
        End(_var(flag)),
    ]


def generate_equal(compare: Equal, inner: Sequence[Asm], flag: str, is_equal: str) -> List[Asm]:
    return [
        Set(_var(is_equal), _num(1)),
        *compare_into(compare.var, compare.value, flag),
        Loop(_var(flag)),
        Set(_var(is_equal), _num(0)),
        Set(_var(flag), _num(0)),
        End(_var(flag)),
        Loop(_var(is_equal)),
        *inner,
        Set(_var(is_equal), _num(0)),
        End(_var(is_equal)),
    ]


def generate_compares(compares: Sequence[Compare], then_ops: Sequence[Asm], depth: int, term: int = 0) -> List[Asm]:
    # Later terms are lowered inside the earlier term's gate.
    if not compares:
        return list(then_ops)
    first, rest = compares[0], compares[1:]
    inner = generate_compares(rest, then_ops, depth, term + 1)
    if isinstance(first, NotEqual):
        return generate_not_equal(first, inner, if_flag(depth, term))
    if isinstance(first, Equal):
        return generate_equal(first, inner, if_flag(depth, term), eq_flag(depth, term))
    raise TypeError(f"Unsupported comparison: {first!r}")


def generate_if(
    condition: Condition,
    then_body: Sequence[Statement],
    else_body: Optional[Sequence[Statement]],
    depth: int = 0,
    trailing: Sequence[Asm] = (),
) -> List[Asm]:
    """
    Lower an if/else at block depth `depth`.

    `trailing` is appended to the then-branch after its statements.
    """
    then_ops = lower_block(then_body, depth + 1) + list(trailing)
    if else_body is None:
        return generate_compares(condition.compares, then_ops, depth)

    taken = else_flag(depth)
    return [
        Set(_var(taken), _num(1)),
        *generate_compares(condition.compares, then_ops + [Set(_var(taken), _num(0))], depth),
        Loop(_var(taken)),
        *lower_block(else_body, depth + 1),
        Set(_var(taken), _num(0)),
        End(_var(taken)),
    ]


def generate_while(condition: Condition, body: Sequence[Statement], depth: int = 0) -> List[Asm]:
    flag = while_flag(depth)
    return [
        Set(_var(flag), _num(1)),
        Loop(_var(flag)),
        Set(_var(flag), _num(0)),
        *generate_if(condition, body, None, depth, trailing=[Set(_var(flag), _num(1))]),
        End(_var(flag)),
    ]


def lower_statement(stmt: Statement, depth: int = 0) -> List[Asm]:
    if isinstance(stmt, Input):
        return [Read(_var(stmt.var))]
    if isinstance(stmt, Output):
        return [Write(_var(stmt.var))]
    if isinstance(stmt, Assign):
        return [Set(_var(stmt.var), _num(stmt.value))]
    if isinstance(stmt, Move):
        if stmt.direction is Direction.RIGHT:
            return [Rs(Value(CELL_SIZE))]
        return [Ls(Value(CELL_SIZE))]
    if isinstance(stmt, While):
        return generate_while(stmt.condition, stmt.body, depth)
    if isinstance(stmt, If):
        return generate_if(stmt.condition, stmt.then_body, stmt.else_body, depth)
    raise TypeError(f"Unsupported statement: {stmt!r}")


def lower_block(statements: Sequence[Statement], depth: int = 0) -> List[Asm]:
    ops: List[Asm] = []
    for stmt in statements:
        ops.extend(lower_statement(stmt, depth))
    return ops


# ===== Entry point =====

@dataclass(frozen=True)
class GeneratedProgram:
    symbols: SymbolTable
    ops: List[Asm]

    @property
    def text(self) -> str:
        return asm.render(self.ops)


def code_gen(program: Program, *, annotate: bool = False) -> GeneratedProgram:
    """
    Lower a whole program.

    The result starts with one #define per cell plus the row width, followed
    by the program body; with `annotate`, each top-level statement is
    preceded by a comment naming it.
    """
    user_vars = list_variables(program)

    body: List[Asm] = []
    for stmt in program.statements:
        if annotate:
            body.append(Comment(str(stmt)))
        body.extend(lower_statement(stmt))

    symbols = build_symbol_table(user_vars, body)
    header: List[Asm] = [Define(name, Value(idx)) for name, idx in symbols.offsets.items()]
    header.append(Define(CELL_SIZE, Value(symbols.cell_size)))
    return GeneratedProgram(symbols=symbols, ops=header + body)
