"""
Symbolic tape instructions ("Asm") shared by the generator and the assembler.

Text form, one instruction per line:
    #define <name> <value>
    add <var> <n>        sub <var> <n>        set <var> <n>
    rs <n>               ls <n>
    loop <var>           end <var>
    copy <src> <dest>...
    read <var>           write <var>
    # comment

Operands are either numbers or names; names are resolved by #define before
the instruction is encoded.
"""

from __future__ import annotations

import re

from dataclasses import dataclass, fields, replace
from typing import Callable, ClassVar, Dict, Iterable, List, Optional, Tuple, Union

from .errors import MalformedInstructionError, UnknownOperationError, make_assemble_error

Ref = Union[int, str]

_NAME_RE = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')
_NUM_RE = re.compile(r'^[0-9]+$')


@dataclass(frozen=True)
class _Operand:
    ref: Ref

    @property
    def is_resolved(self) -> bool:
        return isinstance(self.ref, int)

    def resolve(self, table: Dict[str, int]):
        if isinstance(self.ref, str) and self.ref in table:
            return type(self)(table[self.ref])
        return self

    def __str__(self) -> str:
        return str(self.ref)


@dataclass(frozen=True)
class Value(_Operand):
    """A literal count or a named constant."""


@dataclass(frozen=True)
class Variable(_Operand):
    """A cell, by name or by resolved offset from the row origin."""


@dataclass(frozen=True)
class Define:
    mnemonic: ClassVar[str] = '#define'
    name: str
    value: Value

    def to_line(self) -> str:
        return f"#define {self.name} {self.value}"


@dataclass(frozen=True)
class Add:
    mnemonic: ClassVar[str] = 'add'
    var: Variable
    value: Value


@dataclass(frozen=True)
class Sub:
    mnemonic: ClassVar[str] = 'sub'
    var: Variable
    value: Value


@dataclass(frozen=True)
class Set:
    mnemonic: ClassVar[str] = 'set'
    var: Variable
    value: Value


@dataclass(frozen=True)
class Rs:
    mnemonic: ClassVar[str] = 'rs'
    value: Value


@dataclass(frozen=True)
class Ls:
    mnemonic: ClassVar[str] = 'ls'
    value: Value


@dataclass(frozen=True)
class Loop:
    mnemonic: ClassVar[str] = 'loop'
    var: Variable = Variable(0)


@dataclass(frozen=True)
class End:
    mnemonic: ClassVar[str] = 'end'
    var: Variable = Variable(0)


@dataclass(frozen=True)
class Copy:
    mnemonic: ClassVar[str] = 'copy'
    src: Variable
    dests: Tuple[Variable, ...]


@dataclass(frozen=True)
class Read:
    mnemonic: ClassVar[str] = 'read'
    var: Variable


@dataclass(frozen=True)
class Write:
    mnemonic: ClassVar[str] = 'write'
    var: Variable


@dataclass(frozen=True)
class Comment:
    mnemonic: ClassVar[str] = '#'
    text: str

    def to_line(self) -> str:
        return f"# {self.text}"


Asm = Union[Define, Add, Sub, Set, Rs, Ls, Loop, End, Copy, Read, Write, Comment]

MNEMONICS = {
    cls.mnemonic: cls for cls in (Add, Sub, Set, Rs, Ls, Loop, End, Copy, Read, Write)
}


def operands(op: Asm) -> List[_Operand]:
    """All operands of an instruction, in textual order."""
    out: List[_Operand] = []
    for f in fields(op):
        v = getattr(op, f.name)
        if isinstance(v, _Operand):
            out.append(v)
        elif isinstance(v, tuple):
            out.extend(v)
    return out


def map_operands(op: Asm, fn: Callable[[_Operand], _Operand]) -> Asm:
    changes = {}
    for f in fields(op):
        v = getattr(op, f.name)
        if isinstance(v, _Operand):
            changes[f.name] = fn(v)
        elif isinstance(v, tuple):
            changes[f.name] = tuple(fn(x) for x in v)
    return replace(op, **changes) if changes else op


def variable_names(op: Asm) -> List[str]:
    """Names of the cells an instruction touches (unresolved variables only)."""
    return [
        o.ref for o in operands(op)
        if isinstance(o, Variable) and isinstance(o.ref, str)
    ]


def to_line(op: Asm) -> str:
    if isinstance(op, (Define, Comment)):
        return op.to_line()
    return ' '.join([op.mnemonic] + [str(o) for o in operands(op)])


def render(ops: Iterable[Asm]) -> str:
    return ''.join(to_line(op) + '\n' for op in ops)


# ===== Text -> instructions =====

def _parse_ref(token: str, *, line: int, source: Optional[str]) -> Ref:
    if _NUM_RE.match(token):
        try:
            return int(token)
        except ValueError:
            raise make_assemble_error(
                MalformedInstructionError,
                message=f"Operand too large: {token[:20]}... ({len(token)} digits)",
                line=line,
                source=source,
            ) from None
    if _NAME_RE.match(token):
        return token
    raise make_assemble_error(
        MalformedInstructionError,
        message=f"Invalid operand: {token!r}",
        line=line,
        source=source,
    )


def parse_line(text: str, *, line: int = 1, source: Optional[str] = None) -> Optional[Asm]:
    """
    Parse one line of Asm text.

    Returns None for blank lines and comments.
    """
    parts = text.split()
    if not parts:
        return None
    head, args = parts[0], parts[1:]

    def malformed(detail: str) -> MalformedInstructionError:
        return make_assemble_error(
            MalformedInstructionError,
            message=f"Malformed '{head}': {detail}",
            line=line,
            source=source,
        )

    if head == '#define':
        if len(args) != 2:
            raise malformed(f"expected a name and a value, got {len(args)} operand(s)")
        if not _NAME_RE.match(args[0]):
            raise malformed(f"invalid name {args[0]!r}")
        return Define(args[0], Value(_parse_ref(args[1], line=line, source=source)))
    if head.startswith('#'):
        return None

    cls = MNEMONICS.get(head)
    if cls is None:
        raise make_assemble_error(
            UnknownOperationError,
            message=f"Unknown operation: {head!r}",
            line=line,
            source=source,
        )

    refs = [_parse_ref(a, line=line, source=source) for a in args]
    if cls is Copy:
        if len(refs) < 2:
            raise malformed("expected a source and at least one destination")
        return Copy(Variable(refs[0]), tuple(Variable(r) for r in refs[1:]))
    if cls in (Loop, End):
        if len(refs) > 1:
            raise malformed(f"expected at most 1 operand, got {len(refs)}")
        return cls(Variable(refs[0])) if refs else cls()
    if cls in (Rs, Ls):
        if len(refs) != 1:
            raise malformed(f"expected 1 operand, got {len(refs)}")
        return cls(Value(refs[0]))
    if cls in (Read, Write):
        if len(refs) != 1:
            raise malformed(f"expected 1 operand, got {len(refs)}")
        return cls(Variable(refs[0]))

    if len(refs) != 2:
        raise malformed(f"expected 2 operands, got {len(refs)}")
    return cls(Variable(refs[0]), Value(refs[1]))


def parse_program(source: str) -> List[Tuple[int, Asm]]:
    """Parse Asm text into (line number, instruction) pairs."""
    out: List[Tuple[int, Asm]] = []
    for line_no_0, raw in enumerate(source.split('\n')):
        op = parse_line(raw, line=line_no_0 + 1, source=source)
        if op is not None:
            out.append((line_no_0 + 1, op))
    return out
