from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from .assembler import assemble
from .generator import code_gen
from .parser import parse


@dataclass(frozen=True)
class CompileOptions:
    annotate: bool = False
    # Treat the input as Asm text instead of high-level source.
    assembly: bool = False


@dataclass(frozen=True)
class CompileResult:
    bf_code: str
    asm: str
    symbols: Dict[str, int]
    cell_size: int


def compile_string(source: str, *, options: Optional[CompileOptions] = None) -> CompileResult:
    options = options or CompileOptions()
    if options.assembly:
        return assemble_string(source)
    generated = code_gen(parse(source), annotate=options.annotate)
    text = generated.text
    return CompileResult(
        bf_code=assemble(text),
        asm=text,
        symbols=dict(generated.symbols.offsets),
        cell_size=generated.symbols.cell_size,
    )


def assemble_string(source: str) -> CompileResult:
    return CompileResult(bf_code=assemble(source), asm=source, symbols={}, cell_size=0)


def compile_file(path: str | Path, *, options: Optional[CompileOptions] = None, encoding: str = "utf-8") -> CompileResult:
    p = Path(path)
    return compile_string(p.read_text(encoding=encoding), options=options)
