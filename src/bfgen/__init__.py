
from .api import CompileOptions, CompileResult, assemble_string, compile_file, compile_string
from .assembler import assemble, assemble_ops, expand_macros, preprocess
from .errors import (
    AssembleError,
    BFGenError,
    LexicalError,
    MalformedInstructionError,
    ParseError,
    ReservedNameError,
    UnknownOperationError,
)
from .generator import code_gen, list_variables
from .lexer import tokenize
from .parser import parse

__all__ = [
    'CompileOptions',
    'CompileResult',
    'compile_string',
    'compile_file',
    'assemble_string',
    'assemble',
    'assemble_ops',
    'expand_macros',
    'preprocess',
    'code_gen',
    'list_variables',
    'tokenize',
    'parse',
    'BFGenError',
    'LexicalError',
    'ParseError',
    'ReservedNameError',
    'AssembleError',
    'MalformedInstructionError',
    'UnknownOperationError',
]
