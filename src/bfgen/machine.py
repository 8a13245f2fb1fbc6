"""In-process Brainfuck interpreter with 8-bit wrapping cells."""

from typing import Callable, Dict, Optional, Tuple

CODE_CHARS = '+-<>[].,'

DEFAULT_TAPE_SIZE = 30000


def is_code_char(ch: str) -> bool:
    return ch in CODE_CHARS


def build_jump_table(code: str) -> Optional[Dict[int, int]]:
    jump_table: Dict[int, int] = {}
    stack = []
    for pos, cmd in enumerate(code):
        if cmd == '[':
            stack.append(pos)
        elif cmd == ']':
            if not stack:
                return None  # Mismatched brackets
            start = stack.pop()
            jump_table[start] = pos
            jump_table[pos] = start
    if stack:
        return None  # Mismatched brackets
    return jump_table


def generate_code(source: str) -> Optional[Callable[..., bytes]]:
    """
    Prepare `source` for execution.

    Returns None if the brackets do not match, otherwise a function
    `execute(memory, input_data=b"") -> bytes` that runs the program on
    `memory` in place and returns everything it wrote.
    """
    code = ''.join(c for c in source if is_code_char(c))
    length = len(code)
    jump_table = build_jump_table(code)
    if jump_table is None:
        return None

    def execute(mem: bytearray, input_data: bytes = b"") -> bytes:
        mem_len = len(mem)
        out = bytearray()
        in_pos = 0
        ptr = 0
        i = 0
        while i < length:
            cmd = code[i]

            if cmd == '+':
                mem[ptr] = (mem[ptr] + 1) & 0xFF
            elif cmd == '-':
                mem[ptr] = (mem[ptr] - 1) & 0xFF
            elif cmd == '>':
                ptr += 1
                if ptr >= mem_len:
                    ptr = 0
            elif cmd == '<':
                ptr -= 1
                if ptr < 0:
                    ptr = mem_len - 1
            elif cmd == '.':
                out.append(mem[ptr])
            elif cmd == ',':
                if in_pos < len(input_data):
                    mem[ptr] = input_data[in_pos]
                    in_pos += 1
                else:
                    mem[ptr] = 0
            elif cmd == '[':
                if mem[ptr] == 0:
                    i = jump_table[i]
            elif cmd == ']':
                if mem[ptr] != 0:
                    i = jump_table[i]
            i += 1
        return bytes(out)

    return execute


def run(source: str, input_data: bytes = b"", tape_size: int = DEFAULT_TAPE_SIZE) -> Tuple[bytes, bytearray]:
    """Run a program on a fresh tape; returns (output, memory)."""
    func = generate_code(source)
    if func is None:
        raise ValueError("Mismatched brackets in Brainfuck code")
    memory = bytearray(tape_size)
    output = func(memory, input_data)
    return output, memory
