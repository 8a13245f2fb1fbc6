#!/usr/bin/env python3

import os
import sys

sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

from bfgen.api import compile_string
from bfgen.machine import run


def main():
    # Each character goes into its own row; row 0 is left empty as a sentinel.
    code = """
    move_right
    input ( c )
    while c != 0 {
        move_right
        input ( c )
    }
    move_left
    while c != 0 {
        output ( c )
        move_left
    }
    """

    result = compile_string(code)
    print(f"row width: {result.cell_size} cells, symbols: {result.symbols}")
    output, _ = run(result.bf_code, b"stressed")
    print(output.decode("latin-1"))


if __name__ == "__main__":
    main()
