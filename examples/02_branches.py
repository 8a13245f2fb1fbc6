#!/usr/bin/env python3

import os
import sys

sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

from bfgen.api import CompileOptions, compile_string
from bfgen.machine import run


def main():
    code = """
    yes = 89
    no = 78
    nl = 10
    input ( a )
    input ( b )
    if a == 49 && b != 48 {
        output ( yes )
    } else if a == 50 {
        output ( a )
    } else {
        output ( no )
    }
    output ( nl )
    """

    result = compile_string(code, options=CompileOptions(annotate=True))
    print(result.asm)
    for data in (b"11", b"10", b"2x", b"99"):
        output, _ = run(result.bf_code, data)
        print(data.decode(), "->", output.decode("latin-1"), end="")


if __name__ == "__main__":
    main()
