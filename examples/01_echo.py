#!/usr/bin/env python3

import os
import sys

sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

from bfgen.api import compile_string
from bfgen.machine import run


def main():
    code = """
    // Echo stdin until end of input.
    input ( c )
    while c != 0 {
        output ( c )
        input ( c )
    }
    """

    result = compile_string(code)
    print(result.bf_code)
    output, _ = run(result.bf_code, b"Hello, tape!\n")
    sys.stdout.write(output.decode("latin-1"))


if __name__ == "__main__":
    main()
