from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import List, Optional

from .api import CompileOptions, compile_string
from .errors import BFGenError
from .machine import run


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bfgen",
        description="Compile the structured tape language (or its Asm) to Brainfuck.",
    )
    parser.add_argument("source", help="Source file")
    parser.add_argument("-o", "--output", help="Output file (default: stdout)")
    parser.add_argument("--asm", action="store_true", help="Treat the source as Asm text")
    parser.add_argument("--emit-asm", action="store_true", help="Write the generated Asm instead of Brainfuck")
    parser.add_argument("--annotate", action="store_true", help="Prefix each statement's Asm with a comment")
    parser.add_argument("--run", action="store_true", help="Execute the compiled program and print its output")
    parser.add_argument("--input", default="", help="Input bytes for --run (as text)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Print stage timings to stderr")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.run and (args.output or args.emit_asm):
        parser.error("--run cannot be combined with -o/--output or --emit-asm")

    try:
        source = Path(args.source).read_text(encoding="utf-8")
    except FileNotFoundError:
        print(f"Couldn't find file: {args.source}", file=sys.stderr)
        return 1

    options = CompileOptions(annotate=args.annotate, assembly=args.asm)
    start = time.time()
    try:
        result = compile_string(source, options=options)
    except BFGenError as e:
        print(e, file=sys.stderr)
        return 1
    end = time.time()

    if args.verbose:
        print(f"Compilation took {(end - start) * 1000:.2f} ms", file=sys.stderr)
        if result.cell_size:
            print(f"Row width: {result.cell_size} cells", file=sys.stderr)
        print(f"Program size: {len(result.bf_code)} instructions", file=sys.stderr)

    if args.run:
        start = time.time()
        try:
            output, _ = run(result.bf_code, args.input.encode("utf-8"))
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        end = time.time()
        sys.stdout.buffer.write(output)
        sys.stdout.flush()
        if args.verbose:
            print(f"Execution took {(end - start) * 1000:.2f} ms", file=sys.stderr)
        return 0

    text = result.asm if args.emit_asm else result.bf_code
    if args.output:
        Path(args.output).write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
