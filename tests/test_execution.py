#!/usr/bin/env python3
"""
Test actual execution of compiled programs.
"""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

import pytest

from bfgen import CompileOptions, compile_file, compile_string
from bfgen.machine import run


def execute(source, input_data=b""):
    result = compile_string(source)
    output, _ = run(result.bf_code, input_data)
    return output


def test_assign_and_output():
    """x = 1 then output writes the single byte 1 and terminates."""
    assert execute("x = 1\noutput ( x )") == b"\x01"


def test_echo_input():
    assert execute("input ( x )\noutput ( x )", b"A") == b"A"


@pytest.mark.parametrize("value, expected", [(5, b"T"), (4, b"F"), (0, b"F"), (255, b"F")])
def test_equality(value, expected):
    source = f"""
        x = {value}
        t = 84
        f = 70
        if x == 5 {{ output ( t ) }} else {{ output ( f ) }}
    """
    assert execute(source) == expected


@pytest.mark.parametrize("value, expected", [(3, b"F"), (4, b"T"), (0, b"T")])
def test_inequality(value, expected):
    source = f"""
        x = {value}
        t = 84
        f = 70
        if x != 3 {{ output ( t ) }} else {{ output ( f ) }}
    """
    assert execute(source) == expected


def test_if_without_else_not_taken():
    assert execute("x = 2\nif x == 1 { output ( x ) }\ny = 9\noutput ( y )") == b"\x09"


def test_compare_preserves_variable():
    source = """
        x = 42
        if x == 42 { output ( x ) }
        if x != 7 { output ( x ) }
        output ( x )
    """
    assert execute(source) == b"***"


@pytest.mark.parametrize("a, b, expected", [
    (1, 3, b"Y"),
    (1, 2, b"N"),
    (0, 3, b"N"),
    (0, 2, b"N"),
])
def test_and_condition(a, b, expected):
    source = f"""
        a = {a}
        b = {b}
        y = 89
        n = 78
        if a == 1 && b != 2 {{ output ( y ) }} else {{ output ( n ) }}
    """
    assert execute(source) == expected


@pytest.mark.parametrize("data, expected", [(b"1", b"one"), (b"2", b"two"), (b"9", b"?")])
def test_else_if_chain(data, expected):
    source = """
        input ( c )
        if c == 49 {
            o = 111 output ( o )  n = 110 output ( n )  e = 101 output ( e )
        } else if c == 50 {
            t = 116 output ( t )  w = 119 output ( w )  o = 111 output ( o )
        } else {
            q = 63 output ( q )
        }
    """
    assert execute(source, data) == expected


def test_while_echo_until_zero():
    source = """
        input ( c )
        while c != 0 {
            output ( c )
            input ( c )
        }
    """
    assert execute(source, b"hello") == b"hello"


def test_while_false_on_entry():
    assert execute("c = 0\nwhile c != 0 { output ( c ) }\nc = 33\noutput ( c )") == b"!"


def test_while_runs_once():
    source = """
        x = 1
        while x == 1 {
            output ( x )
            x = 2
        }
        output ( x )
    """
    assert execute(source) == b"\x01\x02"


def test_nested_while_and_if():
    # Echo input, replacing every 'a' with '*', until the first newline.
    source = """
        star = 42
        input ( c )
        while c != 10 && c != 0 {
            if c == 97 { output ( star ) } else { output ( c ) }
            input ( c )
        }
    """
    assert execute(source, b"banana\nrest") == b"b*n*n*"


def test_move_between_rows():
    source = """
        x = 65
        move_right
        x = 66
        output ( x )
        move_left
        output ( x )
    """
    assert execute(source) == b"BA"


def test_reverse_input_with_rows():
    # Row 0 stays zero as a sentinel; each character is stored one row further right.
    source = """
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
    assert execute(source, b"abc") == b"cba"


def test_row_width_matches_symbols():
    result = compile_string("input ( a )\nif a == 1 { move_right }")
    assert result.cell_size == len(result.symbols)
    assert result.symbols['a'] == 0


def test_assembly_option():
    result = compile_string("#define a 3\nadd a 2", options=CompileOptions(assembly=True))
    assert result.bf_code == ">>>++<<<"


def test_annotated_output_runs_the_same():
    source = "x = 7\nif x == 7 { output ( x ) }"
    plain = compile_string(source)
    annotated = compile_string(source, options=CompileOptions(annotate=True))
    assert annotated.bf_code == plain.bf_code
    assert "# if x == 7" in annotated.asm


def test_compile_file(tmp_path):
    path = tmp_path / "prog.txt"
    path.write_text("x = 3\noutput ( x )", encoding="utf-8")
    result = compile_file(path)
    assert run(result.bf_code)[0] == b"\x03"
