#!/usr/bin/env python3
"""
Tokenizer tests.
"""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

import pytest

from bfgen import lexer
from bfgen.errors import LexicalError
from bfgen.lexer import tokenize


def kinds(source):
    return [t.kind for t in tokenize(source)]


def test_token_stream():
    """A full if statement tokenizes into the expected kinds and texts."""
    program = """
        if hello != 123 && world == 45 {
            abc = 78
        }"""
    tokens = tokenize(program)
    assert [(t.kind, t.text) for t in tokens] == [
        (lexer.ID, 'if'),
        (lexer.ID, 'hello'),
        (lexer.NE, '!='),
        (lexer.NUM, '123'),
        (lexer.AND, '&&'),
        (lexer.ID, 'world'),
        (lexer.EQ, '=='),
        (lexer.NUM, '45'),
        (lexer.LB, '{'),
        (lexer.ID, 'abc'),
        (lexer.ASSIGN, '='),
        (lexer.NUM, '78'),
        (lexer.RB, '}'),
        (lexer.EOF, ''),
    ]


def test_identifiers():
    for name in ('hello', 'hello123', '_hello', 'HELLO'):
        tokens = tokenize(name)
        assert tokens[0].kind == lexer.ID
        assert tokens[0].text == name


def test_punctuation_without_spaces():
    assert kinds("output(x)") == [lexer.ID, lexer.LP, lexer.ID, lexer.RP, lexer.EOF]
    assert kinds("x=1") == [lexer.ID, lexer.ASSIGN, lexer.NUM, lexer.EOF]
    assert kinds("a==1&&b!=2") == [
        lexer.ID, lexer.EQ, lexer.NUM, lexer.AND, lexer.ID, lexer.NE, lexer.NUM, lexer.EOF,
    ]


def test_empty_source_has_only_eof():
    assert kinds("") == [lexer.EOF]
    assert kinds("   \n\n  ") == [lexer.EOF]


def test_positions():
    tokens = tokenize("x = 1\n  output ( x )")
    out = tokens[3]
    assert (out.text, out.line, out.column) == ('output', 2, 3)


def test_line_comments_are_ignored():
    assert kinds("x = 1 // set x\n// whole line\noutput ( x )") == [
        lexer.ID, lexer.ASSIGN, lexer.NUM, lexer.ID, lexer.LP, lexer.ID, lexer.RP, lexer.EOF,
    ]


def test_literal_bounds():
    assert tokenize("x = 255")[2].text == '255'
    with pytest.raises(LexicalError) as exc:
        tokenize("x = 256")
    assert 'out of range' in str(exc.value)
    assert exc.value.line == 1
    assert tokenize("x = 000255")[2].text == '000255'
    with pytest.raises(LexicalError) as exc:
        tokenize("x = " + "9" * 5000)
    assert 'out of range' in str(exc.value)


def test_number_glued_to_identifier():
    with pytest.raises(LexicalError):
        tokenize("x = 123abc")


def test_unexpected_character():
    with pytest.raises(LexicalError) as exc:
        tokenize("x = 1\ny $ 2")
    assert exc.value.line == 2
    assert exc.value.column == 3
    assert "Hint:" in str(exc.value)
