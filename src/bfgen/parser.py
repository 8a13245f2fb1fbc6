"""
Recursive-descent parser for the structured source language.

Grammar:
    program   := block EOF
    block     := statement*
    statement := if | while | move | input | output | assign
    if        := "if" bool "{" block "}" [ "else" ( "{" block "}" | if ) ]
    while     := "while" bool "{" block "}"
    move      := "move_right" | "move_left"
    input     := "input" "(" var ")"
    output    := "output" "(" var ")"
    assign    := var "=" NUM
    bool      := compare ( "&&" compare )*
    compare   := var ( "==" | "!=" ) NUM

Every rule takes the index of its first token and returns the parsed node
together with the index just past it; the token list is never mutated.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

from . import lexer
from .errors import ParseError, make_parse_error
from .lexer import Token
from .syntax import (
    Assign, Compare, Condition, Direction, Equal, If, Input, Move, NotEqual, Output, Program, Statement, While,
)

RESERVED_WORDS = frozenset({'if', 'else', 'while', 'move_right', 'move_left', 'input', 'output'})


class Parser:
    def __init__(self, tokens: Sequence[Token], source: str = ''):
        if not tokens or tokens[-1].kind != lexer.EOF:
            raise ValueError("Token stream must end with EOF")
        self.tokens = tuple(tokens)
        self.source = source

    # ===== Helpers =====

    def _error(self, pos: int, expected: str) -> ParseError:
        tok = self.tokens[pos]
        return make_parse_error(
            message=f"Expected {expected}, found {tok}",
            source=self.source,
            line=tok.line,
            column=tok.column,
        )

    def _at_keyword(self, pos: int, word: str) -> bool:
        tok = self.tokens[pos]
        return tok.kind == lexer.ID and tok.text == word

    def _expect(self, pos: int, kind: str, expected: str) -> Tuple[Token, int]:
        tok = self.tokens[pos]
        if tok.kind != kind:
            raise self._error(pos, expected)
        return tok, pos + 1

    def _keyword(self, pos: int, word: str) -> int:
        if not self._at_keyword(pos, word):
            raise self._error(pos, f"'{word}'")
        return pos + 1

    # ===== Rules =====

    def parse_program(self, pos: int = 0) -> Tuple[Program, int]:
        statements, pos = self.parse_block(pos)
        if self.tokens[pos].kind != lexer.EOF:
            raise self._error(pos, "statement or end of input")
        return Program(statements), pos

    def parse_block(self, pos: int) -> Tuple[Tuple[Statement, ...], int]:
        statements: List[Statement] = []
        while self.tokens[pos].kind not in (lexer.EOF, lexer.RB):
            stmt, pos = self.parse_statement(pos)
            statements.append(stmt)
        return tuple(statements), pos

    def parse_braced_block(self, pos: int) -> Tuple[Tuple[Statement, ...], int]:
        _, pos = self._expect(pos, lexer.LB, "'{'")
        body, pos = self.parse_block(pos)
        _, pos = self._expect(pos, lexer.RB, "'}'")
        return body, pos

    def parse_statement(self, pos: int) -> Tuple[Statement, int]:
        tok = self.tokens[pos]
        if tok.kind != lexer.ID:
            raise self._error(pos, "statement")

        if tok.text == 'if':
            return self.parse_if(pos)
        if tok.text == 'while':
            return self.parse_while(pos)
        if tok.text == 'move_right':
            return Move(Direction.RIGHT), pos + 1
        if tok.text == 'move_left':
            return Move(Direction.LEFT), pos + 1
        if tok.text in ('input', 'output'):
            return self.parse_io(pos)
        if tok.text == 'else':
            raise self._error(pos, "statement ('else' without 'if')")
        return self.parse_assign(pos)

    def parse_if(self, pos: int) -> Tuple[If, int]:
        pos = self._keyword(pos, 'if')
        condition, pos = self.parse_condition(pos)
        then_body, pos = self.parse_braced_block(pos)
        if not self._at_keyword(pos, 'else'):
            return If(condition, then_body, None), pos
        pos += 1
        if self._at_keyword(pos, 'if'):
            nested, pos = self.parse_if(pos)
            return If(condition, then_body, (nested,)), pos
        else_body, pos = self.parse_braced_block(pos)
        return If(condition, then_body, else_body), pos

    def parse_while(self, pos: int) -> Tuple[While, int]:
        pos = self._keyword(pos, 'while')
        condition, pos = self.parse_condition(pos)
        body, pos = self.parse_braced_block(pos)
        return While(condition, body), pos

    def parse_io(self, pos: int) -> Tuple[Statement, int]:
        word = self.tokens[pos].text
        pos += 1
        _, pos = self._expect(pos, lexer.LP, f"'(' after '{word}'")
        var, pos = self.parse_variable(pos)
        _, pos = self._expect(pos, lexer.RP, "')'")
        if word == 'input':
            return Input(var), pos
        return Output(var), pos

    def parse_assign(self, pos: int) -> Tuple[Assign, int]:
        var, pos = self.parse_variable(pos)
        _, pos = self._expect(pos, lexer.ASSIGN, f"'=' after '{var}'")
        num, pos = self._expect(pos, lexer.NUM, "number")
        return Assign(var, int(num.text)), pos

    def parse_condition(self, pos: int) -> Tuple[Condition, int]:
        compare, pos = self.parse_compare(pos)
        compares = [compare]
        while self.tokens[pos].kind == lexer.AND:
            compare, pos = self.parse_compare(pos + 1)
            compares.append(compare)
        return Condition(tuple(compares)), pos

    def parse_compare(self, pos: int) -> Tuple[Compare, int]:
        var, pos = self.parse_variable(pos)
        op = self.tokens[pos]
        if op.kind not in (lexer.EQ, lexer.NE):
            raise self._error(pos, "'==' or '!='")
        num, pos = self._expect(pos + 1, lexer.NUM, "number")
        if op.kind == lexer.EQ:
            return Equal(var, int(num.text)), pos
        return NotEqual(var, int(num.text)), pos

    def parse_variable(self, pos: int) -> Tuple[str, int]:
        tok = self.tokens[pos]
        if tok.kind != lexer.ID:
            raise self._error(pos, "variable")
        if tok.text in RESERVED_WORDS:
            raise self._error(pos, f"variable ({tok.text!r} is a reserved word)")
        return tok.text, pos + 1


def parse_tokens(tokens: Sequence[Token], source: str = '') -> Program:
    program, _ = Parser(tokens, source).parse_program()
    return program


def parse(source: str) -> Program:
    """Tokenize and parse source text into a Program."""
    return parse_tokens(lexer.tokenize(source), source)
