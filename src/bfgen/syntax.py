"""Syntax tree produced by the parser and consumed by the generator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union


class Direction(Enum):
    RIGHT = 'move_right'
    LEFT = 'move_left'


@dataclass(frozen=True)
class Equal:
    var: str
    value: int

    def __str__(self) -> str:
        return f"{self.var} == {self.value}"


@dataclass(frozen=True)
class NotEqual:
    var: str
    value: int

    def __str__(self) -> str:
        return f"{self.var} != {self.value}"


Compare = Union[Equal, NotEqual]


@dataclass(frozen=True)
class Condition:
    # Terms are ANDed, left to right.
    compares: Tuple[Compare, ...]

    def __str__(self) -> str:
        return ' && '.join(str(c) for c in self.compares)


@dataclass(frozen=True)
class Input:
    var: str

    def __str__(self) -> str:
        return f"input ( {self.var} )"


@dataclass(frozen=True)
class Output:
    var: str

    def __str__(self) -> str:
        return f"output ( {self.var} )"


@dataclass(frozen=True)
class Assign:
    var: str
    value: int

    def __str__(self) -> str:
        return f"{self.var} = {self.value}"


@dataclass(frozen=True)
class Move:
    direction: Direction

    def __str__(self) -> str:
        return self.direction.value


@dataclass(frozen=True)
class While:
    condition: Condition
    body: Tuple['Statement', ...]

    def __str__(self) -> str:
        return f"while {self.condition}"


@dataclass(frozen=True)
class If:
    condition: Condition
    then_body: Tuple['Statement', ...]
    else_body: Optional[Tuple['Statement', ...]] = None

    def __str__(self) -> str:
        return f"if {self.condition}"


Statement = Union[Input, Output, Assign, Move, While, If]


@dataclass(frozen=True)
class Program:
    statements: Tuple[Statement, ...]
