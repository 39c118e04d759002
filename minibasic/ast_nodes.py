from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Union

class Operator(Enum):
    EQUALS = '='
    ADD = '+'
    SUB = '-'
    MUL = '*'
    DIV = '/'
    LT = '<'
    GT = '>'

# Expressions

@dataclass(frozen=True)
class Variable:
    name: str

@dataclass(frozen=True)
class NumberLiteral:
    value: float

@dataclass(frozen=True)
class StringLiteral:
    value: str

@dataclass(frozen=True)
class BinaryOp:
    left: 'Expression'
    operator: Operator
    right: 'Expression'

Expression = Union[Variable, NumberLiteral, StringLiteral, BinaryOp]

# Statements

@dataclass(frozen=True)
class Assignment:
    var: str
    expr: Expression

@dataclass(frozen=True)
class Print:
    expr: Expression

@dataclass(frozen=True)
class Input:
    var: str

@dataclass(frozen=True)
class Goto:
    label: str

@dataclass(frozen=True)
class IfThen:
    condition: Expression
    label: str

@dataclass(frozen=True)
class Exit:
    pass

Statement = Union[Assignment, Print, Input, Goto, IfThen, Exit]

@dataclass
class Program:
    statements: List[Statement] = field(default_factory=list)
    labels: Dict[str, int] = field(default_factory=dict)
