"""Abstract Syntax Tree (AST) definitions for the Lume language.

Every node is a dataclass and owns its children outright: the tree is never
shared or cyclic. Nodes optionally keep the token they were built from so
that runtime errors can point back into the source.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .tokens import Token, TokenType


@dataclass
class Node:
    """Base class for all AST nodes."""
    token: Optional[Token] = field(default=None, kw_only=True, repr=False, compare=False)


@dataclass
class Program(Node):
    statements: List[Node] = field(default_factory=list)

    def push(self, statement: Node):
        self.statements.append(statement)


@dataclass
class Block(Node):
    statements: List[Node] = field(default_factory=list)

    def push(self, statement: Node):
        self.statements.append(statement)


@dataclass
class ExpressionStmt(Node):
    expression: Node


@dataclass
class If(Node):
    condition: Node
    then_branch: Node
    else_branch: Optional[Node] = None


@dataclass
class Return(Node):
    expression: Optional[Node] = None


@dataclass
class Var(Node):
    name: 'Identifier'
    initializer: Optional[Node] = None


@dataclass
class Fn(Node):
    name: 'Identifier'
    params: List['Identifier']
    body: Node


@dataclass
class Number(Node):
    value: int | float
    is_float: bool = False


@dataclass
class String(Node):
    # Raw bytes between the quotes, escapes not yet interpreted.
    value: bytes


@dataclass
class Boolean(Node):
    value: bool


@dataclass
class Null(Node):
    pass


@dataclass
class Identifier(Node):
    name: str


@dataclass
class Assignment(Node):
    target: Identifier
    value: Node


@dataclass
class BinaryOp(Node):
    op: TokenType
    left: Node
    right: Node


@dataclass
class UnaryOp(Node):
    op: TokenType
    operand: Node


@dataclass
class Call(Node):
    callee: Node
    args: List[Node] = field(default_factory=list)
