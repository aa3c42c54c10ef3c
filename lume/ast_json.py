"""JSON serialization/deserialization for the Lume AST.

This module converts between AST dataclasses and plain dict/list
structures suitable for JSON encoding. Every node kind round-trips. Token
back-references are kept as their position and span only; a tree loaded
from JSON has no source buffer, so diagnostics for it carry a line and
column but cannot reproduce the source line.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from .ast import (
    Assignment, BinaryOp, Block, Boolean, Call, ExpressionStmt, Fn, Identifier,
    If, Node, Null, Number, Program, Return, String, UnaryOp, Var,
)
from .tokens import Token, TokenType


def _bytes_to_text(data: bytes) -> str:
    return data.decode('utf-8', errors='surrogateescape')


def _text_to_bytes(text: str) -> bytes:
    return text.encode('utf-8', errors='surrogateescape')


def token_to_obj(token: Optional[Token]) -> Optional[Dict[str, Any]]:
    if token is None:
        return None
    return {
        "type": token.type.name,
        "start": token.start,
        "length": token.length,
        "line": token.line,
        "column": token.column,
    }


def token_from_obj(o: Optional[Dict[str, Any]]) -> Optional[Token]:
    if o is None:
        return None
    return Token(TokenType[o["type"]], o["start"], o["length"], o["line"], o["column"])


def ast_to_obj(node: Optional[Node]) -> Any:
    if node is None:
        return None

    obj: Dict[str, Any]
    if isinstance(node, Program):
        obj = {"type": "Program", "statements": [ast_to_obj(n) for n in node.statements]}
    elif isinstance(node, Block):
        obj = {"type": "Block", "statements": [ast_to_obj(n) for n in node.statements]}
    elif isinstance(node, ExpressionStmt):
        obj = {"type": "ExpressionStmt", "expression": ast_to_obj(node.expression)}
    elif isinstance(node, If):
        obj = {
            "type": "If",
            "condition": ast_to_obj(node.condition),
            "then_branch": ast_to_obj(node.then_branch),
            "else_branch": ast_to_obj(node.else_branch),
        }
    elif isinstance(node, Return):
        obj = {"type": "Return", "expression": ast_to_obj(node.expression)}
    elif isinstance(node, Var):
        obj = {"type": "Var", "name": ast_to_obj(node.name), "initializer": ast_to_obj(node.initializer)}
    elif isinstance(node, Fn):
        obj = {
            "type": "Fn",
            "name": ast_to_obj(node.name),
            "params": [ast_to_obj(p) for p in node.params],
            "body": ast_to_obj(node.body),
        }
    elif isinstance(node, Number):
        obj = {"type": "Number", "value": node.value, "is_float": node.is_float}
    elif isinstance(node, String):
        obj = {"type": "String", "value": _bytes_to_text(node.value)}
    elif isinstance(node, Boolean):
        obj = {"type": "Boolean", "value": node.value}
    elif isinstance(node, Null):
        obj = {"type": "Null"}
    elif isinstance(node, Identifier):
        obj = {"type": "Identifier", "name": node.name}
    elif isinstance(node, Assignment):
        obj = {"type": "Assignment", "target": ast_to_obj(node.target), "value": ast_to_obj(node.value)}
    elif isinstance(node, BinaryOp):
        obj = {
            "type": "BinaryOp",
            "op": node.op.name,
            "left": ast_to_obj(node.left),
            "right": ast_to_obj(node.right),
        }
    elif isinstance(node, UnaryOp):
        obj = {"type": "UnaryOp", "op": node.op.name, "operand": ast_to_obj(node.operand)}
    elif isinstance(node, Call):
        obj = {"type": "Call", "callee": ast_to_obj(node.callee), "args": [ast_to_obj(a) for a in node.args]}
    else:
        raise TypeError(f"Unsupported AST node for serialization: {type(node).__name__}")

    obj["token"] = token_to_obj(node.token)
    return obj


def ast_from_obj(o: Any) -> Any:
    if o is None:
        return None
    if not isinstance(o, dict) or "type" not in o:
        raise TypeError(f"Invalid AST object: {o!r}")

    t = o["type"]
    token = token_from_obj(o.get("token"))
    if t == "Program":
        return Program([ast_from_obj(x) for x in o["statements"]], token=token)
    if t == "Block":
        return Block([ast_from_obj(x) for x in o["statements"]], token=token)
    if t == "ExpressionStmt":
        return ExpressionStmt(ast_from_obj(o["expression"]), token=token)
    if t == "If":
        return If(
            ast_from_obj(o["condition"]),
            ast_from_obj(o["then_branch"]),
            ast_from_obj(o.get("else_branch")),
            token=token,
        )
    if t == "Return":
        return Return(ast_from_obj(o.get("expression")), token=token)
    if t == "Var":
        return Var(ast_from_obj(o["name"]), ast_from_obj(o.get("initializer")), token=token)
    if t == "Fn":
        return Fn(
            ast_from_obj(o["name"]),
            [ast_from_obj(p) for p in o["params"]],
            ast_from_obj(o["body"]),
            token=token,
        )
    if t == "Number":
        is_float = bool(o.get("is_float", False))
        value = float(o["value"]) if is_float else int(o["value"])
        return Number(value, is_float, token=token)
    if t == "String":
        return String(_text_to_bytes(o["value"]), token=token)
    if t == "Boolean":
        return Boolean(bool(o["value"]), token=token)
    if t == "Null":
        return Null(token=token)
    if t == "Identifier":
        return Identifier(o["name"], token=token)
    if t == "Assignment":
        return Assignment(ast_from_obj(o["target"]), ast_from_obj(o["value"]), token=token)
    if t == "BinaryOp":
        return BinaryOp(TokenType[o["op"]], ast_from_obj(o["left"]), ast_from_obj(o["right"]), token=token)
    if t == "UnaryOp":
        return UnaryOp(TokenType[o["op"]], ast_from_obj(o["operand"]), token=token)
    if t == "Call":
        return Call(ast_from_obj(o["callee"]), [ast_from_obj(a) for a in o["args"]], token=token)

    raise TypeError(f"Unknown AST node type: {t}")
