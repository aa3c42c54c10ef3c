"""Tree-walking evaluator for Lume.

`Interpreter.evaluate(node, arena, env)` returns a `Value` for every node.
Early returns and runtime errors are values as well: a `ReturnSignal`
unwinds blocks up to the enclosing call (or the program), and an
`ErrorSignal` is propagated unchanged by every rule that sees one, all the
way to the top. Nothing in the evaluator raises for a runtime error; the
diagnostic is reported at the offending token and `ERROR` is returned.

Only storage failures (`InternalError`) are raised. They are caught at the
entry points, reported, and turned into the sentinel `Integer(-1)`.

Function calls chain the new scope to the *caller's* environment, not to
the scope the function was declared in, so free variables in a function
body resolve against whatever is visible at the call site.
"""

from __future__ import annotations

import math
from typing import List, Optional, Union

from loguru import logger

from . import diagnostics
from .arena import Arena
from .ast import (
    Assignment, BinaryOp, Block, Boolean as BooleanNode, Call, ExpressionStmt, Fn,
    Identifier, If, Node, Null as NullNode, Number, Program, Return,
    String as StringNode, UnaryOp, Var,
)
from .environment import Environment
from .errors import InternalError
from .lexer import tokenize
from .parser import parse
from .std import BasicIO, load_builtins
from .tokens import TokenType
from .values import (
    ERROR, NULL, ErrorSignal, Floating, FunctionBuiltin, FunctionDefinition,
    Integer, ReturnSignal, String, Value, boolean, is_signal, is_truthy,
    type_name, unwrap_return,
)

INTERNAL_ERROR_RESULT = -1

_OPERATOR_SYMBOLS = {
    TokenType.PLUS: '+', TokenType.MINUS: '-', TokenType.STAR: '*',
    TokenType.SLASH: '/', TokenType.PERCENT: '%', TokenType.EQ: '==',
    TokenType.NEQ: '!=', TokenType.LT: '<', TokenType.GT: '>',
    TokenType.LTE: '<=', TokenType.GTE: '>=', TokenType.AND: '&&',
    TokenType.OR: '||', TokenType.NOT: '!', TokenType.BIT_AND: '&',
    TokenType.BIT_OR: '|', TokenType.BIT_XOR: '^', TokenType.BIT_NOT: '~',
    TokenType.SHIFT_LEFT: '<<', TokenType.SHIFT_RIGHT: '>>',
}

_COMPARISONS = {
    TokenType.LT: lambda a, b: a < b,
    TokenType.GT: lambda a, b: a > b,
    TokenType.LTE: lambda a, b: a <= b,
    TokenType.GTE: lambda a, b: a >= b,
}

Number_ = Union[Integer, Floating]


def symbol(op: TokenType) -> str:
    return _OPERATOR_SYMBOLS.get(op, op.name)


def c_divide(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


def c_remainder(a: int, b: int) -> int:
    """Remainder with the sign of the dividend."""
    return a - b * c_divide(a, b)


class Interpreter:
    """Evaluates Lume ASTs against an arena and a chain of environments."""
    def __init__(self, debug_level: int = 0, io: Optional[BasicIO] = None,
                 arena_size: int = 16 * 1024, scope_capacity: int = 32):
        self.debug_level = debug_level
        self.io = io or BasicIO()
        self.arena_size = arena_size
        self.scope_capacity = scope_capacity

    def debug(self, msg: str):
        if self.debug_level > 0:
            logger.debug(msg)

    def new_arena(self) -> Arena:
        return Arena(self.arena_size)

    def new_environment(self, parent: Optional[Environment] = None) -> Environment:
        return Environment(parent, capacity=self.scope_capacity)

    # Public API
    def run(self, root: Node, arena: Optional[Arena] = None,
            env: Optional[Environment] = None) -> Value:
        """Evaluate `root`, registering builtins in a fresh root scope.

        Storage failures are reported and yield `Integer(-1)`.
        """
        if arena is None:
            arena = self.new_arena()
        if env is None:
            env = self.new_environment()
        if env.parent is None and not env.builtins_loaded:
            load_builtins(env, self.io)
        try:
            return self.evaluate(root, arena, env)
        except InternalError as e:
            diagnostics.report(diagnostics.ERROR, f"Internal error: {e}")
            return Integer(INTERNAL_ERROR_RESULT)

    def runtime_error(self, node: Node, message: str) -> ErrorSignal:
        diagnostics.report_at(diagnostics.ERROR, node.token, f"Runtime error: {message}")
        return ERROR

    def evaluate(self, node: Node, arena: Arena, env: Environment) -> Value:
        if isinstance(node, Program):
            return self.eval_program(node, arena, env)
        if isinstance(node, Block):
            return self.eval_block(node, arena, env)
        if isinstance(node, ExpressionStmt):
            return self.evaluate(node.expression, arena, env)
        if isinstance(node, If):
            return self.eval_if(node, arena, env)
        if isinstance(node, Return):
            return self.eval_return(node, arena, env)
        if isinstance(node, Var):
            return self.eval_var(node, arena, env)
        if isinstance(node, Fn):
            return self.eval_fn(node, env)
        if isinstance(node, Number):
            return Floating(node.value) if node.is_float else Integer(node.value)
        if isinstance(node, StringNode):
            token = node.token
            if token is not None and token.source:
                return String(token.source, token.start, token.length)
            return String.from_bytes(node.value)
        if isinstance(node, BooleanNode):
            return boolean(node.value)
        if isinstance(node, NullNode):
            return NULL
        if isinstance(node, Identifier):
            return self.eval_identifier(node, env)
        if isinstance(node, Assignment):
            return self.eval_assignment(node, arena, env)
        if isinstance(node, BinaryOp):
            return self.eval_binary(node, arena, env)
        if isinstance(node, UnaryOp):
            return self.eval_unary(node, arena, env)
        if isinstance(node, Call):
            return self.eval_call(node, arena, env)
        raise NotImplementedError(f"evaluate: unexpected node type {type(node).__name__}")

    # Statements

    def eval_program(self, node: Program, arena: Arena, env: Environment) -> Value:
        result: Value = NULL
        for statement in node.statements:
            result = self.evaluate(statement, arena, env)
            if is_signal(result):
                break
        return unwrap_return(result)

    def eval_block(self, node: Block, arena: Arena, env: Environment) -> Value:
        block_env = self.new_environment(env)
        try:
            for statement in node.statements:
                result = self.evaluate(statement, arena, block_env)
                if is_signal(result):
                    return result
        finally:
            block_env.destroy()
        return NULL

    def eval_if(self, node: If, arena: Arena, env: Environment) -> Value:
        condition = self.evaluate(node.condition, arena, env)
        if isinstance(condition, ErrorSignal):
            return condition
        truthy = is_truthy(condition)
        if self.debug_level >= 3:
            self.debug(f"if condition {condition!r} -> {truthy}")
        branch = node.then_branch if truthy else node.else_branch
        if branch is None:
            return NULL
        return unwrap_return(self.evaluate(branch, arena, env))

    def eval_return(self, node: Return, arena: Arena, env: Environment) -> Value:
        value: Value = NULL
        if node.expression is not None:
            value = self.evaluate(node.expression, arena, env)
            if isinstance(value, ErrorSignal):
                return value
        return ReturnSignal.wrap(value, arena)

    def eval_var(self, node: Var, arena: Arena, env: Environment) -> Value:
        value: Value = NULL
        if node.initializer is not None:
            value = self.evaluate(node.initializer, arena, env)
            if isinstance(value, ErrorSignal):
                return value
        env.push(node.name.name, value)
        if self.debug_level >= 2:
            self.debug(f"declare {node.name.name} = {value!r}")
        return NULL

    def eval_fn(self, node: Fn, env: Environment) -> Value:
        function = FunctionDefinition(node)
        env.push(node.name.name, function)
        if self.debug_level >= 2:
            self.debug(f"define function {node.name.name}/{len(node.params)}")
        return function

    # Expressions

    def eval_identifier(self, node: Identifier, env: Environment) -> Value:
        binding = env.find(node.name)
        if binding is None:
            return self.runtime_error(node, f"undefined reference to '{node.name}'")
        return binding.value

    def eval_assignment(self, node: Assignment, arena: Arena, env: Environment) -> Value:
        binding = env.find(node.target.name)
        if binding is None:
            return self.runtime_error(node, f"undefined reference to '{node.target.name}'")
        value = self.evaluate(node.value, arena, env)
        if isinstance(value, ErrorSignal):
            return value
        binding.value = value
        return value

    def eval_binary(self, node: BinaryOp, arena: Arena, env: Environment) -> Value:
        # Both operands are evaluated for every operator, && and || included.
        left = self.evaluate(node.left, arena, env)
        if isinstance(left, ErrorSignal):
            return left
        right = self.evaluate(node.right, arena, env)
        if isinstance(right, ErrorSignal):
            return right
        return self.apply_binary(node, left, right, arena)

    def apply_binary(self, node: BinaryOp, left: Value, right: Value, arena: Arena) -> Value:
        op = node.op

        if op is TokenType.AND:
            return boolean(is_truthy(left) and is_truthy(right))
        if op is TokenType.OR:
            return boolean(is_truthy(left) or is_truthy(right))

        if op in (TokenType.BIT_AND, TokenType.BIT_OR, TokenType.BIT_XOR,
                  TokenType.SHIFT_LEFT, TokenType.SHIFT_RIGHT):
            if not (isinstance(left, Integer) and isinstance(right, Integer)):
                return self.incompatible(node, left, right)
            return self.apply_integer_bitwise(node, left.value, right.value)

        if op is TokenType.PLUS and isinstance(left, String) and isinstance(right, String):
            return self.concatenate(left, right, arena)

        if op in (TokenType.EQ, TokenType.NEQ):
            if isinstance(left, String) and isinstance(right, String):
                equal = left.length == right.length and left.data() == right.data()
            elif self.is_number(left) and self.is_number(right):
                a, b = self.promote(left, right)
                equal = a == b
            else:
                return self.incompatible(node, left, right)
            return boolean(equal if op is TokenType.EQ else not equal)

        if not (self.is_number(left) and self.is_number(right)):
            return self.incompatible(node, left, right)

        if op in _COMPARISONS:
            a, b = self.promote(left, right)
            return boolean(_COMPARISONS[op](a, b))

        if isinstance(left, Integer) and isinstance(right, Integer):
            return self.apply_integer_arithmetic(node, left.value, right.value)
        a, b = self.promote(left, right)
        return self.apply_float_arithmetic(node, a, b)

    @staticmethod
    def is_number(value: Value) -> bool:
        return isinstance(value, (Integer, Floating))

    @staticmethod
    def promote(left: Number_, right: Number_):
        if isinstance(left, Integer) and isinstance(right, Integer):
            return left.value, right.value
        return float(left.value), float(right.value)

    def incompatible(self, node: BinaryOp, left: Value, right: Value) -> ErrorSignal:
        return self.runtime_error(
            node,
            f"operator '{symbol(node.op)}' with incompatible types "
            f"{type_name(left)} and {type_name(right)}",
        )

    def concatenate(self, left: String, right: String, arena: Arena) -> String:
        data = left.data() + right.data()
        return String(arena, arena.store(data), len(data))

    def apply_integer_arithmetic(self, node: BinaryOp, a: int, b: int) -> Value:
        op = node.op
        if op is TokenType.PLUS:
            return Integer(a + b)
        if op is TokenType.MINUS:
            return Integer(a - b)
        if op is TokenType.STAR:
            return Integer(a * b)
        if op is TokenType.SLASH:
            if b == 0:
                return self.runtime_error(node, "division by zero")
            return Integer(c_divide(a, b))
        if op is TokenType.PERCENT:
            if b == 0:
                return self.runtime_error(node, "modulo by zero")
            return Integer(c_remainder(a, b))
        return self.runtime_error(node, f"unsupported operator '{symbol(op)}'")

    def apply_float_arithmetic(self, node: BinaryOp, a: float, b: float) -> Value:
        op = node.op
        if op is TokenType.PLUS:
            return Floating(a + b)
        if op is TokenType.MINUS:
            return Floating(a - b)
        if op is TokenType.STAR:
            return Floating(a * b)
        if op is TokenType.SLASH:
            if b == 0.0:
                return self.runtime_error(node, "division by zero")
            return Floating(a / b)
        if op is TokenType.PERCENT:
            if b == 0.0:
                return self.runtime_error(node, "modulo by zero")
            return Floating(math.fmod(a, b))
        return self.runtime_error(node, f"unsupported operator '{symbol(op)}'")

    def apply_integer_bitwise(self, node: BinaryOp, a: int, b: int) -> Value:
        op = node.op
        if op is TokenType.BIT_AND:
            return Integer(a & b)
        if op is TokenType.BIT_OR:
            return Integer(a | b)
        if op is TokenType.BIT_XOR:
            return Integer(a ^ b)
        if b < 0:
            return self.runtime_error(node, "negative shift count")
        if op is TokenType.SHIFT_LEFT:
            return Integer(a << b if b < 64 else 0)
        return Integer(a >> min(b, 63))

    def eval_unary(self, node: UnaryOp, arena: Arena, env: Environment) -> Value:
        operand = self.evaluate(node.operand, arena, env)
        if isinstance(operand, ErrorSignal):
            return operand
        op = node.op
        if op is TokenType.NOT:
            return boolean(not is_truthy(operand))
        if op is TokenType.BIT_NOT:
            if isinstance(operand, Integer):
                return Integer(~operand.value)
        elif op in (TokenType.PLUS, TokenType.MINUS):
            sign = -1 if op is TokenType.MINUS else 1
            if isinstance(operand, Integer):
                return Integer(sign * operand.value)
            if isinstance(operand, Floating):
                return Floating(sign * operand.value)
        return self.runtime_error(
            node,
            f"unary operator '{symbol(op)}' with incompatible type {type_name(operand)}",
        )

    def eval_call(self, node: Call, arena: Arena, env: Environment) -> Value:
        callee = self.evaluate(node.callee, arena, env)
        if isinstance(callee, ErrorSignal):
            return callee
        if not isinstance(callee, (FunctionDefinition, FunctionBuiltin)):
            return self.runtime_error(node, f"calling a non-function value of type {type_name(callee)}")

        args: List[Value] = []
        for arg in node.args:
            value = self.evaluate(arg, arena, env)
            if isinstance(value, ErrorSignal):
                return value
            args.append(value)

        if self.debug_level >= 3:
            self.debug(f"call {callee.name} with {len(args)} argument(s)")

        if isinstance(callee, FunctionBuiltin):
            return self.call_builtin(node, callee, args, arena, env)
        return self.call_function(node, callee, args, arena, env)

    def call_builtin(self, node: Call, function: FunctionBuiltin, args: List[Value],
                     arena: Arena, env: Environment) -> Value:
        arity = function.builtin.arity
        if arity is not None and len(args) != arity:
            return self.runtime_error(
                node,
                f"{function.name}() expects {arity} argument(s), got {len(args)}",
            )
        return function.builtin(args, arena, env)

    def call_function(self, node: Call, function: FunctionDefinition, args: List[Value],
                      arena: Arena, env: Environment) -> Value:
        params = function.node.params
        if len(args) != len(params):
            return self.runtime_error(
                node,
                f"function '{function.name}' expects {len(params)} argument(s), got {len(args)}",
            )
        # Parent is the caller's scope, not the declaration scope.
        call_env = self.new_environment(env)
        try:
            for param, value in zip(params, args):
                call_env.push(param.name, value)
            result = self.evaluate(function.node.body, arena, call_env)
        finally:
            call_env.destroy()
        return unwrap_return(result)


def evaluate(root: Node, arena: Arena, environment: Environment,
             interpreter: Optional[Interpreter] = None) -> Value:
    """Evaluate `root` in `environment`.

    A parentless environment that has not been seeded yet receives the
    `print`, `input` and `length` builtins first.
    """
    return (interpreter or Interpreter()).run(root, arena, environment)


def run_program(source: Union[bytes, str], debug_level: int = 0,
                io: Optional[BasicIO] = None) -> Optional[Value]:
    """Tokenize, parse and evaluate `source`.

    Returns None when the source cannot be tokenized or parsed; the
    diagnostics have been reported by then.
    """
    tokens = tokenize(source)
    if not tokens:
        return None
    program = parse(tokens)
    if program is None:
        return None
    interpreter = Interpreter(debug_level=debug_level, io=io)
    return interpreter.run(program)
