"""Recursive-descent parser for the Lume language.

The parser consumes the token list produced by `lume.lexer` with one token
of lookahead. Statements are chosen by their first token; expressions are
parsed by one method per precedence level, lowest first:

    assignment -> logical or -> logical and -> bitwise or -> bitwise xor
    -> bitwise and -> equality -> comparison -> shift -> additive
    -> multiplicative -> unary -> call -> primary -> literal

Binary levels are left-associative, assignment is right-associative and only
accepts a bare identifier on its left.

Parsing stops at the first error. The failing rule reports a diagnostic
anchored at the offending token and raises `ParseError`; `parse()` turns
that into a None result, so one syntax error discards the whole program.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence

from . import diagnostics
from .ast import (
    Assignment, BinaryOp, Block, Boolean, Call, ExpressionStmt, Fn, Identifier,
    If, Node, Null, Number, Program, Return, String, UnaryOp, Var,
)
from .errors import ParseError
from .lexer import parse_float_literal, parse_integer_literal
from .tokens import Token, TokenType

LOGICAL_OR = (TokenType.OR,)
LOGICAL_AND = (TokenType.AND,)
BITWISE_OR = (TokenType.BIT_OR,)
BITWISE_XOR = (TokenType.BIT_XOR,)
BITWISE_AND = (TokenType.BIT_AND,)
EQUALITY = (TokenType.EQ, TokenType.NEQ)
COMPARISON = (TokenType.LT, TokenType.GT, TokenType.LTE, TokenType.GTE)
SHIFT = (TokenType.SHIFT_LEFT, TokenType.SHIFT_RIGHT)
ADDITIVE = (TokenType.PLUS, TokenType.MINUS)
MULTIPLICATIVE = (TokenType.STAR, TokenType.SLASH, TokenType.PERCENT)
UNARY = (TokenType.NOT, TokenType.BIT_NOT, TokenType.MINUS, TokenType.PLUS)


class Parser:
    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0

    # Helpers

    def at_end(self) -> bool:
        return self.pos >= len(self.tokens)

    def peek(self) -> Optional[Token]:
        if self.at_end():
            return None
        return self.tokens[self.pos]

    def previous(self) -> Optional[Token]:
        if self.pos == 0 or not self.tokens:
            return None
        return self.tokens[min(self.pos, len(self.tokens)) - 1]

    def advance(self) -> Optional[Token]:
        token = self.peek()
        if token is not None:
            self.pos += 1
        return token

    def check(self, *types: TokenType) -> bool:
        token = self.peek()
        return token is not None and token.type in types

    def match(self, *types: TokenType) -> Optional[Token]:
        if self.check(*types):
            return self.advance()
        return None

    def error(self, message: str, token: Optional[Token] = None) -> ParseError:
        """Report a syntax error and return the exception to raise."""
        if token is None:
            token = self.peek()
        if token is None:
            token = self.previous()
            message = f"{message} (unexpected end of input)"
        diagnostics.report_at(diagnostics.ERROR, token, f"Syntax error: {message}")
        return ParseError(message)

    def expect(self, type_: TokenType, message: str) -> Token:
        token = self.match(type_)
        if token is None:
            raise self.error(message)
        return token

    # Program and statements

    def parse_program(self) -> Program:
        program = Program(token=self.peek())
        while not self.at_end():
            program.push(self.parse_statement())
        return program

    def parse_statement(self) -> Node:
        if self.check(TokenType.LBRACE):
            return self.parse_block()
        if self.check(TokenType.KEYWORD_IF):
            return self.parse_if()
        if self.check(TokenType.KEYWORD_RETURN):
            return self.parse_return()
        if self.check(TokenType.KEYWORD_VAR):
            return self.parse_var()
        if self.check(TokenType.KEYWORD_FN):
            return self.parse_fn()
        if self.check(TokenType.KEYWORD_WHILE):
            return self.parse_while()
        return self.parse_expression_statement()

    def parse_block(self) -> Block:
        opening = self.expect(TokenType.LBRACE, "Expected '{'")
        block = Block(token=opening)
        while not self.at_end() and not self.check(TokenType.RBRACE):
            block.push(self.parse_statement())
        if not self.match(TokenType.RBRACE):
            raise self.error("Unclosed block", opening)
        return block

    def parse_if(self) -> If:
        keyword = self.advance()
        self.expect(TokenType.LPAREN, "Expected '(' after if")
        condition = self.parse_expression()
        self.expect(TokenType.RPAREN, "Expected ')' after condition")
        then_branch = self.parse_statement()
        else_branch = None
        if self.match(TokenType.KEYWORD_ELSE):
            else_branch = self.parse_statement()
        return If(condition, then_branch, else_branch, token=keyword)

    def parse_return(self) -> Return:
        keyword = self.advance()
        if self.match(TokenType.SEMICOLON):
            return Return(None, token=keyword)
        expression = self.parse_expression()
        self.expect(TokenType.SEMICOLON, "Expected ';' after return value")
        return Return(expression, token=keyword)

    def parse_var(self) -> Var:
        keyword = self.advance()
        name = self.parse_identifier("Expected identifier after var")
        initializer = None
        if self.match(TokenType.ASSIGN):
            initializer = self.parse_expression()
            self.expect(TokenType.SEMICOLON, "Expected ';' after expression")
        else:
            self.expect(TokenType.SEMICOLON, "Expected ';' after identifier")
        return Var(name, initializer, token=keyword)

    def parse_fn(self) -> Fn:
        keyword = self.advance()
        name = self.parse_identifier("Expected function name after fn")
        self.expect(TokenType.LPAREN, "Expected '(' after function name")
        params: List[Identifier] = []
        if not self.check(TokenType.RPAREN):
            while True:
                params.append(self.parse_identifier("The parameter must be an identifier"))
                if not self.match(TokenType.COMMA):
                    break
        self.expect(TokenType.RPAREN, "Expected ')' after parameters")
        body = self.parse_statement()
        return Fn(name, params, body, token=keyword)

    def parse_while(self) -> Node:
        # Loops are not part of the language yet.
        raise self.error("'while' statements are not supported")

    def parse_expression_statement(self) -> ExpressionStmt:
        first = self.peek()
        expression = self.parse_expression()
        self.expect(TokenType.SEMICOLON, "Expected ';' after expression")
        return ExpressionStmt(expression, token=first)

    def parse_identifier(self, message: str) -> Identifier:
        token = self.match(TokenType.IDENTIFIER)
        if token is None:
            raise self.error(message)
        return Identifier(token.text, token=token)

    # Expressions

    def parse_expression(self) -> Node:
        return self.parse_assignment()

    def parse_assignment(self) -> Node:
        first = self.peek()
        target = self.parse_logical_or()
        operator = self.match(TokenType.ASSIGN)
        if operator is None:
            return target
        if not isinstance(target, Identifier):
            raise self.error("Expected identifier on the left of '='", first)
        value = self.parse_assignment()
        return Assignment(target, value, token=target.token)

    def parse_binary(self, operators: Sequence[TokenType], operand: Callable[[], Node]) -> Node:
        left = operand()
        while True:
            operator = self.match(*operators)
            if operator is None:
                return left
            right = operand()
            left = BinaryOp(operator.type, left, right, token=operator)

    def parse_logical_or(self) -> Node:
        return self.parse_binary(LOGICAL_OR, self.parse_logical_and)

    def parse_logical_and(self) -> Node:
        return self.parse_binary(LOGICAL_AND, self.parse_bitwise_or)

    def parse_bitwise_or(self) -> Node:
        return self.parse_binary(BITWISE_OR, self.parse_bitwise_xor)

    def parse_bitwise_xor(self) -> Node:
        return self.parse_binary(BITWISE_XOR, self.parse_bitwise_and)

    def parse_bitwise_and(self) -> Node:
        return self.parse_binary(BITWISE_AND, self.parse_equality)

    def parse_equality(self) -> Node:
        return self.parse_binary(EQUALITY, self.parse_comparison)

    def parse_comparison(self) -> Node:
        return self.parse_binary(COMPARISON, self.parse_shift)

    def parse_shift(self) -> Node:
        return self.parse_binary(SHIFT, self.parse_additive)

    def parse_additive(self) -> Node:
        return self.parse_binary(ADDITIVE, self.parse_multiplicative)

    def parse_multiplicative(self) -> Node:
        return self.parse_binary(MULTIPLICATIVE, self.parse_unary)

    def parse_unary(self) -> Node:
        operator = self.match(*UNARY)
        if operator is not None:
            return UnaryOp(operator.type, self.parse_unary(), token=operator)
        return self.parse_call()

    def parse_call(self) -> Node:
        expression = self.parse_primary()
        while True:
            opening = self.match(TokenType.LPAREN)
            if opening is None:
                return expression
            args: List[Node] = []
            if not self.check(TokenType.RPAREN):
                while True:
                    args.append(self.parse_expression())
                    if not self.match(TokenType.COMMA):
                        break
            self.expect(TokenType.RPAREN, "Expected ')' after arguments")
            expression = Call(expression, args, token=expression.token or opening)

    def parse_primary(self) -> Node:
        if self.match(TokenType.LPAREN):
            expression = self.parse_expression()
            self.expect(TokenType.RPAREN, "Expected ')' after expression")
            return expression
        token = self.match(TokenType.IDENTIFIER)
        if token is not None:
            return Identifier(token.text, token=token)
        return self.parse_literal()

    def parse_literal(self) -> Node:
        token = self.peek()
        if token is None:
            raise self.error("Expected expression")
        if token.type is TokenType.INTEGER:
            self.advance()
            return Number(parse_integer_literal(token.lexeme), False, token=token)
        if token.type is TokenType.FLOAT:
            self.advance()
            return Number(parse_float_literal(token.lexeme), True, token=token)
        if token.type is TokenType.STRING:
            self.advance()
            return String(token.lexeme, token=token)
        if token.type in (TokenType.KEYWORD_TRUE, TokenType.KEYWORD_FALSE):
            self.advance()
            return Boolean(token.type is TokenType.KEYWORD_TRUE, token=token)
        if token.type is TokenType.KEYWORD_NULL:
            self.advance()
            return Null(token=token)
        raise self.error(f"Unexpected token '{token.text}', expected expression")


def parse(tokens: Optional[List[Token]]) -> Optional[Program]:
    """Build a Program from tokens, or return None after the first syntax error."""
    if not tokens:
        diagnostics.report(diagnostics.ERROR, "Parser error: no tokens to parse")
        return None
    try:
        return Parser(tokens).parse_program()
    except ParseError:
        return None
