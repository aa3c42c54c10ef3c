"""Token kinds and the token record produced by the lexer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, List


class TokenType(Enum):
    INTEGER = auto()
    FLOAT = auto()
    STRING = auto()
    IDENTIFIER = auto()

    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    PERCENT = auto()

    ASSIGN = auto()

    EQ = auto()
    NEQ = auto()
    LT = auto()
    GT = auto()
    LTE = auto()
    GTE = auto()

    AND = auto()
    OR = auto()
    NOT = auto()

    BIT_AND = auto()
    BIT_OR = auto()
    BIT_XOR = auto()
    BIT_NOT = auto()
    SHIFT_LEFT = auto()
    SHIFT_RIGHT = auto()

    LPAREN = auto()
    RPAREN = auto()
    LBRACE = auto()
    RBRACE = auto()
    LBRACKET = auto()
    RBRACKET = auto()

    SEMICOLON = auto()
    COMMA = auto()
    DOT = auto()
    COLON = auto()

    QUESTION = auto()
    ARROW = auto()

    KEYWORD_INT = auto()
    KEYWORD_BOOLEAN = auto()
    KEYWORD_STRING = auto()
    KEYWORD_NULL = auto()
    KEYWORD_TRUE = auto()
    KEYWORD_FALSE = auto()
    KEYWORD_IF = auto()
    KEYWORD_ELSE = auto()
    KEYWORD_WHILE = auto()
    KEYWORD_VAR = auto()
    KEYWORD_FN = auto()
    KEYWORD_RETURN = auto()


# Matched against the exact bytes of identifier tokens after scanning.
KEYWORDS: Dict[bytes, TokenType] = {
    b'int': TokenType.KEYWORD_INT,
    b'boolean': TokenType.KEYWORD_BOOLEAN,
    b'string': TokenType.KEYWORD_STRING,
    b'true': TokenType.KEYWORD_TRUE,
    b'false': TokenType.KEYWORD_FALSE,
    b'null': TokenType.KEYWORD_NULL,
    b'if': TokenType.KEYWORD_IF,
    b'else': TokenType.KEYWORD_ELSE,
    b'while': TokenType.KEYWORD_WHILE,
    b'var': TokenType.KEYWORD_VAR,
    b'fn': TokenType.KEYWORD_FN,
    b'return': TokenType.KEYWORD_RETURN,
    b'and': TokenType.AND,
    b'or': TokenType.OR,
    b'not': TokenType.NOT,
}

SINGLE_CHAR_TOKENS: Dict[bytes, TokenType] = {
    b'+': TokenType.PLUS,
    b'-': TokenType.MINUS,
    b'*': TokenType.STAR,
    b'/': TokenType.SLASH,
    b'%': TokenType.PERCENT,
    b'=': TokenType.ASSIGN,
    b'!': TokenType.NOT,
    b'<': TokenType.LT,
    b'>': TokenType.GT,
    b'&': TokenType.BIT_AND,
    b'|': TokenType.BIT_OR,
    b'^': TokenType.BIT_XOR,
    b'~': TokenType.BIT_NOT,
    b'(': TokenType.LPAREN,
    b')': TokenType.RPAREN,
    b'{': TokenType.LBRACE,
    b'}': TokenType.RBRACE,
    b'[': TokenType.LBRACKET,
    b']': TokenType.RBRACKET,
    b';': TokenType.SEMICOLON,
    b',': TokenType.COMMA,
    b'.': TokenType.DOT,
    b':': TokenType.COLON,
    b'?': TokenType.QUESTION,
}

TWO_CHAR_TOKENS: Dict[bytes, TokenType] = {
    b'==': TokenType.EQ,
    b'!=': TokenType.NEQ,
    b'<=': TokenType.LTE,
    b'>=': TokenType.GTE,
    b'<<': TokenType.SHIFT_LEFT,
    b'>>': TokenType.SHIFT_RIGHT,
    b'&&': TokenType.AND,
    b'||': TokenType.OR,
    b'->': TokenType.ARROW,
}


@dataclass
class Token:
    """A lexical unit: a kind plus a span into the source buffer.

    The token keeps a reference to the buffer it was scanned from so that
    diagnostics can reproduce the offending line; `start` and `length` are
    byte offsets into that buffer.
    """
    type: TokenType
    start: int
    length: int
    line: int
    column: int
    source: bytes = field(default=b'', repr=False, compare=False)

    @property
    def lexeme(self) -> bytes:
        return self.source[self.start:self.start + self.length]

    @property
    def text(self) -> str:
        return self.lexeme.decode('utf-8', errors='replace')

    def __str__(self) -> str:
        return f"{self.type.name} {self.text!r} at {self.line}:{self.column}"


TokenSequence = List[Token]
