"""Hand-written lexer for Lume.

The lexer scans a byte buffer and produces a list of `Token` records that
reference spans of that buffer. Whitespace and `#` comments are skipped,
newlines advance the line counter, and string literals are kept verbatim
(escape sequences are interpreted only when a string is printed).

Numbers follow the C library readings: `strtoll(..., 0)` integers (hex,
octal, decimal) and `strtod` floats, hexadecimal floats such as `0x1.8p1`
included.

Keywords are not recognized while scanning: once the whole buffer has been
tokenized, a second pass turns identifier tokens whose bytes match the
keyword table into keyword tokens.

Lexical errors follow two policies. An unterminated string is fatal and
stops tokenization, keeping the tokens produced so far. An unknown
character is reported and skipped.
"""

from __future__ import annotations

import re
from typing import List, Optional, Union

from . import diagnostics
from .tokens import KEYWORDS, SINGLE_CHAR_TOKENS, TWO_CHAR_TOKENS, Token, TokenType

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1

_INTEGER_RE = re.compile(rb'0[xX][0-9a-fA-F]+|0[0-7]*|[1-9][0-9]*')
_FLOAT_RE = re.compile(rb'[0-9]+(?:\.[0-9]*)?(?:[eE][+-]?[0-9]+)?')
_HEX_FLOAT_RE = re.compile(rb'0[xX](?:[0-9a-fA-F]+(?:\.[0-9a-fA-F]*)?|\.[0-9a-fA-F]+)(?:[pP][+-]?[0-9]+)?')


def parse_integer_literal(text: bytes) -> int:
    """Value of an integer literal in C `strtoll(..., 0)` notation, clamped to 64 bits."""
    if text[:2] in (b'0x', b'0X'):
        value = int(text[2:], 16)
    elif len(text) > 1 and text[:1] == b'0':
        value = int(text[1:], 8)
    else:
        value = int(text)
    return max(INT64_MIN, min(INT64_MAX, value))


def parse_float_literal(text: bytes) -> float:
    if text[:2] in (b'0x', b'0X'):
        return float.fromhex(text.decode('ascii'))
    return float(text)


class Lexer:
    def __init__(self, source: bytes):
        self.source = source
        self.length = len(source)
        self.pos = 0
        self.line = 1
        self.column = 1

    def eof(self) -> bool:
        return self.pos >= self.length

    def peek(self) -> bytes:
        return self.source[self.pos:self.pos + 1]

    def next(self) -> bytes:
        return self.source[self.pos + 1:self.pos + 2]

    def skip_until(self, stop: bytes):
        """Advance to the next `stop` byte (or the end), tracking lines."""
        while not self.eof() and self.peek() != stop:
            if self.peek() == b'\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def make_token(self, type_: TokenType, start: int, length: int,
                   line: Optional[int] = None, column: Optional[int] = None) -> Token:
        return Token(
            type=type_,
            start=start,
            length=length,
            line=self.line if line is None else line,
            column=self.column if column is None else column,
            source=self.source,
        )

    def tokenize(self) -> List[Token]:
        tokens: List[Token] = []
        while not self.eof():
            c = self.peek()

            if c == b'\n':
                self.line += 1
                self.column = 1
                self.pos += 1
                continue

            if c in (b' ', b'\t', b'\r'):
                self.column += 1
                self.pos += 1
                continue

            if c == b'#':
                self.pos += 1
                self.skip_until(b'\n')
                continue

            if c.isdigit():
                tokens.append(self.scan_number())
                continue

            if c in (b'"', b"'"):
                token = self.scan_string(c)
                if token is None:
                    break
                tokens.append(token)
                continue

            if c.isalpha() or c == b'_':
                tokens.append(self.scan_identifier())
                continue

            pair = self.source[self.pos:self.pos + 2]
            if len(pair) == 2 and pair in TWO_CHAR_TOKENS:
                tokens.append(self.make_token(TWO_CHAR_TOKENS[pair], self.pos, 2))
                self.pos += 2
                self.column += 2
                continue

            if c in SINGLE_CHAR_TOKENS:
                tokens.append(self.make_token(SINGLE_CHAR_TOKENS[c], self.pos, 1))
                self.pos += 1
                self.column += 1
                continue

            diagnostics.report(
                diagnostics.ERROR,
                f"Unknown character {c.decode('latin-1')!r} at {self.line}:{self.column}",
            )
            self.pos += 1
            self.column += 1

        self.classify_keywords(tokens)
        return tokens

    def scan_number(self) -> Token:
        # Both readings are attempted; the one that consumes more input wins,
        # and the integer reading wins a tie.
        integer = _INTEGER_RE.match(self.source, self.pos)
        float_end = self.pos
        for pattern in (_FLOAT_RE, _HEX_FLOAT_RE):
            floating = pattern.match(self.source, self.pos)
            if floating:
                float_end = max(float_end, floating.end())
        int_end = integer.end() if integer else self.pos
        if float_end > int_end:
            type_, end = TokenType.FLOAT, float_end
        else:
            type_, end = TokenType.INTEGER, int_end
        token = self.make_token(type_, self.pos, end - self.pos)
        self.column += end - self.pos
        self.pos = end
        return token

    def scan_string(self, quote: bytes) -> Optional[Token]:
        line = self.line
        column = self.column
        self.pos += 1
        self.column += 1
        start = self.pos
        self.skip_until(quote)
        if self.eof():
            diagnostics.report(
                diagnostics.ERROR,
                f"Unterminated string at {self.line}:{self.column}",
            )
            return None
        token = self.make_token(TokenType.STRING, start, self.pos - start, line, column)
        self.pos += 1
        self.column += 1
        return token

    def scan_identifier(self) -> Token:
        start = self.pos
        column = self.column
        while not self.eof() and (self.peek().isalnum() or self.peek() == b'_'):
            self.pos += 1
            self.column += 1
        return self.make_token(TokenType.IDENTIFIER, start, self.pos - start, column=column)

    @staticmethod
    def classify_keywords(tokens: List[Token]):
        for token in tokens:
            if token.type is TokenType.IDENTIFIER:
                keyword = KEYWORDS.get(token.lexeme)
                if keyword is not None:
                    token.type = keyword


def tokenize(source: Union[bytes, str, None], length: Optional[int] = None) -> List[Token]:
    """Convert a source buffer into a list of tokens.

    Returns an empty list (after reporting an error) when the buffer is
    missing or empty. When `length` is given only that many bytes are read.
    """
    if source is None:
        diagnostics.report(diagnostics.ERROR, "Lexer error: content is missing")
        return []
    if isinstance(source, str):
        source = source.encode('utf-8')
    if length is not None:
        source = source[:length]
    if len(source) == 0:
        diagnostics.report(diagnostics.ERROR, "Lexer error: content size is 0")
        return []
    return Lexer(bytes(source)).tokenize()
