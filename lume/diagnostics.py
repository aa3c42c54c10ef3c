"""Leveled diagnostics, optionally anchored to a token in the source."""

from __future__ import annotations

from typing import Optional

from loguru import logger

from .tokens import Token

ERROR = "ERROR"
WARNING = "WARNING"
INFO = "INFO"
SUCCESS = "SUCCESS"

TAB_WIDTH = 4


def source_line(source: bytes, line: int) -> Optional[bytes]:
    """Return the bytes of 1-based `line` without its newline."""
    if line < 1:
        return None
    lines = source.split(b'\n')
    if line > len(lines):
        return None
    return lines[line - 1]


def line_start(source: bytes, line: int) -> int:
    """Byte offset of the first byte of 1-based `line`."""
    offset = 0
    for _ in range(line - 1):
        newline = source.find(b'\n', offset)
        if newline < 0:
            return len(source)
        offset = newline + 1
    return offset


def _expand_tabs(text: str) -> str:
    return text.replace('\t', ' ' * TAB_WIDTH)


def render_anchor(token: Token) -> str:
    """Render the token's line with a caret underline below the token."""
    raw = source_line(token.source, token.line)
    if not raw:
        return ''
    text = raw.decode('utf-8', errors='replace')
    # Byte offsets, not columns: a string token's span starts after its quote.
    offset = min(max(token.start - line_start(token.source, token.line), 0), len(raw))
    prefix = raw[:offset].decode('utf-8', errors='replace')
    span = raw[offset:offset + token.length]
    width = max(len(_expand_tabs(span.decode('utf-8', errors='replace'))), 1)
    return _expand_tabs(text) + '\n' + ' ' * len(_expand_tabs(prefix)) + '^' * width


def report(level: str, message: str) -> None:
    logger.log(level, message)


def report_at(level: str, token: Optional[Token], message: str) -> None:
    """Report `message` at `token`, reproducing the source line when known."""
    if token is None:
        report(level, message)
        return
    text = f"in line {token.line}, column {token.column}: {message}"
    anchor = render_anchor(token) if token.source else ''
    if anchor:
        text = text + '\n' + anchor
    logger.log(level, text)
