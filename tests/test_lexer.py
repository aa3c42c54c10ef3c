import pytest

from lume.lexer import INT64_MAX, parse_float_literal, parse_integer_literal, tokenize
from lume.tokens import TokenType


def types(tokens):
    return [t.type for t in tokens]


def test_simple_statement_positions():
    tokens = tokenize("var x = 42;")
    assert types(tokens) == [
        TokenType.KEYWORD_VAR, TokenType.IDENTIFIER, TokenType.ASSIGN,
        TokenType.INTEGER, TokenType.SEMICOLON,
    ]
    assert [t.column for t in tokens] == [1, 5, 7, 9, 11]
    assert all(t.line == 1 for t in tokens)
    assert tokens[3].lexeme == b'42'


def test_number_kinds():
    tokens = tokenize("0x1F 017 3.14 1e3 5. 08")
    assert [(t.type, t.lexeme) for t in tokens] == [
        (TokenType.INTEGER, b'0x1F'),
        (TokenType.INTEGER, b'017'),
        (TokenType.FLOAT, b'3.14'),
        (TokenType.FLOAT, b'1e3'),
        (TokenType.FLOAT, b'5.'),
        # the octal reading stops at '8', the decimal float reading does not
        (TokenType.FLOAT, b'08'),
    ]


@pytest.mark.parametrize('text, value', [
    (b'0', 0),
    (b'42', 42),
    (b'0x1f', 31),
    (b'0X10', 16),
    (b'017', 15),
    (b'99999999999999999999', INT64_MAX),
])
def test_parse_integer_literal(text, value):
    assert parse_integer_literal(text) == value


def test_two_char_operators():
    tokens = tokenize("a <= b != c << 1 -> d && e || f")
    assert TokenType.LTE in types(tokens)
    assert TokenType.NEQ in types(tokens)
    assert TokenType.SHIFT_LEFT in types(tokens)
    assert TokenType.ARROW in types(tokens)
    assert TokenType.AND in types(tokens)
    assert TokenType.OR in types(tokens)


def test_keywords_and_word_operators():
    tokens = tokenize("if iffy and or not return")
    assert types(tokens) == [
        TokenType.KEYWORD_IF, TokenType.IDENTIFIER, TokenType.AND,
        TokenType.OR, TokenType.NOT, TokenType.KEYWORD_RETURN,
    ]


def test_string_matching_keyword_stays_string():
    tokens = tokenize('"while"')
    assert types(tokens) == [TokenType.STRING]
    assert tokens[0].lexeme == b'while'


def test_strings_keep_escapes_verbatim():
    tokens = tokenize(r"'it\n' " + '"x"')
    assert [t.lexeme for t in tokens] == [b'it\\n', b'x']
    assert tokens[0].column == 1
    assert tokens[1].column == 8


def test_multiline_string_advances_line():
    tokens = tokenize('"a\nb" c')
    assert tokens[0].line == 1
    assert tokens[1].line == 2


def test_comments_and_newlines():
    tokens = tokenize("# comment\n  x # trailing\ny")
    assert [(t.text, t.line, t.column) for t in tokens] == [('x', 2, 3), ('y', 3, 1)]


def test_unterminated_string_keeps_prior_tokens(capsys):
    tokens = tokenize('var s = "abc')
    assert types(tokens) == [TokenType.KEYWORD_VAR, TokenType.IDENTIFIER, TokenType.ASSIGN]
    assert 'Unterminated string' in capsys.readouterr().out


def test_unknown_character_is_skipped(capsys):
    tokens = tokenize("1 @ 2")
    assert types(tokens) == [TokenType.INTEGER, TokenType.INTEGER]
    assert "[ERROR] Unknown character '@' at 1:3" in capsys.readouterr().out


def test_empty_source_reports_error(capsys):
    assert tokenize("") == []
    assert tokenize(None) == []
    out = capsys.readouterr().out
    assert 'content size is 0' in out
    assert 'content is missing' in out


def test_length_limits_scanned_bytes():
    tokens = tokenize(b"abc def", 3)
    assert [t.text for t in tokens] == ['abc']


@pytest.mark.parametrize('text, value', [
    ('0x1.8p1', 3.0),
    ('0x1.8', 1.5),
    ('0x.8p-1', 0.25),
])
def test_hex_float_literals(text, value):
    tokens = tokenize(text)
    assert types(tokens) == [TokenType.FLOAT]
    assert tokens[0].text == text
    assert parse_float_literal(tokens[0].lexeme) == value
