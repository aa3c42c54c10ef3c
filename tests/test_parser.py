from lume.ast import (
    Assignment, BinaryOp, Block, Boolean, Call, ExpressionStmt, Fn, Identifier,
    If, Null, Number, Program, Return, String, UnaryOp, Var,
)
from lume.lexer import tokenize
from lume.parser import parse
from lume.tokens import TokenType


def parse_source(source):
    return parse(tokenize(source))


def expression_of(source):
    program = parse_source(source)
    assert program is not None
    statement = program.statements[0]
    assert isinstance(statement, ExpressionStmt)
    return statement.expression


def test_multiplication_binds_tighter_than_addition():
    assert expression_of("1 + 2 * 3;") == BinaryOp(
        TokenType.PLUS,
        Number(1),
        BinaryOp(TokenType.STAR, Number(2), Number(3)),
    )


def test_binary_operators_are_left_associative():
    assert expression_of("1 - 2 - 3;") == BinaryOp(
        TokenType.MINUS,
        BinaryOp(TokenType.MINUS, Number(1), Number(2)),
        Number(3),
    )


def test_precedence_ladder():
    # || < && < | < ^ < & < == < < < << < + < *
    expr = expression_of("a || b && c | d ^ e & f == g < h << i + j * k;")
    assert expr.op is TokenType.OR
    expr = expr.right
    for op in (TokenType.AND, TokenType.BIT_OR, TokenType.BIT_XOR, TokenType.BIT_AND,
               TokenType.EQ, TokenType.LT, TokenType.SHIFT_LEFT, TokenType.PLUS,
               TokenType.STAR):
        assert expr.op is op
        expr = expr.right
    assert expr == Identifier('k')


def test_assignment_is_right_associative():
    assert expression_of("a = b = 1;") == Assignment(
        Identifier('a'),
        Assignment(Identifier('b'), Number(1)),
    )


def test_assignment_requires_identifier(capsys):
    assert parse_source("1 = 2;") is None
    assert "Expected identifier on the left of '='" in capsys.readouterr().out


def test_unary_operators_nest():
    assert expression_of("- -1;") == UnaryOp(
        TokenType.MINUS, UnaryOp(TokenType.MINUS, Number(1)),
    )
    assert expression_of("not true;") == UnaryOp(TokenType.NOT, Boolean(True))


def test_parenthesized_expression():
    assert expression_of("(1 + 2) * 3;") == BinaryOp(
        TokenType.STAR,
        BinaryOp(TokenType.PLUS, Number(1), Number(2)),
        Number(3),
    )


def test_calls_chain():
    assert expression_of("f(1)(2, x);") == Call(
        Call(Identifier('f'), [Number(1)]),
        [Number(2), Identifier('x')],
    )


def test_literals():
    program = parse_source("1; 2.5; 'hi'; true; false; null;")
    assert [s.expression for s in program.statements] == [
        Number(1),
        Number(2.5, True),
        String(b'hi'),
        Boolean(True),
        Boolean(False),
        Null(),
    ]


def test_statements():
    program = parse_source("""
        var a;
        var b = 2;
        fn add(x, y) { return x + y; }
        if (a) return; else { b = 3; }
    """)
    assert program == Program([
        Var(Identifier('a')),
        Var(Identifier('b'), Number(2)),
        Fn(
            Identifier('add'),
            [Identifier('x'), Identifier('y')],
            Block([Return(BinaryOp(TokenType.PLUS, Identifier('x'), Identifier('y')))]),
        ),
        If(
            Identifier('a'),
            Return(),
            Block([ExpressionStmt(Assignment(Identifier('b'), Number(3)))]),
        ),
    ])


def test_if_without_else():
    program = parse_source("if (x) y;")
    assert program.statements[0] == If(Identifier('x'), ExpressionStmt(Identifier('y')))


def test_nodes_keep_their_tokens():
    program = parse_source("var x = 1 + 2;")
    var = program.statements[0]
    assert var.token.type is TokenType.KEYWORD_VAR
    assert var.initializer.token.type is TokenType.PLUS
    assert var.initializer.token.column == 11


def test_syntax_error_is_anchored(capsys):
    assert parse_source("var = 1;") is None
    out = capsys.readouterr().out
    assert '[ERROR] in line 1, column 5: Syntax error: Expected identifier after var' in out
    assert 'var = 1;\n    ^' in out


def test_missing_semicolon(capsys):
    assert parse_source("var x = 1") is None
    assert "Expected ';' after expression (unexpected end of input)" in capsys.readouterr().out


def test_unclosed_block(capsys):
    assert parse_source("{ var x = 1;") is None
    assert 'Syntax error: Unclosed block' in capsys.readouterr().out


def test_while_is_rejected(capsys):
    assert parse_source("while (1) { }") is None
    assert "'while' statements are not supported" in capsys.readouterr().out


def test_unused_punctuation_is_a_syntax_error(capsys):
    assert parse_source("a[1];") is None
    assert "Syntax error" in capsys.readouterr().out


def test_no_tokens(capsys):
    assert parse([]) is None
    assert 'no tokens to parse' in capsys.readouterr().out


def test_string_token_caret_covers_contents(capsys):
    assert parse_source('var x "abc";') is None
    out = capsys.readouterr().out
    assert "in line 1, column 7: Syntax error: Expected ';' after identifier" in out
    assert 'var x "abc";\n       ^^^\n' in out
