from lume import tokenize, parse, Interpreter


def test_program_2_integer_arithmetic(example_path, capsys):
    with open(example_path('program_2.lume'), 'rb') as f:
        source = f.read()
    ast = parse(tokenize(source))
    interp = Interpreter()
    interp.run(ast)
    out = capsys.readouterr().out.strip()
    assert out.splitlines() == ['9', '5', '14', '3', '1', '-3', '-1']
