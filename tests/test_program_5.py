from lume import tokenize, parse, Interpreter


def test_program_5_strings(example_path, capsys):
    with open(example_path('program_5.lume'), 'rb') as f:
        source = f.read()
    ast = parse(tokenize(source))
    interp = Interpreter()
    interp.run(ast)
    out = capsys.readouterr().out.strip()
    assert out.splitlines() == ['Hello, Lume!', '12', 'true']
