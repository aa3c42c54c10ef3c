from lume import tokenize, parse, Interpreter
from lume.values import ErrorSignal


def test_program_8_runtime_error_stops_program(example_path, capsys):
    with open(example_path('program_8.lume'), 'rb') as f:
        source = f.read()
    ast = parse(tokenize(source))
    interp = Interpreter()
    result = interp.run(ast)
    out = capsys.readouterr().out
    assert isinstance(result, ErrorSignal)
    assert out.startswith('before\n')
    assert '[ERROR] in line 3, column 11: Runtime error: division by zero' in out
    assert 'var z = 1 / 0;\n          ^' in out
    assert 'after' not in out
