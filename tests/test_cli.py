import json

import pytest

from lume import __version__
from lume.__main__ import exit_code, main
from lume.values import ERROR, NULL, Integer


def write_program(tmp_path, source, name='prog.lume'):
    path = tmp_path / name
    path.write_bytes(source.encode('utf-8'))
    return path


def test_exit_code_mapping():
    assert exit_code(Integer(42)) == 42
    assert exit_code(Integer(-1)) == 255
    assert exit_code(Integer(256)) == 0
    assert exit_code(ERROR) == 1
    assert exit_code(NULL) == 0
    assert exit_code(None) == 1


def test_runs_program(tmp_path, capsys):
    path = write_program(tmp_path, 'print("hi\\n"); return 3;')
    assert main([str(path)]) == 3
    assert capsys.readouterr().out == 'hi\n'


def test_runtime_error_exit(tmp_path, capsys):
    path = write_program(tmp_path, 'return nope;')
    assert main([str(path)]) == 1
    assert "undefined reference to 'nope'" in capsys.readouterr().out


def test_syntax_error_exit(tmp_path, capsys):
    path = write_program(tmp_path, 'var = ;')
    assert main([str(path)]) == 1
    out = capsys.readouterr().out
    assert 'Syntax error' in out
    assert 'Failed to parse' in out


def test_empty_file_exit(tmp_path, capsys):
    path = write_program(tmp_path, '')
    assert main([str(path)]) == 1
    assert 'Failed to tokenize' in capsys.readouterr().out


def test_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / 'absent.lume')]) == 1
    assert 'Failed to open' in capsys.readouterr().out


def test_file_is_required(capsys):
    assert main([]) == 1
    assert 'File is required' in capsys.readouterr().out


def test_version(capsys):
    with pytest.raises(SystemExit) as exc:
        main(['--version'])
    assert exc.value.code == 0
    assert capsys.readouterr().out.strip() == f'lume v{__version__}'


def test_token_dump(tmp_path, capsys):
    path = write_program(tmp_path, 'var x;')
    assert main(['--tokens', str(path)]) == 0
    out = capsys.readouterr().out
    assert 'Token 0: type=KEYWORD_VAR, lexeme=var, line=1, column=1' in out
    assert 'Token 2: type=SEMICOLON' in out


def test_emit_and_run_ast(tmp_path, capsys):
    path = write_program(tmp_path, 'fn sq(n) { return n * n; } return sq(9);')
    assert main(['--emit-ast', str(path)]) == 0
    ast_path = tmp_path / 'prog.lume.ast.json'
    assert capsys.readouterr().out.strip() == str(ast_path)
    assert json.loads(ast_path.read_text())['type'] == 'Program'
    assert main(['--ast', str(ast_path)]) == 81


def test_verbose_writes_debug_file(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    path = write_program(tmp_path, 'var x = 1;')
    assert main(['-vv', str(path)]) == 0
    assert '[DEBUG] declare x' in capsys.readouterr().out
    assert 'declare x' in (tmp_path / 'debug.txt').read_text()


def test_recursion_limit_is_reported(tmp_path, capsys):
    path = write_program(tmp_path, 'fn f(n) { return f(n + 1); } f(0);')
    assert main([str(path)]) == 1
    assert 'maximum recursion depth exceeded' in capsys.readouterr().out


def test_recursion_limit_is_reported_for_ast(tmp_path, capsys):
    path = write_program(tmp_path, 'fn f(n) return f(n + 1); f(0);')
    assert main(['--emit-ast', str(path)]) == 0
    ast_path = tmp_path / 'prog.lume.ast.json'
    assert main(['--ast', str(ast_path)]) == 1
    assert 'maximum recursion depth exceeded' in capsys.readouterr().out
