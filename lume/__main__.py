"""CLI entry point for the Lume interpreter.

Usage:
    python -m lume [-v|-vv|-vvv] <program_file>
    python -m lume --tokens <program_file>
    python -m lume [-v...] --emit-ast <program_file>
    python -m lume [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --tokens      Dump the token stream of the given file
  --emit-ast    Parse the given file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file
  --version     Print the interpreter version

Diagnostics are written to standard output. When verbosity is greater
than zero a trace is also written to `debug.txt` in the current directory.

The exit status is the program's result when it is an integer (truncated
to a byte), 1 when evaluation ended in a runtime error or the program
could not be loaded, and 0 otherwise.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from . import __version__, diagnostics
from .ast_json import ast_from_obj, ast_to_obj
from .interpreter import Interpreter
from .lexer import tokenize
from .logging_utils import configure_logging, shutdown_logging
from .parser import parse
from .values import ErrorSignal, Integer, Value


def exit_code(value: Optional[Value]) -> int:
    if value is None or isinstance(value, ErrorSignal):
        return 1
    if isinstance(value, Integer):
        return value.value & 0xFF
    return 0


def read_source(path: Path) -> Optional[bytes]:
    try:
        return path.read_bytes()
    except OSError as e:
        diagnostics.report(diagnostics.ERROR, f"Failed to open {path}: {e.strerror or e}")
        return None


def dump_tokens(path: Path) -> int:
    source = read_source(path)
    if source is None:
        return 1
    tokens = tokenize(source)
    for i, token in enumerate(tokens):
        diagnostics.report(
            diagnostics.INFO,
            f"Token {i}: type={token.type.name}, lexeme={token.text}, "
            f"line={token.line}, column={token.column}",
        )
    return 0 if tokens else 1


def emit_ast(path: Path) -> int:
    source = read_source(path)
    if source is None:
        return 1
    program = parse(tokenize(source))
    if program is None:
        diagnostics.report(diagnostics.ERROR, "Failed to parse")
        return 1
    out_path = path.with_name(path.name + '.ast.json')
    with open(out_path, 'w', encoding='utf-8') as out:
        json.dump(ast_to_obj(program), out, indent=2)
    print(str(out_path))
    return 0


def run_ast(path: Path, interpreter: Interpreter) -> int:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except OSError as e:
        diagnostics.report(diagnostics.ERROR, f"Failed to open {path}: {e.strerror or e}")
        return 1
    return exit_code(interpreter.run(ast_from_obj(data)))


def run_file(path: Path, interpreter: Interpreter) -> int:
    source = read_source(path)
    if source is None:
        return 1
    tokens = tokenize(source)
    if not tokens:
        diagnostics.report(diagnostics.ERROR, "Failed to tokenize")
        return 1
    program = parse(tokens)
    if program is None:
        diagnostics.report(diagnostics.ERROR, "Failed to parse")
        return 1
    return exit_code(interpreter.run(program))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog='lume', description="Lume language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--version', action='version', version=f'%(prog)s v{__version__}')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--tokens', metavar='LUME_FILE', help='dump the token stream of the given file')
    group.add_argument('--emit-ast', metavar='LUME_FILE', help='emit AST JSON for the given file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='Lume program file to execute')
    args = parser.parse_args(argv)

    configure_logging(args.v)
    try:
        if args.tokens:
            return dump_tokens(Path(args.tokens))
        if args.emit_ast:
            return emit_ast(Path(args.emit_ast))

        if not args.ast and not args.program:
            diagnostics.report(diagnostics.ERROR, "File is required")
            return 1
        interpreter = Interpreter(debug_level=args.v)
        try:
            if args.ast:
                return run_ast(Path(args.ast), interpreter)
            return run_file(Path(args.program), interpreter)
        except RecursionError:
            diagnostics.report(diagnostics.ERROR, "Internal error: maximum recursion depth exceeded")
            return 1
    finally:
        shutdown_logging()


if __name__ == '__main__':
    sys.exit(main())
