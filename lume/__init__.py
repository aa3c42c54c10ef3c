# Lume language package
# This package provides a lexer, parser and tree-walking interpreter for Lume.
__version__ = '0.1.0'

from .arena import Arena
from .environment import Environment
from .errors import LumeError, ParseError, InternalError
from .lexer import tokenize
from .parser import parse
from .interpreter import evaluate, run_program, Interpreter

__all__ = [
    'Arena',
    'Environment',
    'LumeError',
    'ParseError',
    'InternalError',
    'tokenize',
    'parse',
    'evaluate',
    'run_program',
    'Interpreter',
]
