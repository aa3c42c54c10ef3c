from typing import List

from lume.arena import Arena
from lume.builtin_function import BuiltinFunction
from lume.environment import Environment
from lume.values import NULL, FunctionBuiltin, String, Value, to_bytes

from .basic_io import BasicIO


def populate_io_environment(env: Environment, basic_io: BasicIO) -> Environment:
    """Bind `print` and `input` in `env`, both writing through `basic_io`."""

    def write_values(args: List[Value]):
        basic_io.write(b' '.join(to_bytes(arg) for arg in args))

    def std_print(args: List[Value], arena: Arena, env: Environment) -> Value:
        write_values(args)
        return NULL

    def std_input(args: List[Value], arena: Arena, env: Environment) -> Value:
        if args:
            write_values(args)
        line = basic_io.read_line()
        if line is None:
            return NULL
        return String(arena, arena.store(line), len(line))

    for builtin in (
        BuiltinFunction('print', None, std_print),
        BuiltinFunction('input', None, std_input),
    ):
        env.push(builtin.name, FunctionBuiltin(builtin))
    return env
