from typing import List

from lume import diagnostics
from lume.arena import Arena
from lume.builtin_function import BuiltinFunction
from lume.environment import Environment
from lume.values import ERROR, FunctionBuiltin, Integer, String, Value, type_name


def std_length(args: List[Value], arena: Arena, env: Environment) -> Value:
    value = args[0]
    if not isinstance(value, String):
        diagnostics.report(
            diagnostics.ERROR,
            f"Runtime error: length() expects a string, got {type_name(value)}",
        )
        return ERROR
    return Integer(value.length)


def populate_string_environment(env: Environment) -> Environment:
    length = BuiltinFunction('length', 1, std_length)
    env.push(length.name, FunctionBuiltin(length))
    return env
