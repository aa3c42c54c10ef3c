"""Builtins bound in the root scope of every program."""

from typing import Optional

from lume.environment import Environment

from .io import BasicIO, populate_io_environment
from .strings import populate_string_environment


def load_builtins(env: Environment, basic_io: Optional[BasicIO] = None) -> Environment:
    populate_io_environment(env, basic_io or BasicIO())
    populate_string_environment(env)
    env.builtins_loaded = True
    return env


__all__ = ['BasicIO', 'load_builtins']
