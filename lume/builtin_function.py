from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, List, Optional

if TYPE_CHECKING:
    from .arena import Arena
    from .environment import Environment
    from .values import Value

BuiltinCallable = Callable[[List['Value'], 'Arena', 'Environment'], 'Value']


@dataclass
class BuiltinFunction:
    name: str
    arity: Optional[int]
    fn: BuiltinCallable

    def __call__(self, args: List['Value'], arena: 'Arena', env: 'Environment') -> 'Value':
        return self.fn(args, arena, env)

    def __repr__(self) -> str:
        return f"<builtin {self.name}>"
