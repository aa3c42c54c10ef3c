from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .errors import ScopeExhausted
from .values import Value


@dataclass
class Binding:
    name: str
    value: Value


class Environment:
    """One scope of name bindings with a link to the enclosing scope.

    Bindings are appended and never removed while the scope lives. A lookup
    scans the newest binding first and then walks up the parent chain, so a
    re-declared name shadows the earlier one.
    """
    def __init__(self, parent: Optional['Environment'] = None, capacity: int = 32,
                 limit: Optional[int] = None):
        self.parent = parent
        self.capacity = capacity if capacity > 0 else 1
        self.limit = limit
        if limit is not None and self.capacity > limit:
            self.capacity = limit
        self.bindings: List[Binding] = []
        self.builtins_loaded = False

    def push(self, name: str, value: Value) -> Binding:
        if len(self.bindings) >= self.capacity:
            self._grow()
        binding = Binding(name, value)
        self.bindings.append(binding)
        return binding

    def _grow(self):
        if self.limit is not None and len(self.bindings) >= self.limit:
            raise ScopeExhausted(f'scope limit of {self.limit} bindings exceeded')
        new_capacity = max(self.capacity * 2, 1)
        if self.limit is not None:
            new_capacity = min(new_capacity, self.limit)
        self.capacity = new_capacity

    def find(self, name: str) -> Optional[Binding]:
        env: Optional[Environment] = self
        while env is not None:
            for binding in reversed(env.bindings):
                if binding.name == name:
                    return binding
            env = env.parent
        return None

    def get(self, name: str) -> Optional[Value]:
        binding = self.find(name)
        return binding.value if binding is not None else None

    def assign(self, name: str, value: Value) -> bool:
        """Overwrite the nearest binding of `name`; False when there is none."""
        binding = self.find(name)
        if binding is None:
            return False
        binding.value = value
        return True

    def destroy(self):
        self.bindings.clear()
        self.parent = None

    def __contains__(self, name: str) -> bool:
        return self.find(name) is not None

    def __len__(self) -> int:
        return len(self.bindings)

    def __repr__(self) -> str:
        names = ', '.join(b.name for b in self.bindings)
        return f"Environment([{names}], parent={'yes' if self.parent else 'no'})"
