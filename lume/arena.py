"""Bump allocator for data synthesized at run time.

The arena owns one growable byte buffer plus a table of boxed values.
Allocations hand out integer offsets (for bytes) and integer indices (for
boxes). Those handles stay meaningful when the buffer grows because they are
resolved against the current backing store on every access. Nothing is
freed individually; `reset()` reclaims everything at once.
"""

from __future__ import annotations

from typing import Any, List, Optional

from .errors import ArenaExhausted


class Arena:
    def __init__(self, initial: int = 16 * 1024, limit: Optional[int] = None):
        if initial <= 0:
            raise ValueError('arena size must be positive')
        self.limit = limit
        self.buffer = bytearray(initial)
        self.offset = 0
        self.boxes: List[Any] = []

    @property
    def capacity(self) -> int:
        return len(self.buffer)

    def alloc(self, length: int) -> int:
        """Reserve `length` bytes and return the offset of the first one."""
        if length < 0:
            raise ValueError('allocation length must not be negative')
        needed = self.offset + length
        if needed > len(self.buffer):
            self._grow(needed)
        start = self.offset
        self.offset = needed
        return start

    def _grow(self, needed: int):
        new_length = len(self.buffer) * 2
        if new_length < needed:
            new_length = needed
        if self.limit is not None and new_length > self.limit:
            if needed > self.limit:
                raise ArenaExhausted(f'arena limit of {self.limit} bytes exceeded')
            new_length = self.limit
        try:
            self.buffer.extend(bytes(new_length - len(self.buffer)))
        except MemoryError as e:
            raise ArenaExhausted('failed to grow arena') from e

    def store(self, data: bytes) -> int:
        """Copy `data` into a fresh allocation and return its offset."""
        start = self.alloc(len(data))
        self.buffer[start:start + len(data)] = data
        return start

    def read(self, offset: int, length: int) -> bytes:
        if offset < 0 or offset + length > self.offset:
            raise IndexError(f'arena span {offset}+{length} is not allocated')
        return bytes(self.buffer[offset:offset + length])

    def box(self, value: Any) -> int:
        """Store a value in the arena and return its handle."""
        try:
            self.boxes.append(value)
        except MemoryError as e:
            raise ArenaExhausted('failed to box value') from e
        return len(self.boxes) - 1

    def unbox(self, handle: int) -> Any:
        return self.boxes[handle]

    def reset(self):
        # Outstanding handles become invalid.
        self.offset = 0
        self.boxes.clear()

    def destroy(self):
        self.reset()
        self.buffer = bytearray()

    def __repr__(self) -> str:
        return f"Arena(used={self.offset}, capacity={len(self.buffer)}, boxes={len(self.boxes)})"
