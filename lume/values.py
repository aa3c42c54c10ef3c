"""Runtime values for the Lume interpreter.

Values form a closed set of dataclasses: numbers, strings, booleans, null,
the two kinds of callables, and two control signals. `ReturnSignal` carries
an arena handle to the returned value; `ErrorSignal` carries nothing, the
diagnostic has already been reported where the error happened.

Strings are spans. A literal's bytes live in the source buffer, a
concatenation result lives in the arena; either way the bytes are fetched
through the owner at access time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Union

from .arena import Arena

if TYPE_CHECKING:
    from .ast import Fn
    from .builtin_function import BuiltinFunction

INT64_MASK = (1 << 64) - 1
INT64_SIGN = 1 << 63


def wrap_int64(value: int) -> int:
    """Reduce a Python int to a signed 64-bit two's complement value."""
    value &= INT64_MASK
    return value - (1 << 64) if value & INT64_SIGN else value


class Value:
    """Base class for runtime values."""
    __slots__ = ()


@dataclass(frozen=True)
class Integer(Value):
    value: int

    def __post_init__(self):
        object.__setattr__(self, 'value', wrap_int64(self.value))


@dataclass(frozen=True)
class Floating(Value):
    value: float


@dataclass(frozen=True)
class String(Value):
    owner: Union[bytes, Arena] = field(repr=False, compare=False)
    start: int
    length: int

    @classmethod
    def from_bytes(cls, data: bytes) -> 'String':
        return cls(data, 0, len(data))

    def data(self) -> bytes:
        if isinstance(self.owner, Arena):
            return self.owner.read(self.start, self.length)
        return bytes(self.owner[self.start:self.start + self.length])

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, String):
            return NotImplemented
        return self.length == other.length and self.data() == other.data()

    def __hash__(self) -> int:
        return hash(self.data())

    def __repr__(self) -> str:
        return f"String({self.data()!r})"


@dataclass(frozen=True)
class Boolean(Value):
    value: bool


@dataclass(frozen=True)
class Null(Value):
    pass


@dataclass(frozen=True)
class FunctionDefinition(Value):
    node: 'Fn' = field(compare=False)

    @property
    def name(self) -> str:
        return self.node.name.name

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, FunctionDefinition) and other.node is self.node

    def __hash__(self) -> int:
        return id(self.node)

    def __repr__(self) -> str:
        return f"<fn {self.name}>"


@dataclass(frozen=True)
class FunctionBuiltin(Value):
    builtin: 'BuiltinFunction'

    @property
    def name(self) -> str:
        return self.builtin.name

    def __repr__(self) -> str:
        return f"<builtin {self.name}>"


@dataclass(frozen=True)
class ReturnSignal(Value):
    handle: int
    arena: Arena = field(repr=False, compare=False)

    @classmethod
    def wrap(cls, value: Value, arena: Arena) -> 'ReturnSignal':
        return cls(arena.box(value), arena)

    @property
    def value(self) -> Value:
        return self.arena.unbox(self.handle)


@dataclass(frozen=True)
class ErrorSignal(Value):
    pass


NULL = Null()
ERROR = ErrorSignal()
TRUE = Boolean(True)
FALSE = Boolean(False)


def boolean(flag: bool) -> Boolean:
    return TRUE if flag else FALSE


def unwrap_return(value: Value) -> Value:
    """Return the payload of a ReturnSignal, or the value itself."""
    if isinstance(value, ReturnSignal):
        return value.value
    return value


def is_signal(value: Value) -> bool:
    return isinstance(value, (ReturnSignal, ErrorSignal))


def is_truthy(value: Value) -> bool:
    """Truthiness used by conditions and the logical operators.

    Numbers are true when nonzero, strings when nonempty, null is false and
    callables are true. Control signals never reach here: they are
    propagated before a condition is tested.
    """
    if isinstance(value, Boolean):
        return value.value
    if isinstance(value, (Integer, Floating)):
        return value.value != 0
    if isinstance(value, String):
        return value.length > 0
    if isinstance(value, Null):
        return False
    if isinstance(value, (FunctionDefinition, FunctionBuiltin)):
        return True
    raise TypeError(f"control signal {value!r} has no truth value")


def type_name(value: Value) -> str:
    """Return the user-facing name of a value's type."""
    if isinstance(value, Integer):
        return 'integer'
    if isinstance(value, Floating):
        return 'float'
    if isinstance(value, String):
        return 'string'
    if isinstance(value, Boolean):
        return 'boolean'
    if isinstance(value, Null):
        return 'null'
    if isinstance(value, (FunctionDefinition, FunctionBuiltin)):
        return 'function'
    if isinstance(value, ReturnSignal):
        return 'return signal'
    if isinstance(value, ErrorSignal):
        return 'error signal'
    return type(value).__name__


_ESCAPES = {
    ord('n'): b'\n',
    ord('t'): b'\t',
    ord('r'): b'\r',
    ord('\\'): b'\\',
    ord('"'): b'"',
}


def process_escapes(raw: bytes) -> bytes:
    """Interpret backslash escapes; an unknown escape yields the escaped byte."""
    out = bytearray()
    i = 0
    n = len(raw)
    while i < n:
        byte = raw[i]
        if byte == ord('\\') and i + 1 < n:
            i += 1
            out += _ESCAPES.get(raw[i], bytes((raw[i],)))
        else:
            out.append(byte)
        i += 1
    return bytes(out)


def to_bytes(value: Value) -> bytes:
    """Textual form of a value as written by `print`.

    Scalars other than strings end in a newline; strings are written with
    their escapes interpreted and no newline added.
    """
    if isinstance(value, Integer):
        return b'%d\n' % value.value
    if isinstance(value, Floating):
        return b'%.6f\n' % value.value
    if isinstance(value, String):
        return process_escapes(value.data())
    if isinstance(value, Boolean):
        return b'true\n' if value.value else b'false\n'
    if isinstance(value, Null):
        return b'null\n'
    if isinstance(value, FunctionDefinition):
        return b'<fn %s>\n' % value.name.encode('utf-8')
    if isinstance(value, FunctionBuiltin):
        return b'<builtin %s>\n' % value.name.encode('utf-8')
    if isinstance(value, ReturnSignal):
        return b'<return signal>\n'
    return b'<error signal>\n'
