class LumeError(Exception):
    """Base class for errors raised by the Lume toolchain."""


class ParseError(LumeError):
    """Raised inside the parser when a grammar rule fails to match.

    The diagnostic has already been reported when this is raised; `parse()`
    catches it and returns None.
    """


class InternalError(LumeError):
    """Raised when interpreter storage cannot grow."""


class ArenaExhausted(InternalError):
    """The arena could not grow to satisfy an allocation."""


class ScopeExhausted(InternalError):
    """An environment could not grow to hold another binding."""
