import sys
from typing import Optional, TextIO


class BasicIO:
    """Host streams used by the `print` and `input` builtins.

    Streams left as None are looked up on `sys` at each call, so output
    follows any redirection made after the interpreter was created.
    """
    def __init__(self, output: Optional[TextIO] = None, input: Optional[TextIO] = None):
        self._output = output
        self._input = input

    @property
    def output(self) -> TextIO:
        return self._output if self._output is not None else sys.stdout

    @property
    def input(self) -> TextIO:
        return self._input if self._input is not None else sys.stdin

    def write(self, data: bytes) -> None:
        stream = self.output
        stream.write(data.decode('utf-8', errors='replace'))
        stream.flush()

    def read_line(self) -> Optional[bytes]:
        """Read one line without its trailing newline; None at end of input."""
        line = self.input.readline()
        if line == '':
            return None
        if line.endswith('\n'):
            line = line[:-1]
        return line.encode('utf-8')
