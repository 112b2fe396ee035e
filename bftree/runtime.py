import sys
from typing import Any, Optional

from bftree.errors import BfError
from bftree.types import ErrorVal, SourcePosition, TAPE_SIZE, EOF_SENTINEL


class Runtime:
    """Machine state for one program run: the tape, the cursor and the I/O streams.

    `input` and `output` are binary streams. They default to the process
    standard streams, looked up when the runtime is built. A text input
    stream is read as UTF-8 bytes, one byte per read.
    """
    def __init__(self, input: Optional[Any] = None, output: Optional[Any] = None, tape_size: int = TAPE_SIZE):
        self.input = input if input is not None else sys.stdin.buffer
        self.output = output if output is not None else sys.stdout.buffer
        self.tape = bytearray(tape_size)
        self.cursor = 0
        # UTF-8 bytes of a text character not yet handed out
        self.pending = b''

    @property
    def cell(self) -> int:
        return self.tape[self.cursor]

    @cell.setter
    def cell(self, value: int):
        self.tape[self.cursor] = value

    def move(self, step: int, pos: SourcePosition):
        target = self.cursor + step
        if target < 0 or target >= len(self.tape):
            raise BfError(ErrorVal('OutOfRange', f'position {target} is out of range at {pos}', pos))
        self.cursor = target

    def update(self, delta: int):
        self.cell = (self.cell + delta) % 256

    def write_cell(self, pos: SourcePosition):
        try:
            self.output.write(bytes((self.cell,)))
        except OSError as e:
            raise BfError(ErrorVal('IOError', f'{e} in output at {pos}', pos)) from e

    def read_cell(self, pos: SourcePosition):
        # pending output goes out before we block on input
        self.flush()
        if not self.pending:
            try:
                data = self.input.read(1)
            except OSError as e:
                raise BfError(ErrorVal('IOError', f'{e} in input at {pos}', pos)) from e
            if not data:
                self.cell = EOF_SENTINEL
                return
            self.pending = data.encode('utf-8') if isinstance(data, str) else bytes(data)
        self.cell = self.pending[0]
        self.pending = self.pending[1:]

    def flush(self):
        flush = getattr(self.output, 'flush', None)
        if flush is None:
            return
        try:
            flush()
        except OSError as e:
            raise BfError(ErrorVal('IOError', f'{e} while flushing output')) from e
