"""Parser for bftree programs.

The parser reads its input one byte at a time and builds the AST for
this grammar:

    program     := block
    block       := instruction*        (ends at ']' or end of input)
    instruction := '<' | '>' | '+' | '-' | '.' | ',' | loop
    loop        := '[' block ']'

Every byte outside the instruction alphabet is commentary. It is
skipped but still counted by the position tracking, newlines included.

End of input inside a loop closes every open block without complaint. A
`strict` parser reports the unclosed bracket instead. A `]` with no
matching `[` is always a syntax error.

The first I/O error raised by the stream is remembered, scanning stops
and `parse` reports it in place of any result.

`parse_program` is the convenience entry point for source held in
memory and `Parser.parse_file` for programs on disk.
"""

from __future__ import annotations

import io
from typing import Any, Optional, Union

from .ast import Block, Loop, Move, Update, Output, Input, Node
from .errors import BfError
from .types import ErrorVal, SourcePosition, INSTRUCTIONS


class Parser:
    def __init__(self, strict: bool = False):
        self.strict = strict
        self.stream: Any = None
        self.pending = b''
        self.pos = SourcePosition.start()
        self.error: Optional[OSError] = None

    def parse_file(self, path) -> Block:
        with open(path, 'rb') as f:
            return self.parse(f)

    def parse(self, stream) -> Block:
        self.stream = stream
        self.pending = b''
        self.pos = SourcePosition.start()
        self.error = None

        program = Block(self.pos)
        self.parse_block(program)
        if self.error is not None:
            raise BfError(ErrorVal('IOError', f"{self.error} while reading source at {self.pos}", self.pos)) from self.error
        return program

    def parse_block(self, program: Block):
        """Fill `program` with everything up to end of input.

        Open loops are kept on an explicit stack, innermost last, so
        nesting depth is not bounded by Python's recursion limit.
        """
        open_blocks = [program]
        while self.error is None:
            ch = self.next()
            if ch is None:
                break
            pos = self.pos
            if ch == '[':
                inner = Block(pos)
                open_blocks[-1].add(Loop(pos, inner))
                open_blocks.append(inner)
            elif ch == ']':
                if len(open_blocks) == 1:
                    raise BfError(ErrorVal('SyntaxError', f"unexpected close bracket at {pos}", pos))
                open_blocks.pop()
            else:
                open_blocks[-1].add(self.instruction(ch, pos))
        if self.strict and self.error is None and len(open_blocks) > 1:
            pos = open_blocks[-1].pos
            raise BfError(ErrorVal('SyntaxError', f"unclosed open bracket at {pos}", pos))

    def instruction(self, ch: str, pos: SourcePosition) -> Node:
        if ch == '<':
            return Move(pos, -1)
        if ch == '>':
            return Move(pos, 1)
        if ch == '+':
            return Update(pos, 1)
        if ch == '-':
            return Update(pos, -1)
        if ch == '.':
            return Output(pos)
        if ch == ',':
            return Input(pos)
        raise ValueError(f"not an instruction: {ch!r}")

    def next(self) -> Optional[str]:
        """Return the next instruction character, or None at end of input.

        Text streams are encoded to UTF-8 so positions always count
        bytes. I/O errors are recorded in `self.error` and also end the
        scan.
        """
        while True:
            if not self.pending:
                try:
                    data = self.stream.read(1)
                except OSError as e:
                    self.error = e
                    return None
                if not data:
                    return None
                self.pending = data.encode('utf-8') if isinstance(data, str) else bytes(data)
            byte = self.pending[0]
            self.pending = self.pending[1:]
            self.pos = self.pos.advance(byte)
            ch = chr(byte)
            if ch in INSTRUCTIONS:
                return ch


def parse_program(source: Union[str, bytes], strict: bool = False) -> Block:
    """Parse program text held in memory into its root Block."""
    if isinstance(source, str):
        source = source.encode('utf-8')
    return Parser(strict=strict).parse(io.BytesIO(source))
