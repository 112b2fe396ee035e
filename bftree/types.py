"""Shared value types and constants for bftree.

This module defines the source position record attached to every AST
node, the error value carried by `BfError`, and the fixed constants of
the tape machine.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


TAPE_SIZE = 30000
EOF_SENTINEL = 0xFF
INSTRUCTIONS = "<>+-.,[]"

NEWLINE = 0x0A


@dataclass(frozen=True)
class SourcePosition:
    """Location of a byte in the program source.

    `offset` counts bytes consumed so far, `line` is one-based and
    `column` restarts at zero after every newline. A position is
    captured after its byte has been consumed, so the first byte of a
    file sits at offset 1, column 1.
    """
    offset: int = 0
    line: int = 1
    column: int = 0

    @staticmethod
    def start() -> 'SourcePosition':
        return SourcePosition(0, 1, 0)

    def advance(self, byte: int) -> 'SourcePosition':
        if byte == NEWLINE:
            return SourcePosition(self.offset + 1, self.line + 1, 0)
        return SourcePosition(self.offset + 1, self.line, self.column + 1)

    def __str__(self) -> str:
        return f"line {self.line}, column {self.column} (offset {self.offset})"


@dataclass
class ErrorVal:
    """Describes a parse or run failure.

    `name` is one of 'SyntaxError', 'IOError' or 'OutOfRange'.
    """
    name: str
    message: str
    pos: Optional[SourcePosition] = None

    def __repr__(self) -> str:
        return f"Error(name={self.name!r}, message={self.message!r})"
