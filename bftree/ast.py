"""Abstract Syntax Tree (AST) definitions for bftree programs.

The parser produces a tree of these nodes and the interpreter walks it
directly; there is no other program representation. Every node carries
the `SourcePosition` at which its character was read. Blocks and loops
own their children outright, the bracket grammar guarantees a tree.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from .types import SourcePosition


@dataclass
class Node:
    """Base class for all AST nodes."""
    pos: SourcePosition

    def describe(self) -> str:
        return type(self).__name__


@dataclass
class Block(Node):
    body: List[Node] = field(default_factory=list)

    def add(self, node: Node) -> None:
        self.body.append(node)

    def describe(self) -> str:
        return f"Block({len(self.body)} nodes)"


@dataclass
class Loop(Node):
    body: Block

    def describe(self) -> str:
        return f"Loop({len(self.body.body)} nodes)"


@dataclass
class Move(Node):
    step: int  # +1 for '>', -1 for '<'

    def describe(self) -> str:
        return f"Move(step={self.step:+d})"


@dataclass
class Update(Node):
    delta: int  # +1 for '+', -1 for '-'

    def describe(self) -> str:
        return f"Update(delta={self.delta:+d})"


@dataclass
class Output(Node):
    pass


@dataclass
class Input(Node):
    pass
