"""Tree-walking interpreter for bftree programs.

The interpreter executes the AST produced by `bftree.parser` against a
`Runtime`. Each node performs one effect; blocks run their children in
program order and loops re-check their guard cell after the whole body
has run. The first failure anywhere in the tree aborts the run.

Tracing is controlled by `debug_level`:

1. one line per node, written before the node runs
2. also the cursor and cell after every move and update
3. also every loop guard check

Trace lines go to `debug_file`, or to standard error when it is None.
"""

from __future__ import annotations

import sys
from typing import Any, List, Optional, Union

from .ast import Block, Loop, Move, Update, Output, Input, Node
from .errors import BfError
from .parser import Parser, parse_program
from .runtime import Runtime
from .types import TAPE_SIZE


class Interpreter:
    """Executes a parsed program against a runtime."""
    def __init__(self, debug_level: int = 0, debug_file: Optional[str] = 'debug.txt'):
        self.debug_level = debug_level
        self.debug_file = debug_file
        self.debug_fp = None

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg, file=sys.stderr)

    # Public API
    def run(self, program: Block, runtime: Optional[Runtime] = None) -> Runtime:
        if runtime is None:
            runtime = Runtime()
        if self.debug_level > 0 and self.debug_file:
            self.debug_fp = open(self.debug_file, 'w', encoding='utf-8')
        try:
            try:
                self.execute(program, runtime)
            except BfError:
                # a failing flush must not replace the run error
                try:
                    runtime.flush()
                except BfError:
                    pass
                raise
            runtime.flush()
        finally:
            if self.debug_fp:
                self.debug_fp.close()
                self.debug_fp = None
        return runtime

    def execute(self, node: Node, rt: Runtime):
        """Run `node` and everything nested in it.

        Blocks being walked and loops waiting on their guard are kept on
        an explicit stack, so loop depth is not bounded by Python's
        recursion limit.
        """
        stack: List[Any] = []
        self.enter(node, rt, stack)
        while stack:
            top = stack[-1]
            if isinstance(top, Loop):
                if self.guard(top, rt):
                    self.enter(top.body, rt, stack)
                else:
                    stack.pop()
                continue
            child = next(top, None)
            if child is None:
                stack.pop()
            else:
                self.enter(child, rt, stack)

    def enter(self, node: Node, rt: Runtime, stack: List[Any]):
        if self.debug_level >= 1:
            self.debug(f"run {node.describe()} at {node.pos}")
        if isinstance(node, Update):
            rt.update(node.delta)
            if self.debug_level >= 2:
                self.debug(f"  cell[{rt.cursor}] = {rt.cell}")
            return
        if isinstance(node, Move):
            rt.move(node.step, node.pos)
            if self.debug_level >= 2:
                self.debug(f"  cursor = {rt.cursor}, cell = {rt.cell}")
            return
        if isinstance(node, Block):
            stack.append(iter(node.body))
            return
        if isinstance(node, Loop):
            stack.append(node)
            return
        if isinstance(node, Output):
            rt.write_cell(node.pos)
            return
        if isinstance(node, Input):
            rt.read_cell(node.pos)
            return
        raise NotImplementedError(f"execute: unexpected node type {type(node)}")

    def guard(self, loop: Loop, rt: Runtime) -> bool:
        cond = rt.cell
        if self.debug_level >= 3:
            self.debug(f"  loop at {loop.pos} guard {cond} -> {cond != 0}")
        return cond != 0


def run_program(source: Union[str, bytes], input: Any = None, output: Any = None,
                debug_level: int = 0, strict: bool = False, tape_size: int = TAPE_SIZE) -> Runtime:
    """Parse and run a program held in memory, returning the final runtime."""
    program = parse_program(source, strict=strict)
    interpreter = Interpreter(debug_level=debug_level)
    return interpreter.run(program, Runtime(input, output, tape_size))


def run_file(file_path: str, input: Any = None, output: Any = None,
             debug_level: int = 0, strict: bool = False) -> Runtime:
    """Parse and run a program file, returning the final runtime."""
    program = Parser(strict=strict).parse_file(file_path)
    interpreter = Interpreter(debug_level=debug_level)
    return interpreter.run(program, Runtime(input, output))
