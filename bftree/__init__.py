# bftree package
# This package provides a parser and tree-walking interpreter for the eight-instruction tape language.
from .interpreter import run_program, run_file, Interpreter
from .parser import Parser, parse_program
from .runtime import Runtime
from .errors import BfError

__all__ = [
    'run_program',
    'run_file',
    'parse_program',
    'Parser',
    'Interpreter',
    'Runtime',
    'BfError',
]
