"""CLI entry point for the bftree interpreter.

Usage:
    python -m bftree [-v|-vv|-vvv] [--strict] <program_file>
    python -m bftree [-v...] [--strict] --emit-ast <program_file>
    python -m bftree [-v...] --ast <ast_json_file>

Options:
  -v            Increase trace verbosity (can be repeated)
  --debug-file  Where trace output goes (default: debug.txt)
  --strict      Report an unclosed '[' as a syntax error
  --emit-ast    Parse the given program file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file

The program reads standard input and writes standard output. Parse
errors are reported as `<file>: <error>` and run errors as
`error <error>`, both on standard error with exit status 1.
"""

import argparse
import json
import sys
from pathlib import Path
from .ast_json import ast_to_obj, ast_from_obj
from .errors import BfError
from .interpreter import Interpreter
from .parser import Parser


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog='bftree', description="bftree tape language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase trace verbosity (can be repeated)')
    parser.add_argument('--debug-file', default='debug.txt', help='file receiving trace output (default: debug.txt)')
    parser.add_argument('--strict', action='store_true', help="report an unclosed '[' as a syntax error")
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='PROGRAM_FILE', help='emit AST JSON for the given program file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='program file to execute')
    args = parser.parse_args(argv)

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        program = load_program(program_file, args.strict)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        try:
            text = json.dumps(ast_to_obj(program), indent=2)
        except RecursionError:
            print(f"{program_file}: loops nested too deeply for AST JSON", file=sys.stderr)
            sys.exit(1)
        with open(out_path, 'w', encoding='utf-8') as out:
            out.write(text)
        print(str(out_path))
        return

    # Execute from AST JSON
    if args.ast:
        ast_path = Path(args.ast)
        if not ast_path.exists():
            print(f"Error: file {ast_path} not found", file=sys.stderr)
            sys.exit(1)
        try:
            with open(ast_path, 'r', encoding='utf-8') as f:
                program = ast_from_obj(json.load(f))
        except OSError as e:
            print(f"{ast_path}: {e}", file=sys.stderr)
            sys.exit(1)
        except (KeyError, TypeError, ValueError, RecursionError) as e:
            print(f"{ast_path}: invalid AST: {e}", file=sys.stderr)
            sys.exit(1)
        execute(program, args)
        return

    # Default: execute source file
    if not args.program:
        parser.error('missing program file; or use --emit-ast/--ast')
    program = load_program(Path(args.program), args.strict)
    execute(program, args)


def load_program(program_file: Path, strict: bool):
    if not program_file.exists():
        print(f"Error: file {program_file} not found", file=sys.stderr)
        sys.exit(1)
    try:
        return Parser(strict=strict).parse_file(program_file)
    except (BfError, OSError) as e:
        print(f"{program_file}: {e}", file=sys.stderr)
        sys.exit(1)


def execute(program, args) -> None:
    interpreter = Interpreter(debug_level=args.v, debug_file=args.debug_file)
    try:
        interpreter.run(program)
    except BfError as e:
        print(f"error {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
