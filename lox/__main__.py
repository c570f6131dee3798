"""CLI entry point for the Lox interpreter.

Usage:
    python -m lox [-v|-vv|-vvv|-vvvv] [script]
    python -m lox [-v...] --emit-ast <script>
    python -m lox [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --emit-ast    Parse the given .lox file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file

Without a script an interactive prompt is started. Each line is run on its
own, but variables defined on earlier lines stay visible, and a line holding
a single expression statement echoes its value.

Exit status is 65 when the source has lexical or parse errors, 70 when a
runtime error occurred, 66 when the input file is missing and 64 on usage
errors. Debug information is written to `debug.txt` in the current
directory when verbosity is greater than zero.
"""

import argparse
import builtins
import json
import sys
from pathlib import Path
from typing import List, Optional

from .ast import Expression, Print
from .ast_json import ast_to_obj, ast_from_obj
from .errors import Diagnostics
from .interpreter import Interpreter
from .parser import parse, parse_program
from .scanner import scan

EX_USAGE = 64
EX_DATAERR = 65
EX_NOINPUT = 66
EX_SOFTWARE = 70


def read_source(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(EX_NOINPUT)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def run_file(path: Path, interpreter: Interpreter) -> None:
    source = read_source(path)
    diagnostics = Diagnostics()
    tokens = scan(source, diagnostics)
    interpreter.debug(f"scanned {len(tokens)} token(s) from {path}")
    statements = parse(tokens, diagnostics)
    interpreter.debug(f"parsed {len(statements)} statement(s)")
    if diagnostics.had_error:
        sys.exit(EX_DATAERR)
    interpreter.interpret(statements, diagnostics)
    if diagnostics.had_runtime_error:
        sys.exit(EX_SOFTWARE)


def run_prompt(interpreter: Interpreter) -> None:
    while True:
        try:
            line = builtins.input('> ')
        except EOFError:
            print()
            return
        # fresh error flags for every line
        diagnostics = Diagnostics()
        statements = parse_program(line, diagnostics)
        if diagnostics.had_error:
            continue
        if len(statements) == 1 and isinstance(statements[0], Expression):
            statements = [Print(statements[0].expression)]
        interpreter.interpret(statements, diagnostics)


def emit_ast(path: Path) -> None:
    source = read_source(path)
    diagnostics = Diagnostics()
    statements = parse_program(source, diagnostics)
    if diagnostics.had_error:
        sys.exit(EX_DATAERR)
    obj = ast_to_obj(statements)
    out_path = path.with_name(path.name + '.ast.json')
    with open(out_path, 'w', encoding='utf-8') as out:
        json.dump(obj, out, ensure_ascii=False, indent=2)
    print(str(out_path))


def run_ast(path: Path, interpreter: Interpreter) -> None:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(EX_NOINPUT)
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    statements = ast_from_obj(data)
    diagnostics = Diagnostics()
    interpreter.interpret(statements, diagnostics)
    if diagnostics.had_runtime_error:
        sys.exit(EX_SOFTWARE)


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog='lox', description="Lox language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='LOX_FILE', help='emit AST JSON for the given .lox file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('script', nargs='?', help='Lox script to run; starts a prompt when omitted')
    args = parser.parse_args(argv)

    if (args.emit_ast or args.ast) and args.script:
        print("Usage: lox [-v] [script] | --emit-ast script | --ast file", file=sys.stderr)
        sys.exit(EX_USAGE)

    if args.emit_ast:
        emit_ast(Path(args.emit_ast))
        return

    interpreter = Interpreter(debug_level=args.v)
    try:
        if args.ast:
            run_ast(Path(args.ast), interpreter)
        elif args.script:
            run_file(Path(args.script), interpreter)
        else:
            run_prompt(interpreter)
    finally:
        interpreter.close()


if __name__ == '__main__':
    main()
