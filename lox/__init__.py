# Lox language package
# This package provides a scanner, parser and tree-walking interpreter for Lox.
from .errors import Diagnostics, LoxRuntimeError
from .interpreter import Interpreter, run_source
from .parser import parse, parse_program
from .scanner import scan

__all__ = [
    'Diagnostics',
    'LoxRuntimeError',
    'Interpreter',
    'run_source',
    'parse',
    'parse_program',
    'scan',
]
