"""Error reporting for the Lox pipeline.

Every stage receives a `Diagnostics` collector. Lexical and parse errors are
recorded and reported without stopping the stage that found them; runtime
errors are raised as `LoxRuntimeError`, caught by the interpreter and handed
to the same collector. The driver inspects the flags to decide whether to
interpret and which exit status to use.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import List, Optional, TextIO

from .tokens import Token, TokenType


LEX = 'lex'
PARSE = 'parse'
RUNTIME = 'runtime'


class LoxRuntimeError(Exception):
    """Exception type used to abort execution on a Lox runtime error."""
    def __init__(self, token: Token, message: str):
        super().__init__(message)
        self.token = token
        self.message = message


@dataclass
class Diagnostic:
    line: int
    where: str
    message: str
    category: str

    def __str__(self) -> str:
        return f"[line {self.line}] Error{self.where}: {self.message}"


class Diagnostics:
    """Collects reported errors and tracks a flag per error category.

    Reports are written to `stream` (standard error by default) as they
    arrive and are also kept in `messages` so callers can inspect them. A
    fresh collector is all that is needed to reset the flags, which is what
    the REPL does for every line.
    """
    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream
        self.messages: List[Diagnostic] = []

    @property
    def had_error(self) -> bool:
        """True when a lexical or parse error was reported."""
        return any(d.category in (LEX, PARSE) for d in self.messages)

    @property
    def had_runtime_error(self) -> bool:
        return any(d.category == RUNTIME for d in self.messages)

    def count(self, category: str) -> int:
        return sum(1 for d in self.messages if d.category == category)

    def error(self, line: int, message: str) -> None:
        """Report a lexical error found by the scanner."""
        self.report(line, '', message, LEX)

    def token_error(self, token: Token, message: str) -> None:
        """Report a parse error located at `token`."""
        if token.type == TokenType.EOF:
            self.report(token.line, ' at end', message, PARSE)
        else:
            self.report(token.line, f" at '{token.lexeme}'", message, PARSE)

    def runtime_error(self, error: LoxRuntimeError) -> None:
        self.report(error.token.line, '', error.message, RUNTIME)

    def report(self, line: int, where: str, message: str, category: str) -> None:
        diagnostic = Diagnostic(line, where, message, category)
        self.messages.append(diagnostic)
        # Resolve the stream late so pytest's capsys sees the report
        stream = self.stream if self.stream is not None else sys.stderr
        print(str(diagnostic), file=stream)
