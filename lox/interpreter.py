"""Tree-walking interpreter for the Lox language.

The interpreter executes the statement list produced by the parser against a
chain of environments. The active environment is passed explicitly down
`execute` and `evaluate`; a block runs with a fresh child environment and
the caller's environment is simply used again once the block returns or
fails, so block scopes end with the block.

A runtime error aborts the rest of the current `interpret` call. Effects
that already happened (printed output, bindings) are kept.
"""

from __future__ import annotations

import sys
from dataclasses import fields, is_dataclass
from typing import Any, List, Optional, TextIO

from .ast import (
    Expr, Stmt, Assign, Binary, Grouping, Literal, Logical, Unary, Variable,
    Block, Expression, If, Print, Var, While,
)
from .environment import Environment
from .errors import Diagnostics, LoxRuntimeError
from .parser import parse_program
from .tokens import Token, TokenType
from .types import divide, is_equal, is_number, is_truthy, stringify, type_name


class Interpreter:
    """Core interpreter that executes a Lox AST."""
    def __init__(self, diagnostics: Optional[Diagnostics] = None, out: Optional[TextIO] = None,
                 debug_level: int = 0, debug_file: str = 'debug.txt'):
        self.globals = Environment()
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.out = out
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 else None

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg)

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    @property
    def had_runtime_error(self) -> bool:
        return self.diagnostics.had_runtime_error

    # Public API
    def interpret(self, statements: List[Stmt], diagnostics: Optional[Diagnostics] = None) -> None:
        """Execute `statements` in the global environment.

        Globals persist between calls, which is what the REPL relies on. When
        `diagnostics` is given it replaces the interpreter's collector, so
        the runtime error flag reflects this call only.
        """
        if diagnostics is not None:
            self.diagnostics = diagnostics
        self.debug(f"interpret {len(statements)} statement(s)")
        current: Optional[Stmt] = None
        try:
            for current in statements:
                self.execute(current, self.globals)
        except LoxRuntimeError as error:
            self.debug(f"runtime error at line {error.token.line}: {error.message}")
            self.diagnostics.runtime_error(error)
        except RecursionError:
            # nesting deeper than the Python stack allows; reported against
            # the top-level statement that was running
            error = LoxRuntimeError(first_token(current), 'Too much nesting.')
            self.debug(f"runtime error at line {error.token.line}: {error.message}")
            self.diagnostics.runtime_error(error)

    def execute_block(self, statements: List[Stmt], env: Environment) -> None:
        for stmt in statements:
            self.execute(stmt, env)

    def execute(self, node: Stmt, env: Environment) -> None:
        if isinstance(node, Expression):
            self.evaluate(node.expression, env)
            return
        if isinstance(node, Print):
            value = self.evaluate(node.expression, env)
            out = self.out if self.out is not None else sys.stdout
            print(stringify(value), file=out)
            return
        if isinstance(node, Var):
            value = None
            if node.initializer is not None:
                value = self.evaluate(node.initializer, env)
            env.define(node.name.lexeme, value)
            if self.debug_level >= 2:
                self.debug(f"define {node.name.lexeme}: {type_name(value)} = {stringify(value)}")
            return
        if isinstance(node, Block):
            if self.debug_level >= 3:
                self.debug(f"enter block ({len(node.statements)} statement(s))")
            self.execute_block(node.statements, Environment(env))
            if self.debug_level >= 3:
                self.debug("exit block")
            return
        if isinstance(node, If):
            cond = self.evaluate(node.condition, env)
            truthy = is_truthy(cond)
            if self.debug_level >= 3:
                self.debug(f"if condition {stringify(cond)} -> {truthy}")
            if truthy:
                self.execute(node.then_branch, env)
            elif node.else_branch is not None:
                self.execute(node.else_branch, env)
            return
        if isinstance(node, While):
            while True:
                cond = self.evaluate(node.condition, env)
                if self.debug_level >= 3:
                    self.debug(f"while condition {stringify(cond)}")
                if not is_truthy(cond):
                    break
                self.execute(node.body, env)
            return
        raise NotImplementedError(f"execute: unexpected node type {type(node).__name__}")

    def evaluate(self, node: Expr, env: Environment) -> Any:
        if isinstance(node, Literal):
            return node.value
        if isinstance(node, Grouping):
            return self.evaluate(node.expression, env)
        if isinstance(node, Variable):
            return env.get(node.name)
        if isinstance(node, Assign):
            value = self.evaluate(node.value, env)
            env.assign(node.name, value)
            if self.debug_level >= 2:
                self.debug(f"assign {node.name.lexeme} = {stringify(value)}")
            return value
        if isinstance(node, Logical):
            left = self.evaluate(node.left, env)
            if node.operator.type == TokenType.OR:
                if is_truthy(left):
                    result = left
                else:
                    result = self.evaluate(node.right, env)
            else:
                if not is_truthy(left):
                    result = left
                else:
                    result = self.evaluate(node.right, env)
            if self.debug_level >= 4:
                self.debug(f"{node.operator.lexeme} -> {stringify(result)}")
            return result
        if isinstance(node, Unary):
            right = self.evaluate(node.right, env)
            result = self.apply_unary_op(node.operator, right)
            if self.debug_level >= 4:
                self.debug(f"{node.operator.lexeme}{stringify(right)} -> {stringify(result)}")
            return result
        if isinstance(node, Binary):
            left = self.evaluate(node.left, env)
            right = self.evaluate(node.right, env)
            result = self.apply_binary_op(node.operator, left, right)
            if self.debug_level >= 4:
                self.debug(f"{stringify(left)} {node.operator.lexeme} {stringify(right)} -> {stringify(result)}")
            return result
        raise NotImplementedError(f"evaluate: unexpected node type {type(node).__name__}")

    def apply_unary_op(self, operator: Token, right: Any) -> Any:
        if operator.type == TokenType.BANG:
            return not is_truthy(right)
        if operator.type == TokenType.MINUS:
            check_number_operand(operator, right)
            return -right
        raise LoxRuntimeError(operator, f"Unknown unary operator '{operator.lexeme}'.")

    def apply_binary_op(self, operator: Token, a: Any, b: Any) -> Any:
        op = operator.type
        if op == TokenType.PLUS:
            if is_number(a) and is_number(b):
                return a + b
            if isinstance(a, str) and isinstance(b, str):
                return a + b
            raise LoxRuntimeError(operator, 'Operands must be two numbers or two strings.')
        if op == TokenType.EQUAL_EQUAL:
            return is_equal(a, b)
        if op == TokenType.BANG_EQUAL:
            return not is_equal(a, b)

        check_number_operands(operator, a, b)
        if op == TokenType.MINUS:
            return a - b
        if op == TokenType.STAR:
            return a * b
        if op == TokenType.SLASH:
            return divide(a, b)
        if op == TokenType.GREATER:
            return a > b
        if op == TokenType.GREATER_EQUAL:
            return a >= b
        if op == TokenType.LESS:
            return a < b
        if op == TokenType.LESS_EQUAL:
            return a <= b
        raise LoxRuntimeError(operator, f"Unknown binary operator '{operator.lexeme}'.")


def check_number_operand(operator: Token, operand: Any) -> None:
    if not is_number(operand):
        raise LoxRuntimeError(operator, 'Operand must be a number.')


def check_number_operands(operator: Token, a: Any, b: Any) -> None:
    if not (is_number(a) and is_number(b)):
        raise LoxRuntimeError(operator, 'Operands must be numbers.')


def first_token(node: Optional[Stmt]) -> Token:
    """Return a token of `node` to report an error against.

    The tree is walked with an explicit stack, since it may be too deep to
    recurse into. A node holding no token at all is reported on line 1.
    """
    pending: List[Any] = [node]
    while pending:
        item = pending.pop()
        if isinstance(item, Token):
            return item
        if isinstance(item, (list, tuple)):
            pending.extend(reversed(item))
        elif is_dataclass(item):
            pending.extend(getattr(item, f.name) for f in reversed(fields(item)))
    return Token(TokenType.EOF, '', None, 1)


def run_source(source: str, interpreter: Optional[Interpreter] = None,
               diagnostics: Optional[Diagnostics] = None) -> Diagnostics:
    """Scan, parse and run Lox source, returning the diagnostics collector.

    Nothing is executed when scanning or parsing reported an error.
    """
    if diagnostics is None:
        diagnostics = Diagnostics()
    if interpreter is None:
        interpreter = Interpreter(diagnostics)
    statements = parse_program(source, diagnostics)
    if diagnostics.had_error:
        return diagnostics
    interpreter.interpret(statements, diagnostics)
    return diagnostics
