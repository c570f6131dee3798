"""Recursive-descent parser for the Lox language.

The parser turns the scanner's token list into a list of statements. Each
grammar rule is one method; binary operator tiers are loops that fold
operands to the left, which gives both precedence (a tier calls the next
tighter tier for its operands) and left associativity.

Errors are reported to the diagnostics collector where they are found. The
failing production then raises `ParseError`, which unwinds to the nearest
`parse_declaration` call. That call synchronizes on the next statement
boundary so that independent statements are still parsed and their own
errors collected. `ParseError` never escapes `Parser.parse`.

Nesting deep enough to exhaust the Python stack is reported as
"Too much nesting." against the top-level declaration it occurs in; that
declaration is dropped and parsing resumes at the next statement boundary.

Grammar:

    program     -> declaration* EOF
    declaration -> "var" IDENT ("=" expression)? ";" | statement
    statement   -> exprStmt | printStmt | ifStmt | whileStmt | forStmt | block
    block       -> "{" declaration* "}"
    ifStmt      -> "if" "(" expression ")" statement ("else" statement)?
    whileStmt   -> "while" "(" expression ")" statement
    forStmt     -> "for" "(" (varDecl | exprStmt | ";") expression? ";" expression? ")" statement
    expression  -> assignment
    assignment  -> IDENT "=" assignment | logic_or
    logic_or    -> logic_and ("or" logic_and)*
    logic_and   -> equality ("and" equality)*
    equality    -> comparison (("!=" | "==") comparison)*
    comparison  -> term ((">" | ">=" | "<" | "<=") term)*
    term        -> factor (("-" | "+") factor)*
    factor      -> unary (("/" | "*") unary)*
    unary       -> ("!" | "-") unary | primary
    primary     -> NUMBER | STRING | "true" | "false" | "nil" | IDENT | "(" expression ")"
"""

from __future__ import annotations

from typing import List, Optional

from .ast import (
    Expr, Stmt, Assign, Binary, Grouping, Literal, Logical, Unary, Variable,
    Block, Expression, If, Print, Var, While,
)
from .errors import Diagnostics
from .scanner import scan
from .tokens import Token, TokenType


# Tokens that can begin a statement; synchronization stops in front of them
STATEMENT_STARTS = {
    TokenType.CLASS,
    TokenType.FUN,
    TokenType.VAR,
    TokenType.FOR,
    TokenType.IF,
    TokenType.WHILE,
    TokenType.PRINT,
    TokenType.RETURN,
}


class ParseError(Exception):
    """Signal used to abandon the current declaration after a parse error."""
    pass


class Parser:
    def __init__(self, tokens: List[Token], diagnostics: Optional[Diagnostics] = None):
        self.tokens = tokens
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.pos = 0

    def parse(self) -> List[Stmt]:
        statements: List[Stmt] = []
        while not self.is_at_end():
            try:
                stmt = self.parse_declaration()
            except RecursionError:
                # handled here, where the stack is shallow again
                self.error(self.peek(), 'Too much nesting.')
                self.synchronize()
                continue
            if stmt is not None:
                statements.append(stmt)
        return statements

    # Statements

    def parse_declaration(self) -> Optional[Stmt]:
        try:
            if self.match(TokenType.VAR):
                return self.parse_var_decl()
            return self.parse_statement()
        except ParseError:
            self.synchronize()
            return None

    def parse_var_decl(self) -> Var:
        name = self.consume(TokenType.IDENTIFIER, 'Expect variable name.')
        initializer: Optional[Expr] = None
        if self.match(TokenType.EQUAL):
            initializer = self.parse_expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return Var(name, initializer)

    def parse_statement(self) -> Stmt:
        if self.match(TokenType.PRINT):
            return self.parse_print_stmt()
        if self.match(TokenType.IF):
            return self.parse_if_stmt()
        if self.match(TokenType.WHILE):
            return self.parse_while_stmt()
        if self.match(TokenType.FOR):
            return self.parse_for_stmt()
        if self.match(TokenType.LEFT_BRACE):
            return Block(self.parse_block())
        return self.parse_expr_stmt()

    def parse_print_stmt(self) -> Print:
        value = self.parse_expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after value.")
        return Print(value)

    def parse_expr_stmt(self) -> Expression:
        expr = self.parse_expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return Expression(expr)

    def parse_block(self) -> List[Stmt]:
        """Parse the declarations of a block whose '{' was already consumed."""
        statements: List[Stmt] = []
        while not self.check(TokenType.RIGHT_BRACE) and not self.is_at_end():
            stmt = self.parse_declaration()
            if stmt is not None:
                statements.append(stmt)
        self.consume(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    def parse_if_stmt(self) -> If:
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self.parse_expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after if condition.")
        then_branch = self.parse_statement()
        else_branch: Optional[Stmt] = None
        # a dangling else binds to the nearest if
        if self.match(TokenType.ELSE):
            else_branch = self.parse_statement()
        return If(condition, then_branch, else_branch)

    def parse_while_stmt(self) -> While:
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self.parse_expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after condition.")
        body = self.parse_statement()
        return While(condition, body)

    def parse_for_stmt(self) -> Stmt:
        """Parse a for loop and desugar it into a while loop.

        `for (init; cond; incr) body` becomes
        `{ init; while (cond) { body; incr; } }`. The outer block only exists
        when there is an initializer, the inner one only when there is an
        increment, and a missing condition is the literal `true`.
        """
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'for'.")

        initializer: Optional[Stmt]
        if self.match(TokenType.SEMICOLON):
            initializer = None
        elif self.match(TokenType.VAR):
            initializer = self.parse_var_decl()
        else:
            initializer = self.parse_expr_stmt()

        condition: Optional[Expr] = None
        if not self.check(TokenType.SEMICOLON):
            condition = self.parse_expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after loop condition.")

        increment: Optional[Expr] = None
        if not self.check(TokenType.RIGHT_PAREN):
            increment = self.parse_expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self.parse_statement()

        if increment is not None:
            body = Block([body, Expression(increment)])
        if condition is None:
            condition = Literal(True)
        body = While(condition, body)
        if initializer is not None:
            body = Block([initializer, body])
        return body

    # Expressions

    def parse_expression(self) -> Expr:
        return self.parse_assign()

    def parse_assign(self) -> Expr:
        expr = self.parse_logic_or()
        if self.match(TokenType.EQUAL):
            equals = self.previous()
            value = self.parse_assign()
            if isinstance(expr, Variable):
                return Assign(expr.name, value)
            # Reported but not raised: the parser is not confused, so there
            # is no need to synchronize
            self.error(equals, 'Invalid assignment target.')
        return expr

    def parse_logic_or(self) -> Expr:
        expr = self.parse_logic_and()
        while self.match(TokenType.OR):
            operator = self.previous()
            right = self.parse_logic_and()
            expr = Logical(expr, operator, right)
        return expr

    def parse_logic_and(self) -> Expr:
        expr = self.parse_equality()
        while self.match(TokenType.AND):
            operator = self.previous()
            right = self.parse_equality()
            expr = Logical(expr, operator, right)
        return expr

    def parse_equality(self) -> Expr:
        expr = self.parse_comparison()
        while self.match(TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL):
            operator = self.previous()
            right = self.parse_comparison()
            expr = Binary(expr, operator, right)
        return expr

    def parse_comparison(self) -> Expr:
        expr = self.parse_term()
        while self.match(TokenType.GREATER, TokenType.GREATER_EQUAL,
                         TokenType.LESS, TokenType.LESS_EQUAL):
            operator = self.previous()
            right = self.parse_term()
            expr = Binary(expr, operator, right)
        return expr

    def parse_term(self) -> Expr:
        expr = self.parse_factor()
        while self.match(TokenType.MINUS, TokenType.PLUS):
            operator = self.previous()
            right = self.parse_factor()
            expr = Binary(expr, operator, right)
        return expr

    def parse_factor(self) -> Expr:
        expr = self.parse_unary()
        while self.match(TokenType.SLASH, TokenType.STAR):
            operator = self.previous()
            right = self.parse_unary()
            expr = Binary(expr, operator, right)
        return expr

    def parse_unary(self) -> Expr:
        if self.match(TokenType.BANG, TokenType.MINUS):
            operator = self.previous()
            right = self.parse_unary()
            return Unary(operator, right)
        return self.parse_primary()

    def parse_primary(self) -> Expr:
        if self.match(TokenType.FALSE):
            return Literal(False)
        if self.match(TokenType.TRUE):
            return Literal(True)
        if self.match(TokenType.NIL):
            return Literal(None)
        if self.match(TokenType.NUMBER, TokenType.STRING):
            return Literal(self.previous().literal)
        if self.match(TokenType.IDENTIFIER):
            return Variable(self.previous())
        if self.match(TokenType.LEFT_PAREN):
            expr = self.parse_expression()
            self.consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expr)
        raise self.error(self.peek(), 'Expect expression.')

    # Token helpers

    def match(self, *types: TokenType) -> bool:
        for type in types:
            if self.check(type):
                self.advance()
                return True
        return False

    def check(self, type: TokenType) -> bool:
        if self.is_at_end():
            return False
        return self.peek().type == type

    def consume(self, type: TokenType, message: str) -> Token:
        if self.check(type):
            return self.advance()
        raise self.error(self.peek(), message)

    def advance(self) -> Token:
        if not self.is_at_end():
            self.pos += 1
        return self.previous()

    def is_at_end(self) -> bool:
        return self.peek().type == TokenType.EOF

    def peek(self) -> Token:
        return self.tokens[self.pos]

    def previous(self) -> Token:
        return self.tokens[self.pos - 1]

    def error(self, token: Token, message: str) -> ParseError:
        """Report a parse error and return the signal for the caller to raise."""
        self.diagnostics.token_error(token, message)
        return ParseError(message)

    def synchronize(self) -> None:
        """Discard tokens until the start of the next statement.

        The token the error was reported at is always skipped first, even
        when it could itself begin a statement.
        """
        self.advance()
        while not self.is_at_end():
            if self.previous().type == TokenType.SEMICOLON:
                return
            if self.peek().type in STATEMENT_STARTS:
                return
            self.advance()


def parse(tokens: List[Token], diagnostics: Optional[Diagnostics] = None) -> List[Stmt]:
    """Parse a token list into a list of statements."""
    return Parser(tokens, diagnostics).parse()


def parse_program(source: str, diagnostics: Optional[Diagnostics] = None) -> List[Stmt]:
    """Scan and parse Lox source code into a list of statements.

    Errors from both stages go to the same diagnostics collector; check its
    `had_error` flag before running the result.
    """
    if diagnostics is None:
        diagnostics = Diagnostics()
    return parse(scan(source, diagnostics), diagnostics)
