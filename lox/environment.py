from typing import Any, Dict, Optional

from lox.errors import LoxRuntimeError
from lox.tokens import Token


class Environment:
    """Represents a scope mapping variable names to values.

    `enclosing` points at the surrounding scope and is only followed for
    lookup and assignment. The global scope has no enclosing environment.
    """
    def __init__(self, enclosing: Optional['Environment'] = None):
        self.enclosing = enclosing
        self.values: Dict[str, Any] = {}

    def __contains__(self, name: str) -> bool:
        if name in self.values:
            return True
        if self.enclosing is not None:
            return name in self.enclosing
        return False

    def define(self, name: str, value: Any) -> None:
        # Redefinition in the same scope is allowed and simply rebinds
        self.values[name] = value

    def get(self, name: Token) -> Any:
        if name.lexeme in self.values:
            return self.values[name.lexeme]
        if self.enclosing is not None:
            return self.enclosing.get(name)
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}' on line {name.line}.")

    def assign(self, name: Token, value: Any) -> None:
        if name.lexeme in self.values:
            self.values[name.lexeme] = value
            return
        if self.enclosing is not None:
            self.enclosing.assign(name, value)
            return
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}' on line {name.line}.")
