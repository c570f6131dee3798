"""Runtime value helpers for Lox.

Lox values are plain Python objects: `float` for numbers, `str` for
strings, `bool` for booleans and `None` for nil. No value carries a tag of
its own, so this module provides the type tests and conversions the
interpreter's operators are defined in terms of.
"""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Any


def is_number(value: Any) -> bool:
    # bool is a subclass of int, never of float, so it is excluded here
    return isinstance(value, float)


def is_truthy(value: Any) -> bool:
    """Return the truth value of a Lox value.

    `nil` and `false` are falsy; every other value, including 0 and the
    empty string, is truthy.
    """
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(a: Any, b: Any) -> bool:
    """Compare two Lox values for equality.

    Values of different runtime types are never equal. Python would treat
    `True == 1.0` as true, which Lox must not.

    Numbers compare by value identity rather than IEEE comparison: NaN
    equals NaN, and 0 and -0 are different values.
    """
    if a is None:
        return b is None
    if type(a) is not type(b):
        return False
    if isinstance(a, float):
        if math.isnan(a) or math.isnan(b):
            return math.isnan(a) and math.isnan(b)
        return a == b and math.copysign(1.0, a) == math.copysign(1.0, b)
    return a == b


def divide(a: float, b: float) -> float:
    """Divide with IEEE-754 semantics instead of raising ZeroDivisionError."""
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def type_name(value: Any) -> str:
    """Return the Lox type name of a runtime value."""
    if value is None:
        return 'nil'
    if isinstance(value, bool):
        return 'boolean'
    if isinstance(value, float):
        return 'number'
    if isinstance(value, str):
        return 'string'
    return type(value).__name__


def stringify(value: Any) -> str:
    """Convert a Lox value to the text `print` writes."""
    if value is None:
        return 'nil'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        if math.isnan(value):
            return 'NaN'
        if math.isinf(value):
            return 'Infinity' if value > 0 else '-Infinity'
        # integral values print as whole numbers, never in exponent form
        if value.is_integer():
            if value == 0.0 and math.copysign(1.0, value) < 0:
                return '-0'
            return str(int(value))
        text = repr(value)
        if 'e' in text:
            text = format(Decimal(text), 'f')
        return text
    return str(value)
