"""
Built-in checks for `refine`.

Each factory returns a Check: a predicate carrying the message used when the
decoded value is rejected.

Usage:
    decode.integer.refine(between(0, 150))
    decode.string.refine(one_of_values({"active", "inactive"}))
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from ..types import Predicate


@dataclass(frozen=True, slots=True)
class Check:
    """
    A predicate plus the failure message used by `refine`.

    With `reject_on_type_error`, a TypeError from the predicate (comparing
    "a" with 0, taking len() of an int) counts as a rejection. The built-in
    factories set it; checks from `predicate()` let the error propagate, as
    plain predicates passed to `refine` do.
    """

    fn: Predicate
    message: str
    reject_on_type_error: bool = False

    def __call__(self, value: Any) -> bool:
        if not self.reject_on_type_error:
            return bool(self.fn(value))
        try:
            return bool(self.fn(value))
        except TypeError:
            return False

    def __and__(self, other: Check) -> Check:
        """Both checks must pass."""
        return Check(
            fn=lambda x: self(x) and other(x),
            message=f"{self.message} and {other.message}",
        )


def _builtin(fn: Predicate, message: str) -> Check:
    return Check(fn, message, reject_on_type_error=True)


def between(lower: Any, upper: Any, inclusive: bool = True) -> Check:
    """Validate value is between bounds."""
    if inclusive:
        return _builtin(
            lambda x: lower <= x <= upper,
            f"Must be between {lower} and {upper}",
        )
    return _builtin(
        lambda x: lower < x < upper,
        f"Must be between {lower} and {upper} (exclusive)",
    )


def min_length(n: int) -> Check:
    """Validate minimum length."""
    return _builtin(lambda x: len(x) >= n, f"Length must be >= {n}")


def max_length(n: int) -> Check:
    """Validate maximum length."""
    return _builtin(lambda x: len(x) <= n, f"Length must be <= {n}")


def one_of_values(values: set | frozenset | list | tuple) -> Check:
    """
    Validate value is in a set of allowed values.

    Usage:
        one_of_values({"active", "inactive", "pending"})
    """
    container = frozenset(values)
    shown = ", ".join(sorted(repr(v) for v in container))
    return _builtin(lambda x: x in container, f"Must be one of: {shown}")


def matches(pattern: str) -> Check:
    r"""
    Validate string matches regex pattern.

    Usage:
        matches(r"^[a-z]+$")
        matches(r"\d{3}-\d{4}")
    """
    compiled = re.compile(pattern)
    return _builtin(
        lambda x: isinstance(x, str) and compiled.match(x) is not None,
        f"Must match pattern: {pattern}",
    )


def predicate(fn: Predicate, message: str) -> Check:
    """
    Create a check from an arbitrary predicate function.

    Errors raised by `fn` propagate.

    Usage:
        predicate(lambda x: x > 0, "Must be positive")
    """
    return Check(fn, message)
