"""
Type definitions shared by the decoder and parser engines.

Provides a minimal Result type (Ok/Err) and type aliases.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success result containing a value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Error result containing a failure value."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True


# Type aliases
Result = Union[Ok[T], Err[E]]
Json = Union[None, bool, int, float, str, list[Any], dict[str, Any]]
Segment = Union[str, int]
Path = tuple[Segment, ...]
Predicate = Callable[[Any], bool]
