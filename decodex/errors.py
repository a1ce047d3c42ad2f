"""
Failure values for both engines, and the exceptions used in strict mode.

Failures are plain data. The engines return them wrapped in `Err`; only the
entry points (`decode_value`, `decode_string`, `run`) turn them into
exceptions, and only when strict mode is enabled.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum

from .types import Path, Segment


class FailureKind(Enum):
    """Why a decoder or parser failed."""

    MISSING_FIELD = "missing_field"
    TYPE_MISMATCH = "type_mismatch"
    INVALID_VALUE = "invalid_value"
    AGGREGATE = "aggregate"
    UNEXPECTED_TOKEN = "unexpected_token"
    UNEXPECTED_END = "unexpected_end"


def format_path(path: Path) -> str:
    """
    Render a decode path in JSONPath-like notation.

    Examples:
        ()                    -> "$"
        ("user", "tags", 2)   -> "$.user.tags[2]"
    """
    parts = ["$"]
    for segment in path:
        if isinstance(segment, int):
            parts.append(f"[{segment}]")
        else:
            parts.append(f".{segment}")
    return "".join(parts)


@dataclass(frozen=True, slots=True)
class DecodeFailure:
    """
    A decoder failure: where it happened (path from the root) and why.

    `causes` is only populated for AGGREGATE failures produced by `one_of`.
    """

    kind: FailureKind
    message: str
    path: Path = ()
    causes: tuple[DecodeFailure, ...] = ()

    def prefixed(self, segment: Segment) -> DecodeFailure:
        """Return a copy located one level deeper, under `segment`."""
        return replace(
            self,
            path=(segment, *self.path),
            causes=tuple(c.prefixed(segment) for c in self.causes),
        )

    def describe(self) -> str:
        """Human-readable report including the full path."""
        head = f"{format_path(self.path)}: {self.message}"
        if not self.causes:
            return head
        lines = [head]
        for cause in self.causes:
            for line in cause.describe().splitlines():
                lines.append(f"  {line}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.describe()


@dataclass(frozen=True, slots=True)
class ParseFailure:
    """A parser failure located at `offset` (and its 1-based line/column)."""

    kind: FailureKind
    message: str
    offset: int
    line: int = 1
    column: int = 1
    expected: frozenset[str] = field(default_factory=frozenset)

    def describe(self) -> str:
        """Human-readable report including the line and column."""
        text = f"{self.line}:{self.column}: {self.message}"
        if self.expected:
            text += f" (expected one of: {', '.join(sorted(self.expected))})"
        return text

    def __str__(self) -> str:
        return self.describe()


def locate(source: str, offset: int) -> tuple[int, int]:
    """Convert an offset into a 1-based (line, column) pair."""
    line = source.count("\n", 0, offset) + 1
    last_newline = source.rfind("\n", 0, offset)
    return line, offset - last_newline


class DecodeError(ValueError):
    """Raised by decode entry points in strict mode."""

    def __init__(self, failure: DecodeFailure):
        super().__init__(failure.describe())
        self.failure = failure


class ParseError(ValueError):
    """Raised by `run` in strict mode."""

    def __init__(self, failure: ParseFailure):
        super().__init__(failure.describe())
        self.failure = failure
