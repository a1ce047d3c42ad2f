"""
Core parser type and combinators.

A Parser wraps a pure function `(source, offset) -> Ok((value, new_offset))`
or `Err(ParseFailure)`. The source is never copied or mutated; the offset is
the only cursor. Since a failed parser hands back no offset at all, a failing
combinator never commits a partial advance: callers simply keep the offset
they started from.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, TypeVar

from ..errors import FailureKind, ParseFailure, locate
from ..types import Err, Ok

T = TypeVar("T")
U = TypeVar("U")

Step = tuple[Any, int]
ParseResult = Ok[Step] | Err[ParseFailure]
RunFn = Callable[[str, int], ParseResult]


@dataclass(frozen=True, slots=True)
class Parser(Generic[T]):
    """
    Immutable parser node.

    Supports method-style and operator composition:

        integer.map(abs)
        token("(") >> integer << token(")")     # keep the integer
        keyword("true") | keyword("false")      # alternatives
    """

    fn: RunFn
    name: str = "parser"

    def run(self, source: str, offset: int = 0) -> ParseResult:
        """Run at `offset`, returning Ok((value, new_offset)) or Err(failure)."""
        if not 0 <= offset <= len(source):
            raise ValueError(f"Offset {offset} outside of input (length {len(source)})")
        return self.fn(source, offset)

    def map(self, f: Callable[[T], U]) -> Parser[U]:
        return map(f, self)

    def and_then(self, f: Callable[[T], Parser[U]]) -> Parser[U]:
        return and_then(f, self)

    def __rshift__(self, other: Parser[U]) -> Parser[U]:
        """Run both, keep the right value."""
        if not isinstance(other, Parser):
            return NotImplemented
        return sequence(_keep_right, self, other)

    def __lshift__(self, other: Parser[Any]) -> Parser[T]:
        """Run both, keep the left value."""
        if not isinstance(other, Parser):
            return NotImplemented
        return sequence(_keep_left, self, other)

    def __or__(self, other: Parser[U]) -> Parser[T | U]:
        if not isinstance(other, Parser):
            return NotImplemented
        return one_of([self, other])

    def __repr__(self) -> str:
        return f"Parser({self.name})"


def failure(
    source: str,
    offset: int,
    message: str,
    expected: Iterable[str] = (),
    kind: FailureKind | None = None,
) -> Err[ParseFailure]:
    """
    Build a located failure.

    Without an explicit kind, a failure at the end of input is
    UNEXPECTED_END and anything else is UNEXPECTED_TOKEN.
    """
    if kind is None:
        kind = (
            FailureKind.UNEXPECTED_END
            if offset >= len(source)
            else FailureKind.UNEXPECTED_TOKEN
        )
    line, column = locate(source, offset)
    return Err(ParseFailure(kind, message, offset, line, column, frozenset(expected)))


def found(source: str, offset: int) -> str:
    """Describe what sits at `offset`, for failure messages."""
    if offset >= len(source):
        return "end of input"
    return repr(source[offset])


def succeed(value: T) -> Parser[T]:
    """Produce `value` without consuming anything."""
    return Parser(
        lambda source, offset: Ok((value, offset)), name=f"succeed({value!r})"
    )


def fail(message: str, kind: FailureKind = FailureKind.INVALID_VALUE) -> Parser[Any]:
    """Fail at the current offset with `message`."""

    def run(source: str, offset: int) -> ParseResult:
        return failure(source, offset, message, kind=kind)

    return Parser(run, name=f"fail({message!r})")


def map(f: Callable[..., U], parser: Parser[Any]) -> Parser[U]:
    """Transform a successful value with `f`; the offset is unchanged."""

    def run(source: str, offset: int) -> ParseResult:
        result = parser.fn(source, offset)
        if isinstance(result, Err):
            return result
        value, end = result.value
        return Ok((f(value), end))

    return Parser(run, name=f"map({_fn_name(f)}, {parser.name})")


def and_then(f: Callable[[T], Parser[U]], parser: Parser[T]) -> Parser[U]:
    """
    Run `parser`, then pick the next parser from its value.

    The chosen parser continues from where `parser` stopped. On failure `f`
    is not called.
    """

    def run(source: str, offset: int) -> ParseResult:
        result = parser.fn(source, offset)
        if isinstance(result, Err):
            return result
        value, end = result.value
        return f(value).fn(source, end)

    return Parser(run, name=f"and_then({_fn_name(f)}, {parser.name})")


def sequence(combine: Callable[..., U], *parsers: Parser[Any]) -> Parser[U]:
    """
    Run parsers one after another and merge their values with `combine`.

    Each parser starts where the previous one stopped. If any fails, the
    whole sequence fails with that parser's failure (located where it
    happened) and no partial advance is visible to the caller.

    Usage:
        point = sequence(
            lambda _, x, __, y, ___: (x, y),
            token("("), number, token(","), number, token(")"),
        )
    """
    if not parsers:
        raise ValueError("sequence() requires at least one parser")

    def run(source: str, offset: int) -> ParseResult:
        values = []
        cursor = offset
        for parser in parsers:
            result = parser.fn(source, cursor)
            if isinstance(result, Err):
                return result
            value, cursor = result.value
            values.append(value)
        return Ok((combine(*values), cursor))

    names = ", ".join(p.name for p in parsers)
    return Parser(run, name=f"sequence({names})")


def one_of(parsers: Iterable[Parser[Any]]) -> Parser[Any]:
    """
    Try each parser from the same offset and return the first success.

    If all fail, report the failure that got furthest into the input. When
    several alternatives fail at that same offset their expectations are
    merged into a single failure.
    """
    options = tuple(parsers)
    if not options:
        raise ValueError("one_of() requires at least one parser")

    def run(source: str, offset: int) -> ParseResult:
        failures: list[ParseFailure] = []
        for parser in options:
            result = parser.fn(source, offset)
            if isinstance(result, Ok):
                return result
            failures.append(result.error)

        furthest = max(f.offset for f in failures)
        at_furthest = [f for f in failures if f.offset == furthest]
        if len(at_furthest) == 1:
            return Err(at_furthest[0])

        expected = frozenset().union(*(f.expected for f in at_furthest))
        if expected:
            message = f"Unexpected {found(source, furthest)}"
        else:
            message = "; ".join(f.message for f in at_furthest)
        return failure(source, furthest, message, expected)

    names = " | ".join(p.name for p in options)
    return Parser(run, name=f"one_of({names})")


def lazy(thunk: Callable[[], Parser[T]]) -> Parser[T]:
    """Defer building a parser until it runs, for recursive grammars."""

    def run(source: str, offset: int) -> ParseResult:
        return thunk().fn(source, offset)

    return Parser(run, name="lazy")


def _fn_name(f: Callable[..., Any]) -> str:
    return getattr(f, "__name__", repr(f))


def _keep_left(left: Any, _right: Any) -> Any:
    return left


def _keep_right(_left: Any, right: Any) -> Any:
    return right
