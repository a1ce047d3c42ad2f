"""
Primitive text parsers and repetition combinators.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Literal, TypeVar

from ..errors import FailureKind, locate
from ..types import Err, Ok
from .core import Parser, ParseResult, and_then, failure, found, sequence, succeed

T = TypeVar("T")
E = TypeVar("E", bound=Enum)

CharPredicate = Callable[[str], bool]


def token(literal: str) -> Parser[str]:
    """Match `literal` exactly at the cursor; fail without advancing otherwise."""
    if not literal:
        raise ValueError("token() requires a non-empty literal")

    def run(source: str, offset: int) -> ParseResult:
        if source.startswith(literal, offset):
            return Ok((literal, offset + len(literal)))
        return failure(
            source,
            offset,
            f"Expected {literal!r}, found {found(source, offset)}",
            {repr(literal)},
        )

    return Parser(run, name=f"token({literal!r})")


def _is_identifier_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


def keyword(word: str) -> Parser[str]:
    """
    Like `token`, but the match must not run on into an identifier.

    `keyword("let")` matches "let x" but not "letter".
    """
    if not word:
        raise ValueError("keyword() requires a non-empty word")

    def run(source: str, offset: int) -> ParseResult:
        end = offset + len(word)
        if source.startswith(word, offset) and not (
            end < len(source) and _is_identifier_char(source[end])
        ):
            return Ok((word, end))
        return failure(
            source,
            offset,
            f"Expected keyword {word!r}, found {found(source, offset)}",
            {repr(word)},
        )

    return Parser(run, name=f"keyword({word!r})")


def chomp_while(predicate: CharPredicate) -> Parser[str]:
    """
    Consume every contiguous character satisfying `predicate`.

    Always succeeds, possibly consuming nothing. Produces the consumed span.
    """

    def run(source: str, offset: int) -> ParseResult:
        end = offset
        length = len(source)
        while end < length and predicate(source[end]):
            end += 1
        return Ok((source[offset:end], end))

    return Parser(run, name="chomp_while")


def chomp_if(
    predicate: CharPredicate, expecting: str = "a matching character"
) -> Parser[str]:
    """Consume exactly one character satisfying `predicate`."""

    def run(source: str, offset: int) -> ParseResult:
        if offset < len(source) and predicate(source[offset]):
            return Ok((source[offset], offset + 1))
        return failure(
            source,
            offset,
            f"Expected {expecting}, found {found(source, offset)}",
            {expecting},
        )

    return Parser(run, name="chomp_if")


def chomp_until(literal: str) -> Parser[str]:
    """
    Consume everything up to (not including) the next occurrence of `literal`.

    Fails with UNEXPECTED_END, located at the end of input, if `literal` never
    appears.
    """
    if not literal:
        raise ValueError("chomp_until() requires a non-empty literal")

    def run(source: str, offset: int) -> ParseResult:
        end = source.find(literal, offset)
        if end < 0:
            return failure(
                source,
                len(source),
                f"Expected {literal!r} before end of input",
                {repr(literal)},
                FailureKind.UNEXPECTED_END,
            )
        return Ok((source[offset:end], end))

    return Parser(run, name=f"chomp_until({literal!r})")


def chomped(parser: Parser[Any]) -> Parser[str]:
    """Run `parser` and produce the slice of source it consumed."""

    def run(source: str, offset: int) -> ParseResult:
        result = parser.fn(source, offset)
        if isinstance(result, Err):
            return result
        _, end = result.value
        return Ok((source[offset:end], end))

    return Parser(run, name=f"chomped({parser.name})")


def _spaces(source: str, offset: int) -> ParseResult:
    end = offset
    while end < len(source) and source[end].isspace():
        end += 1
    return Ok((None, end))


def _digits_end(source: str, start: int) -> int:
    end = start
    while end < len(source) and "0" <= source[end] <= "9":
        end += 1
    return end


def _sign_end(source: str, offset: int) -> int:
    if offset < len(source) and source[offset] in "+-":
        return offset + 1
    return offset


def _read_int(source: str, offset: int, end: int, expecting: str) -> ParseResult:
    try:
        return Ok((int(source[offset:end]), end))
    except ValueError:
        # int() refuses digit runs past sys.get_int_max_str_digits()
        return failure(
            source,
            offset,
            "Integer too large",
            {expecting},
            FailureKind.INVALID_VALUE,
        )


def _integer(source: str, offset: int) -> ParseResult:
    digits_start = _sign_end(source, offset)
    end = _digits_end(source, digits_start)
    if end == digits_start:
        return failure(
            source,
            digits_start,
            f"Expected an integer, found {found(source, digits_start)}",
            {"an integer"},
        )
    return _read_int(source, offset, end, "an integer")


def _number(source: str, offset: int) -> ParseResult:
    digits_start = _sign_end(source, offset)
    end = _digits_end(source, digits_start)
    if end == digits_start:
        return failure(
            source,
            digits_start,
            f"Expected a number, found {found(source, digits_start)}",
            {"a number"},
        )
    # A fraction needs at least one digit after the dot; "12." stops before it
    if end < len(source) and source[end] == ".":
        fraction_end = _digits_end(source, end + 1)
        if fraction_end > end + 1:
            return Ok((float(source[offset:fraction_end]), fraction_end))
    return _read_int(source, offset, end, "a number")


def _end(source: str, offset: int) -> ParseResult:
    if offset == len(source):
        return Ok((None, offset))
    return failure(
        source,
        offset,
        f"Expected end of input, found {found(source, offset)}",
        {"end of input"},
    )


spaces: Parser[None] = Parser(_spaces, name="spaces")
integer: Parser[int] = Parser(_integer, name="integer")
number: Parser[int | float] = Parser(_number, name="number")
end: Parser[None] = Parser(_end, name="end")
current_offset: Parser[int] = Parser(
    lambda source, offset: Ok((offset, offset)), name="current_offset"
)


def _position(source: str, offset: int) -> ParseResult:
    return Ok((locate(source, offset), offset))


current_position: Parser[tuple[int, int]] = Parser(_position, name="current_position")


def many(parser: Parser[T]) -> Parser[list[T]]:
    """
    Run `parser` zero or more times, collecting the values.

    Stops at the first failure, or as soon as `parser` succeeds without
    consuming input (which would otherwise repeat forever).
    """

    def run(source: str, offset: int) -> ParseResult:
        items = []
        cursor = offset
        while True:
            result = parser.fn(source, cursor)
            if isinstance(result, Err):
                break
            value, next_cursor = result.value
            if next_cursor == cursor:
                break
            items.append(value)
            cursor = next_cursor
        return Ok((items, cursor))

    return Parser(run, name=f"many({parser.name})")


def many1(parser: Parser[T]) -> Parser[list[T]]:
    """Like `many`, but the first run must succeed."""

    def run(source: str, offset: int) -> ParseResult:
        first = parser.fn(source, offset)
        if isinstance(first, Err):
            return first
        value, cursor = first.value
        rest = many(parser).fn(source, cursor)
        items, end_cursor = rest.value
        return Ok(([value, *items], end_cursor))

    return Parser(run, name=f"many1({parser.name})")


def sep_by(parser: Parser[T], separator: Parser[Any]) -> Parser[list[T]]:
    """
    Zero or more `parser` values separated by `separator`.

    A separator not followed by an item is left unconsumed.
    """
    tail = many(separator >> parser)

    def run(source: str, offset: int) -> ParseResult:
        first = parser.fn(source, offset)
        if isinstance(first, Err):
            return Ok(([], offset))
        value, cursor = first.value
        items, end_cursor = tail.fn(source, cursor).value
        return Ok(([value, *items], end_cursor))

    return Parser(run, name=f"sep_by({parser.name})")


def optional(parser: Parser[T], default: Any = None) -> Parser[Any]:
    """Run `parser`, or produce `default` without consuming anything."""

    def run(source: str, offset: int) -> ParseResult:
        result = parser.fn(source, offset)
        if isinstance(result, Err):
            return Ok((default, offset))
        return result

    return Parser(run, name=f"optional({parser.name})")


word: Parser[str] = chomped(chomp_while(_is_identifier_char))


def enum_of(
    enum_cls: type[E],
    by: Literal["value", "name"] = "value",
    case_sensitive: bool = True,
) -> Parser[E]:
    """
    Parse an identifier-like word into a member of `enum_cls`.

    Unknown words fail with INVALID_VALUE, located where the word starts and
    naming it.

    Usage:
        enum_of(Cardinal).run("west")   # Ok((Cardinal.WEST, 4))
    """

    def key_of(member: Enum) -> str:
        key = str(member.value if by == "value" else member.name)
        return key if case_sensitive else key.casefold()

    table = {key_of(member): member for member in enum_cls}
    allowed = ", ".join(repr(k) for k in table)

    def pick(located: tuple[int, str]) -> Parser[E]:
        start, raw = located
        member = table.get(raw if case_sensitive else raw.casefold())
        if member is not None:
            return succeed(member)

        def reject(source: str, _offset: int) -> ParseResult:
            if not raw:
                return failure(
                    source,
                    start,
                    f"Expected a {enum_cls.__name__}, found {found(source, start)}",
                    {f"a {enum_cls.__name__}"},
                )
            return failure(
                source,
                start,
                f"Unknown {enum_cls.__name__} {raw!r}; expected one of: {allowed}",
                kind=FailureKind.INVALID_VALUE,
            )

        return Parser(reject, name="reject")

    located_word = sequence(lambda start, raw: (start, raw), current_offset, word)
    parser = and_then(pick, located_word)
    return Parser(parser.fn, name=f"enum_of({enum_cls.__name__})")
