"""
Path parser for decodex path expressions, built from the parser combinators.

Supports:
- Simple keys: "data.patient.id"
- Array indices: "items[0]", "items[-1]"
- Wildcards: "items[*]"
- Leading brackets: "[0].name"
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Union

from ..errors import ParseError
from ..types import Err
from .core import Parser, sequence
from .primitives import chomp_if, chomp_while, chomped, end, integer, many, many1, token


class PathSegmentType(Enum):
    KEY = auto()
    INDEX = auto()
    WILDCARD = auto()


@dataclass(frozen=True)
class PathSegment:
    """Represents a single segment in a path."""

    type: PathSegmentType
    value: Union[str, int]

    @classmethod
    def key(cls, name: str) -> "PathSegment":
        return cls(PathSegmentType.KEY, name)

    @classmethod
    def index(cls, idx: int) -> "PathSegment":
        return cls(PathSegmentType.INDEX, idx)

    @classmethod
    def wildcard(cls) -> "PathSegment":
        return cls(PathSegmentType.WILDCARD, "*")


@dataclass(frozen=True)
class Path:
    """Represents a parsed path expression."""

    segments: tuple[PathSegment, ...]


def _is_key_start(ch: str) -> bool:
    return ch.isascii() and (ch.isalpha() or ch == "_")


def _is_key_char(ch: str) -> bool:
    return ch.isascii() and (ch.isalnum() or ch in "_-")


_key: Parser[PathSegment] = chomped(
    chomp_if(_is_key_start, "a key") >> chomp_while(_is_key_char)
).map(PathSegment.key)

_bracket: Parser[PathSegment] = (
    token("[")
    >> (
        token("*").map(lambda _: PathSegment.wildcard())
        | integer.map(PathSegment.index)
    )
    << token("]")
)

# key[0][*] or a bare run of brackets like [0][1]
_group: Parser[list[PathSegment]] = sequence(
    lambda key, brackets: [key, *brackets], _key, many(_bracket)
) | many1(_bracket)


def _flatten(first: list[PathSegment], rest: list[list[PathSegment]]) -> Path:
    segments = list(first)
    for group in rest:
        segments.extend(group)
    return Path(tuple(segments))


path_expression: Parser[Path] = (
    sequence(_flatten, _group, many(token(".") >> _group)) << end
)


def parse_path(path_str: str) -> Path:
    """
    Parse a path string into a Path object.

    Raises:
        ParseError: (a ValueError) with the line/column of the invalid syntax
    """
    result = path_expression.run(path_str)
    if isinstance(result, Err):
        raise ParseError(result.error)
    path, _ = result.value
    return path
