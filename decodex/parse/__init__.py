"""
decodex.parse - combinators for parsing text.

Usage:
    from decodex import parse

    point = parse.sequence(
        lambda x, y: (x, y),
        parse.token("(") >> parse.spaces >> parse.number << parse.spaces,
        parse.token(",") >> parse.spaces >> parse.number << parse.token(")"),
    )

    parse.run(point, "(1, 2.5)")   # Ok((1, 2.5))
"""

from .core import Parser, and_then, fail, lazy, map, one_of, sequence, succeed
from .path import Path, PathSegment, PathSegmentType, parse_path
from .primitives import (
    chomp_if,
    chomp_until,
    chomp_while,
    chomped,
    current_offset,
    current_position,
    end,
    enum_of,
    integer,
    keyword,
    many,
    many1,
    number,
    optional,
    sep_by,
    spaces,
    token,
    word,
)
from .runner import run

__all__ = [
    # Core
    "Parser",
    "succeed",
    "fail",
    "map",
    "and_then",
    "sequence",
    "one_of",
    "lazy",
    # Primitives
    "token",
    "keyword",
    "chomp_while",
    "chomp_if",
    "chomp_until",
    "chomped",
    "spaces",
    "integer",
    "number",
    "word",
    "end",
    "current_offset",
    "current_position",
    "enum_of",
    # Repetition
    "many",
    "many1",
    "sep_by",
    "optional",
    # Paths
    "Path",
    "PathSegment",
    "PathSegmentType",
    "parse_path",
    # Entry point
    "run",
]
