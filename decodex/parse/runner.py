"""
Entry point for running parsers against host text.
"""

from __future__ import annotations

from typing import TypeVar

import structlog

from ..context import is_strict, should_log_failures
from ..errors import ParseError, ParseFailure
from ..types import Err, Ok
from .core import Parser

T = TypeVar("T")

logger = structlog.get_logger()


def run(parser: Parser[T], text: str) -> Ok[T] | Err[ParseFailure]:
    """
    Run `parser` from the start of `text`.

    Only the value is returned on success; use `<< end` to require that the
    whole input is consumed.

    Raises:
        ParseError: In strict mode, instead of returning Err
    """
    result = parser.run(text, 0)
    if isinstance(result, Ok):
        value, _ = result.value
        return Ok(value)

    failure = result.error
    if should_log_failures():
        logger.debug(
            "parse_failed",
            parser=parser.name,
            kind=failure.kind.value,
            offset=failure.offset,
            line=failure.line,
            column=failure.column,
            error=failure.message,
        )
    if is_strict():
        raise ParseError(failure)
    return Err(failure)
