"""
Entry points for running decoders against host data.
"""

from __future__ import annotations

import json
from typing import Any, TypeVar

import structlog

from ..context import is_strict, should_log_failures
from ..errors import DecodeError, DecodeFailure, FailureKind
from ..types import Err, Ok
from .core import Decoder

T = TypeVar("T")

logger = structlog.get_logger()


def decode_value(decoder: Decoder[T], value: Any) -> Ok[T] | Err[DecodeFailure]:
    """
    Run `decoder` against an already-parsed JSON-shaped value.

    Returns:
        Ok(result) if decoding succeeds
        Err(DecodeFailure) if it fails

    Raises:
        DecodeError: In strict mode, instead of returning Err
    """
    return _finish(decoder, decoder.run(value))


def decode_string(decoder: Decoder[T], text: str | bytes) -> Ok[T] | Err[DecodeFailure]:
    """
    Parse JSON text and run `decoder` against the result.

    Malformed JSON fails with TYPE_MISMATCH at the root path, with the JSON
    error position in the message. Bytes that are not valid text and numbers
    too long to convert fail the same way.
    """
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as e:
        failure = DecodeFailure(
            FailureKind.TYPE_MISMATCH,
            f"Invalid JSON at line {e.lineno} column {e.colno}: {e.msg}",
        )
        return _finish(decoder, Err(failure))
    except ValueError as e:
        # UnicodeDecodeError, or int() past the digit limit
        failure = DecodeFailure(FailureKind.TYPE_MISMATCH, f"Invalid JSON: {e}")
        return _finish(decoder, Err(failure))
    return _finish(decoder, decoder.run(parsed))


def _finish(
    decoder: Decoder[T], result: Ok[T] | Err[DecodeFailure]
) -> Ok[T] | Err[DecodeFailure]:
    if isinstance(result, Ok):
        return result

    failure = result.error
    if should_log_failures():
        logger.debug(
            "decode_failed",
            decoder=decoder.name,
            kind=failure.kind.value,
            path=list(failure.path),
            error=failure.message,
        )
    if is_strict():
        raise DecodeError(failure)
    return result
