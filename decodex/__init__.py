from . import decode, parse
from .context import decoding_context
from .errors import (
    DecodeError,
    DecodeFailure,
    FailureKind,
    ParseError,
    ParseFailure,
)
from .types import Err, Ok

__all__ = [
    "decode",
    "parse",
    "decoding_context",
    "Ok",
    "Err",
    "FailureKind",
    "DecodeFailure",
    "ParseFailure",
    "DecodeError",
    "ParseError",
]
