"""
Primitive and structural decoders for JSON-shaped values.
"""

from __future__ import annotations

import math
from typing import Any, TypeVar

from ..parse.path import PathSegmentType, parse_path
from ..types import Err, Ok
from .core import Decoder, DecodeResult, field, index, type_mismatch

T = TypeVar("T")


def _string(value: Any) -> DecodeResult:
    if isinstance(value, str):
        return Ok(value)
    return type_mismatch("a STRING", value)


def _integer(value: Any) -> DecodeResult:
    # bool is a subclass of int; JSON keeps them apart
    if isinstance(value, bool):
        return type_mismatch("an INT", value)
    if isinstance(value, int):
        return Ok(value)
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return Ok(int(value))
    return type_mismatch("an INT", value)


def _number(value: Any) -> DecodeResult:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return Ok(value)
    return type_mismatch("a NUMBER", value)


def _boolean(value: Any) -> DecodeResult:
    if isinstance(value, bool):
        return Ok(value)
    return type_mismatch("a BOOL", value)


string: Decoder[str] = Decoder(_string, name="string")
integer: Decoder[int] = Decoder(_integer, name="integer")
number: Decoder[int | float] = Decoder(_number, name="number")
boolean: Decoder[bool] = Decoder(_boolean, name="boolean")
value: Decoder[Any] = Decoder(Ok, name="value")


def null(default: T) -> Decoder[T]:
    """Succeed with `default` when the value is JSON null."""

    def run(v: Any) -> DecodeResult:
        if v is None:
            return Ok(default)
        return type_mismatch("null", v)

    return Decoder(run, name=f"null({default!r})")


def nullable(decoder: Decoder[T]) -> Decoder[T | None]:
    """Accept null as None, otherwise run `decoder`."""

    def run(v: Any) -> DecodeResult:
        if v is None:
            return Ok(None)
        return decoder.run(v)

    return Decoder(run, name=f"nullable({decoder.name})")


def maybe(decoder: Decoder[T]) -> Decoder[T | None]:
    """Turn any failure of `decoder` into a successful None."""

    def run(v: Any) -> DecodeResult:
        result = decoder.run(v)
        if isinstance(result, Err):
            return Ok(None)
        return result

    return Decoder(run, name=f"maybe({decoder.name})")


def optional_field(name: str, decoder: Decoder[T], default: Any = None) -> Decoder[Any]:
    """
    Like `field`, but a missing key (or a null value) yields `default`.

    A key that is present with a non-null value must still decode; its
    failures are not hidden.
    """

    def run(v: Any) -> DecodeResult:
        if not isinstance(v, dict):
            return type_mismatch(f"an object (optional field '{name}')", v)
        if v.get(name) is None:
            return Ok(default)
        result = decoder.run(v[name])
        if isinstance(result, Err):
            return Err(result.error.prefixed(name))
        return result

    return Decoder(run, name=f"optional_field({name!r}, {decoder.name})")


def list_of(decoder: Decoder[T]) -> Decoder[list[T]]:
    """Decode every element of an array; the first failure is located by index."""

    def run(v: Any) -> DecodeResult:
        if not isinstance(v, list):
            return type_mismatch("a LIST", v)
        items = []
        for i, item in enumerate(v):
            result = decoder.run(item)
            if isinstance(result, Err):
                return Err(result.error.prefixed(i))
            items.append(result.value)
        return Ok(items)

    return Decoder(run, name=f"list_of({decoder.name})")


def key_value_pairs(decoder: Decoder[T]) -> Decoder[list[tuple[str, T]]]:
    """Decode every value of an object, keeping (key, value) pairs in order."""

    def run(v: Any) -> DecodeResult:
        if not isinstance(v, dict):
            return type_mismatch("an OBJECT", v)
        pairs = []
        for key, item in v.items():
            result = decoder.run(item)
            if isinstance(result, Err):
                return Err(result.error.prefixed(key))
            pairs.append((key, result.value))
        return Ok(pairs)

    return Decoder(run, name=f"key_value_pairs({decoder.name})")


def dict_of(decoder: Decoder[T]) -> Decoder[dict[str, T]]:
    """Decode every value of an object into a dict with the same keys."""
    return key_value_pairs(decoder).map(dict)


def at_path(path: str, decoder: Decoder[T]) -> Decoder[Any]:
    """
    Decode the value found at a path expression.

    Supports:
    - Keys: "data.patient.id"
    - Array indices: "items[0]", "items[-1]"
    - Wildcards: "items[*].name" (decodes every element, giving a list)

    The path is parsed once, when the decoder is built; invalid syntax
    raises ValueError.
    """
    segments = parse_path(path).segments
    result: Decoder[Any] = decoder
    for segment in reversed(segments):
        if segment.type == PathSegmentType.KEY:
            result = field(segment.value, result)
        elif segment.type == PathSegmentType.INDEX:
            result = index(segment.value, result)
        else:
            result = list_of(result)
    return Decoder(result.fn, name=f"at_path({path!r}, {decoder.name})")
