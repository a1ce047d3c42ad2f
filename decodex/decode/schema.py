"""
Schema operations for decodex decoders.

Provides model() for Pydantic interop and from_schema() for dict-like
schema definitions.
"""

from __future__ import annotations

from typing import Any, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..errors import DecodeFailure, FailureKind
from ..types import Err, Ok
from .core import Decoder, field, object_of
from .primitives import boolean, integer, list_of, null, number, string, value

_ModelT = TypeVar("_ModelT", bound=BaseModel)

_PRIMITIVES: dict[Any, Decoder[Any]] = {
    str: string,
    int: integer,
    float: number,
    bool: boolean,
    type(None): null(None),
    Any: value,
}

_MISSING_TYPES = {"missing", "missing_argument"}


def is_pydantic_model(model_class: Any) -> bool:
    """Check if a class is a Pydantic BaseModel."""
    try:
        return (
            isinstance(model_class, type)
            and issubclass(model_class, BaseModel)
            and hasattr(model_class, "model_fields")
        )
    except TypeError:
        return False


def model(model_class: Type[_ModelT]) -> Decoder[_ModelT]:
    """
    Decode by validating against a Pydantic model.

    Each Pydantic error becomes a DecodeFailure located at the error's `loc`.
    A single error is returned as-is; several are wrapped in an AGGREGATE.

    Usage:
        class User(BaseModel):
            name: str
            age: int

        decode.model(User).run({"name": "Alice", "age": 30})
    """
    if not is_pydantic_model(model_class):
        raise TypeError(f"model() expects a Pydantic model, got {model_class!r}")

    def run(v: Any) -> Ok[_ModelT] | Err[DecodeFailure]:
        try:
            return Ok(model_class.model_validate(v))
        except ValidationError as e:
            failures = tuple(_from_pydantic_error(err) for err in e.errors())

        if len(failures) == 1:
            return Err(failures[0])
        return Err(
            DecodeFailure(
                FailureKind.AGGREGATE,
                f"{len(failures)} validation errors for {model_class.__name__}",
                (),
                failures,
            )
        )

    return Decoder(run, name=f"model({model_class.__name__})")


def _from_pydantic_error(error: Any) -> DecodeFailure:
    """Convert one entry of ValidationError.errors() into a DecodeFailure."""
    loc = tuple(error.get("loc", ()))
    if error.get("type") in _MISSING_TYPES and loc:
        kind = FailureKind.MISSING_FIELD
        message = f"missing field: {loc[-1]}"
    elif str(error.get("type", "")).endswith("_type"):
        kind = FailureKind.TYPE_MISMATCH
        message = error["msg"]
    else:
        kind = FailureKind.INVALID_VALUE
        message = error["msg"]
    return DecodeFailure(kind, message, loc)


def from_schema(schema: Any) -> Decoder[Any]:
    """
    Build a decoder from a dict-like schema.

    Conversion rules:
        Decoder -> pass through
        str / int / float / bool / None / Any -> primitive decoder
        Pydantic model -> model(...)
        dict -> object of required fields, decoded recursively
        [item] -> list_of(item)

    Usage:
        user = from_schema({
            "name": str,
            "age": int,
            "tags": [str],
            "address": {"city": str},
        })
    """
    if isinstance(schema, Decoder):
        return schema

    if schema is None:
        return _PRIMITIVES[type(None)]

    if is_pydantic_model(schema):
        return model(schema)

    try:
        if schema in _PRIMITIVES:
            return _PRIMITIVES[schema]
    except TypeError:
        # Unhashable schemas (dicts, lists) fall through
        pass

    if isinstance(schema, dict):
        fields = {key: field(key, from_schema(sub)) for key, sub in schema.items()}
        return object_of(**fields)

    if isinstance(schema, list):
        if len(schema) != 1:
            raise ValueError("List schemas must hold exactly one item schema")
        return list_of(from_schema(schema[0]))

    raise TypeError(f"Cannot convert {schema!r} to decoder")
