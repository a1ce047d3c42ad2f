"""
decodex.decode - combinators for decoding JSON-shaped values.

Usage:
    from decodex import decode

    point = decode.map_n(
        Point,
        decode.field("x", decode.number),
        decode.field("y", decode.number),
    )

    result = decode.decode_string(point, '{"x": 1, "y": 2.5}')
"""

from .checks import (
    Check,
    between,
    matches,
    max_length,
    min_length,
    one_of_values,
    predicate,
)
from .core import (
    Decoder,
    and_then,
    at,
    fail,
    field,
    index,
    lazy,
    map,
    map_n,
    object_of,
    one_of,
    refine,
    succeed,
)
from .primitives import (
    at_path,
    boolean,
    dict_of,
    integer,
    key_value_pairs,
    list_of,
    maybe,
    null,
    nullable,
    number,
    optional_field,
    string,
    value,
)
from .runner import decode_string, decode_value
from .schema import from_schema, model
from .tagged import enum_of, tagged

__all__ = [
    # Core
    "Decoder",
    "succeed",
    "fail",
    "field",
    "index",
    "at",
    "at_path",
    "map",
    "map_n",
    "object_of",
    "and_then",
    "one_of",
    "lazy",
    "refine",
    # Primitives
    "string",
    "integer",
    "number",
    "boolean",
    "null",
    "value",
    "nullable",
    "maybe",
    "optional_field",
    "list_of",
    "dict_of",
    "key_value_pairs",
    # Variants
    "enum_of",
    "tagged",
    # Checks
    "Check",
    "between",
    "min_length",
    "max_length",
    "one_of_values",
    "matches",
    "predicate",
    # Schema
    "model",
    "from_schema",
    # Entry points
    "decode_value",
    "decode_string",
]
