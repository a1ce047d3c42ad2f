"""
Decoders for closed sets of variants (enums and tagged unions).

Both decode a discriminant first and then dispatch with `and_then`. The
dispatch table of `tagged` is checked against the enum when the decoder is
built, so adding an enum member without a matching decoder fails at import
time instead of on the first unlucky payload.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal, Mapping, TypeVar

from ..errors import DecodeFailure, FailureKind
from ..types import Err, Ok
from .core import Decoder, and_then, succeed
from .primitives import string

E = TypeVar("E", bound=Enum)
T = TypeVar("T")


def _invalid(message: str) -> Decoder[Any]:
    failure = DecodeFailure(FailureKind.INVALID_VALUE, message)
    return Decoder(lambda _: Err(failure), name="invalid")


def enum_of(
    enum_cls: type[E],
    by: Literal["value", "name"] = "value",
    case_sensitive: bool = True,
) -> Decoder[E]:
    """
    Decode a string into a member of `enum_cls`.

    Args:
        enum_cls: The enum to decode into
        by: Match the string against member values or member names
        case_sensitive: If False, compare case-insensitively

    Unknown strings fail with INVALID_VALUE naming the offending string.

    Usage:
        class Cardinal(Enum):
            NORTH = "north"
            WEST = "west"

        enum_of(Cardinal).run("west")   # Ok(Cardinal.WEST)
    """
    if by not in ("value", "name"):
        raise ValueError(f"by must be 'value' or 'name', got {by!r}")

    def key_of(member: Enum) -> str:
        key = member.value if by == "value" else member.name
        if not isinstance(key, str):
            raise TypeError(
                f"{enum_cls.__name__}.{member.name} has a non-string {by}; "
                "enum_of() decodes strings"
            )
        return key if case_sensitive else key.casefold()

    table = {key_of(member): member for member in enum_cls}
    allowed = ", ".join(repr(k) for k in table)

    def pick(raw: str) -> Decoder[E]:
        member = table.get(raw if case_sensitive else raw.casefold())
        if member is None:
            return _invalid(
                f"Unknown {enum_cls.__name__} {raw!r}; expected one of: {allowed}"
            )
        return succeed(member)

    decoder = and_then(pick, string)
    return Decoder(decoder.fn, name=f"enum_of({enum_cls.__name__})")


def tagged(
    enum_cls: type[E],
    discriminant: Decoder[E],
    variants: Mapping[E, Decoder[Any]],
) -> Decoder[Any]:
    """
    Decode a tagged union: read the discriminant, then run its variant decoder.

    Args:
        enum_cls: The closed set of tags
        discriminant: Decoder producing a member of `enum_cls`
            (typically `field("type", enum_of(Tag))`)
        variants: One decoder per member of `enum_cls`, run against the
            same input as the discriminant

    Raises:
        TypeError: If `variants` misses a member or has extra keys

    Usage:
        shape = tagged(
            ShapeKind,
            field("kind", enum_of(ShapeKind)),
            {
                ShapeKind.CIRCLE: map(Circle, field("radius", number)),
                ShapeKind.SQUARE: map(Square, field("side", number)),
            },
        )
    """
    members = set(enum_cls)
    keys = set(variants)
    missing = members - keys
    extra = keys - members
    if missing or extra:
        problems = []
        if missing:
            problems.append(
                "missing " + ", ".join(sorted(m.name for m in missing))
            )
        if extra:
            problems.append("unexpected " + ", ".join(sorted(map(repr, extra))))
        raise TypeError(
            f"tagged({enum_cls.__name__}) is not exhaustive: {'; '.join(problems)}"
        )

    table = dict(variants)

    def run(value: Any) -> Ok[Any] | Err[DecodeFailure]:
        tag = discriminant.run(value)
        if isinstance(tag, Err):
            return tag
        member = tag.value
        if member not in table:
            return Err(
                DecodeFailure(
                    FailureKind.INVALID_VALUE,
                    f"Discriminant produced {member!r}, not a {enum_cls.__name__}",
                )
            )
        return table[member].run(value)

    return Decoder(run, name=f"tagged({enum_cls.__name__})")
