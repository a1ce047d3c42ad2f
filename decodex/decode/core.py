"""
Core decoder type and combinators.

A Decoder wraps a pure function from a JSON-shaped value to
Ok(result) | Err(DecodeFailure). Combinators build new decoders from existing
ones; nothing is mutated and no decoder holds state between runs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, TypeVar

from ..errors import DecodeFailure, FailureKind
from ..types import Err, Ok, Predicate

T = TypeVar("T")
U = TypeVar("U")

DecodeResult = Ok[T] | Err[DecodeFailure]
RunFn = Callable[[Any], DecodeResult]


@dataclass(frozen=True, slots=True)
class Decoder(Generic[T]):
    """
    Immutable decoder node.

    The fundamental building block. Wraps a run function and supports
    method-style composition:

        decode.string.map(str.upper)
        decode.field("kind", decode.string).and_then(pick_variant)
        decode.integer | decode.null(0)
    """

    fn: RunFn
    name: str = "decoder"

    def run(self, value: Any) -> DecodeResult:
        """Decode a JSON-shaped value."""
        return self.fn(value)

    def __call__(self, value: Any) -> DecodeResult:
        return self.fn(value)

    def map(self, f: Callable[[T], U]) -> Decoder[U]:
        return map(f, self)

    def and_then(self, f: Callable[[T], Decoder[U]]) -> Decoder[U]:
        return and_then(f, self)

    def refine(self, check: Predicate, message: str | None = None) -> Decoder[T]:
        return refine(self, check, message)

    def __or__(self, other: Decoder[U]) -> Decoder[T | U]:
        """Try this decoder, then `other`: `a | b` is `one_of([a, b])`."""
        if not isinstance(other, Decoder):
            return NotImplemented
        return one_of([self, other])

    def __repr__(self) -> str:
        return f"Decoder({self.name})"


def succeed(value: T) -> Decoder[T]:
    """Ignore the input and always produce `value`."""
    return Decoder(lambda _: Ok(value), name=f"succeed({value!r})")


def fail(message: str) -> Decoder[Any]:
    """Ignore the input and always fail with `message` at the current path."""
    failure = DecodeFailure(FailureKind.INVALID_VALUE, message)
    return Decoder(lambda _: Err(failure), name=f"fail({message!r})")


def type_mismatch(expected: str, value: Any) -> Err[DecodeFailure]:
    """Build the standard failure for a value of the wrong JSON type."""
    return Err(
        DecodeFailure(
            FailureKind.TYPE_MISMATCH,
            f"Expected {expected}, got {describe_value(value)}",
        )
    )


def describe_value(value: Any) -> str:
    """Short JSON-flavoured description of a value, for failure messages."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return f"a bool ({str(value).lower()})"
    if isinstance(value, (int, float)):
        return f"a number ({value!r})"
    if isinstance(value, str):
        return f"a string ({repr(value)[:50]})"
    if isinstance(value, list):
        return f"an array of length {len(value)}"
    if isinstance(value, dict):
        return "an object"
    return type(value).__name__


def field(name: str, decoder: Decoder[T]) -> Decoder[T]:
    """
    Decode the value stored under `name` in an object.

    Fails with MISSING_FIELD when the key is absent, and with TYPE_MISMATCH
    when the input is not an object. Failures of `decoder` are located under
    `name`.
    """

    def run(value: Any) -> DecodeResult:
        if not isinstance(value, dict):
            return type_mismatch(f"an object with a field named '{name}'", value)
        if name not in value:
            return Err(
                DecodeFailure(
                    FailureKind.MISSING_FIELD, f"missing field: {name}", (name,)
                )
            )
        result = decoder.run(value[name])
        if isinstance(result, Err):
            return Err(result.error.prefixed(name))
        return result

    return Decoder(run, name=f"field({name!r}, {decoder.name})")


def index(i: int, decoder: Decoder[T]) -> Decoder[T]:
    """Decode the element at position `i` of an array (negative i allowed)."""

    def run(value: Any) -> DecodeResult:
        if not isinstance(value, list):
            return type_mismatch(f"an array with an element at [{i}]", value)
        actual = i if i >= 0 else len(value) + i
        if not 0 <= actual < len(value):
            return Err(
                DecodeFailure(
                    FailureKind.MISSING_FIELD,
                    f"missing index: {i} (array has {len(value)} elements)",
                    (i,),
                )
            )
        result = decoder.run(value[actual])
        if isinstance(result, Err):
            return Err(result.error.prefixed(i))
        return result

    return Decoder(run, name=f"index({i}, {decoder.name})")


def at(path: Iterable[str | int], decoder: Decoder[T]) -> Decoder[T]:
    """
    Nested `field` / `index` access.

        at(["data", "items", 0], decoder)
        == field("data", field("items", index(0, decoder)))
    """
    result = decoder
    for segment in reversed(list(path)):
        if isinstance(segment, int):
            result = index(segment, result)
        else:
            result = field(segment, result)
    return result


def map(f: Callable[..., U], decoder: Decoder[Any]) -> Decoder[U]:
    """Transform a successful value with `f`. Failures pass through unchanged."""

    def run(value: Any) -> DecodeResult:
        result = decoder.run(value)
        if isinstance(result, Err):
            return result
        return Ok(f(result.value))

    return Decoder(run, name=f"map({_fn_name(f)}, {decoder.name})")


def map_n(f: Callable[..., U], *decoders: Decoder[Any]) -> Decoder[U]:
    """
    Run every decoder against the same input and combine the results with `f`.

    Decoders run left to right; the first failure is returned as-is and the
    remaining decoders are not run. `f` is only called when all succeed, so
    no partially built value ever escapes.

    Usage:
        map_n(Point, field("x", number), field("y", number))
    """
    if not decoders:
        raise ValueError("map_n() requires at least one decoder")

    def run(value: Any) -> DecodeResult:
        values = []
        for decoder in decoders:
            result = decoder.run(value)
            if isinstance(result, Err):
                return result
            values.append(result.value)
        return Ok(f(*values))

    names = ", ".join(d.name for d in decoders)
    return Decoder(run, name=f"map_n({_fn_name(f)}, {names})")


def object_of(**decoders: Decoder[Any]) -> Decoder[dict[str, Any]]:
    """
    Decode several fields of the same object into a dict.

    Usage:
        object_of(username=field("username", string), token=field("token", string))
    """
    keys = list(decoders)

    def combine(*values: Any) -> dict[str, Any]:
        return dict(zip(keys, values))

    return map_n(combine, *decoders.values())


def and_then(f: Callable[[T], Decoder[U]], decoder: Decoder[T]) -> Decoder[U]:
    """
    Run `decoder`, then pick the next decoder from its value.

    The chosen decoder runs against the same input. On failure `f` is not
    called. This is the only combinator that inspects an intermediate value,
    which is what value-dependent decoding (tagged variants) needs.
    """

    def run(value: Any) -> DecodeResult:
        result = decoder.run(value)
        if isinstance(result, Err):
            return result
        return f(result.value).run(value)

    return Decoder(run, name=f"and_then({_fn_name(f)}, {decoder.name})")


def one_of(decoders: Iterable[Decoder[Any]]) -> Decoder[Any]:
    """
    Try each decoder in order and return the first success.

    If every decoder fails, the failure is AGGREGATE and keeps each child
    failure in `causes`.
    """
    options = tuple(decoders)
    if not options:
        raise ValueError("one_of() requires at least one decoder")

    def run(value: Any) -> DecodeResult:
        failures = []
        for decoder in options:
            result = decoder.run(value)
            if isinstance(result, Ok):
                return result
            failures.append(result.error)
        messages = "; ".join(f.describe() for f in failures)
        return Err(
            DecodeFailure(
                FailureKind.AGGREGATE,
                f"All {len(failures)} alternatives failed: {messages}",
                (),
                tuple(failures),
            )
        )

    names = " | ".join(d.name for d in options)
    return Decoder(run, name=f"one_of({names})")


def lazy(thunk: Callable[[], Decoder[T]]) -> Decoder[T]:
    """Defer building a decoder until it runs, for recursive structures."""

    def run(value: Any) -> DecodeResult:
        return thunk().run(value)

    return Decoder(run, name="lazy")


def refine(
    decoder: Decoder[T], check: Predicate, message: str | None = None
) -> Decoder[T]:
    """
    Keep a successful value only if `check(value)` is truthy.

    A rejected value fails with INVALID_VALUE. Checks built with the factories
    in `decodex.decode.checks` carry their own message.
    """
    text = message or getattr(check, "message", None)

    def run(value: Any) -> DecodeResult:
        result = decoder.run(value)
        if isinstance(result, Err):
            return result
        if check(result.value):
            return result
        msg = text or f"Rejected value: {repr(result.value)[:50]}"
        return Err(DecodeFailure(FailureKind.INVALID_VALUE, msg))

    return Decoder(run, name=f"refine({decoder.name})")


def _fn_name(f: Callable[..., Any]) -> str:
    return getattr(f, "__name__", repr(f))
