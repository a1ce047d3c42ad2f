"""
Context manager for decoding configuration (e.g., strict mode).
"""

from contextlib import contextmanager
from contextvars import ContextVar

# Context variables for entry point behaviour
_strict_mode: ContextVar[bool] = ContextVar("strict_mode", default=False)
_log_failures: ContextVar[bool] = ContextVar("log_failures", default=True)


def is_strict() -> bool:
    """Check if strict mode is currently enabled."""
    return _strict_mode.get()


def should_log_failures() -> bool:
    """Check if entry points should log the failures they return."""
    return _log_failures.get()


@contextmanager
def decoding_context(*, strict: bool = False, log_failures: bool = True):
    """
    Context manager for decoding configuration.

    Only the entry points (`decode_value`, `decode_string` and `parse.run`)
    read this configuration. Decoders and parsers themselves stay pure.

    Args:
        strict: If True, entry points raise DecodeError / ParseError instead
               of returning an Err.
        log_failures: If False, entry points do not log failures.

    Example:
        from decodex import decode, decoding_context

        user = decode.field("name", decode.string)

        # Normal: failures come back as Err values
        result = decode.decode_value(user, {})

        # Strict: raises DecodeError
        with decoding_context(strict=True):
            decode.decode_value(user, {})  # DecodeError!
    """
    strict_token = _strict_mode.set(strict)
    log_token = _log_failures.set(log_failures)
    try:
        yield
    finally:
        _log_failures.reset(log_token)
        _strict_mode.reset(strict_token)
