"""
Shared helpers: logging setup, strict equality and callback binding.
"""

import inspect
import logging
import sys
from typing import Any, Callable, Optional, Tuple

from models import Settings

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(funcName)s:%(lineno)d] - %(message)s'


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """Setup structured logging for the library"""
    if level is None:
        level = Settings.from_env().log_level
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)]
    )
    logger = logging.getLogger('underscore')
    logger.setLevel(level)
    return logger


def _kind(value) -> type:
    kind = type(value)
    # int and float are one numeric kind; bool stays separate.
    return float if kind is int else kind


def strict_key(value) -> Tuple[type, Any]:
    """Hashable marker under which strictly equal values collide."""
    return (_kind(value), value)


def strict_equals(a: Any, b: Any) -> bool:
    """Equality without coercion: 1 equals 1.0, but True equals neither."""
    return a is b or (_kind(a) is _kind(b) and a == b)


def _positional_capacity(fn: Callable) -> Optional[Tuple[int, int]]:
    """(required, total) positional parameters of fn: None if unknown, total -1 for *args."""
    try:
        sig = inspect.signature(fn)
    except (TypeError, ValueError):
        return None
    required = total = 0
    for param in sig.parameters.values():
        if param.kind == param.VAR_POSITIONAL:
            return required, -1
        if param.kind in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD):
            total += 1
            if param.default is param.empty:
                required += 1
    return required, total


def bind_callback(fn: Callable, minimum: int) -> Callable:
    """
    Adapt fn so it can always be called with the full argument list.

    Callbacks are offered (value, key, collection) or
    (accumulator, value, key, collection). fn receives one argument per
    required positional parameter, and optional parameters are only
    filled up to `minimum`, so round's ndigits and str.split's sep keep
    their defaults. When the signature cannot be read (some builtins)
    fn receives `minimum` arguments.
    """
    capacity = _positional_capacity(fn)
    if capacity is None:
        count = minimum
    else:
        required, total = capacity
        if total == -1:
            return fn
        count = max(required, min(minimum, total))

    def bound(*args):
        return fn(*args[:count])

    return bound
