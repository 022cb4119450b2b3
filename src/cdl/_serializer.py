"""Rendering of in-memory values as canonical CDL text."""

import logging
import math
from decimal import Decimal
from typing import TYPE_CHECKING, cast

from ._constants import (
    EMPTY_DOCUMENT,
    ENVELOPE,
    FALSE_LITERAL,
    KEY_SEPARATOR,
    KEY_VALUE_SEPARATOR,
    MAX_NESTING_DEPTH,
    NULL_LITERAL,
    TRUE_LITERAL,
    VALUE_SEPARATOR,
)
from ._escaping import is_bare, quote, reads_as_literal
from ._exceptions import InvalidRootError, LimitError, UnsupportedValueError

if TYPE_CHECKING:
    from collections.abc import Sequence

__all__ = ["escape_key", "escape_string", "format_number", "serialize"]

logger = logging.getLogger(__name__)

# Numbers in [1e-6, 1e21) are written positionally, others in exponent form
_POSITIONAL_MIN = 1e-6
_POSITIONAL_MAX = 1e21


def serialize(value: object, *, max_depth: int = MAX_NESTING_DEPTH) -> str:
    """Serialize an object to a CDL document.

    Keys are written in insertion order, so equal inputs always produce
    identical text. Arrays of objects sharing one key sequence are written
    in table shorthand.

    Args:
        value: The root object.
        max_depth: Maximum nesting depth of objects and arrays.

    Returns:
        The CDL document, including its ``---`` envelope.

    Raises:
        InvalidRootError: If value is not a dict.
        UnsupportedValueError: If a nested value has no CDL representation.
        LimitError: If nesting exceeds max_depth.

    Example:
        >>> serialize({"name": "Alice", "age": 30, "city": "New York"})
        '---name|age|city:Alice,30,"New York"---'
    """
    if not isinstance(value, dict):
        msg = f"root must be an object, got {type(value).__name__}"
        raise InvalidRootError(msg)
    if not value:
        return EMPTY_DOCUMENT
    body = _serialize_object(value, 1, max_depth)
    logger.debug("serialized %d root key(s) into %d characters", len(value), len(body))
    return f"{ENVELOPE}{body}{ENVELOPE}"


def escape_key(key: str) -> str:
    """Return key as written in a key list, quoting it unless it is bare."""
    if is_bare(key):
        return key
    return quote(key)


def escape_string(text: str) -> str:
    """Return a string value as written in a value list.

    Bare text that would read back as null, a boolean or a number is quoted
    so that it stays a string.
    """
    if is_bare(text) and not reads_as_literal(text):
        return text
    return quote(text)


def format_number(number: int | float) -> str:
    """Format a number without a trailing ``.0`` for whole values.

    Raises:
        UnsupportedValueError: If number is NaN or infinite.
        LimitError: If an integer has more digits than the interpreter
            converts.
    """
    if isinstance(number, int):
        try:
            return str(number)
        except ValueError as exc:
            msg = "integer exceeds conversion limit"
            raise LimitError(msg) from exc
    if not math.isfinite(number):
        msg = f"cannot serialize non-finite number {number!r}"
        raise UnsupportedValueError(msg)
    magnitude = abs(number)
    if number.is_integer() and magnitude < _POSITIONAL_MAX:
        return str(int(number))
    text = repr(number)
    if "e" in text and _POSITIONAL_MIN <= magnitude < _POSITIONAL_MAX:
        return format(Decimal(text), "f")
    return text


def _check_depth(level: int, max_depth: int) -> None:
    if level > max_depth:
        msg = f"nesting depth exceeds maximum {max_depth}"
        raise LimitError(msg)


def _serialize_object(obj: "dict[object, object]", level: int, max_depth: int) -> str:
    _check_depth(level, max_depth)
    keys: list[str] = []
    values: list[str] = []
    for key, value in obj.items():
        if not isinstance(key, str):
            msg = f"object keys must be strings, got {type(key).__name__}"
            raise UnsupportedValueError(msg)
        keys.append(escape_key(key))
        values.append(_serialize_value(value, level, max_depth))
    return (
        f"{KEY_SEPARATOR.join(keys)}{KEY_VALUE_SEPARATOR}{VALUE_SEPARATOR.join(values)}"
    )


def _serialize_value(value: object, level: int, max_depth: int) -> str:
    if value is None:
        return NULL_LITERAL
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return TRUE_LITERAL if value else FALSE_LITERAL
    if isinstance(value, (int, float)):
        return format_number(value)
    if isinstance(value, str):
        return escape_string(value)
    if isinstance(value, (list, tuple)):
        return _serialize_array(value, level + 1, max_depth)
    if isinstance(value, dict):
        return f"({_serialize_object(value, level + 1, max_depth)})"
    msg = f"cannot serialize value of type {type(value).__name__}"
    raise UnsupportedValueError(msg)


def _table_keys(items: "Sequence[object]") -> "list[object] | None":
    """Return the shared key sequence when items qualify for table shorthand."""
    first = items[0]
    if not isinstance(first, dict) or not first:
        return None
    keys = list(first)
    for item in items:
        if not isinstance(item, dict) or list(item) != keys:
            return None
    return keys


def _serialize_array(items: "Sequence[object]", level: int, max_depth: int) -> str:
    _check_depth(level, max_depth)
    if not items:
        return "[]"
    keys = _table_keys(items)
    if keys is None:
        values = [_serialize_value(item, level, max_depth) for item in items]
        return f"[{VALUE_SEPARATOR.join(values)}]"
    # Rows are flattened in row-major order under one key list
    header: list[str] = []
    for key in keys:
        if not isinstance(key, str):
            msg = f"object keys must be strings, got {type(key).__name__}"
            raise UnsupportedValueError(msg)
        header.append(escape_key(key))
    rows = cast("Sequence[dict[object, object]]", items)
    cells = [
        _serialize_value(row[key], level + 1, max_depth) for row in rows for key in keys
    ]
    return (
        f"[{KEY_SEPARATOR.join(header)}{KEY_VALUE_SEPARATOR}"
        f"{VALUE_SEPARATOR.join(cells)}]"
    )
