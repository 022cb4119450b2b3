"""Parsing of CDL text into in-memory values.

The document grammar is ambiguous: ``a:(...)`` is one key with one composite
value, ``a|b:1,2`` is a key list with a value list, and ``a|b:[1,2,3,4]`` is
a key list reduced from a table. The ambiguity is resolved by trying an
ordered tuple of document productions (see _PRODUCTIONS); the first one that
matches decides the result.
"""

import logging
import re
from dataclasses import dataclass
from functools import cached_property
from typing import TYPE_CHECKING

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
from ._escaping import is_numeric, is_quoted, parse_number, unquote
from ._exceptions import InvalidFormatError, LimitError, MismatchedKeysAndValuesError
from ._scanner import find_top_level, is_single_group, split_last_colon, split_top_level

if TYPE_CHECKING:
    from collections.abc import Callable

    from ._types import CDLArray, CDLObject, CDLValue

__all__ = ["deserialize", "parse_list", "parse_value"]

logger = logging.getLogger(__name__)

# Legacy form: every pair is key:"value" and the pairs are joined by |
_QUOTED_PAIR = r'\w+:"(?:[^"\\]|\\.)*"'
_PIPE_PAIRS_PATTERN = re.compile(
    rf"{_QUOTED_PAIR}(?:\|{_QUOTED_PAIR})*", re.ASCII | re.DOTALL
)


def deserialize(text: str, *, max_depth: int = MAX_NESTING_DEPTH) -> "CDLObject":
    """Parse a CDL document into an object.

    Args:
        text: The CDL document, including its ``---`` envelope. Surrounding
            whitespace is ignored.
        max_depth: Maximum nesting depth of objects and arrays.

    Returns:
        The root object.

    Raises:
        InvalidFormatError: If the text is not a well-formed CDL document.
        MismatchedKeysAndValuesError: If a key list and its value list have
            irreconcilable lengths.
        LimitError: If nesting exceeds max_depth.

    Example:
        >>> deserialize("---users:[name|age:Alice,30,Bob,25]---")
        {'users': [{'name': 'Alice', 'age': 30}, {'name': 'Bob', 'age': 25}]}
    """
    stripped = text.strip()
    if stripped == EMPTY_DOCUMENT:
        return {}
    if not (stripped.startswith(ENVELOPE) and stripped.endswith(ENVELOPE)):
        msg = "invalid CDL format: missing --- envelope"
        raise InvalidFormatError(msg)

    document = _Document(stripped[len(ENVELOPE) : -len(ENVELOPE)].strip(), max_depth)
    for production in _PRODUCTIONS:
        result = production(document)
        if result is not None:
            logger.debug("document parsed by %s", production.__name__)
            return result
    # _match_key_value_lists always matches or raises
    msg = "invalid CDL format: no production matched"  # pragma: no cover
    raise InvalidFormatError(msg)  # pragma: no cover


def parse_value(text: str, *, max_depth: int = MAX_NESTING_DEPTH) -> "CDLValue":
    """Parse a single CDL value token.

    Tokens are tried in order: ``null``, ``true``, ``false``, a quoted
    string, a number, an array ``[...]``, an object ``(...)``. Any other
    token is returned unchanged as a bare string.

    Args:
        text: The value token. Surrounding whitespace is ignored.
        max_depth: Maximum nesting depth of objects and arrays.

    Returns:
        The parsed value.
    """
    return _parse_value(text, 0, max_depth)


def parse_list(
    text: str,
    delimiter: str,
    *,
    parse_nested: bool = False,
    max_depth: int = MAX_NESTING_DEPTH,
) -> "list[CDLValue]":
    """Split a delimited list on its top-level delimiters.

    Args:
        text: The list text, without surrounding brackets.
        delimiter: The separator character, ``,`` or ``|``.
        parse_nested: Parse each token with parse_value. When false the
            tokens are keys: each is cut at its first top-level colon and
            unquoted.
        max_depth: Maximum nesting depth of objects and arrays.

    Returns:
        The parsed tokens.
    """
    if parse_nested:
        return _parse_values(text, delimiter, 0, max_depth)
    return list(_parse_keys(text, delimiter))


@dataclass
class _Document:
    """The body of a CDL document, between its envelope markers."""

    content: str
    max_depth: int

    @cached_property
    def parts(self) -> tuple[str, str]:
        """The key part and value part, split at the last top-level colon.

        Raises:
            InvalidFormatError: If there is no split point or either part is
                empty.
        """
        keys_part, values_part = split_last_colon(self.content)
        keys_part = keys_part.strip()
        values_part = values_part.strip()
        logger.debug("split document at keys %r, values %r", keys_part, values_part)
        if not keys_part or not values_part:
            msg = "invalid CDL format: empty key or value segment"
            raise InvalidFormatError(msg)
        return keys_part, values_part


def _match_composite(document: _Document) -> "CDLObject | None":
    """Match ``key:(...)`` or ``key:[...]``, one key with one composite value."""
    index = find_top_level(document.content, KEY_VALUE_SEPARATOR)
    if index == -1:
        return None
    value_text = document.content[index + 1 :].strip()
    if not is_single_group(value_text):
        return None
    keys = _parse_keys(document.content[:index], KEY_SEPARATOR)
    if len(keys) != 1:
        return None
    return {keys[0]: _parse_value(value_text, 1, document.max_depth)}


def _match_pipe_pairs(document: _Document) -> "CDLObject | None":
    """Match ``a:"x"|b:"y"``, where each pair carries its own key."""
    keys_part, values_part = document.parts
    if KEY_SEPARATOR not in keys_part:
        return None
    if VALUE_SEPARATOR in values_part or KEY_SEPARATOR in values_part:
        return None
    if _PIPE_PAIRS_PATTERN.fullmatch(document.content) is None:
        return None
    keys: list[str] = []
    values: list[CDLValue] = []
    for pair in split_top_level(document.content, KEY_SEPARATOR):
        key, _, value = pair.partition(KEY_VALUE_SEPARATOR)
        keys.append(key.strip())
        values.append(_parse_value(value, 1, document.max_depth))
    return _zip_object(keys, values)


def _match_key_value_lists(document: _Document) -> "CDLObject":
    """Match ``k1|k2:v1,v2``, the general key list and value list form."""
    keys_part, values_part = document.parts
    keys = _parse_keys(keys_part, KEY_SEPARATOR)
    if VALUE_SEPARATOR in values_part:
        values = _parse_values(values_part, VALUE_SEPARATOR, 1, document.max_depth)
    elif len(keys) > 1 and KEY_SEPARATOR in values_part:
        values = _parse_values(values_part, KEY_SEPARATOR, 1, document.max_depth)
    else:
        values = [_parse_value(values_part, 1, document.max_depth)]

    if (
        len(keys) == 1
        and len(values) == 1
        and not isinstance(values[0], (dict, list))
        and not values_part.startswith(("(", "["))
    ):
        msg = "invalid CDL format: a document cannot be a single key with a scalar"
        raise InvalidFormatError(msg)
    return _build_object(keys, values)


_PRODUCTIONS: "tuple[Callable[[_Document], CDLObject | None], ...]" = (
    _match_composite,
    _match_pipe_pairs,
    _match_key_value_lists,
)


def _parse_value(text: str, level: int, max_depth: int) -> "CDLValue":
    value = text.strip()
    if value == NULL_LITERAL:
        return None
    if value == TRUE_LITERAL:
        return True
    if value == FALSE_LITERAL:
        return False
    if is_quoted(value):
        return unquote(value)
    if is_numeric(value):
        return parse_number(value)
    if value.startswith("[") and value.endswith("]"):
        return _parse_array(value[1:-1], level + 1, max_depth)
    if value.startswith("(") and value.endswith(")"):
        return _parse_object(value[1:-1], level + 1, max_depth)
    return value


def _parse_array(inner: str, level: int, max_depth: int) -> "CDLArray":
    _check_depth(level, max_depth)
    if find_top_level(inner, KEY_VALUE_SEPARATOR) == -1:
        return _parse_values(inner, VALUE_SEPARATOR, level, max_depth)
    keys_part, values_part = split_last_colon(inner)
    keys = _parse_keys(keys_part, KEY_SEPARATOR)
    cells = _parse_values(values_part, VALUE_SEPARATOR, level + 1, max_depth)
    rows: CDLArray = list(_chunk_records(keys, cells))
    return rows


def _parse_object(inner: str, level: int, max_depth: int) -> "CDLObject":
    _check_depth(level, max_depth)
    keys_part, values_part = split_last_colon(inner)
    keys = _parse_keys(keys_part, KEY_SEPARATOR)
    values = _parse_values(values_part, VALUE_SEPARATOR, level, max_depth)
    return _build_object(keys, values)


def _parse_values(
    text: str, delimiter: str, level: int, max_depth: int
) -> "list[CDLValue]":
    return [
        _parse_value(token, level, max_depth)
        for token in split_top_level(text, delimiter)
    ]


def _parse_keys(text: str, delimiter: str) -> list[str]:
    tokens = split_top_level(text, delimiter)
    if text.strip().endswith(delimiter):
        tokens.append("")
    keys: list[str] = []
    for token in tokens:
        # A key may carry a :type suffix inside table headers; only the name is kept
        index = find_top_level(token, KEY_VALUE_SEPARATOR)
        name = token if index == -1 else token[:index].strip()
        if not name:
            msg = "invalid CDL format: empty unquoted key"
            raise InvalidFormatError(msg)
        if is_quoted(name):
            keys.append(unquote(name))
        else:
            keys.append(name.replace('\\"', '"'))
    return keys


def _check_depth(level: int, max_depth: int) -> None:
    if level > max_depth:
        msg = f"nesting depth exceeds maximum {max_depth}"
        raise LimitError(msg)


def _zip_object(keys: list[str], values: "list[CDLValue]") -> "CDLObject":
    obj: CDLObject = {}
    for key, value in zip(keys, values, strict=True):
        if key in obj:
            msg = f"invalid CDL format: duplicate key {key!r}"
            raise InvalidFormatError(msg)
        obj[key] = value
    return obj


def _chunk_records(keys: list[str], cells: "list[CDLValue]") -> "list[CDLObject]":
    """Group a row-major flat value list into records of len(keys) fields."""
    width = len(keys)
    if width == 0:
        if cells:
            msg = f"{len(cells)} value(s) for an empty key list"
            raise MismatchedKeysAndValuesError(msg)
        return []
    if len(cells) % width != 0:
        msg = f"{len(cells)} value(s) do not fill rows of {width} key(s)"
        raise MismatchedKeysAndValuesError(msg)
    return [
        _zip_object(keys, cells[start : start + width])
        for start in range(0, len(cells), width)
    ]


def _build_object(keys: list[str], values: "list[CDLValue]") -> "CDLObject":
    """Pair keys with values, applying the table reduction when it fits.

    Several keys with one array value means the array holds the flattened
    rows of a table, regrouped as records under the first key.
    """
    if len(keys) > 1 and len(values) == 1 and isinstance(values[0], list):
        logger.debug("reducing %d key(s) onto a flat array of rows", len(keys))
        return {keys[0]: _chunk_records(keys, values[0])}
    if len(keys) != len(values):
        msg = f"mismatched keys and values: {len(keys)} key(s), {len(values)} value(s)"
        raise MismatchedKeysAndValuesError(msg)
    return _zip_object(keys, values)
