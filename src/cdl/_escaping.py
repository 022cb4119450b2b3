"""Token classification, quoting and unquoting shared by both codec directions."""

import re

from ._constants import FALSE_LITERAL, NULL_LITERAL, TRUE_LITERAL
from ._exceptions import LimitError

__all__ = [
    "is_bare",
    "is_numeric",
    "is_quoted",
    "parse_number",
    "quote",
    "reads_as_literal",
    "unquote",
]

_BARE_PATTERN = re.compile(r"[A-Za-z0-9_-]+")
_NUMBER_PATTERN = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
_INTEGER_PATTERN = re.compile(r"[+-]?\d+", re.ASCII)
# \: and \, are accepted for older documents; quote() never emits them
_ESCAPE_PATTERN = re.compile(r'\\([\\":,])')

_LITERALS = frozenset({NULL_LITERAL, TRUE_LITERAL, FALSE_LITERAL})


def is_bare(text: str) -> bool:
    """Check whether text can be written without quotes."""
    return _BARE_PATTERN.fullmatch(text) is not None


def is_numeric(text: str) -> bool:
    """Check whether text is a decimal number token."""
    return _NUMBER_PATTERN.fullmatch(text) is not None


def reads_as_literal(text: str) -> bool:
    """Check whether unquoted text would be read back as a non-string value."""
    return text in _LITERALS or is_numeric(text)


def parse_number(text: str) -> int | float:
    """Convert a numeric token to int when it has no fraction or exponent.

    Raises:
        LimitError: If an integer token has more digits than the interpreter
            converts (``sys.get_int_max_str_digits``).
    """
    if _INTEGER_PATTERN.fullmatch(text):
        try:
            return int(text)
        except ValueError as exc:
            digits = len(text.lstrip("+-"))
            msg = f"integer of {digits} digits exceeds conversion limit"
            raise LimitError(msg) from exc
    return float(text)


def is_quoted(text: str) -> bool:
    return len(text) >= 2 and text[0] == '"' and text[-1] == '"'


def quote(text: str) -> str:
    """Wrap text in double quotes, escaping backslashes and quotes."""
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def unquote(text: str) -> str:
    """Strip surrounding quotes and resolve escape sequences in one pass.

    Args:
        text: A quoted token, including its quotes.

    Returns:
        The raw string value.
    """
    return _ESCAPE_PATTERN.sub(r"\1", text[1:-1])
