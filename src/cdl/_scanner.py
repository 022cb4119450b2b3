"""Quote- and bracket-aware scanning of CDL text.

Every splitting decision in the deserializer goes through this module. A
character is at the top level when it sits outside any quoted string and
outside any ``(...)`` or ``[...]`` group. The scanner is a pure transition
function over an explicit ScanState; nothing here holds mutable state between
calls.
"""

from typing import NamedTuple

from ._constants import CLOSERS, KEY_VALUE_SEPARATOR, OPENERS
from ._exceptions import InvalidFormatError

__all__ = [
    "ScanState",
    "advance",
    "find_top_level",
    "is_single_group",
    "scan_top_level",
    "split_last_colon",
    "split_top_level",
]


class ScanState(NamedTuple):
    """Scanner state before the next character is consumed.

    Attributes:
        in_quotes: Whether the cursor is inside a quoted string.
        depth: Number of open ``(`` and ``[`` groups.
        backslashes: Length of the run of backslashes just consumed.
    """

    in_quotes: bool = False
    depth: int = 0
    backslashes: int = 0

    @property
    def at_top_level(self) -> bool:
        """Whether a delimiter at the cursor would be structural."""
        return not self.in_quotes and self.depth == 0


def advance(state: ScanState, char: str) -> ScanState:
    """Return the state after consuming one character.

    A double quote toggles the quote flag unless it is escaped, that is,
    preceded by an odd number of consecutive backslashes. Brackets change
    the depth only outside quotes.
    """
    if char == "\\":
        return state._replace(backslashes=state.backslashes + 1)
    in_quotes = state.in_quotes
    depth = state.depth
    if char == '"' and state.backslashes % 2 == 0:
        in_quotes = not in_quotes
    elif not in_quotes:
        if char in OPENERS:
            depth += 1
        elif char in CLOSERS:
            depth -= 1
    return ScanState(in_quotes, depth, 0)


def scan_top_level(text: str, delimiters: str) -> list[int]:
    """Find every top-level occurrence of the given delimiter characters.

    Args:
        text: The text to scan.
        delimiters: The structural characters to report.

    Returns:
        The indices of top-level delimiters, in ascending order.

    Raises:
        InvalidFormatError: If a closing bracket has no opener, or the text
            ends inside a quoted string or an open group.
    """
    positions: list[int] = []
    state = ScanState()
    for index, char in enumerate(text):
        if char in delimiters and state.at_top_level:
            positions.append(index)
        state = advance(state, char)
        if state.depth < 0:
            msg = f"unbalanced {char!r} at offset {index}"
            raise InvalidFormatError(msg)
    if state.in_quotes:
        msg = "unterminated quoted string"
        raise InvalidFormatError(msg)
    if state.depth != 0:
        msg = f"{state.depth} unclosed group(s)"
        raise InvalidFormatError(msg)
    return positions


def find_top_level(text: str, delimiter: str) -> int:
    """Return the index of the first top-level delimiter, or -1."""
    positions = scan_top_level(text, delimiter)
    return positions[0] if positions else -1


def split_top_level(text: str, delimiter: str) -> list[str]:
    """Split text on top-level delimiters and strip each token.

    Empty text yields no tokens. A trailing delimiter does not produce an
    empty final token, but empty tokens between delimiters are kept.
    """
    tokens: list[str] = []
    start = 0
    for index in scan_top_level(text, delimiter):
        tokens.append(text[start:index].strip())
        start = index + 1
    tail = text[start:]
    if tail:
        tokens.append(tail.strip())
    return tokens


def split_last_colon(text: str) -> tuple[str, str]:
    """Split text into a key part and a value part at the last top-level colon.

    Key lists never contain a top-level colon, while value lists may embed
    nested objects with colons of their own at higher depth, so the last
    top-level colon is the separator.

    Args:
        text: The text to split.

    Returns:
        The (keys, values) pair, unstripped. A bare parenthesized group with
        no top-level colon yields an empty key part.

    Raises:
        InvalidFormatError: If there is no split point.
    """
    positions = scan_top_level(text, KEY_VALUE_SEPARATOR)
    if not positions:
        if text.startswith("(") and text.endswith(")"):
            return "", text
        msg = "no key/value separator found"
        raise InvalidFormatError(msg)
    index = positions[-1]
    return text[:index], text[index + 1 :]


def is_single_group(text: str) -> bool:
    """Check whether text is exactly one bracketed group.

    True for ``(a:1)`` or ``[1,2]``, false for ``[1],2`` or ``(a:1)(b:2)``.
    """
    if not text or text[0] not in OPENERS:
        return False
    state = ScanState()
    for index, char in enumerate(text):
        state = advance(state, char)
        if state.depth == 0 and not state.in_quotes:
            return index == len(text) - 1
    return False
