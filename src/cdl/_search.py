"""Deep search over parsed CDL values."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ._types import CDLValue

__all__ = ["find_all_values"]


def find_all_values(value: "CDLValue", key: str) -> "list[CDLValue]":
    """Collect the values of every object entry named key.

    The walk is depth-first and pre-order: an entry's value is reported
    before anything nested inside it, and matched values are searched too.

    Args:
        value: The value to search, usually a deserialized document.
        key: The entry name to look for.

    Returns:
        The matching values, in document order.

    Example:
        >>> find_all_values({"a": 1, "b": [{"a": 2}]}, "a")
        [1, 2]
    """
    results: list[CDLValue] = []
    _collect(value, key, results)
    return results


def _collect(value: "CDLValue", key: str, results: "list[CDLValue]") -> None:
    if isinstance(value, list):
        for item in value:
            _collect(item, key, results)
    elif isinstance(value, dict):
        for name, child in value.items():
            if name == key:
                results.append(child)
            _collect(child, key, results)
