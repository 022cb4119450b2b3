"""A compact, delimiter-based text serialization format for JSON-like data."""

from importlib.metadata import version

from ._deserializer import deserialize
from ._exceptions import (
    CDLError,
    InvalidFormatError,
    InvalidRootError,
    LimitError,
    MismatchedKeysAndValuesError,
    UnsupportedValueError,
)
from ._search import find_all_values
from ._serializer import serialize
from ._types import CDLArray, CDLObject, CDLPrimitive, CDLValue

__version__ = version("cdl-codec")

__all__ = [
    "CDLArray",
    "CDLError",
    "CDLObject",
    "CDLPrimitive",
    "CDLValue",
    "InvalidFormatError",
    "InvalidRootError",
    "LimitError",
    "MismatchedKeysAndValuesError",
    "UnsupportedValueError",
    "__version__",
    "deserialize",
    "find_all_values",
    "serialize",
]
