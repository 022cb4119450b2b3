"""Exception hierarchy for the CDL codec.

All codec errors derive from CDLError, so callers processing batches of
documents can catch a single type and decide whether a failure is fatal.
"""

__all__ = [
    "CDLError",
    "InvalidFormatError",
    "InvalidRootError",
    "LimitError",
    "MismatchedKeysAndValuesError",
    "UnsupportedValueError",
]


class CDLError(Exception):
    """Base exception for all CDL errors."""


class InvalidFormatError(CDLError, ValueError):
    """The text is not a well-formed CDL document.

    Raised for a missing envelope, unbalanced brackets or quotes, empty key
    or value segments, bare scalar documents, and duplicate keys.
    """


class MismatchedKeysAndValuesError(CDLError, ValueError):
    """A key list and a value list have irreconcilable lengths."""


class InvalidRootError(CDLError, TypeError):
    """Serialization was requested for a value that is not an object."""


class UnsupportedValueError(CDLError, TypeError):
    """A value has no CDL representation."""


class LimitError(CDLError):
    """Nesting depth or an integer's digit count exceeds a limit."""
