"""Format markers and limits for CDL documents."""

ENVELOPE = "---"
"""Delimiter wrapping every CDL document body."""

EMPTY_DOCUMENT = ENVELOPE + ENVELOPE
"""The document representing an empty root object."""

KEY_SEPARATOR = "|"
VALUE_SEPARATOR = ","
KEY_VALUE_SEPARATOR = ":"

OPENERS = frozenset("([")
CLOSERS = frozenset(")]")

NULL_LITERAL = "null"
TRUE_LITERAL = "true"
FALSE_LITERAL = "false"

MAX_NESTING_DEPTH = 128
"""Default maximum nesting depth of objects and arrays."""
