"""Type aliases for CDL values.

This module contains ONLY TypeAlias definitions for the CDL value model.
It has no dependencies on other CDL modules so that the exceptions, scanner,
serializer and deserializer can all import from it safely.
"""

from typing import TypeAlias

# Same data model as JSON; int and float both play the Number role
CDLPrimitive: TypeAlias = "str | int | float | bool | None"
"""A CDL primitive value: string, number, boolean, or null."""

CDLArray: TypeAlias = "list[CDLValue]"
"""A CDL array containing any CDL values."""

CDLObject: TypeAlias = "dict[str, CDLValue]"
"""A CDL object mapping string keys to CDL values, in insertion order."""

CDLValue: TypeAlias = "CDLPrimitive | CDLArray | CDLObject"
"""Any CDL value: primitive, array, or object."""
