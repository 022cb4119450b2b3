"""Shared fixtures for unit tests."""

from typing import TYPE_CHECKING

import pytest

from cdl import deserialize, serialize

if TYPE_CHECKING:
    from collections.abc import Callable

    from cdl._types import CDLObject


@pytest.fixture
def roundtrip() -> "Callable[[CDLObject], CDLObject]":
    """Factory fixture passing a value through serialize and deserialize.

    Returns:
        A callable that takes an object and returns it after one round trip.

    Example:
        def test_keeps_value(roundtrip) -> None:
            assert roundtrip({"a": 1, "b": 2}) == {"a": 1, "b": 2}
    """

    def run(value: "CDLObject") -> "CDLObject":
        return deserialize(serialize(value))

    return run


@pytest.fixture
def sensor_network() -> "CDLObject":
    """Provide a realistic nested document with tables inside tables.

    Returns:
        A fresh sensor network object for each test.
    """
    return {
        "sensor_network": {
            "name": "Building A",
            "active": True,
            "sensors": [
                {
                    "id": "s-001",
                    "type": "temperature",
                    "location": "Lobby",
                    "readings": [
                        {"value": 21.5, "unit": "C"},
                        {"value": 22, "unit": "C"},
                    ],
                    "status": "ok",
                },
                {
                    "id": "s-002",
                    "type": "humidity",
                    "location": "Server Room",
                    "readings": [{"value": 40.25, "unit": "%"}],
                    "status": None,
                },
            ],
            "tags": ["critical", "floor-1"],
        }
    }
