"""Mark every test in this directory as a benchmark."""

from pathlib import Path

import pytest


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    bench_dir = Path(__file__).parent
    for item in items:
        if item.path.is_relative_to(bench_dir):
            item.add_marker(pytest.mark.benchmark)
