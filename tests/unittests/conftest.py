# tests/unittests/conftest.py

from pathlib import Path

import pytest


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "unittests: fast tests without I/O beyond tmp_path")


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Automatically mark all tests collected in this directory as 'unittests' tests."""
    for item in items:
        item_path = Path(str(item.fspath))
        if "unittests" in item_path.parts:
            item.add_marker("unittests")


@pytest.fixture(autouse=True, scope="module")
def suppress_debug_logging():
    # Suppress DEBUG and lower
    from imagemaker.loggers import temporary_log_level

    with temporary_log_level("WARNING"):
        yield
