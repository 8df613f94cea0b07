"""Conftest for unit tests - automatically mark all tests as unit tests."""

import pytest

from fast_search.config import SearchSettings
from fast_search.search.index import IndexBuilder, IndexSnapshot


def pytest_collection_modifyitems(config, items):
    """Automatically mark all tests in the unit directory as unit tests."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)


@pytest.fixture
def build_snapshot():
    """Build a snapshot from plain strings with default settings."""

    def _build(texts, settings: SearchSettings | None = None) -> IndexSnapshot:
        builder = IndexBuilder(settings or SearchSettings())
        return builder.build([{"text": text} for text in texts])

    return _build
