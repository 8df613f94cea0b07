"""Shared test fixtures and configuration."""

import os

import pytest

from fast_search.config import SearchSettings
from fast_search.engine import FastSearchEngine


# Reset every engine setting to its default for the whole session
TEST_ENV = {
    "FAST_SEARCH_LOG_LEVEL": "info",
    "FAST_SEARCH_LOG_JSON": "true",
}

for key in list(os.environ):
    if key.startswith("FAST_SEARCH_") and key not in TEST_ENV:
        del os.environ[key]
for key, value in TEST_ENV.items():
    os.environ[key] = value


SAMPLE_TEXTS = [
    "the quick brown fox",
    "a quick fox jumps",
    "totally unrelated text",
]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Drop stray FAST_SEARCH_ overrides and apply the test defaults."""
    for key in list(os.environ):
        if key.startswith("FAST_SEARCH_") and key not in TEST_ENV:
            monkeypatch.delenv(key, raising=False)
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)


@pytest.fixture
def settings() -> SearchSettings:
    return SearchSettings()


@pytest.fixture
def sample_documents() -> list[dict]:
    return [{"text": text} for text in SAMPLE_TEXTS]


@pytest.fixture
def engine(sample_documents, settings) -> FastSearchEngine:
    return FastSearchEngine(sample_documents, settings=settings, name="test")


@pytest.fixture
def catalog_documents() -> list[dict]:
    """Records with metadata used by filter tests."""
    return [
        {
            "title": "Fox habitats",
            "text": "the red fox lives in forests",
            "metadata": {"lang": "en", "year": 2019, "published": "2019-05-01", "reviewed": True},
        },
        {
            "title": "Renard",
            "text": "le renard est un fox",
            "metadata": {"lang": "fr", "year": 2021, "published": "2021-03-15T10:00:00Z", "reviewed": False},
        },
        {
            "title": "Arctic fox facts",
            "text": "the arctic fox changes coat colour",
            "metadata": {"lang": "en", "year": 2023, "published": "2023-11-30", "reviewed": True},
        },
    ]
