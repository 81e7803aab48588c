"""Fixtures for integration tests."""

from collections.abc import Generator

import pytest

from opbind.core.config import get_settings


@pytest.fixture(autouse=True)
def fresh_settings() -> Generator[None]:
    """Read settings from the test environment for every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
