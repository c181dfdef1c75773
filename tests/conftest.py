"""Pytest configuration and shared fixtures for weaviate-hub tests."""

import os
from collections.abc import Generator

import pytest

from weaviate_hub.config import Settings


@pytest.fixture
def settings() -> Settings:
    """Default engine settings (bounded extension, unlimited fan-out)."""
    return Settings()


@pytest.fixture
def isolated_env() -> Generator[dict[str, str]]:
    """Save the environment and restore it after the test.

    Cleanup:
        Restores original environment after test
    """
    original_env = os.environ.copy()
    yield original_env
    os.environ.clear()
    os.environ.update(original_env)
