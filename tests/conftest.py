# tests/conftest.py

"""Shared pytest fixtures for the adapter and provider tests."""

from collections.abc import Generator
from unittest.mock import patch

import pytest


@pytest.fixture(autouse=True)
def no_backoff_sleep() -> Generator[None, None, None]:
    """Skip the adapters' retry and rate-limit sleeps."""
    with patch("time.sleep"):
        yield
