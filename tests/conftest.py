"""Pytest configuration and shared fixtures for hybrid-result tests."""

import pytest

from hybrid_result import clear_log_hooks, reset_settings


@pytest.fixture(autouse=True)
def default_settings():
    """Restore default settings and clear log hooks around each test."""
    reset_settings()
    clear_log_hooks()
    yield
    reset_settings()
    clear_log_hooks()


@pytest.fixture
def sample_ok():
    """Sample Ok value for testing."""
    from hybrid_result import Ok

    return Ok(42)


@pytest.fixture
def sample_err():
    """Sample Err value for testing."""
    from hybrid_result import Err

    return Err(ValueError('test error'))


@pytest.fixture
def sample_some():
    """Sample Some value for testing."""
    from hybrid_result import Some

    return Some('hello')


@pytest.fixture
def sample_nothing():
    """Sample Nothing value for testing."""
    from hybrid_result import Nothing

    return Nothing
