"""Test configuration and fixtures."""

import pytest


@pytest.fixture(autouse=True)
def _test_environment_variables(monkeypatch):
    """Pin settings that must not leak in from a developer's shell."""
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("SESSION__SECRET", "test-session-secret")
    # Cheap argon2 costs keep hashing fast
    monkeypatch.setenv("PASSWORDS__TIME_COST", "1")
    monkeypatch.setenv("PASSWORDS__MEMORY_COST", "8")
    monkeypatch.setenv("PASSWORDS__PARALLELISM", "1")
