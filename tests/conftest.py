"""Pytest configuration and fixtures."""

import pytest

from wirecheck.config import assert_config
from wirecheck.expr import default_registry


@pytest.fixture(autouse=True)
def reset_shared_state():
    """Restore the process-wide configuration and step registry after each test."""
    yield

    assert_config.reset()
    default_registry.clear()


def nested(depth: int, leaf=0) -> dict:
    """Build a dict nested ``depth`` containers deep."""
    value = leaf
    for _ in range(depth):
        value = {"child": value}
    return value
