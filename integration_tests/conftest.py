"""Pytest configuration for integration tests."""

import logging

import pytest


def pytest_collection_modifyitems(items):
    """Mark every workflow test in this directory as an integration test."""
    for item in items:
        if "integration_tests" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep REP_TALLY_* settings and CLI logging setup out of other tests."""
    for name in ("REP_TALLY_DATA_DIR", "REP_TALLY_LOG_FORMAT", "REP_TALLY_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
