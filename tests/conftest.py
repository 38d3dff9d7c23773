"""Pytest configuration for autocenter-events tests."""

import sys

import pytest
import structlog
from structlog._config import BoundLoggerLazyProxy


@pytest.fixture(autouse=True)
def _reset_structlog(monkeypatch):
    # setup_logging() binds the current sys.stderr, which pytest swaps per test,
    # and exports the level through the environment.
    monkeypatch.delenv("AUTOCENTER_LOG_LEVEL", raising=False)
    yield
    structlog.reset_defaults()
    # Module-level lazy proxies cache their assembled logger (and the stderr it
    # bound) on first use; drop those caches so later tests reassemble.
    for module in list(sys.modules.values()):
        if not getattr(module, "__name__", "").startswith("autocenter_events"):
            continue
        for value in vars(module).values():
            if isinstance(value, BoundLoggerLazyProxy):
                value.__dict__.pop("bind", None)


def pytest_collection_modifyitems(config, items):
    """Set per-marker timeouts: unit=1s, integration=5s."""
    for item in items:
        if "unit" in item.keywords:
            item.add_marker(pytest.mark.timeout(1))
        elif "integration" in item.keywords:
            item.add_marker(pytest.mark.timeout(5))
