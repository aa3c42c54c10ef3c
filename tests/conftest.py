from pathlib import Path

import pytest

from lume.logging_utils import configure_logging, shutdown_logging

EXAMPLES_DIR = Path(__file__).resolve().parent.parent / 'examples'


@pytest.fixture(autouse=True)
def plain_logging(monkeypatch):
    """Send diagnostics to the captured stdout without colour codes."""
    monkeypatch.delenv('LUME_LOG_LEVEL', raising=False)
    configure_logging(colorize=False)
    yield
    shutdown_logging()


@pytest.fixture
def example_path():
    def _path(name: str) -> Path:
        return EXAMPLES_DIR / name
    return _path
