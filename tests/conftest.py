"""
pytest configuration for relayer_api tests.

Adds src directory to Python path for imports and sets up test environment.
"""

import logging
import sys
from pathlib import Path

import pytest

# Add src directory to Python path
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep config environment variables from leaking between tests."""
    for name in (
        "RELAYER_API_LOG_LEVEL",
        "RELAYER_API_LOG_JSON",
        "RELAYER_API_VALIDATE_EVENTS",
    ):
        monkeypatch.delenv(name, raising=False)
    yield
    logger = logging.getLogger("relayer_api")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
