"""
Pytest fixtures for PriceTrack tests.
"""

from pathlib import Path

import pytest


@pytest.fixture
def config_file(tmp_path) -> Path:
    """Path to a not-yet-existing config file."""
    return tmp_path / ".pricetrack.json"


@pytest.fixture
def write_config(config_file):
    def _write(content):
        if isinstance(content, bytes):
            config_file.write_bytes(content)
        else:
            config_file.write_text(content, encoding="utf-8")
        return config_file
    return _write
