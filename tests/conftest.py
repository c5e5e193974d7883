"""
Pytest configuration and fixtures for vidinfo tests.

Page builders live in pages.py so each test states only the parts of the
watch page it cares about.
"""

from unittest.mock import MagicMock

import pytest

from vidinfo.core.transport import HttpTransport
from vidinfo.utils.config import Config


@pytest.fixture
def config(tmp_path):
    """Config that never reads the user's home settings file."""
    return Config(tmp_path / "settings.json")


@pytest.fixture
def transport(config):
    """Transport whose get() is a mock."""
    mock = MagicMock(spec=HttpTransport)
    mock.config = config
    mock.session = MagicMock()
    return mock
