# tests/conftest.py
import pytest
from unittest.mock import MagicMock
from pathlib import Path

from dbxfs.config import Settings, get_settings
from dbxfs.dbox import DropboxClient


@pytest.fixture
def mock_settings():
    """
    Provides a mock of the settings for testing.
    This avoids the need for environment variables during tests.
    """
    settings = MagicMock(spec=Settings)
    settings.LOG_LEVEL = "INFO"
    settings.TOKEN_STORAGE_FILE = ".dropbox.token"
    settings.DROPBOX_ACCESS_TOKEN = None
    settings.DROPBOX_APP_KEY = "test_key"
    settings.DROPBOX_APP_SECRET = "test_secret"
    settings.DROPBOX_REFRESH_TOKEN_ENV = "env_token"
    settings.DROPBOX_REFRESH_TOKEN_FILE = None
    settings.DROPBOX_ROOT_PREFIX = "prefix"
    settings.DROPBOX_UPLOAD_CHUNK_SIZE = 1024
    settings.DROPBOX_TIMEOUT = 30.0
    settings.BASE_DIR = Path("/tmp")
    settings.LOG_FILE = Path("/tmp/dbxfs.log")
    return settings


@pytest.fixture
def mock_client():
    """Fixture for a mock Dropbox client with the DropboxClient interface."""
    return MagicMock(spec=DropboxClient)


@pytest.fixture(autouse=True)
def patch_settings_class(monkeypatch, mock_settings):
    """
    This autouse fixture automatically replaces the `Settings` class constructor.
    Any code that calls `Settings()` during a test run will receive the
    `mock_settings` instance instead of a real settings object.
    """
    # The cache may hold a real instance created during test collection.
    get_settings.cache_clear()
    monkeypatch.setattr("dbxfs.config.Settings", lambda *args, **kwargs: mock_settings)
    yield
    get_settings.cache_clear()
