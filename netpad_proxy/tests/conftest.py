"""
Shared fixtures for proxy tests.

The upstream HTTP client is an AsyncMock returning real ``httpx.Response``
objects, so tests can assert on the exact URL, headers and JSON body the
proxy sends to NetPad.
"""

from unittest.mock import AsyncMock

import httpx
import pytest
from fastapi.testclient import TestClient

from netpad_proxy.config import Settings, get_settings
from netpad_proxy.credentials import InMemoryCredentialStore
from netpad_proxy.forwarding import RequestForwarder
from netpad_proxy.main import create_app

NETPAD_URL = "http://netpad.test"
API_KEY = "np_test_key_1234567890"


@pytest.fixture
def mock_settings(tmp_path):
    """Settings isolated from the user's real configuration file"""
    return Settings(CONFIG_PATH=tmp_path / "config.json")


@pytest.fixture
def store():
    """Credential store with a configured NetPad URL and API key"""
    return InMemoryCredentialStore(netpad_url=NETPAD_URL, api_key=API_KEY)


@pytest.fixture
def mock_upstream_client():
    """Mock NetPad HTTP client (returns 200 {} unless a test overrides it)"""
    client = AsyncMock()
    client.request = AsyncMock(return_value=httpx.Response(200, json={}))
    return client


@pytest.fixture
def forwarder(mock_upstream_client, store, mock_settings):
    return RequestForwarder(mock_upstream_client, store, mock_settings)


@pytest.fixture
def app(mock_settings, store, forwarder):
    """Create test FastAPI application with the mock forwarder in place"""
    app = create_app(mock_settings, store)
    app.state.forwarder = forwarder
    return app


@pytest.fixture
def client(app):
    """Create test client"""
    return TestClient(app)


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Point get_settings() at a temporary credential file"""
    config_path = tmp_path / "netpad" / "config.json"
    monkeypatch.setenv("NETPAD_PROXY_CONFIG_PATH", str(config_path))
    get_settings.cache_clear()
    yield config_path
    get_settings.cache_clear()
