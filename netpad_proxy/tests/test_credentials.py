"""
Unit Tests for Credential Stores and Configuration
==================================================

Tests for netpad_proxy/credentials/store.py and netpad_proxy/config.py
"""

import json

import pytest
from pydantic import ValidationError

from netpad_proxy.config import Settings, mask_api_key, validate_configuration
from netpad_proxy.credentials import (
    InMemoryCredentialStore,
    JsonFileCredentialStore,
    create_store,
)


# ============================================================================
# JSON File Store Tests
# ============================================================================

def test_defaults_when_file_missing(tmp_path):
    store = JsonFileCredentialStore(tmp_path / "config.json")

    assert store.get("netpad_url") == "http://localhost:3000"
    assert store.get("api_key") == ""
    assert store.get("port") == 7777


def test_set_persists_across_instances(tmp_path):
    path = tmp_path / "nested" / "config.json"
    JsonFileCredentialStore(path).set("api_key", "np_saved")

    assert JsonFileCredentialStore(path).get("api_key") == "np_saved"
    assert json.loads(path.read_text(encoding="utf-8")) == {"api_key": "np_saved"}


def test_file_is_private(tmp_path):
    path = tmp_path / "config.json"
    JsonFileCredentialStore(path).set("api_key", "np_saved")

    assert path.stat().st_mode & 0o777 == 0o600


def test_external_edit_seen_on_next_get(tmp_path):
    """Test that the store is re-read, so a configure run applies immediately"""
    path = tmp_path / "config.json"
    store = JsonFileCredentialStore(path)
    store.set("api_key", "np_old")

    path.write_text(json.dumps({"api_key": "np_new"}), encoding="utf-8")

    assert store.get("api_key") == "np_new"


def test_clear_removes_file(tmp_path):
    path = tmp_path / "config.json"
    store = JsonFileCredentialStore(path)
    store.set("port", 8080)

    store.clear()

    assert not path.exists()
    assert store.get("port") == 7777
    store.clear()


def test_corrupt_file_behaves_as_empty(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")

    store = JsonFileCredentialStore(path)

    assert store.get("netpad_url") == "http://localhost:3000"


def test_non_object_file_behaves_as_empty(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("[1, 2]", encoding="utf-8")

    assert JsonFileCredentialStore(path).as_dict()["api_key"] == ""


def test_create_store_uses_settings(tmp_path):
    settings = Settings(
        CONFIG_PATH=tmp_path / "c.json",
        DEFAULT_NETPAD_URL="http://netpad.local:4000",
        DEFAULT_PORT=9000,
    )

    store = create_store(settings)

    assert store.path == tmp_path / "c.json"
    assert store.get("netpad_url") == "http://netpad.local:4000"
    assert store.get("port") == 9000


# ============================================================================
# In-Memory Store Tests
# ============================================================================

def test_in_memory_store():
    store = InMemoryCredentialStore(api_key="np_mem")

    assert store.get("api_key") == "np_mem"
    assert store.get("netpad_url") == "http://localhost:3000"

    store.clear()
    assert store.get("api_key") == ""


# ============================================================================
# Settings Tests
# ============================================================================

def test_log_level_is_validated():
    assert Settings(LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"

    with pytest.raises(ValidationError):
        Settings(LOG_LEVEL="chatty")


def test_api_prefix_is_normalized():
    assert Settings(UPSTREAM_API_PREFIX="api/mcp/").UPSTREAM_API_PREFIX == "/api/mcp"


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("NETPAD_PROXY_CLIENT_ID", "custom-proxy")
    monkeypatch.setenv("NETPAD_PROXY_UPSTREAM_TIMEOUT_SECONDS", "15")

    settings = Settings()

    assert settings.client_info == {"clientId": "custom-proxy", "platform": "cursor"}
    assert settings.UPSTREAM_TIMEOUT_SECONDS == 15.0


def test_allowed_origins_list():
    settings = Settings(ALLOWED_ORIGINS="http://a.test, http://b.test,")

    assert settings.allowed_origins_list == ["http://a.test", "http://b.test"]


# ============================================================================
# Configuration Helper Tests
# ============================================================================

def test_mask_api_key():
    assert mask_api_key("np_live_abcdefghijkl") == "np_live_..."
    assert mask_api_key("") == "(not set)"
    assert mask_api_key(None) == "(not set)"


def test_validate_configuration_missing_key():
    status = validate_configuration({"netpad_url": "http://localhost:3000", "api_key": ""})

    assert status["valid"] is False
    assert "No API key configured" in status["errors"]


def test_validate_configuration_warns_on_remote_http():
    status = validate_configuration({"netpad_url": "http://netpad.example.com", "api_key": "k"})

    assert status["valid"] is True
    assert status["warnings"]


def test_validate_configuration_rejects_bad_scheme():
    status = validate_configuration({"netpad_url": "netpad.example.com", "api_key": "k"})

    assert status["valid"] is False
