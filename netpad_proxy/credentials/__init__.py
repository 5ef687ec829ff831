"""
Credentials Package
===================

Storage for the per-user proxy configuration: the NetPad server URL, the
NetPad API key and the port the proxy listens on.

Modules:
- store: CredentialStore protocol, JSON file store and in-memory store

Usage:
------
    from netpad_proxy.credentials import JsonFileCredentialStore
    store = JsonFileCredentialStore(settings.CONFIG_PATH)
    store.set("api_key", "np_live_...")
"""

from .store import (
    API_KEY,
    NETPAD_URL,
    PORT,
    CredentialStore,
    InMemoryCredentialStore,
    JsonFileCredentialStore,
    create_store,
    default_credentials,
)

__all__ = [
    "API_KEY",
    "NETPAD_URL",
    "PORT",
    "CredentialStore",
    "InMemoryCredentialStore",
    "JsonFileCredentialStore",
    "create_store",
    "default_credentials",
]
