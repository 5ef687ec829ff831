"""
Credential stores holding the NetPad URL, API key and proxy port.

The forwarder reads the store on every request, never caching values, so a
``netpad-mcp-proxy configure`` run takes effect without restarting the proxy.
The store is written only by the CLI, never while serving requests.
"""

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Optional, Protocol

if TYPE_CHECKING:
    from ..config import Settings

logger = logging.getLogger(__name__)


NETPAD_URL = "netpad_url"
API_KEY = "api_key"
PORT = "port"


def default_credentials(
    netpad_url: str = "http://localhost:3000",
    port: int = 7777,
) -> Dict[str, Any]:
    """Values returned for keys that were never stored."""
    return {NETPAD_URL: netpad_url, API_KEY: "", PORT: port}


class CredentialStore(Protocol):
    """Key/value store for proxy credentials."""

    def get(self, key: str) -> Any:
        ...

    def set(self, key: str, value: Any) -> None:
        ...

    def clear(self) -> None:
        ...

    def as_dict(self) -> Dict[str, Any]:
        ...


class InMemoryCredentialStore:
    """Credential store kept in process memory."""

    def __init__(self, defaults: Optional[Dict[str, Any]] = None, **values: Any):
        self._defaults = dict(defaults if defaults is not None else default_credentials())
        self._values: Dict[str, Any] = dict(values)

    def get(self, key: str) -> Any:
        if key in self._values:
            return self._values[key]
        return self._defaults.get(key)

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value

    def clear(self) -> None:
        self._values.clear()

    def as_dict(self) -> Dict[str, Any]:
        return {**self._defaults, **self._values}


class JsonFileCredentialStore:
    """
    Credential store persisted as a JSON document.

    The file is re-read on every ``get`` and rewritten on every ``set``.
    Missing or unreadable files behave as an empty store, so defaults apply.
    """

    def __init__(self, path: Path, defaults: Optional[Dict[str, Any]] = None):
        self.path = Path(path)
        self._defaults = dict(defaults if defaults is not None else default_credentials())

    def get(self, key: str) -> Any:
        values = self._load()
        if key in values:
            return values[key]
        return self._defaults.get(key)

    def set(self, key: str, value: Any) -> None:
        values = self._load()
        values[key] = value
        self._save(values)

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()
            logger.info("Cleared stored configuration", extra={"path": str(self.path)})

    def as_dict(self) -> Dict[str, Any]:
        return {**self._defaults, **self._load()}

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable configuration file {self.path}: {e}")
            return {}

        if isinstance(data, dict):
            return data
        logger.warning(f"Ignoring configuration file {self.path}: expected a JSON object")
        return {}

    def _save(self, values: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(values, indent=2), encoding="utf-8")
        # API key is stored in clear text
        self.path.chmod(0o600)


def create_store(settings: "Settings") -> JsonFileCredentialStore:
    """Credential store backed by the JSON file named in the settings."""
    return JsonFileCredentialStore(
        settings.CONFIG_PATH,
        defaults=default_credentials(settings.DEFAULT_NETPAD_URL, settings.DEFAULT_PORT),
    )
