"""
Configuration module for the NetPad MCP Proxy.

This module uses Pydantic Settings to load and validate environment variables
for the proxy process: logging, upstream API layout, outbound timeouts, client
identity markers and server binding.

Per-user credentials (NetPad URL, API key, port) are NOT process settings;
they live in the credential store (see ``netpad_proxy.credentials``) so that
``netpad-mcp-proxy configure`` changes take effect on the next request.

Environment variables are loaded from .env file or system environment,
prefixed with ``NETPAD_PROXY_``.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_CONFIG_PATH = Path.home() / ".config" / "netpad-mcp-proxy" / "config.json"


class Settings(BaseSettings):
    """
    Process settings loaded from environment variables.
    """

    # =========================================================================
    # Logging
    # =========================================================================

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    DEBUG: bool = Field(
        default=False,
        description="Log every inbound request (method and URL)",
    )

    # =========================================================================
    # Credential Store
    # =========================================================================

    CONFIG_PATH: Path = Field(
        default=DEFAULT_CONFIG_PATH,
        description="JSON file holding the stored NetPad URL, API key and port",
    )

    DEFAULT_NETPAD_URL: str = Field(
        default="http://localhost:3000",
        description="NetPad URL used when none has been stored",
    )

    PRODUCTION_NETPAD_URL: str = Field(
        default="https://api.netpad.ai",
        description="NetPad SaaS URL offered by the configure command",
    )

    DEFAULT_PORT: int = Field(
        default=7777,
        description="Proxy port used when none has been stored",
        ge=1,
        le=65535,
    )

    # =========================================================================
    # Upstream Communication
    # =========================================================================

    UPSTREAM_API_PREFIX: str = Field(
        default="/api/mcp",
        description="Path prefix of the MCP API on the NetPad server",
    )

    UPSTREAM_TIMEOUT_SECONDS: Optional[float] = Field(
        default=None,
        description="Outbound request timeout in seconds (unset means no timeout)",
        gt=0,
    )

    CLIENT_ID: str = Field(
        default="netpad-mcp-proxy",
        description="clientInfo.clientId injected into command requests",
    )

    PLATFORM: str = Field(
        default="cursor",
        description="clientInfo.platform injected into command requests",
    )

    # =========================================================================
    # Server Configuration
    # =========================================================================

    HOST: str = Field(
        default="127.0.0.1",
        description="Host to bind the proxy server",
    )

    ALLOWED_ORIGINS: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins",
    )

    model_config = SettingsConfigDict(
        env_prefix="NETPAD_PROXY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def allowed_origins_list(self) -> List[str]:
        """
        Parse and return ALLOWED_ORIGINS as a list.

        Returns:
            List of allowed origin URLs, or empty list if not configured.
        """
        return [
            origin.strip()
            for origin in self.ALLOWED_ORIGINS.split(",")
            if origin.strip()
        ]

    @property
    def client_info(self) -> Dict[str, str]:
        """Identity marker injected into command bodies lacking clientInfo."""
        return {"clientId": self.CLIENT_ID, "platform": self.PLATFORM}

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """
        Validate that LOG_LEVEL names a standard logging level.

        Raises:
            ValueError: If the level is unknown
        """
        level = v.strip().upper()
        allowed_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if level not in allowed_levels:
            raise ValueError(f"Log level must be one of {allowed_levels}, got: {v}")
        return level

    @field_validator("UPSTREAM_API_PREFIX")
    @classmethod
    def validate_api_prefix(cls, v: str) -> str:
        """Normalize the prefix to a leading slash and no trailing slash."""
        v = v.strip().rstrip("/")
        if v and not v.startswith("/"):
            v = "/" + v
        return v


# =============================================================================
# Settings Singleton
# =============================================================================

@lru_cache()
def get_settings() -> Settings:
    """
    Get or create a singleton Settings instance.

    Returns:
        Settings instance with all configuration loaded and validated.

    Raises:
        ValidationError: If environment variables are invalid.
    """
    return Settings()


# =============================================================================
# Configuration Helpers
# =============================================================================

def mask_api_key(api_key: Optional[str]) -> str:
    """Return the first 8 characters of an API key followed by an ellipsis."""
    if not api_key:
        return "(not set)"
    return f"{api_key[:8]}..."


def validate_configuration(credentials: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate stored credentials and return a status report.

    Args:
        credentials: Mapping with ``netpad_url``, ``api_key`` and ``port``

    Returns:
        Dictionary with validation status, errors and warnings.

    Example:
        >>> status = validate_configuration({"netpad_url": "http://x", "api_key": ""})
        >>> status["valid"]
        False
    """
    errors = []
    warnings = []

    netpad_url = str(credentials.get("netpad_url") or "")
    if not credentials.get("api_key"):
        errors.append("No API key configured")

    if not netpad_url:
        errors.append("No NetPad URL configured")
    elif not netpad_url.startswith(("http://", "https://")):
        errors.append(f"NetPad URL must start with http:// or https://, got: {netpad_url}")
    elif netpad_url.startswith("http://") and not any(
        host in netpad_url for host in ("localhost", "127.0.0.1")
    ):
        warnings.append("NetPad URL is not using https; the API key is sent in clear text")

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "warnings": warnings,
    }
