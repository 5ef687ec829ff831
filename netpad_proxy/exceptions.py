"""Custom exceptions for the NetPad MCP Proxy.

Upstream failures are never raised: they are classified into result objects
(see ``netpad_proxy.forwarding.normalizer``). These exceptions cover the few
conditions the proxy detects before a call leaves the process.
"""

from typing import Optional


class ProxyError(Exception):
    """Base exception for all proxy errors.

    Attributes:
        message: Human-readable description.
        code: Stable machine-readable error code.
        status_code: HTTP status used when the error is rendered.
        suggestion: Optional remediation hint for the user.
    """

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        suggestion: Optional[str] = None,
    ):
        self.message = message
        self.code = code or self.__class__.__name__
        self.suggestion = suggestion
        super().__init__(self.message)


class MissingApiKeyError(ProxyError):
    """Raised when a forward is attempted while no API key is stored."""

    status_code = 503

    def __init__(self):
        super().__init__(
            message="No NetPad API key is configured for this proxy.",
            code="MISSING_API_KEY",
            suggestion="Run `netpad-mcp-proxy configure` to store an API key.",
        )


class InvalidRequestBodyError(ProxyError):
    """Raised when a command request body is not a JSON object.

    Attributes:
        reason: Why the body was rejected.
    """

    status_code = 400

    def __init__(self, reason: str):
        super().__init__(
            message=f"Invalid request body: {reason}",
            code="INVALID_REQUEST",
        )
        self.reason = reason
