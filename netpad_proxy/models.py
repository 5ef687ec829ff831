"""
Data Models Module

This module defines the Pydantic models that flow through the proxy:

- Upstream target (credentials read from the store for one request)
- Call outcomes (neutral result of one outbound HTTP attempt)
- Normalized results (the stable taxonomy rendered back to the client)
- Error response envelope shared by every error the proxy emits
"""

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field


# ============================================================================
# Upstream Target
# ============================================================================

class UpstreamTarget(BaseModel):
    """NetPad server and API key resolved from the credential store."""
    base_url: str = Field(..., description="NetPad base URL without trailing slash")
    api_key: str = Field(..., description="NetPad API key")


# ============================================================================
# Call Outcomes
# ============================================================================

class UpstreamResponse(BaseModel):
    """The upstream server answered, with any HTTP status."""
    status_code: int = Field(..., description="HTTP status returned by NetPad")
    body: Any = Field(None, description="Decoded JSON body, raw text, or None if empty")

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


class TransportFailure(BaseModel):
    """No upstream response was received (DNS, refused connection, timeout)."""
    message: str = Field(..., description="Transport error message")


CallOutcome = Union[UpstreamResponse, TransportFailure]


# ============================================================================
# Error Envelope
# ============================================================================

class ErrorResponse(BaseModel):
    """Standardized error response shape. Clients branch on ``error['code']``."""
    success: bool = Field(default=False)
    status: int = Field(..., description="HTTP status code")
    message: str = Field(..., description="Human-readable error message")
    error: Dict[str, Any] = Field(..., description="Error code and details")


# ============================================================================
# Normalized Results
# ============================================================================

class NormalizedResult(BaseModel):
    """Base for the classified outcome of one forwarded call."""
    status_code: int

    def content(self) -> Any:
        """JSON-serializable body sent back to the client."""
        raise NotImplementedError


class SuccessResult(NormalizedResult):
    """2xx upstream response, relayed verbatim."""
    body: Any = None

    def content(self) -> Any:
        return self.body


class UpstreamErrorResult(NormalizedResult):
    """Unclassified upstream error, relayed verbatim."""
    body: Any = None

    def content(self) -> Any:
        return self.body


class AuthErrorResult(NormalizedResult):
    """NetPad rejected the API key (401 or 403)."""
    message: str
    detail: Any = None
    suggestion: str

    def content(self) -> Dict[str, Any]:
        return ErrorResponse(
            status=self.status_code,
            message=self.message,
            error={
                "code": "AUTH_ERROR",
                "details": self.detail,
                "suggestion": self.suggestion,
            },
        ).model_dump()


class NotFoundResult(NormalizedResult):
    """NetPad reported the requested resource as missing."""
    message: str
    detail: Any = None

    def content(self) -> Dict[str, Any]:
        return ErrorResponse(
            status=self.status_code,
            message=self.message,
            error={"code": "NOT_FOUND", "details": self.detail},
        ).model_dump()


class ConnectionErrorResult(NormalizedResult):
    """The proxy could not reach NetPad at all."""
    status_code: int = 502
    message: str
    error_message: str = Field(..., description="Names the NetPad URL that was unreachable")
    detail: Optional[str] = None
    suggestion: str

    def content(self) -> Dict[str, Any]:
        return ErrorResponse(
            status=self.status_code,
            message=self.message,
            error={
                "code": "NETPAD_CONNECTION_ERROR",
                "message": self.error_message,
                "details": self.detail,
                "suggestion": self.suggestion,
            },
        ).model_dump()
