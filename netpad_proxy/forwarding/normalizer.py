"""
Response/Error Normalizer
=========================

Classifies the outcome of one forwarded call into the proxy's stable result
taxonomy. Rules, first match wins:

1. 2xx response          -> SuccessResult (body relayed verbatim)
2. 401 / 403 response    -> AuthErrorResult (AUTH_ERROR)
3. 404 response          -> NotFoundResult (NOT_FOUND)
4. any other response    -> UpstreamErrorResult (status and body relayed)
5. no response at all    -> ConnectionErrorResult (502, NETPAD_CONNECTION_ERROR)
"""

import logging

from ..models import (
    AuthErrorResult,
    CallOutcome,
    ConnectionErrorResult,
    NormalizedResult,
    NotFoundResult,
    SuccessResult,
    TransportFailure,
    UpstreamErrorResult,
)

logger = logging.getLogger(__name__)


AUTH_ERROR_MESSAGE = (
    "Authentication failed: Invalid or missing API key. "
    "Please check your API key and permissions."
)
AUTH_ERROR_SUGGESTION = (
    "Re-run `netpad-mcp-proxy configure` to update your API key, "
    "or generate a new one in the NetPad UI."
)
NOT_FOUND_MESSAGE = "The requested resource was not found on the NetPad server."
CONNECTION_ERROR_MESSAGE = "Proxy Error: Could not connect to the NetPad server."
CONNECTION_ERROR_SUGGESTION = (
    "Check your internet connection, firewall settings, and ensure the NetPad "
    "server URL is correct. If using SaaS, verify https://api.netpad.ai is reachable."
)


def normalize(outcome: CallOutcome, base_url: str) -> NormalizedResult:
    """
    Classify a call outcome.

    Args:
        outcome: Response or transport failure from the upstream adapter
        base_url: NetPad URL the call was sent to (named in connection errors)

    Returns:
        Exactly one NormalizedResult variant
    """
    if isinstance(outcome, TransportFailure):
        logger.error(
            f"Could not connect to NetPad at {base_url}: {outcome.message}",
            extra={"base_url": base_url},
        )
        return ConnectionErrorResult(
            message=CONNECTION_ERROR_MESSAGE,
            error_message=f"Could not connect to NetPad at {base_url}",
            detail=outcome.message,
            suggestion=CONNECTION_ERROR_SUGGESTION,
        )

    status_code = outcome.status_code

    if outcome.is_success:
        return SuccessResult(status_code=status_code, body=outcome.body)

    if status_code in (401, 403):
        logger.warning(f"NetPad rejected the API key ({status_code})")
        return AuthErrorResult(
            status_code=status_code,
            message=AUTH_ERROR_MESSAGE,
            detail=outcome.body,
            suggestion=AUTH_ERROR_SUGGESTION,
        )

    if status_code == 404:
        logger.warning("NetPad resource not found")
        return NotFoundResult(
            status_code=status_code,
            message=NOT_FOUND_MESSAGE,
            detail=outcome.body,
        )

    logger.warning(f"NetPad returned error {status_code}, relaying unchanged")
    return UpstreamErrorResult(status_code=status_code, body=outcome.body)
