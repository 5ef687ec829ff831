"""
Request Forwarder - NetPad Request Forwarding
==============================================

Builds and issues the outbound call to the NetPad MCP API for one inbound
request, then hands the outcome to the normalizer.

Security Model:
---------------
1. NetPad URL and API key are read from the credential store on every call
2. The stored API key is always sent in the ``x-api-key`` header, replacing
   any key supplied by the caller
3. Command requests also carry the key in ``auth.apiKey`` when the caller
   did not provide one

Error Model:
------------
Upstream HTTP error statuses are data, not exceptions. Only transport-level
failures (DNS, refused connection, timeout) are caught, and they become a
``TransportFailure`` outcome. There is exactly one attempt per request.
"""

import copy
import logging
from typing import Any, Dict, Optional

import httpx

from ..config import Settings
from ..credentials import API_KEY, NETPAD_URL, CredentialStore
from ..exceptions import MissingApiKeyError
from ..models import CallOutcome, NormalizedResult, TransportFailure, UpstreamResponse, UpstreamTarget
from .normalizer import normalize

logger = logging.getLogger(__name__)


API_KEY_HEADER = "x-api-key"


# ============================================================================
# Body Injection
# ============================================================================

def inject_command_credentials(
    body: Dict[str, Any],
    api_key: str,
    client_info: Dict[str, str],
) -> Dict[str, Any]:
    """
    Return a copy of a command body with credentials and client identity.

    ``auth.apiKey`` is filled only when missing or empty, and ``clientInfo``
    only when absent. Existing values are never overwritten and the input
    body is left untouched.

    Args:
        body: Inbound command body
        api_key: Stored NetPad API key
        client_info: Identity marker ({clientId, platform})

    Returns:
        New body dict for the upstream call
    """
    outbound = dict(body)

    auth = outbound.get("auth")
    if not isinstance(auth, dict) or not auth.get("apiKey"):
        auth = dict(auth) if isinstance(auth, dict) else {}
        auth["apiKey"] = api_key
        outbound["auth"] = auth

    if outbound.get("clientInfo") is None:
        outbound["clientInfo"] = copy.deepcopy(client_info)

    return outbound


# ============================================================================
# Response Decoding
# ============================================================================

def decode_body(response: httpx.Response) -> Any:
    """Decode an upstream body as JSON, falling back to text (None if empty)."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


# ============================================================================
# Forwarder
# ============================================================================

def create_upstream_client(settings: Settings) -> httpx.AsyncClient:
    """Shared NetPad client. Redirects are followed so callers only see the final response."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.UPSTREAM_TIMEOUT_SECONDS),
        follow_redirects=True,
    )


class RequestForwarder:
    """
    Forwards inbound requests to NetPad and normalizes the outcome.

    Attributes:
        client: Shared async HTTP client
        store: Credential store, read on every call
        settings: Process settings (API prefix, client identity)
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        store: CredentialStore,
        settings: Settings,
    ):
        self.client = client
        self.store = store
        self.settings = settings

    def resolve_target(self) -> UpstreamTarget:
        """
        Read NetPad URL and API key from one snapshot of the credential store.

        Raises:
            MissingApiKeyError: If no API key is stored
        """
        credentials = self.store.as_dict()
        api_key = credentials.get(API_KEY)
        if not api_key:
            raise MissingApiKeyError()

        base_url = str(credentials.get(NETPAD_URL) or self.settings.DEFAULT_NETPAD_URL)
        return UpstreamTarget(base_url=base_url.rstrip("/"), api_key=str(api_key))

    def build_url(self, target: UpstreamTarget, path: str, query: Optional[str] = None) -> str:
        """
        Build the upstream URL.

        Args:
            target: Resolved upstream target
            path: Inbound path relative to the MCP API (e.g. "/tools")
            query: Inbound query string including the leading "?", or None

        Returns:
            ``base_url + api_prefix + path + query``

        The query is appended as received. httpx percent-encodes characters
        outside the URL query character set (space, ``"``, ``<`` and ``>``)
        when it sends the request. Already-encoded sequences and all other
        characters go out unchanged.
        """
        return f"{target.base_url}{self.settings.UPSTREAM_API_PREFIX}{path}{query or ''}"

    def build_headers(self, target: UpstreamTarget, has_body: bool) -> Dict[str, str]:
        headers = {API_KEY_HEADER: target.api_key}
        if has_body:
            headers["Content-Type"] = "application/json"
        return headers

    async def send(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        body: Any = None,
    ) -> CallOutcome:
        """
        Issue one HTTP request and reduce it to a neutral call outcome.

        Returns:
            UpstreamResponse for any HTTP status, TransportFailure otherwise
        """
        try:
            response = await self.client.request(method, url, headers=headers, json=body)
        except (httpx.RequestError, httpx.InvalidURL) as e:
            return TransportFailure(message=str(e) or type(e).__name__)

        return UpstreamResponse(status_code=response.status_code, body=decode_body(response))

    async def forward(
        self,
        path: str,
        method: str = "GET",
        query: Optional[str] = None,
        body: Optional[Dict[str, Any]] = None,
        inject_credentials: bool = False,
    ) -> NormalizedResult:
        """
        Forward one inbound request to NetPad.

        Args:
            path: Inbound path with the proxy prefix stripped
            method: HTTP method
            query: Inbound query string including the leading "?", or None
            body: Inbound JSON body, if any (never mutated)
            inject_credentials: Fill ``auth.apiKey`` and ``clientInfo`` in the body

        Returns:
            Classified result of the call

        Raises:
            MissingApiKeyError: If no API key is stored
        """
        target = self.resolve_target()

        if inject_credentials and body is not None:
            body = inject_command_credentials(body, target.api_key, self.settings.client_info)

        url = self.build_url(target, path, query)
        headers = self.build_headers(target, has_body=body is not None)

        logger.debug(
            f"Forwarding {method} {path} to NetPad",
            extra={"method": method, "upstream_url": url},
        )

        outcome = await self.send(method, url, headers, body)
        return normalize(outcome, target.base_url)
