"""
Proxy Routes - NetPad MCP Endpoints
===================================

Maps the inbound MCP surface onto the NetPad MCP API. Each route only names
the upstream path and whether in-body credential injection applies; the
shared RequestForwarder does the rest.

Endpoints:
----------
- GET  /                      -> /api/mcp
- GET  /tools                 -> /api/mcp/tools          (query forwarded)
- GET  /tools/{tool_id}       -> /api/mcp/tools/{id}     (query forwarded)
- GET  /schema                -> /api/mcp/schema         (query forwarded)
- POST /command               -> /api/mcp/command        (auth/clientInfo injected)
- GET  /api/openai-functions  -> /api/mcp/tools?schema=true, translated
"""

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse, Response

from ..exceptions import InvalidRequestBodyError
from ..models import NormalizedResult, SuccessResult
from .forwarder import RequestForwarder
from .translator import extract_tool_list, translate_tools

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# Dependencies
# ============================================================================

def get_forwarder(request: Request) -> RequestForwarder:
    """
    Dependency to get the request forwarder from app state.

    Raises:
        HTTPException: If the application lifespan has not initialized it
    """
    forwarder = getattr(request.app.state, "forwarder", None)
    if forwarder is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Request forwarder not initialized",
        )
    return forwarder


def inbound_query(request: Request) -> Optional[str]:
    """Raw inbound query string with its leading "?", or None if absent."""
    query = request.url.query
    return f"?{query}" if query else None


async def read_command_body(request: Request) -> Dict[str, Any]:
    """
    Decode the command body as a JSON object.

    An empty body is treated as ``{}``.

    Raises:
        InvalidRequestBodyError: If the body is not a JSON object
    """
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        body = await request.json()
    except ValueError:
        raise InvalidRequestBodyError("body is not valid JSON")

    if not isinstance(body, dict):
        raise InvalidRequestBodyError("expected a JSON object")
    return body


def render(result: NormalizedResult) -> Response:
    # 1xx, 204 and 304 must not carry a body
    if result.status_code < 200 or result.status_code in (204, 304):
        return Response(status_code=result.status_code)
    return JSONResponse(status_code=result.status_code, content=result.content())


# ============================================================================
# Proxy Endpoints
# ============================================================================

@router.get("/")
async def mcp_info(forwarder: RequestForwarder = Depends(get_forwarder)):
    """Proxy the NetPad MCP info document."""
    return render(await forwarder.forward(""))


@router.get("/tools")
async def list_tools(request: Request, forwarder: RequestForwarder = Depends(get_forwarder)):
    """Proxy the NetPad tool list, forwarding filters verbatim."""
    return render(await forwarder.forward("/tools", query=inbound_query(request)))


@router.get("/tools/{tool_id}")
async def get_tool(
    tool_id: str,
    request: Request,
    forwarder: RequestForwarder = Depends(get_forwarder),
):
    """Proxy a single NetPad tool descriptor."""
    path = f"/tools/{quote(tool_id, safe='')}"
    return render(await forwarder.forward(path, query=inbound_query(request)))


@router.get("/schema")
async def get_schema(request: Request, forwarder: RequestForwarder = Depends(get_forwarder)):
    """Proxy the NetPad MCP schema."""
    return render(await forwarder.forward("/schema", query=inbound_query(request)))


@router.post("/command")
async def run_command(request: Request, forwarder: RequestForwarder = Depends(get_forwarder)):
    """
    Proxy a command to NetPad.

    The stored API key is injected into ``auth.apiKey`` and the proxy identity
    into ``clientInfo`` when the client did not supply them.
    """
    body = await read_command_body(request)
    result = await forwarder.forward(
        "/command",
        method="POST",
        body=body,
        inject_credentials=True,
    )
    return render(result)


@router.get("/api/openai-functions")
async def openai_functions(forwarder: RequestForwarder = Depends(get_forwarder)):
    """
    OpenAI function discovery.

    Fetches the NetPad tool list with schemas and returns it as a bare list
    of OpenAI function descriptors. Errors are rendered like any other route.
    """
    result = await forwarder.forward("/tools", query="?schema=true")
    if not isinstance(result, SuccessResult):
        return render(result)

    functions = translate_tools(extract_tool_list(result.body))
    logger.debug(f"Translated {len(functions)} NetPad tools to OpenAI functions")
    return JSONResponse(content=functions)
